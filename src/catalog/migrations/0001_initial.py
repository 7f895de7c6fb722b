import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="creado el")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="actualizado el")),
                ("name", models.CharField(max_length=255, verbose_name="nombre")),
                ("slug", models.SlugField(max_length=255, unique=True, verbose_name="slug")),
                ("description", models.TextField(blank=True, default="", verbose_name="descripcion")),
                ("is_active", models.BooleanField(default=True, verbose_name="activa")),
            ],
            options={
                "verbose_name": "categoria",
                "verbose_name_plural": "categorias",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="creado el")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="actualizado el")),
                ("name", models.CharField(max_length=255, verbose_name="nombre")),
                ("description", models.TextField(blank=True, default="", verbose_name="descripcion")),
                (
                    "purchase_price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="precio de compra",
                    ),
                ),
                (
                    "distributor_price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="precio distribuidor",
                    ),
                ),
                (
                    "suggested_price",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Por defecto el precio de compra + 30%.",
                        max_digits=14,
                        null=True,
                        verbose_name="precio sugerido",
                    ),
                ),
                (
                    "client_price",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True, verbose_name="precio cliente"),
                ),
                ("total_stock", models.IntegerField(default=0, verbose_name="stock total")),
                ("warehouse_stock", models.IntegerField(default=0, verbose_name="stock en bodega")),
                ("low_stock_alert", models.PositiveIntegerField(default=10, verbose_name="alerta de stock bajo")),
                ("is_active", models.BooleanField(default=True, verbose_name="activo")),
                (
                    "category",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="products",
                        to="catalog.category",
                        verbose_name="categoria",
                    ),
                ),
            ],
            options={
                "verbose_name": "producto",
                "verbose_name_plural": "productos",
                "ordering": ["name"],
            },
        ),
    ]
