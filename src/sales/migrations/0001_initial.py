import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Sale",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="creado el")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="actualizado el")),
                (
                    "quantity",
                    models.PositiveIntegerField(
                        validators=[django.core.validators.MinValueValidator(1)],
                        verbose_name="cantidad",
                    ),
                ),
                ("purchase_price", models.DecimalField(decimal_places=2, max_digits=14, verbose_name="precio de compra")),
                (
                    "distributor_price",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Monto que el distribuidor remite por unidad.",
                        max_digits=14,
                        verbose_name="precio para distribuidor",
                    ),
                ),
                ("sale_price", models.DecimalField(decimal_places=2, max_digits=14, verbose_name="precio de venta")),
                ("commission_bonus_pct", models.PositiveSmallIntegerField(default=0, verbose_name="bono de comision (%)")),
                ("distributor_profit_pct", models.PositiveSmallIntegerField(default=0, verbose_name="ganancia distribuidor (%)")),
                (
                    "distributor_profit",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, verbose_name="ganancia distribuidor"),
                ),
                (
                    "admin_profit",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, verbose_name="ganancia administrador"),
                ),
                (
                    "total_profit",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, verbose_name="ganancia total"),
                ),
                (
                    "payment_status",
                    models.CharField(
                        choices=[("pending", "Pendiente"), ("confirmed", "Confirmado")],
                        db_index=True,
                        default="pending",
                        max_length=20,
                        verbose_name="estado de pago",
                    ),
                ),
                ("payment_confirmed_at", models.DateTimeField(blank=True, null=True, verbose_name="pago confirmado el")),
                (
                    "sale_date",
                    models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name="fecha de venta"),
                ),
                ("notes", models.TextField(blank=True, default="", verbose_name="notas")),
                (
                    "distributor",
                    models.ForeignKey(
                        blank=True,
                        help_text="Vacio para una venta directa de la casa.",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sales_as_distributor",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="distribuidor",
                    ),
                ),
                (
                    "payment_confirmed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="confirmed_sales",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="confirmado por",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sales",
                        to="catalog.product",
                        verbose_name="producto",
                    ),
                ),
            ],
            options={
                "verbose_name": "venta",
                "verbose_name_plural": "ventas",
                "ordering": ["-sale_date"],
                "indexes": [
                    models.Index(fields=["payment_status", "sale_date"], name="sales_sale_payment_5d1c3e_idx"),
                    models.Index(fields=["distributor", "sale_date"], name="sales_sale_distrib_8a4f0b_idx"),
                    models.Index(fields=["product", "sale_date"], name="sales_sale_product_2e7b9c_idx"),
                ],
            },
        ),
    ]
