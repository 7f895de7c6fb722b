import uuid

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="BusinessAssistantConfig",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="creado el")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="actualizado el")),
                (
                    "horizon_days_default",
                    models.PositiveIntegerField(
                        default=90,
                        validators=[django.core.validators.MinValueValidator(1)],
                        verbose_name="horizonte por defecto (dias)",
                    ),
                ),
                (
                    "recent_days_default",
                    models.PositiveIntegerField(
                        default=30,
                        validators=[django.core.validators.MinValueValidator(1)],
                        verbose_name="ventana reciente por defecto (dias)",
                    ),
                ),
                ("cache_enabled", models.BooleanField(default=True, verbose_name="cache habilitado")),
                (
                    "cache_ttl_seconds",
                    models.PositiveIntegerField(
                        default=300,
                        validators=[django.core.validators.MinValueValidator(1)],
                        verbose_name="duracion del cache (segundos)",
                    ),
                ),
                ("days_cover_low_threshold", models.FloatField(default=14, verbose_name="cobertura baja (dias)")),
                ("buy_target_days", models.FloatField(default=30, verbose_name="dias objetivo de compra")),
                ("low_rotation_units_threshold", models.FloatField(default=1, verbose_name="umbral de baja rotacion (uds)")),
                ("high_stock_multiplier", models.FloatField(default=2, verbose_name="multiplicador de stock alto")),
                ("high_stock_min_units", models.FloatField(default=10, verbose_name="stock alto minimo (uds)")),
                ("trend_drop_threshold_pct", models.FloatField(default=-20, verbose_name="caida de tendencia (%)")),
                ("trend_growth_threshold_pct", models.FloatField(default=20, verbose_name="crecimiento de tendencia (%)")),
                (
                    "min_units_for_growth_strategy",
                    models.FloatField(default=10, verbose_name="unidades minimas para estrategia de crecimiento"),
                ),
                ("margin_low_threshold_pct", models.FloatField(default=15, verbose_name="margen bajo (%)")),
                ("target_margin_pct", models.FloatField(default=25, verbose_name="margen objetivo (%)")),
                ("min_margin_after_discount_pct", models.FloatField(default=10, verbose_name="margen minimo tras descuento (%)")),
                (
                    "price_high_vs_category_threshold_pct",
                    models.FloatField(default=10, verbose_name="precio alto vs categoria (%)"),
                ),
                (
                    "price_low_vs_category_threshold_pct",
                    models.FloatField(default=-10, verbose_name="precio bajo vs categoria (%)"),
                ),
                ("decrease_price_pct", models.FloatField(default=-5, verbose_name="cambio al bajar precio (%)")),
                ("promotion_discount_pct", models.FloatField(default=-10, verbose_name="descuento de promocion (%)")),
                ("increase_price_pct", models.FloatField(default=5, verbose_name="cambio al subir precio (%)")),
            ],
            options={
                "verbose_name": "configuracion del asistente",
                "verbose_name_plural": "configuracion del asistente",
            },
        ),
    ]
