import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("assistant", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(
            model_name="businessassistantconfig",
            name="days_cover_low_threshold",
            field=models.FloatField(
                default=14, validators=[django.core.validators.MinValueValidator(1)],
                verbose_name="cobertura baja (dias)",
            ),
        ),
        migrations.AlterField(
            model_name="businessassistantconfig",
            name="buy_target_days",
            field=models.FloatField(
                default=30, validators=[django.core.validators.MinValueValidator(1)],
                verbose_name="dias objetivo de compra",
            ),
        ),
        migrations.AlterField(
            model_name="businessassistantconfig",
            name="low_rotation_units_threshold",
            field=models.FloatField(
                default=1, validators=[django.core.validators.MinValueValidator(0)],
                verbose_name="umbral de baja rotacion (uds)",
            ),
        ),
        migrations.AlterField(
            model_name="businessassistantconfig",
            name="high_stock_multiplier",
            field=models.FloatField(
                default=2, validators=[django.core.validators.MinValueValidator(1)],
                verbose_name="multiplicador de stock alto",
            ),
        ),
        migrations.AlterField(
            model_name="businessassistantconfig",
            name="high_stock_min_units",
            field=models.FloatField(
                default=10, validators=[django.core.validators.MinValueValidator(0)],
                verbose_name="stock alto minimo (uds)",
            ),
        ),
        migrations.AlterField(
            model_name="businessassistantconfig",
            name="min_units_for_growth_strategy",
            field=models.FloatField(
                default=10, validators=[django.core.validators.MinValueValidator(0)],
                verbose_name="unidades minimas para estrategia de crecimiento",
            ),
        ),
        migrations.AlterField(
            model_name="businessassistantconfig",
            name="margin_low_threshold_pct",
            field=models.FloatField(
                default=15, validators=[django.core.validators.MinValueValidator(0)],
                verbose_name="margen bajo (%)",
            ),
        ),
        migrations.AlterField(
            model_name="businessassistantconfig",
            name="target_margin_pct",
            field=models.FloatField(
                default=25, validators=[django.core.validators.MinValueValidator(0)],
                verbose_name="margen objetivo (%)",
            ),
        ),
        migrations.AlterField(
            model_name="businessassistantconfig",
            name="min_margin_after_discount_pct",
            field=models.FloatField(
                default=10, validators=[django.core.validators.MinValueValidator(0)],
                verbose_name="margen minimo tras descuento (%)",
            ),
        ),
    ]
