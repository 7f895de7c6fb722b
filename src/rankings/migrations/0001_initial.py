import uuid
from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="RankingSettings",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="creado el")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="actualizado el")),
                (
                    "period_type",
                    models.CharField(
                        choices=[
                            ("daily", "Diario"),
                            ("weekly", "Semanal"),
                            ("biweekly", "Quincenal"),
                            ("monthly", "Mensual"),
                            ("custom", "Personalizado"),
                        ],
                        default="weekly",
                        max_length=20,
                        verbose_name="periodo de evaluacion",
                    ),
                ),
                (
                    "custom_period_days",
                    models.PositiveIntegerField(
                        default=30,
                        validators=[django.core.validators.MinValueValidator(1)],
                        verbose_name="dias del periodo personalizado",
                    ),
                ),
                (
                    "period_anchor",
                    models.DateField(
                        blank=True,
                        help_text="Fecha de referencia para cortar los periodos de 15 dias.",
                        null=True,
                        verbose_name="inicio del periodo quincenal",
                    ),
                ),
                (
                    "min_admin_profit_for_ranking",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="0 desactiva el requisito.",
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="ganancia minima generada para clasificar",
                    ),
                ),
            ],
            options={
                "verbose_name": "configuracion de ranking",
                "verbose_name_plural": "configuracion de ranking",
            },
        ),
    ]
