"""Models for the distributor ranking module."""
from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from core.models import TimeStampedModel
from rankings.periods import PeriodType


class RankingSettings(TimeStampedModel):
    """Singleton describing how ranking periods are cut.

    Lazily created with defaults on first read (see :meth:`load`).
    """

    class Period(models.TextChoices):
        DAILY = PeriodType.DAILY, "Diario"
        WEEKLY = PeriodType.WEEKLY, "Semanal"
        BIWEEKLY = PeriodType.BIWEEKLY, "Quincenal"
        MONTHLY = PeriodType.MONTHLY, "Mensual"
        CUSTOM = PeriodType.CUSTOM, "Personalizado"

    period_type = models.CharField(
        "periodo de evaluacion",
        max_length=20,
        choices=Period.choices,
        default=Period.WEEKLY,
    )
    custom_period_days = models.PositiveIntegerField(
        "dias del periodo personalizado",
        default=30,
        validators=[MinValueValidator(1)],
    )
    period_anchor = models.DateField(
        "inicio del periodo quincenal",
        null=True,
        blank=True,
        help_text="Fecha de referencia para cortar los periodos de 15 dias.",
    )
    min_admin_profit_for_ranking = models.DecimalField(
        "ganancia minima generada para clasificar",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
        help_text="0 desactiva el requisito.",
    )

    class Meta:
        verbose_name = "configuracion de ranking"
        verbose_name_plural = "configuracion de ranking"

    def __str__(self) -> str:
        return f"Ranking {self.get_period_type_display()}"

    @classmethod
    def load(cls) -> "RankingSettings":
        obj = cls.objects.order_by("created_at").first()
        if obj is None:
            obj = cls.objects.create()
        return obj
