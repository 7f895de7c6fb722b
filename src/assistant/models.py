"""Models for the business assistant."""
from django.core.validators import MinValueValidator
from django.db import models

from core.models import TimeStampedModel


class BusinessAssistantConfig(TimeStampedModel):
    """Singleton holding every threshold the recommendation rules read.

    ``updated_at`` doubles as the configuration version: it is part of every
    recommendation cache key.
    """

    # Windows
    horizon_days_default = models.PositiveIntegerField(
        "horizonte por defecto (dias)", default=90, validators=[MinValueValidator(1)],
    )
    recent_days_default = models.PositiveIntegerField(
        "ventana reciente por defecto (dias)", default=30, validators=[MinValueValidator(1)],
    )

    # Cache
    cache_enabled = models.BooleanField("cache habilitado", default=True)
    cache_ttl_seconds = models.PositiveIntegerField(
        "duracion del cache (segundos)", default=300, validators=[MinValueValidator(1)],
    )

    # Replenishment
    days_cover_low_threshold = models.FloatField(
        "cobertura baja (dias)", default=14, validators=[MinValueValidator(1)],
    )
    buy_target_days = models.FloatField(
        "dias objetivo de compra", default=30, validators=[MinValueValidator(1)],
    )

    # Rotation / stock
    low_rotation_units_threshold = models.FloatField(
        "umbral de baja rotacion (uds)", default=1, validators=[MinValueValidator(0)],
    )
    high_stock_multiplier = models.FloatField(
        "multiplicador de stock alto", default=2, validators=[MinValueValidator(1)],
    )
    high_stock_min_units = models.FloatField(
        "stock alto minimo (uds)", default=10, validators=[MinValueValidator(0)],
    )

    # Trends
    trend_drop_threshold_pct = models.FloatField("caida de tendencia (%)", default=-20)
    trend_growth_threshold_pct = models.FloatField("crecimiento de tendencia (%)", default=20)
    min_units_for_growth_strategy = models.FloatField(
        "unidades minimas para estrategia de crecimiento", default=10, validators=[MinValueValidator(0)],
    )

    # Margins
    margin_low_threshold_pct = models.FloatField(
        "margen bajo (%)", default=15, validators=[MinValueValidator(0)],
    )
    target_margin_pct = models.FloatField(
        "margen objetivo (%)", default=25, validators=[MinValueValidator(0)],
    )
    min_margin_after_discount_pct = models.FloatField(
        "margen minimo tras descuento (%)", default=10, validators=[MinValueValidator(0)],
    )

    # Relative price vs category
    price_high_vs_category_threshold_pct = models.FloatField("precio alto vs categoria (%)", default=10)
    price_low_vs_category_threshold_pct = models.FloatField("precio bajo vs categoria (%)", default=-10)

    # Suggested changes
    decrease_price_pct = models.FloatField("cambio al bajar precio (%)", default=-5)
    promotion_discount_pct = models.FloatField("descuento de promocion (%)", default=-10)
    increase_price_pct = models.FloatField("cambio al subir precio (%)", default=5)

    class Meta:
        verbose_name = "configuracion del asistente"
        verbose_name_plural = "configuracion del asistente"

    def __str__(self):
        return "Asistente de negocio"

    @classmethod
    def load(cls) -> "BusinessAssistantConfig":
        obj = cls.objects.order_by("created_at").first()
        if obj is None:
            obj = cls.objects.create()
        return obj
