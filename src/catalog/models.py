"""Models for the catalog app (categories and products)."""
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.text import slugify

from core.models import TimeStampedModel


# ---------------------------------------------------------------------------
# Category
# ---------------------------------------------------------------------------

class Category(TimeStampedModel):
    """Product category; also the market baseline bucket for relative pricing."""

    name = models.CharField("nombre", max_length=255)
    slug = models.SlugField("slug", max_length=255, unique=True)
    description = models.TextField("descripcion", blank=True, default="")
    is_active = models.BooleanField("activa", default=True)

    class Meta:
        verbose_name = "categoria"
        verbose_name_plural = "categorias"
        ordering = ["name"]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name) or "cat"
        super().save(*args, **kwargs)


# ---------------------------------------------------------------------------
# Product
# ---------------------------------------------------------------------------

class Product(TimeStampedModel):
    """A product sold directly by the house or through distributors.

    ``total_stock`` counts every unit owned (warehouse plus units assigned to
    distributors); ``warehouse_stock`` is what the house still holds.
    """

    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
        verbose_name="categoria",
    )
    name = models.CharField("nombre", max_length=255)
    description = models.TextField("descripcion", blank=True, default="")
    purchase_price = models.DecimalField(
        "precio de compra",
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    distributor_price = models.DecimalField(
        "precio distribuidor",
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    suggested_price = models.DecimalField(
        "precio sugerido",
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Por defecto el precio de compra + 30%.",
    )
    client_price = models.DecimalField(
        "precio cliente",
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
    )
    total_stock = models.IntegerField("stock total", default=0)
    warehouse_stock = models.IntegerField("stock en bodega", default=0)
    low_stock_alert = models.PositiveIntegerField("alerta de stock bajo", default=10)
    is_active = models.BooleanField("activo", default=True)

    class Meta:
        verbose_name = "producto"
        verbose_name_plural = "productos"
        ordering = ["name"]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if self.suggested_price is None and self.purchase_price is not None:
            self.suggested_price = (Decimal(self.purchase_price) * Decimal("1.3")).quantize(Decimal("0.01"))
        super().save(*args, **kwargs)

    @property
    def inventory_value(self) -> Decimal:
        """Capital tied up in warehouse stock at purchase price."""
        return Decimal(max(self.warehouse_stock, 0)) * self.purchase_price
