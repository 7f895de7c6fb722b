"""Models for the sales app."""
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from core.models import TimeStampedModel


# ---------------------------------------------------------------------------
# Sale
# ---------------------------------------------------------------------------

class Sale(TimeStampedModel):
    """A single-product sale, either by the house or by a distributor.

    Profit fields are written by ``sales.profit`` at registration time and
    only touched again by the explicit repair utility.
    """

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", "Pendiente"
        CONFIRMED = "confirmed", "Confirmado"

    distributor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="sales_as_distributor",
        verbose_name="distribuidor",
        help_text="Vacio para una venta directa de la casa.",
    )
    product = models.ForeignKey(
        "catalog.Product",
        on_delete=models.PROTECT,
        related_name="sales",
        verbose_name="producto",
    )
    quantity = models.PositiveIntegerField(
        "cantidad",
        validators=[MinValueValidator(1)],
    )

    # ------------------------------------------------------------------
    # Prices frozen at sale time
    # ------------------------------------------------------------------
    purchase_price = models.DecimalField(
        "precio de compra",
        max_digits=14,
        decimal_places=2,
    )
    distributor_price = models.DecimalField(
        "precio para distribuidor",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Monto que el distribuidor remite por unidad.",
    )
    sale_price = models.DecimalField(
        "precio de venta",
        max_digits=14,
        decimal_places=2,
    )

    # ------------------------------------------------------------------
    # Commission & profit split
    # ------------------------------------------------------------------
    commission_bonus_pct = models.PositiveSmallIntegerField(
        "bono de comision (%)",
        default=0,
    )
    distributor_profit_pct = models.PositiveSmallIntegerField(
        "ganancia distribuidor (%)",
        default=0,
    )
    distributor_profit = models.DecimalField(
        "ganancia distribuidor",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    admin_profit = models.DecimalField(
        "ganancia administrador",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    total_profit = models.DecimalField(
        "ganancia total",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    # ------------------------------------------------------------------
    # Payment
    # ------------------------------------------------------------------
    payment_status = models.CharField(
        "estado de pago",
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
        db_index=True,
    )
    payment_confirmed_at = models.DateTimeField("pago confirmado el", null=True, blank=True)
    payment_confirmed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="confirmed_sales",
        verbose_name="confirmado por",
    )

    sale_date = models.DateTimeField("fecha de venta", default=timezone.now, db_index=True)
    notes = models.TextField("notas", blank=True, default="")

    class Meta:
        verbose_name = "venta"
        verbose_name_plural = "ventas"
        ordering = ["-sale_date"]
        indexes = [
            models.Index(fields=["payment_status", "sale_date"], name="sales_sale_payment_5d1c3e_idx"),
            models.Index(fields=["distributor", "sale_date"], name="sales_sale_distrib_8a4f0b_idx"),
            models.Index(fields=["product", "sale_date"], name="sales_sale_product_2e7b9c_idx"),
        ]

    def __str__(self):
        who = self.distributor or "casa"
        return f"Venta {str(self.pk)[:8]} ({who})"

    @property
    def is_house_sale(self) -> bool:
        return self.distributor_id is None

    @property
    def is_confirmed(self) -> bool:
        return self.payment_status == self.PaymentStatus.CONFIRMED

    @property
    def revenue(self) -> Decimal:
        return self.sale_price * self.quantity
