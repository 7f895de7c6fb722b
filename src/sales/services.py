"""Business-logic / service functions for the sales app."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from sales.models import Sale
from sales.profit import (
    COMMISSION_PCTS,
    ProfitSplitError,
    apply_profit_split,
    compute_profit_split,
    split_for_sale,
    split_is_consistent,
)

logger = logging.getLogger("distrinet")


# ---------------------------------------------------------------------------
# Cache hooks
# ---------------------------------------------------------------------------

def _invalidate_caches_on_commit(reason: str) -> None:
    """Drop cached recommendations once the surrounding transaction commits."""

    def _invalidate():
        from assistant.cache import invalidate_recommendations

        invalidate_recommendations(reason=reason)

    transaction.on_commit(_invalidate)


# ---------------------------------------------------------------------------
# register_sale
# ---------------------------------------------------------------------------

@transaction.atomic
def register_sale(
    *,
    product,
    quantity: int,
    sale_price,
    distributor=None,
    sale_date=None,
    notes: str = "",
    actor=None,
) -> Sale:
    """Register a single-product sale.

    - House sales (``distributor=None``) are confirmed immediately and
      consume warehouse stock.
    - Distributor sales stay PENDING until an admin confirms the payment; the
      commission tier is resolved here, once, and stored on the sale.
    - Profit fields are fully computed before the row is written.

    Raises
    ------
    ValueError
        If the quantity, price or stock are invalid.
    """
    from catalog.models import Product
    from rankings.engine import resolve_commission_tier

    if quantity is None or int(quantity) < 1:
        raise ValueError("La cantidad debe ser al menos 1.")
    quantity = int(quantity)
    sale_price = Decimal(str(sale_price))
    if sale_price <= 0:
        raise ValueError("El precio de venta debe ser positivo.")

    product = Product.objects.select_for_update().get(pk=product.pk)
    if not product.is_active:
        raise ValueError(f"El producto '{product.name}' no esta activo.")

    is_house_sale = distributor is None
    if is_house_sale:
        _check_stock_availability(product.name, product.warehouse_stock, quantity)
    else:
        if not getattr(distributor, "is_distributor", False):
            raise ValueError("El usuario indicado no es un distribuidor.")
        _check_stock_availability(product.name, product.total_stock, quantity)

    sale_date = sale_date or timezone.now()

    # The tier always comes from the ranking current at write time;
    # ``sale_date`` is bookkeeping only.
    tier = None
    if not is_house_sale:
        tier = resolve_commission_tier(distributor.pk, as_of=timezone.now())

    split = compute_profit_split(
        sale_price=sale_price,
        purchase_price=product.purchase_price,
        quantity=quantity,
        distributor_profit_pct=tier.distributor_profit_pct if tier else 0,
        is_house_sale=is_house_sale,
    )

    sale = Sale(
        distributor=distributor,
        product=product,
        quantity=quantity,
        purchase_price=product.purchase_price,
        sale_price=sale_price,
        commission_bonus_pct=tier.commission_bonus_pct if tier else 0,
        sale_date=sale_date,
        notes=notes or "",
    )
    apply_profit_split(sale, split)

    if is_house_sale:
        sale.payment_status = Sale.PaymentStatus.CONFIRMED
        sale.payment_confirmed_at = timezone.now()
        sale.payment_confirmed_by = actor
    else:
        sale.payment_status = Sale.PaymentStatus.PENDING
    sale.save()

    stock_update = {"total_stock": F("total_stock") - quantity}
    if is_house_sale:
        stock_update["warehouse_stock"] = F("warehouse_stock") - quantity
    Product.objects.filter(pk=product.pk).update(**stock_update)

    _invalidate_caches_on_commit("sale_registered")

    logger.info(
        "Sale %s registered (%s) product=%s qty=%s pct=%s total_profit=%s by %s",
        sale.pk,
        "house" if is_house_sale else f"distributor={distributor.pk}",
        product.pk,
        quantity,
        sale.distributor_profit_pct,
        sale.total_profit,
        actor,
    )
    return sale


# ---------------------------------------------------------------------------
# confirm_payment
# ---------------------------------------------------------------------------

@transaction.atomic
def confirm_payment(sale: Sale, actor) -> Sale:
    """Mark a pending distributor sale as paid.

    Profit fields are left untouched: the tier frozen at registration stays.
    """
    sale = Sale.objects.select_for_update().get(pk=sale.pk)
    if sale.is_confirmed:
        raise ValueError("El pago de esta venta ya fue confirmado.")

    sale.payment_status = Sale.PaymentStatus.CONFIRMED
    sale.payment_confirmed_at = timezone.now()
    sale.payment_confirmed_by = actor
    sale.save(update_fields=[
        "payment_status",
        "payment_confirmed_at",
        "payment_confirmed_by",
        "updated_at",
    ])

    _invalidate_caches_on_commit("sale_confirmed")

    logger.info("Sale %s payment confirmed by %s", sale.pk, actor)
    return sale


# ---------------------------------------------------------------------------
# delete_sale
# ---------------------------------------------------------------------------

@transaction.atomic
def delete_sale(sale: Sale, actor=None) -> None:
    """Delete a sale and give its units back to the product."""
    from catalog.models import Product

    sale = Sale.objects.select_for_update().get(pk=sale.pk)
    stock_update = {"total_stock": F("total_stock") + sale.quantity}
    if sale.is_house_sale:
        stock_update["warehouse_stock"] = F("warehouse_stock") + sale.quantity
    Product.objects.filter(pk=sale.product_id).update(**stock_update)

    sale_id = sale.pk
    sale.delete()

    _invalidate_caches_on_commit("sale_deleted")

    logger.info("Sale %s deleted by %s (stock restored)", sale_id, actor)


# ---------------------------------------------------------------------------
# Repair / verification utilities
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProfitIntegrityIssue:
    sale_id: str
    code: str
    message: str


def verify_profit_distribution(queryset=None) -> list[ProfitIntegrityIssue]:
    """Report sales whose stored profit fields break the split rules.

    Never modifies data; every issue is logged as a data-integrity warning.
    """
    if queryset is None:
        queryset = Sale.objects.all()

    issues: list[ProfitIntegrityIssue] = []
    for sale in queryset.order_by().iterator():
        sale_id = str(sale.pk)
        if not split_is_consistent(sale):
            issues.append(ProfitIntegrityIssue(
                sale_id,
                "sum_mismatch",
                f"distributor_profit ({sale.distributor_profit}) + admin_profit "
                f"({sale.admin_profit}) != total_profit ({sale.total_profit})",
            ))
        if sale.is_house_sale:
            if sale.distributor_profit != 0 or sale.distributor_profit_pct != 0:
                issues.append(ProfitIntegrityIssue(
                    sale_id,
                    "house_sale_distributor_share",
                    f"house sale with distributor_profit={sale.distributor_profit} "
                    f"pct={sale.distributor_profit_pct}",
                ))
        elif sale.distributor_profit_pct not in COMMISSION_PCTS:
            issues.append(ProfitIntegrityIssue(
                sale_id,
                "invalid_pct",
                f"distributor_profit_pct={sale.distributor_profit_pct} is not a commission tier",
            ))

    for issue in issues:
        logger.warning("Profit integrity violation on sale %s [%s]: %s", issue.sale_id, issue.code, issue.message)
    return issues


@transaction.atomic
def recompute_sale_profits(queryset=None, *, dry_run: bool = False) -> int:
    """Re-run the profit split on stored sales using each sale's own pct.

    House sales are forced back to pct 0. Sales whose pct is not a valid tier
    are skipped and logged. Returns the number of sales whose fields changed.
    """
    if queryset is None:
        queryset = Sale.objects.all()

    changed = 0
    for sale in queryset.order_by().select_for_update().iterator():
        before = (
            sale.distributor_profit_pct,
            sale.distributor_price,
            sale.distributor_profit,
            sale.admin_profit,
            sale.total_profit,
            sale.commission_bonus_pct,
        )
        if sale.is_house_sale:
            sale.distributor_profit_pct = 0
        try:
            split = split_for_sale(sale)
        except ProfitSplitError as exc:
            logger.warning("Sale %s skipped during recompute: %s", sale.pk, exc)
            continue

        apply_profit_split(sale, split)
        after = (
            sale.distributor_profit_pct,
            sale.distributor_price,
            sale.distributor_profit,
            sale.admin_profit,
            sale.total_profit,
            sale.commission_bonus_pct,
        )
        if before == after:
            continue

        changed += 1
        if not dry_run:
            sale.save(update_fields=[
                "distributor_profit_pct",
                "distributor_price",
                "distributor_profit",
                "admin_profit",
                "total_profit",
                "commission_bonus_pct",
                "updated_at",
            ])

    if changed and not dry_run:
        _invalidate_caches_on_commit("sale_profits_recomputed")
    logger.info("Recomputed profit split: %s sale(s) %s", changed, "would change" if dry_run else "updated")
    return changed


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _check_stock_availability(product_name: str, available: int, qty: int) -> None:
    if available < qty:
        raise ValueError(
            f"Stock insuficiente para '{product_name}'. "
            f"Disponible: {available}, solicitado: {qty}."
        )
