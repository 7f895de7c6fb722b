"""Profit split between a distributor and the house.

Pure functions only: no database access. The commission percentage is
resolved once, when the sale is written, and stored on the sale so the split
can be reproduced later without re-ranking anybody.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from core.numbers import quantize_money, to_decimal

HOUSE_PROFIT_PCT = 0
COMMISSION_PCTS = frozenset({20, 21, 23, 25})


class ProfitSplitError(ValueError):
    """Raised when a sale cannot be split with the given inputs."""


@dataclass(frozen=True)
class ProfitSplit:
    distributor_profit_pct: int
    price_for_distributor: Decimal
    distributor_profit: Decimal
    admin_profit: Decimal
    total_profit: Decimal


def compute_profit_split(
    *,
    sale_price,
    purchase_price,
    quantity: int,
    distributor_profit_pct: int = HOUSE_PROFIT_PCT,
    is_house_sale: bool,
) -> ProfitSplit:
    """Split the margin of a sale.

    House sale: the whole margin goes to the admin.
    Distributor sale: the distributor keeps ``pct`` percent of the sale price
    and remits ``price_for_distributor`` upstream; the admin keeps the rest of
    the margin. ``total_profit`` is always the sum of both shares.
    """
    if quantity is None or int(quantity) < 1:
        raise ProfitSplitError("La cantidad debe ser al menos 1.")
    qty = int(quantity)
    sale = quantize_money(sale_price)
    purchase = quantize_money(purchase_price)

    if is_house_sale:
        admin_profit = (sale - purchase) * qty
        return ProfitSplit(
            distributor_profit_pct=HOUSE_PROFIT_PCT,
            price_for_distributor=sale,
            distributor_profit=Decimal("0.00"),
            admin_profit=admin_profit,
            total_profit=admin_profit,
        )

    pct = int(distributor_profit_pct)
    if pct not in COMMISSION_PCTS:
        raise ProfitSplitError(
            f"Porcentaje de distribuidor invalido: {distributor_profit_pct}."
        )

    # Shares are rounded once on the line total; the per-unit remittance is
    # rounded for display only.
    price_for_distributor = quantize_money(sale * (Decimal(100) - pct) / Decimal(100))
    distributor_profit = quantize_money(sale * pct / Decimal(100) * qty)
    admin_profit = (sale - purchase) * qty - distributor_profit
    return ProfitSplit(
        distributor_profit_pct=pct,
        price_for_distributor=price_for_distributor,
        distributor_profit=distributor_profit,
        admin_profit=admin_profit,
        total_profit=distributor_profit + admin_profit,
    )


def split_for_sale(sale) -> ProfitSplit:
    """Recompute the split of a stored sale from its own frozen fields."""
    return compute_profit_split(
        sale_price=sale.sale_price,
        purchase_price=sale.purchase_price,
        quantity=sale.quantity,
        distributor_profit_pct=sale.distributor_profit_pct,
        is_house_sale=sale.distributor_id is None,
    )


def apply_profit_split(sale, split: ProfitSplit | None = None) -> ProfitSplit:
    """Write the split onto ``sale`` (does not save)."""
    split = split or split_for_sale(sale)
    sale.distributor_profit_pct = split.distributor_profit_pct
    sale.distributor_price = split.price_for_distributor
    sale.distributor_profit = split.distributor_profit
    sale.admin_profit = split.admin_profit
    sale.total_profit = split.total_profit
    if sale.distributor_id is None:
        sale.commission_bonus_pct = 0
    return split


def split_is_consistent(sale) -> bool:
    return to_decimal(sale.distributor_profit) + to_decimal(sale.admin_profit) == to_decimal(sale.total_profit)
