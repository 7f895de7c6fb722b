from decimal import Decimal

import pytest

from sales.models import Sale
from sales.profit import (
    COMMISSION_PCTS,
    ProfitSplitError,
    apply_profit_split,
    compute_profit_split,
    split_is_consistent,
)


class TestComputeProfitSplit:
    def test_house_sale_keeps_whole_margin(self):
        split = compute_profit_split(
            sale_price=Decimal("22000"),
            purchase_price=Decimal("10500"),
            quantity=1,
            is_house_sale=True,
        )
        assert split.admin_profit == Decimal("11500")
        assert split.distributor_profit == Decimal("0")
        assert split.total_profit == Decimal("11500")
        assert split.distributor_profit_pct == 0
        assert split.price_for_distributor == Decimal("22000")

    def test_house_sale_ignores_requested_pct(self):
        split = compute_profit_split(
            sale_price=Decimal("22000"),
            purchase_price=Decimal("10500"),
            quantity=1,
            distributor_profit_pct=25,
            is_house_sale=True,
        )
        assert split.distributor_profit_pct == 0
        assert split.distributor_profit == 0

    def test_first_place_distributor_sale(self):
        split = compute_profit_split(
            sale_price=Decimal("22000"),
            purchase_price=Decimal("10500"),
            quantity=1,
            distributor_profit_pct=25,
            is_house_sale=False,
        )
        assert split.price_for_distributor == Decimal("16500")
        assert split.distributor_profit == Decimal("5500")
        assert split.admin_profit == Decimal("6000")
        assert split.total_profit == Decimal("11500")

    def test_quantity_multiplies_every_share(self):
        split = compute_profit_split(
            sale_price=Decimal("22000"),
            purchase_price=Decimal("10500"),
            quantity=3,
            distributor_profit_pct=25,
            is_house_sale=False,
        )
        assert split.price_for_distributor == Decimal("16500")
        assert split.distributor_profit == Decimal("16500")
        assert split.admin_profit == Decimal("18000")
        assert split.total_profit == Decimal("34500")

    @pytest.mark.parametrize("pct", sorted(COMMISSION_PCTS))
    def test_every_tier_sums_exactly(self, pct):
        sale_price = Decimal("15350")
        split = compute_profit_split(
            sale_price=sale_price,
            purchase_price=Decimal("9000"),
            quantity=2,
            distributor_profit_pct=pct,
            is_house_sale=False,
        )
        expected_distributor = (sale_price - sale_price * (100 - pct) / 100) * 2
        assert split.distributor_profit == expected_distributor
        assert split.distributor_profit + split.admin_profit == split.total_profit

    def test_cent_prices_round_once_on_the_line_total(self):
        split = compute_profit_split(
            sale_price=Decimal("10.05"),
            purchase_price=Decimal("5"),
            quantity=100,
            distributor_profit_pct=21,
            is_house_sale=False,
        )
        # 10.05 * 21% = 2.1105 per unit; 211.05 for the line.
        assert split.distributor_profit == Decimal("211.05")
        assert split.admin_profit == Decimal("293.95")
        assert split.total_profit == Decimal("505.00")
        assert split.price_for_distributor == Decimal("7.94")

    @pytest.mark.parametrize("pct", sorted(COMMISSION_PCTS))
    def test_cent_prices_keep_the_total_margin(self, pct):
        split = compute_profit_split(
            sale_price=Decimal("13.37"),
            purchase_price=Decimal("8.11"),
            quantity=7,
            distributor_profit_pct=pct,
            is_house_sale=False,
        )
        assert split.total_profit == (Decimal("13.37") - Decimal("8.11")) * 7
        assert split.distributor_profit + split.admin_profit == split.total_profit

    def test_sale_below_cost_gives_negative_admin_profit(self):
        split = compute_profit_split(
            sale_price=Decimal("10000"),
            purchase_price=Decimal("9000"),
            quantity=1,
            distributor_profit_pct=20,
            is_house_sale=False,
        )
        assert split.distributor_profit == Decimal("2000")
        assert split.admin_profit == Decimal("-1000")
        assert split.total_profit == Decimal("1000")

    @pytest.mark.parametrize("pct", [0, 15, 22, 30])
    def test_invalid_pct_is_rejected(self, pct):
        with pytest.raises(ProfitSplitError):
            compute_profit_split(
                sale_price=Decimal("22000"),
                purchase_price=Decimal("10500"),
                quantity=1,
                distributor_profit_pct=pct,
                is_house_sale=False,
            )

    def test_zero_quantity_is_rejected(self):
        with pytest.raises(ProfitSplitError):
            compute_profit_split(
                sale_price=Decimal("22000"),
                purchase_price=Decimal("10500"),
                quantity=0,
                is_house_sale=True,
            )


class TestApplyProfitSplit:
    def test_writes_fields_from_stored_pct(self):
        sale = Sale(
            distributor_id="00000000-0000-0000-0000-000000000001",
            quantity=1,
            purchase_price=Decimal("10500"),
            sale_price=Decimal("22000"),
            distributor_profit_pct=23,
        )
        apply_profit_split(sale)
        assert sale.distributor_price == Decimal("16940.00")
        assert sale.distributor_profit == Decimal("5060.00")
        assert sale.admin_profit == Decimal("6440.00")
        assert split_is_consistent(sale)

    def test_house_sale_resets_bonus(self):
        sale = Sale(
            quantity=2,
            purchase_price=Decimal("10500"),
            sale_price=Decimal("22000"),
            commission_bonus_pct=5,
        )
        apply_profit_split(sale)
        assert sale.commission_bonus_pct == 0
        assert sale.distributor_profit_pct == 0
        assert sale.total_profit == Decimal("23000")
