"""Tests for gross-up and pension contribution."""

from decimal import Decimal

import pytest

from payroll_accrual.calculators.gross_up import (
    PENSION_NET_FACTOR,
    STATUTORY_NET_FACTOR,
    employer_cost,
    gross_up,
    pension_contribution,
)


class TestGrossUp:
    def test_without_pension(self):
        assert gross_up(Decimal("3150.00"), False) == Decimal("3315.79")

    def test_with_pension(self):
        # 3150 / 0.95 / 0.98 = 3383.4586...
        assert gross_up(Decimal("3150.00"), True) == Decimal("3383.46")

    def test_zero_net(self):
        assert gross_up(Decimal("0"), True) == Decimal("0.00")
        assert pension_contribution(Decimal("0"), True) == Decimal("0.00")

    def test_pension_contribution(self):
        # 2% of the unrounded gross 3383.4586...
        assert pension_contribution(Decimal("3150.00"), True) == Decimal("67.67")
        assert pension_contribution(Decimal("3150.00"), False) == Decimal("0.00")

    def test_employer_cost(self):
        cost = employer_cost("1900", True)

        # 1900 / 0.95 / 0.98 = 2040.8163...
        assert cost.net_salary == Decimal("1900.00")
        assert cost.gross_salary == Decimal("2040.82")
        assert cost.pension_contribution == Decimal("40.82")
        assert cost.pension_enabled is True

    def test_negative_net_is_grossed_up_as_is(self):
        assert gross_up(Decimal("-95.00"), False) == Decimal("-100.00")

    @pytest.mark.parametrize("pension", [False, True])
    @pytest.mark.parametrize(
        "net", ["0.01", "1.00", "99.99", "1234.56", "3150.00", "7777.77", "125000.01"]
    )
    def test_gross_up_inverts_withholding(self, net, pension):
        gross = gross_up(Decimal(net), pension)
        factor = STATUTORY_NET_FACTOR * (PENSION_NET_FACTOR if pension else Decimal("1"))

        assert abs(gross * factor - Decimal(net)) <= Decimal("0.01")
