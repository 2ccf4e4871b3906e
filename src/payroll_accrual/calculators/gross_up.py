"""Employer-side gross salary and pension from net pay."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from payroll_accrual.calculators.money import ZERO, round_to_cents, to_decimal

# Fixed withholding model: net already has a flat 5% statutory withholding
# removed, and a further 2% employee pension withholding when enrolled.
# These are not read from configuration.
STATUTORY_NET_FACTOR = Decimal("0.95")
PENSION_NET_FACTOR = Decimal("0.98")
PENSION_CONTRIBUTION_RATE = Decimal("0.02")


@dataclass(frozen=True)
class GrossUpResult:
    """Gross-up of one net salary."""

    net_salary: Decimal
    gross_salary: Decimal
    pension_contribution: Decimal
    pension_enabled: bool


def _raw_gross(net: Decimal, pension_enabled: bool) -> Decimal:
    if net == 0:
        return ZERO
    gross = net / STATUTORY_NET_FACTOR
    if pension_enabled:
        gross = gross / PENSION_NET_FACTOR
    return gross


def gross_up(net_salary: Any, pension_enabled: bool) -> Decimal:
    """Gross salary for a net salary, rounded to cents."""
    return round_to_cents(_raw_gross(to_decimal(net_salary), pension_enabled))


def pension_contribution(net_salary: Any, pension_enabled: bool) -> Decimal:
    """Pension contribution (2% of gross) when enrolled, else zero."""
    if not pension_enabled:
        return round_to_cents(ZERO)
    gross = _raw_gross(to_decimal(net_salary), True)
    return round_to_cents(gross * PENSION_CONTRIBUTION_RATE)


def employer_cost(net_salary: Any, pension_enabled: bool) -> GrossUpResult:
    """Gross salary and pension contribution for a net salary."""
    net = to_decimal(net_salary)
    return GrossUpResult(
        net_salary=round_to_cents(net),
        gross_salary=gross_up(net, pension_enabled),
        pension_contribution=pension_contribution(net, pension_enabled),
        pension_enabled=pension_enabled,
    )
