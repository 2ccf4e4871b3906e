"""Overtime hours to pay conversion."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from payroll_accrual.calculators.money import round_to_cents, to_decimal

HOURS_PER_WORKING_DAY = Decimal("8")

# Ledger type written for converted overtime
OVERTIME_UNIT_TYPE = "OT"


@dataclass(frozen=True)
class OvertimeConversion:
    """Hours converted into an overtime ledger amount."""

    hourly_rate: Decimal
    rate_pct: Decimal
    hours: Decimal
    amount: Decimal


def hourly_rate(salary: Any, working_days: int) -> Decimal | None:
    """Derive the hourly rate from a monthly salary.

    Returns None when the month has no working days or there is no salary.
    """
    if salary is None or working_days is None or working_days <= 0:
        return None
    return to_decimal(salary) / (Decimal(working_days) * HOURS_PER_WORKING_DAY)


def convert_overtime(
    salary: Any,
    working_days: int,
    rate_pct: Any,
    hours: Any,
) -> OvertimeConversion | None:
    """Convert overtime hours into a payable amount.

    ``amount = salary / (working_days * 8) * rate_pct / 100 * hours``,
    rounded half-up to cents.

    Returns None (no amount) when working days, hours or the rate are zero
    or missing; nothing should be written to the ledger in that case.
    """
    rate = hourly_rate(salary, working_days)
    if rate is None or rate <= 0 or hours is None or rate_pct is None:
        return None

    hours_dec = to_decimal(hours)
    pct = to_decimal(rate_pct)
    if hours_dec <= 0 or pct <= 0:
        return None

    amount = round_to_cents(rate * pct / Decimal("100") * hours_dec)
    if amount <= 0:
        return None

    return OvertimeConversion(
        hourly_rate=rate,
        rate_pct=pct,
        hours=hours_dec,
        amount=amount,
    )


def overtime_amount(
    salary: Any,
    working_days: int,
    rate_pct: Any,
    hours: Any,
) -> Decimal | None:
    """Payable overtime amount, or None when it cannot be computed."""
    conversion = convert_overtime(salary, working_days, rate_pct, hours)
    return conversion.amount if conversion else None
