"""Accrual sheet totals over a month's salary records."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable

from payroll_accrual.calculators.gross_up import GrossUpResult, employer_cost
from payroll_accrual.calculators.money import ZERO, round_to_cents
from payroll_accrual.calculators.types import SalaryRecord
from payroll_accrual.calculators.unit_lines import UnitLineBuilder


@dataclass(frozen=True)
class AccrualRow:
    """One active record with its employer-side cost."""

    record: SalaryRecord
    cost: GrossUpResult


@dataclass(frozen=True)
class AccrualSummary:
    """Totals of the accrual sheet.

    Only active records (accrued, net or additions above zero) are counted.
    """

    month: str
    rows: tuple[AccrualRow, ...]
    total_accrued: Decimal
    total_additions: Decimal
    total_deductions: Decimal
    total_insurance: Decimal
    total_carry_over: Decimal
    total_net: Decimal
    total_gross: Decimal
    total_pension: Decimal
    totals_by_type: dict[str, Decimal] = field(default_factory=dict)

    @property
    def active_count(self) -> int:
        return len(self.rows)


def summarize(month: str, records: Iterable[SalaryRecord]) -> AccrualSummary:
    """Build accrual sheet totals for a month."""
    rows = tuple(
        AccrualRow(record=r, cost=employer_cost(r.net_salary, r.employee.pension))
        for r in records
        if r.is_active
    )

    def total(values: Iterable[Decimal]) -> Decimal:
        return round_to_cents(sum(values, ZERO))

    return AccrualSummary(
        month=month,
        rows=rows,
        total_accrued=total(row.record.accrued_salary for row in rows),
        total_additions=total(row.record.total_additions for row in rows),
        total_deductions=total(row.record.total_deductions for row in rows),
        total_insurance=total(row.record.insurance_deduction for row in rows),
        total_carry_over=total(row.record.carry_over for row in rows),
        total_net=total(row.record.net_salary for row in rows),
        total_gross=total(row.cost.gross_salary for row in rows),
        total_pension=total(row.cost.pension_contribution for row in rows),
        totals_by_type=UnitLineBuilder.totals_by_type(
            line for row in rows for line in row.record.units
        ),
    )
