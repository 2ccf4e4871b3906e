"""Unit line builder with deterministic hashing for reproducibility."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from payroll_accrual.calculators.calendar_resolver import CalendarMonth
from payroll_accrual.calculators.money import ZERO, round_to_cents
from payroll_accrual.calculators.types import Direction, LedgerEntry, UnitLine
from payroll_accrual.calculators.unit_registry import UnitTypeRegistry


@dataclass(frozen=True)
class UnitTotals:
    """Ledger lines of one employee-month partitioned by direction."""

    lines: tuple[UnitLine, ...]
    total_additions: Decimal
    total_deductions: Decimal
    insurance_deduction: Decimal


class UnitLineBuilder:
    """Builds direction-resolved unit lines from raw ledger entries.

    Sign conventions:
    - Ledger amounts are stored positive
    - ADDITION lines add to net, DEDUCTION lines subtract from it
    - Insurance deductions are part of total_deductions and are only
      surfaced separately, never subtracted a second time
    """

    @staticmethod
    def build_lines(
        entries: Iterable[LedgerEntry],
        registry: UnitTypeRegistry,
        calendar: CalendarMonth,
        employee_id: Any,
    ) -> tuple[UnitLine, ...]:
        """Resolve the employee's entries dated inside the month.

        Lines are returned in (date, entry_id) order so output does not
        depend on the order rows came back from storage.
        """
        lines = [
            UnitLine(
                entry_id=entry.entry_id,
                type=entry.type,
                amount=abs(entry.amount),
                date=entry.date,
                direction=registry.direction_of(entry.type),
                is_insurance=registry.is_insurance(entry.type),
            )
            for entry in entries
            if entry.employee_id == employee_id and calendar.contains(entry.date)
        ]
        lines.sort(key=lambda line: (line.date, str(line.entry_id)))
        return tuple(lines)

    @staticmethod
    def aggregate(lines: Iterable[UnitLine]) -> UnitTotals:
        """Sum additions, deductions and the insurance subset."""
        lines = tuple(lines)
        additions = sum(
            (l.amount for l in lines if l.direction is Direction.ADDITION), ZERO
        )
        deductions = sum(
            (l.amount for l in lines if l.direction is Direction.DEDUCTION), ZERO
        )
        insurance = sum((l.amount for l in lines if l.is_insurance), ZERO)
        return UnitTotals(
            lines=lines,
            total_additions=round_to_cents(additions),
            total_deductions=round_to_cents(deductions),
            insurance_deduction=round_to_cents(insurance),
        )

    @staticmethod
    def totals_by_type(lines: Iterable[UnitLine]) -> dict[str, Decimal]:
        """Sum amounts per unit type name, keys sorted."""
        totals: dict[str, Decimal] = {}
        for line in lines:
            totals[line.type] = totals.get(line.type, ZERO) + line.amount
        return dict(sorted(totals.items()))

    @staticmethod
    def compute_fingerprint(data: Any) -> str:
        """Deterministic hash of canonical JSON-able data."""
        json_str = json.dumps(data, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]
