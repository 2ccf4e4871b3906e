"""Type definitions for the accrual pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID


class Direction(str, Enum):
    """Whether a unit type adds to or subtracts from net salary."""

    ADDITION = "addition"
    DEDUCTION = "deduction"


@dataclass(frozen=True)
class EmployeeSnapshot:
    """The employee fields the engine reads, detached from the ORM."""

    employee_id: UUID
    first_name: str
    last_name: str
    base_salary: Decimal | None
    start_date: date
    end_date: date | None = None
    pension: bool = False
    personal_id: str | None = None
    overtime_rate: Decimal | None = None

    @property
    def full_name(self) -> str:
        """Get full name."""
        return f"{self.first_name} {self.last_name}"

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for hashing (deterministic ordering)."""
        return {
            "employee_id": str(self.employee_id),
            "base_salary": str(self.base_salary) if self.base_salary is not None else None,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "pension": self.pension,
        }


@dataclass(frozen=True)
class LedgerEntry:
    """A unit adjustment as read from the ledger. Amount is always positive."""

    entry_id: UUID
    employee_id: UUID
    type: str
    amount: Decimal
    date: date


@dataclass(frozen=True)
class SalaryChangeEntry:
    """An effective-dated base salary change."""

    effective_date: date
    old_salary: Decimal
    new_salary: Decimal
    salary_change_id: UUID | None = None
    note: str | None = None

    def to_canonical_dict(self) -> dict[str, Any]:
        return {
            "effective_date": self.effective_date.isoformat(),
            "old_salary": str(self.old_salary),
            "new_salary": str(self.new_salary),
        }


@dataclass(frozen=True)
class DeferralState:
    """Presence of a salary deferral row for (employee, month)."""

    employee_id: UUID
    month: str
    deferred_amount: Decimal
    deferral_id: UUID | None = None


@dataclass(frozen=True)
class UnitLine:
    """A ledger entry with its direction resolved at read time."""

    entry_id: UUID
    type: str
    amount: Decimal
    date: date
    direction: Direction
    is_insurance: bool = False

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.direction is Direction.ADDITION else -self.amount

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for hashing (deterministic ordering)."""
        return {
            "entry_id": str(self.entry_id),
            "type": self.type,
            "amount": str(self.amount),
            "date": self.date.isoformat(),
            "direction": self.direction.value,
        }


@dataclass(frozen=True)
class SalaryRecord:
    """Computed accrual for one employee and one month. Never persisted."""

    employee: EmployeeSnapshot
    month: str
    days_worked: int
    total_days: int
    resolved_salary: Decimal
    accrued_salary: Decimal
    original_accrued: Decimal
    total_additions: Decimal
    total_deductions: Decimal
    insurance_deduction: Decimal
    carry_over: Decimal
    net_salary: Decimal
    is_deferred: bool
    is_mid_month_starter: bool
    salary_note: str | None
    units: tuple[UnitLine, ...] = ()
    deferral_id: UUID | None = None
    inputs_fingerprint: str = ""
    calculation_id: UUID | None = None
    anomalies: tuple[str, ...] = field(default_factory=tuple)

    @property
    def employee_id(self) -> UUID:
        return self.employee.employee_id

    @property
    def is_active(self) -> bool:
        """Whether the record shows any money moving this month."""
        return (
            self.accrued_salary > 0
            or self.net_salary > 0
            or self.total_additions > 0
        )
