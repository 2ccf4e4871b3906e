"""Payroll accrual calculators."""

from payroll_accrual.calculators.calendar_resolver import (
    CalendarMonth,
    CalendarResolver,
    InvalidMonthError,
    next_month,
    parse_month,
    previous_month,
)
from payroll_accrual.calculators.engine import AccrualEngine
from payroll_accrual.calculators.gross_up import employer_cost, gross_up, pension_contribution
from payroll_accrual.calculators.overtime import convert_overtime, hourly_rate, overtime_amount
from payroll_accrual.calculators.salary_resolver import SalaryHistory
from payroll_accrual.calculators.summary import AccrualSummary, summarize
from payroll_accrual.calculators.types import (
    DeferralState,
    Direction,
    EmployeeSnapshot,
    LedgerEntry,
    SalaryChangeEntry,
    SalaryRecord,
    UnitLine,
)
from payroll_accrual.calculators.unit_registry import UnitTypeRegistry

__all__ = [
    "AccrualEngine",
    "AccrualSummary",
    "CalendarMonth",
    "CalendarResolver",
    "DeferralState",
    "Direction",
    "EmployeeSnapshot",
    "InvalidMonthError",
    "LedgerEntry",
    "SalaryChangeEntry",
    "SalaryHistory",
    "SalaryRecord",
    "UnitLine",
    "UnitTypeRegistry",
    "convert_overtime",
    "employer_cost",
    "gross_up",
    "hourly_rate",
    "next_month",
    "overtime_amount",
    "parse_month",
    "pension_contribution",
    "previous_month",
    "summarize",
]
