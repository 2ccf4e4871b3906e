"""SQLAlchemy ORM models."""

from payroll_accrual.models.base import Base, TimestampMixin
from payroll_accrual.models.calendar import Holiday
from payroll_accrual.models.deferral import SalaryDeferral
from payroll_accrual.models.employee import Employee, SalaryChange
from payroll_accrual.models.ledger import OvertimeRate, UnitAdjustment, UnitType

__all__ = [
    "Base",
    "Employee",
    "Holiday",
    "OvertimeRate",
    "SalaryChange",
    "SalaryDeferral",
    "TimestampMixin",
    "UnitAdjustment",
    "UnitType",
]
