"""Payroll accrual services."""

from payroll_accrual.services.accrual_service import (
    AccrualService,
    MonthlyAccrual,
    OvertimeNotComputableError,
)
from payroll_accrual.services.deferral_service import DeferralService, DeferralValidationError
from payroll_accrual.services.employee_service import (
    EmployeeNotFoundError,
    EmployeeService,
    SalaryChangeNotFoundError,
    SalaryValidationError,
)
from payroll_accrual.services.ledger_service import (
    EntryNotFoundError,
    LedgerService,
    LedgerValidationError,
)

__all__ = [
    "AccrualService",
    "DeferralService",
    "DeferralValidationError",
    "EmployeeNotFoundError",
    "EmployeeService",
    "EntryNotFoundError",
    "LedgerService",
    "LedgerValidationError",
    "MonthlyAccrual",
    "OvertimeNotComputableError",
    "SalaryChangeNotFoundError",
    "SalaryValidationError",
]
