"""API route modules."""

from payroll_accrual.api.routes.employees import router as employees_router
from payroll_accrual.api.routes.health import router as health_router
from payroll_accrual.api.routes.holidays import router as holidays_router
from payroll_accrual.api.routes.overtime_rates import router as overtime_rates_router
from payroll_accrual.api.routes.salaries import router as salaries_router
from payroll_accrual.api.routes.salary_deferrals import router as salary_deferrals_router
from payroll_accrual.api.routes.unit_types import router as unit_types_router

__all__ = [
    "employees_router",
    "health_router",
    "holidays_router",
    "overtime_rates_router",
    "salaries_router",
    "salary_deferrals_router",
    "unit_types_router",
]
