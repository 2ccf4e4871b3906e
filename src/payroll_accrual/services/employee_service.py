"""Employee intake and salary change history."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_accrual.calculators.money import round_to_cents, to_decimal
from payroll_accrual.calculators.salary_resolver import SalaryHistory
from payroll_accrual.models import Employee, SalaryChange

logger = logging.getLogger(__name__)


class EmployeeNotFoundError(Exception):
    """Raised when an employee does not exist for the tenant."""

    def __init__(self, employee_id: UUID):
        self.employee_id = employee_id
        super().__init__(f"Employee {employee_id} not found")


class SalaryChangeNotFoundError(Exception):
    """Raised when a salary change does not exist for the employee."""

    def __init__(self, employee_id: UUID, salary_change_id: UUID):
        self.employee_id = employee_id
        self.salary_change_id = salary_change_id
        super().__init__(
            f"Salary change {salary_change_id} not found for employee {employee_id}"
        )


class SalaryValidationError(ValueError):
    """Raised when a salary amount is not a non-negative number."""

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"{field} must be a non-negative number, got {value!r}")


class EmploymentDatesError(ValueError):
    """Raised when an employment would end before it starts."""

    def __init__(self, start_date: date, end_date: date):
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(f"end_date {end_date} is before start_date {start_date}")


def _validate_salary(field: str, value: Any) -> Decimal:
    try:
        amount = to_decimal(value)
    except ValueError as e:
        raise SalaryValidationError(field, value) from e
    if amount < 0:
        raise SalaryValidationError(field, value)
    return round_to_cents(amount)


class EmployeeService:
    """Tenant-scoped employee records and their salary history.

    Salary only changes through ``record_salary_change``, which snapshots the
    live salary as ``old_salary`` before updating it.
    """

    def __init__(self, session: AsyncSession, tenant_id: UUID):
        self.session = session
        self.tenant_id = tenant_id

    async def create_employee(
        self,
        first_name: str,
        last_name: str,
        base_salary: Any,
        start_date: date,
        end_date: date | None = None,
        pension: bool = False,
        personal_id: str | None = None,
        position: str | None = None,
        overtime_rate: Any = None,
    ) -> Employee:
        """Create an employee record."""
        employee = Employee(
            tenant_id=self.tenant_id,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            personal_id=personal_id.strip() if personal_id else None,
            position=position.strip() if position else None,
            base_salary=_validate_salary("base_salary", base_salary),
            overtime_rate=to_decimal(overtime_rate) if overtime_rate is not None else None,
            start_date=start_date,
            end_date=end_date,
            pension=pension,
        )
        self.session.add(employee)
        await self.session.flush()
        logger.info("Created employee %s", employee.employee_id)
        return employee

    async def update_employee(self, employee_id: UUID, **changes: Any) -> Employee:
        """Update the employment terms of an employee.

        Only ``end_date``, ``pension``, ``position`` and ``overtime_rate`` can
        change here; salary goes through ``record_salary_change``. A ``None``
        end date reopens the employment.

        Raises:
            EmployeeNotFoundError: If the employee does not exist
            EmploymentDatesError: If the new end date precedes the start date
        """
        employee = await self.get_employee(employee_id)

        if "end_date" in changes:
            end_date = changes["end_date"]
            if end_date is not None and end_date < employee.start_date:
                raise EmploymentDatesError(employee.start_date, end_date)
            employee.end_date = end_date
        if "pension" in changes:
            employee.pension = bool(changes["pension"])
        if "position" in changes:
            position = changes["position"]
            employee.position = position.strip() if position else None
        if "overtime_rate" in changes:
            rate = changes["overtime_rate"]
            employee.overtime_rate = to_decimal(rate) if rate is not None else None

        await self.session.flush()
        logger.info("Updated employee %s: %s", employee_id, sorted(changes))
        return employee

    async def get_employee(self, employee_id: UUID) -> Employee:
        """Load an employee of this tenant.

        Raises:
            EmployeeNotFoundError: If the employee does not exist
        """
        result = await self.session.execute(
            select(Employee).where(
                Employee.employee_id == employee_id,
                Employee.tenant_id == self.tenant_id,
            )
        )
        employee = result.scalar_one_or_none()
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee

    async def list_employees(self, search: str | None = None) -> list[Employee]:
        """List employees ordered by last name."""
        query = select(Employee).where(Employee.tenant_id == self.tenant_id)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(
                Employee.first_name.ilike(pattern)
                | Employee.last_name.ilike(pattern)
                | Employee.personal_id.ilike(pattern)
            )
        result = await self.session.execute(
            query.order_by(Employee.last_name, Employee.first_name)
        )
        return list(result.scalars().all())

    async def record_salary_change(
        self,
        employee_id: UUID,
        new_salary: Any,
        effective_date: date,
        note: str | None = None,
    ) -> SalaryChange:
        """Record a dated salary change and move the live salary."""
        employee = await self.get_employee(employee_id)
        amount = _validate_salary("new_salary", new_salary)

        change = SalaryChange(
            employee_id=employee.employee_id,
            old_salary=employee.base_salary,
            new_salary=amount,
            effective_date=effective_date,
            note=note.strip() if note else None,
        )
        employee.base_salary = amount
        self.session.add(change)
        await self.session.flush()
        logger.info(
            "Salary change for employee %s effective %s: %s -> %s",
            employee_id,
            effective_date,
            change.old_salary,
            change.new_salary,
        )
        return change

    async def list_salary_changes(self, employee_id: UUID) -> list[SalaryChange]:
        """Salary changes, newest effective date first."""
        await self.get_employee(employee_id)
        result = await self.session.execute(
            select(SalaryChange)
            .where(SalaryChange.employee_id == employee_id)
            .order_by(SalaryChange.effective_date.desc(), SalaryChange.created_at.desc())
        )
        return list(result.scalars().all())

    async def delete_salary_change(self, employee_id: UUID, salary_change_id: UUID) -> None:
        """Delete a salary change row. The live salary is left as is."""
        await self.get_employee(employee_id)
        change = await self.session.get(SalaryChange, salary_change_id)
        if change is None or change.employee_id != employee_id:
            raise SalaryChangeNotFoundError(employee_id, salary_change_id)
        await self.session.delete(change)
        await self.session.flush()
        logger.info("Deleted salary change %s of employee %s", salary_change_id, employee_id)

    async def load_histories(self, employees: list[Employee]) -> dict[UUID, SalaryHistory]:
        """Build salary histories for a roster with one query."""
        ids = [e.employee_id for e in employees]
        changes_by_employee: dict[UUID, list[SalaryChange]] = {i: [] for i in ids}
        if ids:
            result = await self.session.execute(
                select(SalaryChange)
                .where(SalaryChange.employee_id.in_(ids))
                .order_by(SalaryChange.effective_date, SalaryChange.created_at)
            )
            for change in result.scalars().all():
                changes_by_employee[change.employee_id].append(change)

        return {
            e.employee_id: SalaryHistory(
                e.base_salary,
                [c.to_entry() for c in changes_by_employee[e.employee_id]],
            )
            for e in employees
        }
