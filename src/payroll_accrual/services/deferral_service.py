"""Salary deferral store: moves a month's base accrual to the next month."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_accrual.calculators.calendar_resolver import format_month, parse_month, previous_month
from payroll_accrual.calculators.money import round_to_cents, to_decimal
from payroll_accrual.calculators.types import DeferralState
from payroll_accrual.models import SalaryDeferral
from payroll_accrual.services.employee_service import EmployeeService

logger = logging.getLogger(__name__)


class DeferralValidationError(ValueError):
    """Raised when a deferral amount is rejected."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"deferred_amount must be a non-negative number, got {value!r}")


class DeferralService:
    """Set, unset and look up salary deferrals.

    Setting is an upsert and unsetting is a delete, so toggling is
    idempotent in both directions.
    """

    def __init__(self, session: AsyncSession, tenant_id: UUID):
        self.session = session
        self.tenant_id = tenant_id
        self.employees = EmployeeService(session, tenant_id)

    async def set_deferral(
        self, employee_id: UUID, month: str, deferred_amount: Any
    ) -> SalaryDeferral:
        """Create or update the deferral for (employee, month)."""
        month_key = format_month(*parse_month(month))
        try:
            amount = round_to_cents(to_decimal(deferred_amount))
        except ValueError as e:
            raise DeferralValidationError(deferred_amount) from e
        if amount < 0:
            raise DeferralValidationError(deferred_amount)

        await self.employees.get_employee(employee_id)

        deferral = await self.get_deferral(employee_id, month_key)
        if deferral is None:
            deferral = SalaryDeferral(
                tenant_id=self.tenant_id,
                employee_id=employee_id,
                month=month_key,
                deferred_amount=amount,
            )
            self.session.add(deferral)
        else:
            deferral.deferred_amount = amount
        await self.session.flush()
        logger.info("Deferred %s of employee %s for %s", amount, employee_id, month_key)
        return deferral

    async def unset_deferral(self, employee_id: UUID, month: str) -> bool:
        """Remove the deferral for (employee, month). Returns whether one existed."""
        month_key = format_month(*parse_month(month))
        deferral = await self.get_deferral(employee_id, month_key)
        if deferral is None:
            return False
        await self.session.delete(deferral)
        await self.session.flush()
        logger.info("Removed deferral of employee %s for %s", employee_id, month_key)
        return True

    async def get_deferral(self, employee_id: UUID, month: str) -> SalaryDeferral | None:
        result = await self.session.execute(
            select(SalaryDeferral).where(
                SalaryDeferral.tenant_id == self.tenant_id,
                SalaryDeferral.employee_id == employee_id,
                SalaryDeferral.month == month,
            )
        )
        return result.scalar_one_or_none()

    async def deferrals_for_month(self, month: str) -> dict[UUID, DeferralState]:
        """Deferral rows of a month keyed by employee."""
        result = await self.session.execute(
            select(SalaryDeferral).where(
                SalaryDeferral.tenant_id == self.tenant_id,
                SalaryDeferral.month == month,
            )
        )
        return {d.employee_id: d.to_state() for d in result.scalars().all()}

    async def carry_overs_for_month(self, month: str) -> dict[UUID, Decimal]:
        """Amounts deferred in the previous month, arriving in this one."""
        prior = await self.deferrals_for_month(previous_month(month))
        return {employee_id: state.deferred_amount for employee_id, state in prior.items()}
