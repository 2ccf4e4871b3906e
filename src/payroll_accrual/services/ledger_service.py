"""Unit ledger: append-only adjustment entries per employee."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_accrual.calculators.calendar_resolver import month_bounds
from payroll_accrual.calculators.money import round_to_cents, to_decimal
from payroll_accrual.models import UnitAdjustment
from payroll_accrual.services.employee_service import EmployeeService

logger = logging.getLogger(__name__)


class LedgerValidationError(ValueError):
    """Raised when a ledger entry is rejected at the write boundary."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class EntryNotFoundError(Exception):
    """Raised when a ledger entry does not exist."""

    def __init__(self, entry_id: UUID):
        self.entry_id = entry_id
        super().__init__(f"Ledger entry {entry_id} not found")


class LedgerService:
    """Writes and reads unit adjustments.

    Rules:
    - Amounts are stored positive; direction is resolved when read
    - Entries are never updated; an edit is a delete plus a new entry
    - Invalid input is rejected here and never reaches the engine
    """

    def __init__(self, session: AsyncSession, tenant_id: UUID):
        self.session = session
        self.tenant_id = tenant_id
        self.employees = EmployeeService(session, tenant_id)

    async def add_entry(
        self,
        employee_id: UUID,
        type: str,
        amount: Any,
        date: date,
    ) -> UUID:
        """Append an entry and return its id.

        Raises:
            LedgerValidationError: Missing type, non-positive or non-numeric
                amount, or a missing date
            EmployeeNotFoundError: If the employee does not exist
        """
        type_name = (type or "").strip()
        if not type_name:
            raise LedgerValidationError("type", "Type is required")
        try:
            value = round_to_cents(to_decimal(amount))
        except ValueError:
            raise LedgerValidationError("amount", f"Amount must be a number, got {amount!r}")
        if value <= 0:
            raise LedgerValidationError("amount", "Amount must be greater than zero")
        if date is None:
            raise LedgerValidationError("date", "Date is required")

        await self.employees.get_employee(employee_id)

        entry = UnitAdjustment(
            tenant_id=self.tenant_id,
            employee_id=employee_id,
            type=type_name,
            amount=value,
            date=date,
        )
        self.session.add(entry)
        await self.session.flush()
        logger.info(
            "Ledger entry %s added for employee %s: %s %s on %s",
            entry.unit_id,
            employee_id,
            type_name,
            value,
            date,
        )
        return entry.unit_id

    async def delete_entry(self, entry_id: UUID, employee_id: UUID | None = None) -> None:
        """Delete an entry.

        Raises:
            EntryNotFoundError: If no such entry exists for the tenant
                (or for the given employee)
        """
        entry = await self.session.get(UnitAdjustment, entry_id)
        if (
            entry is None
            or entry.tenant_id != self.tenant_id
            or (employee_id is not None and entry.employee_id != employee_id)
        ):
            raise EntryNotFoundError(entry_id)
        await self.session.delete(entry)
        await self.session.flush()
        logger.info("Ledger entry %s deleted", entry_id)

    async def list_entries(self, employee_id: UUID) -> list[UnitAdjustment]:
        """All entries of an employee, newest first."""
        await self.employees.get_employee(employee_id)
        result = await self.session.execute(
            select(UnitAdjustment)
            .where(
                UnitAdjustment.tenant_id == self.tenant_id,
                UnitAdjustment.employee_id == employee_id,
            )
            .order_by(UnitAdjustment.date.desc(), UnitAdjustment.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_entries_for_month(
        self, employee_id: UUID, year: int, month: int
    ) -> list[UnitAdjustment]:
        """Entries of one employee dated inside a month."""
        first_day, last_day = month_bounds(year, month)
        result = await self.session.execute(
            select(UnitAdjustment)
            .where(
                UnitAdjustment.tenant_id == self.tenant_id,
                UnitAdjustment.employee_id == employee_id,
                UnitAdjustment.date >= first_day,
                UnitAdjustment.date <= last_day,
            )
            .order_by(UnitAdjustment.date, UnitAdjustment.created_at)
        )
        return list(result.scalars().all())

    async def list_month_entries(self, year: int, month: int) -> list[UnitAdjustment]:
        """Entries of every employee dated inside a month."""
        first_day, last_day = month_bounds(year, month)
        result = await self.session.execute(
            select(UnitAdjustment)
            .where(
                UnitAdjustment.tenant_id == self.tenant_id,
                UnitAdjustment.date >= first_day,
                UnitAdjustment.date <= last_day,
            )
            .order_by(UnitAdjustment.date, UnitAdjustment.created_at)
        )
        return list(result.scalars().all())
