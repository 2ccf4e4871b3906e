"""Accrual service - reads a month's inputs, then runs the engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_accrual.calculators.calendar_resolver import (
    CalendarMonth,
    CalendarResolver,
    format_month,
    month_bounds,
    parse_month,
)
from payroll_accrual.calculators.engine import AccrualEngine
from payroll_accrual.calculators.overtime import (
    OVERTIME_UNIT_TYPE,
    OvertimeConversion,
    convert_overtime,
)
from payroll_accrual.calculators.summary import AccrualSummary, summarize
from payroll_accrual.calculators.types import SalaryRecord
from payroll_accrual.calculators.unit_registry import UnitTypeRegistry
from payroll_accrual.config import Settings, get_settings
from payroll_accrual.models import Employee, Holiday, UnitType
from payroll_accrual.services.deferral_service import DeferralService
from payroll_accrual.services.employee_service import EmployeeService
from payroll_accrual.services.ledger_service import LedgerService

logger = logging.getLogger(__name__)


class OvertimeNotComputableError(ValueError):
    """Raised when overtime hours cannot be converted into an amount."""

    def __init__(self, employee_id: UUID, month: str, reason: str):
        self.employee_id = employee_id
        self.month = month
        self.reason = reason
        super().__init__(f"Cannot compute overtime for employee {employee_id} in {month}: {reason}")


@dataclass(frozen=True)
class MonthlyAccrual:
    """Salary records of one month with the calendar they were computed on."""

    month: str
    calendar: CalendarMonth
    records: list[SalaryRecord]


class AccrualService:
    """Orchestrates a read-then-compute accrual for one tenant.

    All inputs for month M (roster, salary history, ledger entries dated in M,
    unit types, holidays in M, deferrals for M and M-1) are read first in the
    request's session, then the engine runs without further I/O. On
    PostgreSQL the reads share one REPEATABLE READ snapshot. Nothing is
    cached between calls, so a rerun after a ledger mutation reflects it.
    """

    def __init__(
        self,
        session: AsyncSession,
        tenant_id: UUID,
        settings: Settings | None = None,
    ):
        self.session = session
        self.tenant_id = tenant_id
        self.settings = settings or get_settings()
        self.engine = AccrualEngine(self.settings)
        self.employees = EmployeeService(session, tenant_id)
        self.ledger = LedgerService(session, tenant_id)
        self.deferrals = DeferralService(session, tenant_id)

    async def load_calendar(self, year: int, month: int) -> CalendarMonth:
        """Resolve the working-day calendar from the tenant's holidays."""
        first_day, last_day = month_bounds(year, month)
        result = await self.session.execute(
            select(Holiday.date).where(
                Holiday.tenant_id == self.tenant_id,
                Holiday.date >= first_day,
                Holiday.date <= last_day,
            )
        )
        return CalendarResolver.resolve(year, month, result.scalars().all())

    async def load_registry(self) -> UnitTypeRegistry:
        """Current unit type directions for the tenant."""
        result = await self.session.execute(
            select(UnitType).where(UnitType.tenant_id == self.tenant_id)
        )
        return UnitTypeRegistry.from_unit_types(
            result.scalars().all(),
            insurance_types=self.settings.insurance_unit_types,
        )

    async def compute_month(self, month: str) -> MonthlyAccrual:
        """Compute salary records for every employee of the tenant."""
        year, month_num = parse_month(month)
        month_key = format_month(year, month_num)
        await self._begin_snapshot()

        result = await self.session.execute(
            select(Employee)
            .where(Employee.tenant_id == self.tenant_id)
            .order_by(Employee.last_name, Employee.first_name)
        )
        employees = list(result.scalars().all())
        return await self._compute(month_key, year, month_num, employees)

    async def compute_employee(self, employee_id: UUID, month: str) -> SalaryRecord:
        """Compute the salary record of one employee."""
        year, month_num = parse_month(month)
        month_key = format_month(year, month_num)
        await self._begin_snapshot()

        employee = await self.employees.get_employee(employee_id)
        accrual = await self._compute(month_key, year, month_num, [employee])
        return accrual.records[0]

    async def summarize_month(self, month: str) -> tuple[MonthlyAccrual, AccrualSummary]:
        """Compute a month and its accrual sheet totals."""
        accrual = await self.compute_month(month)
        return accrual, summarize(accrual.month, accrual.records)

    async def record_overtime(
        self,
        employee_id: UUID,
        month: str,
        hours: Any,
        rate_pct: Any,
    ) -> tuple[UUID, OvertimeConversion]:
        """Convert overtime hours into an ``OT`` ledger entry.

        The hourly rate comes from the salary resolved for the month and its
        working days. The entry is dated on the last day of the month.

        Raises:
            OvertimeNotComputableError: No working days, hours or rate
        """
        record = await self.compute_employee(employee_id, month)
        conversion = convert_overtime(
            record.resolved_salary, record.total_days, rate_pct, hours
        )
        if conversion is None:
            raise OvertimeNotComputableError(
                employee_id, record.month, "working days, hours and rate must be positive"
            )

        year, month_num = parse_month(record.month)
        _, last_day = month_bounds(year, month_num)
        entry_id = await self.ledger.add_entry(
            employee_id, OVERTIME_UNIT_TYPE, conversion.amount, last_day
        )
        return entry_id, conversion

    async def _compute(
        self,
        month_key: str,
        year: int,
        month_num: int,
        employees: list[Employee],
    ) -> MonthlyAccrual:
        calendar = await self.load_calendar(year, month_num)
        registry = await self.load_registry()
        histories = await self.employees.load_histories(employees)
        entries = [e.to_entry() for e in await self.ledger.list_month_entries(year, month_num)]
        deferrals = await self.deferrals.deferrals_for_month(month_key)
        carry_overs = await self.deferrals.carry_overs_for_month(month_key)

        records = self.engine.accrue_month(
            [e.to_snapshot() for e in employees],
            calendar,
            entries,
            registry,
            histories=histories,
            deferrals=deferrals,
            carry_overs=carry_overs,
        )
        logger.debug(
            "Computed %d salary records for tenant %s in %s",
            len(records),
            self.tenant_id,
            month_key,
        )
        return MonthlyAccrual(month=month_key, calendar=calendar, records=records)

    async def _begin_snapshot(self) -> None:
        """Ask PostgreSQL for a single snapshot across the month's reads."""
        bind = getattr(self.session, "bind", None)
        if bind is None or bind.dialect.name != "postgresql":
            return
        if self.session.in_transaction():
            return
        await self.session.connection(
            execution_options={"isolation_level": "REPEATABLE READ"}
        )
