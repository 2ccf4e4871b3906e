"""Payroll accrual engine - monthly net salary per employee."""

from __future__ import annotations

import hashlib
import json
import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping
from uuid import UUID

from payroll_accrual.calculators.calendar_resolver import CalendarMonth
from payroll_accrual.calculators.money import ZERO, round_to_cents, to_decimal
from payroll_accrual.calculators.salary_resolver import SalaryHistory
from payroll_accrual.calculators.types import (
    DeferralState,
    EmployeeSnapshot,
    LedgerEntry,
    SalaryRecord,
)
from payroll_accrual.calculators.unit_lines import UnitLineBuilder
from payroll_accrual.calculators.unit_registry import UnitTypeRegistry
from payroll_accrual.config import Settings, get_settings

logger = logging.getLogger(__name__)

SALARY_CHANGED_NOTE = "Salary changed during this month"


class AccrualEngine:
    """Monthly payroll accrual engine.

    Calculation pipeline (stable order per employee):
    1) Active days: employment window intersected with the month's working days
    2) Salary resolution from the salary change history
    3) Proration by working days at each salary rate in effect
    4) Ledger aggregation by direction (OT always additive)
    5) Carry-over of the previous month's deferred amount
    6) Deferral of this month's base accrual
    7) Net = accrual (unless deferred) + carry-over + additions - deductions

    The engine is a pure function of its inputs: it does no I/O and the
    same inputs always produce an identical SalaryRecord.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def accrue(
        self,
        employee: EmployeeSnapshot,
        calendar: CalendarMonth,
        ledger_entries: Iterable[LedgerEntry],
        registry: UnitTypeRegistry,
        history: SalaryHistory | None = None,
        deferral: DeferralState | None = None,
        prior_carry_over: Decimal | None = None,
    ) -> SalaryRecord:
        """Compute the salary record for one employee and month."""
        anomalies: list[str] = []
        if history is None:
            history = SalaryHistory(employee.base_salary)

        # 1) Active days
        active = self._active_range(employee, calendar)
        if active is None:
            days_worked = 0
        else:
            days_worked = calendar.count_working_days(*active)
        total_days = calendar.working_days
        is_mid_month_starter = (
            calendar.first_day < employee.start_date <= calendar.last_day
        )

        # 2) Salary resolution
        resolved_salary = history.salary_as_of(calendar.last_day)
        if resolved_salary is None:
            anomalies.append("No resolvable salary; accrued as zero")
            logger.warning(
                "Employee %s has no resolvable salary for %s",
                employee.employee_id,
                calendar.key,
            )
            resolved_salary = ZERO
        resolved_salary = to_decimal(resolved_salary)

        changes_in_month = history.changes_between(calendar.first_day, calendar.last_day)
        salary_note = SALARY_CHANGED_NOTE if changes_in_month else None

        # 3) Proration
        accrued = self._prorate(history, calendar, active, total_days)

        # 4) Ledger aggregation
        lines = UnitLineBuilder.build_lines(
            ledger_entries, registry, calendar, employee.employee_id
        )
        totals = UnitLineBuilder.aggregate(lines)

        # 5) Carry-over
        carry_over = round_to_cents(
            to_decimal(prior_carry_over) if prior_carry_over is not None else ZERO
        )

        # 6) Deferral
        is_deferred = deferral is not None
        payable_accrual = ZERO if is_deferred else accrued

        # 7) Net
        net = round_to_cents(
            payable_accrual + carry_over + totals.total_additions - totals.total_deductions
        )
        if net < 0:
            logger.info(
                "Negative net salary %s for employee %s in %s",
                net,
                employee.employee_id,
                calendar.key,
            )

        fingerprint = UnitLineBuilder.compute_fingerprint(
            {
                "employee": employee.to_canonical_dict(),
                "calendar": {
                    "month": calendar.key,
                    "working_days": calendar.working_days,
                    "holidays": sorted(h.isoformat() for h in calendar.holidays),
                },
                "salary_history": history.to_canonical_list(),
                "units": [line.to_canonical_dict() for line in totals.lines],
                "directions": registry.to_canonical_dict(line.type for line in lines),
                "deferred": is_deferred,
                "carry_over": str(carry_over),
            }
        )

        return SalaryRecord(
            employee=employee,
            month=calendar.key,
            days_worked=days_worked,
            total_days=total_days,
            resolved_salary=resolved_salary,
            accrued_salary=accrued,
            original_accrued=accrued,
            total_additions=totals.total_additions,
            total_deductions=totals.total_deductions,
            insurance_deduction=totals.insurance_deduction,
            carry_over=carry_over,
            net_salary=net,
            is_deferred=is_deferred,
            is_mid_month_starter=is_mid_month_starter,
            salary_note=salary_note,
            units=totals.lines,
            deferral_id=deferral.deferral_id if deferral else None,
            inputs_fingerprint=fingerprint,
            calculation_id=self._generate_calculation_id(
                employee.employee_id, calendar.key, fingerprint
            ),
            anomalies=tuple(anomalies),
        )

    def accrue_month(
        self,
        employees: Iterable[EmployeeSnapshot],
        calendar: CalendarMonth,
        ledger_entries: Iterable[LedgerEntry],
        registry: UnitTypeRegistry,
        histories: Mapping[UUID, SalaryHistory] | None = None,
        deferrals: Mapping[UUID, DeferralState] | None = None,
        carry_overs: Mapping[UUID, Decimal] | None = None,
    ) -> list[SalaryRecord]:
        """Compute records for a roster.

        One employee's failure never aborts the batch: it is logged and the
        employee gets a zero record carrying the error as an anomaly.
        """
        histories = histories or {}
        deferrals = deferrals or {}
        carry_overs = carry_overs or {}
        entries = list(ledger_entries)

        records: list[SalaryRecord] = []
        for employee in employees:
            try:
                record = self.accrue(
                    employee,
                    calendar,
                    entries,
                    registry,
                    history=histories.get(employee.employee_id),
                    deferral=deferrals.get(employee.employee_id),
                    prior_carry_over=carry_overs.get(employee.employee_id),
                )
            except Exception as e:
                logger.exception(
                    "Accrual failed for employee %s in %s", employee.employee_id, calendar.key
                )
                record = self._build_error_record(
                    employee, calendar, str(e), carry_overs.get(employee.employee_id)
                )
            records.append(record)
        return records

    @staticmethod
    def _active_range(
        employee: EmployeeSnapshot, calendar: CalendarMonth
    ) -> tuple[date, date] | None:
        """Employment window clipped to the month, None if not employed in it."""
        start = max(employee.start_date, calendar.first_day)
        end = calendar.last_day
        if employee.end_date is not None:
            end = min(employee.end_date, end)
        if start > end:
            return None
        return start, end

    @staticmethod
    def _prorate(
        history: SalaryHistory,
        calendar: CalendarMonth,
        active: tuple[date, date] | None,
        total_days: int,
    ) -> Decimal:
        """Accrued base pay: sum of salary * days / total_days over rate segments."""
        if active is None or total_days <= 0:
            return round_to_cents(ZERO)

        accrued = ZERO
        for segment in history.segments(*active):
            days = calendar.count_working_days(segment.start, segment.end)
            if days:
                # Multiply before dividing so a full month is exact
                accrued += to_decimal(segment.salary) * days / total_days
        return round_to_cents(accrued)

    def _build_error_record(
        self,
        employee: EmployeeSnapshot,
        calendar: CalendarMonth,
        error: str,
        prior_carry_over: Decimal | None = None,
    ) -> SalaryRecord:
        zero = round_to_cents(ZERO)
        # Money deferred out of last month still belongs to this one
        carry_over = round_to_cents(to_decimal(prior_carry_over or ZERO))
        return SalaryRecord(
            employee=employee,
            month=calendar.key,
            days_worked=0,
            total_days=calendar.working_days,
            resolved_salary=zero,
            accrued_salary=zero,
            original_accrued=zero,
            total_additions=zero,
            total_deductions=zero,
            insurance_deduction=zero,
            carry_over=carry_over,
            net_salary=carry_over,
            is_deferred=False,
            is_mid_month_starter=False,
            salary_note=None,
            calculation_id=self._generate_calculation_id(
                employee.employee_id, calendar.key, ""
            ),
            anomalies=(f"Unexpected error: {error}",),
        )

    def _generate_calculation_id(
        self, employee_id: UUID, month: str, inputs_fingerprint: str
    ) -> UUID:
        """Generate deterministic calculation ID."""
        data = {
            "employee_id": str(employee_id),
            "month": month,
            "engine_version": self.settings.engine_version,
            "inputs_fingerprint": inputs_fingerprint,
        }
        json_str = json.dumps(data, sort_keys=True)
        hash_bytes = hashlib.sha256(json_str.encode()).digest()
        return UUID(bytes=hash_bytes[:16])
