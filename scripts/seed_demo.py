"""Seed a demo tenant and print its accrual sheet.

Usage:
    python scripts/seed_demo.py [--tenant-id UUID] [--month YYYY-MM]

Creates the schema if needed, then adds unit types, holidays, three
employees and a few ledger entries for the tenant. The database comes from
DATABASE_URL (see .env).
"""

from __future__ import annotations

import argparse
import asyncio
from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

from payroll_accrual.calculators.calendar_resolver import month_bounds, parse_month
from payroll_accrual.database import create_schema, dispose_db, get_session
from payroll_accrual.models import Holiday, OvertimeRate, UnitType
from payroll_accrual.services import AccrualService, EmployeeService, LedgerService

UNIT_TYPES = [
    ("Bonus", "addition"),
    ("Overtime", "addition"),
    ("Fitpass", "deduction"),
    ("Insurance", "deduction"),
]

OVERTIME_RATES = [
    ("Regular overtime", Decimal("110.00")),
    ("Night / weekend", Decimal("126.00")),
]


async def seed(tenant_id: UUID, month: str) -> None:
    """Seed demo data and print the month's salaries."""
    year, month_num = parse_month(month)
    first_day, last_day = month_bounds(year, month_num)

    await create_schema()
    try:
        async with get_session() as session:
            for name, direction in UNIT_TYPES:
                session.add(UnitType(tenant_id=tenant_id, name=name, direction=direction))
            for label, rate in OVERTIME_RATES:
                session.add(OvertimeRate(tenant_id=tenant_id, label=label, rate=rate))
            session.add(Holiday(tenant_id=tenant_id, date=first_day, name="Demo holiday"))

            employees = EmployeeService(session, tenant_id)
            ledger = LedgerService(session, tenant_id)

            full = await employees.create_employee(
                "Ana", "Petrovic", Decimal("3000.00"), date(year - 1, 1, 1)
            )
            starter = await employees.create_employee(
                "Marko", "Jovanovic", Decimal("2400.00"), first_day.replace(day=16),
                pension=True,
            )
            raised = await employees.create_employee(
                "Jelena", "Ilic", Decimal("2000.00"), date(year - 1, 6, 1)
            )
            await employees.record_salary_change(
                raised.employee_id, Decimal("2600.00"), first_day.replace(day=15),
                note="Promotion",
            )

            await ledger.add_entry(full.employee_id, "Bonus", Decimal("200.00"), last_day)
            await ledger.add_entry(full.employee_id, "Fitpass", Decimal("50.00"), last_day)
            await ledger.add_entry(starter.employee_id, "Insurance", Decimal("35.00"), last_day)

        async with get_session() as session:
            accrual, summary = await AccrualService(session, tenant_id).summarize_month(month)
    finally:
        await dispose_db()

    print(f"Tenant: {tenant_id}")
    print(
        f"Month: {accrual.month} ({accrual.calendar.working_days} working days, "
        f"{accrual.calendar.holiday_days} holidays)"
    )
    for row in summary.rows:
        record = row.record
        print(
            f"  {record.employee.full_name:<20} days {record.days_worked:>2}/{record.total_days:<2} "
            f"net {record.net_salary:>10} gross {row.cost.gross_salary:>10}"
        )
    print(f"Total net: {summary.total_net}  total gross: {summary.total_gross}")


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed a demo tenant")
    parser.add_argument(
        "--tenant-id",
        type=UUID,
        default=None,
        help="Tenant to seed (default: a new random tenant)",
    )
    parser.add_argument(
        "--month",
        type=str,
        default=date.today().strftime("%Y-%m"),
        help="Month to seed and compute, YYYY-MM (default: current month)",
    )

    args = parser.parse_args()

    asyncio.run(seed(args.tenant_id or uuid4(), args.month))


if __name__ == "__main__":
    main()
