"""Tests for the unit ledger service."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from payroll_accrual.models import UnitAdjustment
from payroll_accrual.services.employee_service import EmployeeNotFoundError
from payroll_accrual.services.ledger_service import (
    EntryNotFoundError,
    LedgerService,
    LedgerValidationError,
)


class TestAddEntry:
    @pytest.mark.asyncio
    async def test_add_entry(self, session, tenant_id, test_employees):
        ledger = LedgerService(session, tenant_id)
        employee = test_employees[0]

        entry_id = await ledger.add_entry(
            employee.employee_id, " Bonus ", Decimal("200.005"), date(2024, 4, 30)
        )

        entry = await session.get(UnitAdjustment, entry_id)
        assert entry.type == "Bonus"
        assert entry.amount == Decimal("200.01")
        assert entry.tenant_id == tenant_id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-10.00"), "abc", None, "NaN"])
    async def test_rejects_bad_amount(self, session, tenant_id, test_employees, amount):
        ledger = LedgerService(session, tenant_id)

        with pytest.raises(LedgerValidationError) as exc_info:
            await ledger.add_entry(
                test_employees[0].employee_id, "Bonus", amount, date(2024, 4, 30)
            )

        assert exc_info.value.field == "amount"

    @pytest.mark.asyncio
    async def test_rejects_empty_type(self, session, tenant_id, test_employees):
        ledger = LedgerService(session, tenant_id)

        with pytest.raises(LedgerValidationError) as exc_info:
            await ledger.add_entry(
                test_employees[0].employee_id, "  ", Decimal("10"), date(2024, 4, 30)
            )

        assert exc_info.value.field == "type"

    @pytest.mark.asyncio
    async def test_rejects_missing_date(self, session, tenant_id, test_employees):
        ledger = LedgerService(session, tenant_id)

        with pytest.raises(LedgerValidationError):
            await ledger.add_entry(test_employees[0].employee_id, "Bonus", "10", None)

    @pytest.mark.asyncio
    async def test_unknown_employee(self, session, tenant_id):
        ledger = LedgerService(session, tenant_id)
        missing = uuid4()

        with pytest.raises(EmployeeNotFoundError) as exc_info:
            await ledger.add_entry(missing, "Bonus", "10", date(2024, 4, 30))

        assert exc_info.value.employee_id == missing

    @pytest.mark.asyncio
    async def test_other_tenant_employee_is_not_found(self, session, test_employees):
        ledger = LedgerService(session, uuid4())

        with pytest.raises(EmployeeNotFoundError):
            await ledger.add_entry(
                test_employees[0].employee_id, "Bonus", "10", date(2024, 4, 30)
            )


class TestReadAndDelete:
    @pytest.mark.asyncio
    async def test_list_entries_for_month(self, session, tenant_id, test_employees):
        ledger = LedgerService(session, tenant_id)
        ana, marko = test_employees
        await ledger.add_entry(ana.employee_id, "Bonus", "100", date(2024, 4, 1))
        await ledger.add_entry(ana.employee_id, "Bonus", "200", date(2024, 4, 30))
        await ledger.add_entry(ana.employee_id, "Bonus", "300", date(2024, 5, 1))
        await ledger.add_entry(marko.employee_id, "Bonus", "400", date(2024, 4, 20))

        april = await ledger.list_entries_for_month(ana.employee_id, 2024, 4)
        month_all = await ledger.list_month_entries(2024, 4)

        assert [e.amount for e in april] == [Decimal("100.00"), Decimal("200.00")]
        assert len(month_all) == 3

    @pytest.mark.asyncio
    async def test_list_entries_newest_first(self, session, tenant_id, test_employees):
        ledger = LedgerService(session, tenant_id)
        ana = test_employees[0]
        await ledger.add_entry(ana.employee_id, "Bonus", "100", date(2024, 3, 1))
        await ledger.add_entry(ana.employee_id, "Bonus", "200", date(2024, 4, 1))

        entries = await ledger.list_entries(ana.employee_id)

        assert [e.date for e in entries] == [date(2024, 4, 1), date(2024, 3, 1)]

    @pytest.mark.asyncio
    async def test_delete_entry(self, session, tenant_id, test_employees):
        ledger = LedgerService(session, tenant_id)
        ana = test_employees[0]
        entry_id = await ledger.add_entry(ana.employee_id, "Bonus", "100", date(2024, 4, 1))

        await ledger.delete_entry(entry_id, ana.employee_id)

        assert await ledger.list_entries(ana.employee_id) == []

    @pytest.mark.asyncio
    async def test_delete_missing_entry(self, session, tenant_id):
        ledger = LedgerService(session, tenant_id)

        with pytest.raises(EntryNotFoundError):
            await ledger.delete_entry(uuid4())

    @pytest.mark.asyncio
    async def test_delete_entry_of_other_employee(self, session, tenant_id, test_employees):
        ledger = LedgerService(session, tenant_id)
        ana, marko = test_employees
        entry_id = await ledger.add_entry(ana.employee_id, "Bonus", "100", date(2024, 4, 1))

        with pytest.raises(EntryNotFoundError):
            await ledger.delete_entry(entry_id, marko.employee_id)
