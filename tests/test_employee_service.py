"""Tests for employees and salary history."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from payroll_accrual.services.employee_service import (
    EmployeeNotFoundError,
    EmployeeService,
    EmploymentDatesError,
    SalaryChangeNotFoundError,
    SalaryValidationError,
)


class TestEmployees:
    @pytest.mark.asyncio
    async def test_create_and_get(self, session, tenant_id):
        service = EmployeeService(session, tenant_id)

        employee = await service.create_employee(
            " Jelena ", "Ilic", "2000", date(2024, 1, 1), pension=True
        )
        loaded = await service.get_employee(employee.employee_id)

        assert loaded.first_name == "Jelena"
        assert loaded.base_salary == Decimal("2000.00")
        assert loaded.full_name == "Jelena Ilic"
        assert loaded.to_snapshot().pension is True

    @pytest.mark.asyncio
    async def test_negative_salary_rejected(self, session, tenant_id):
        service = EmployeeService(session, tenant_id)

        with pytest.raises(SalaryValidationError):
            await service.create_employee("A", "B", "-1", date(2024, 1, 1))

    @pytest.mark.asyncio
    async def test_get_missing(self, session, tenant_id):
        with pytest.raises(EmployeeNotFoundError):
            await EmployeeService(session, tenant_id).get_employee(uuid4())

    @pytest.mark.asyncio
    async def test_list_and_search(self, session, tenant_id, test_employees):
        service = EmployeeService(session, tenant_id)

        everyone = await service.list_employees()
        found = await service.list_employees("petro")

        assert [e.last_name for e in everyone] == ["Jovanovic", "Petrovic"]
        assert [e.first_name for e in found] == ["Ana"]

    @pytest.mark.asyncio
    async def test_update_end_date_and_pension(self, session, tenant_id, test_employees):
        service = EmployeeService(session, tenant_id)
        ana = test_employees[0]

        updated = await service.update_employee(
            ana.employee_id, end_date=date(2024, 4, 15), pension=True
        )

        assert updated.end_date == date(2024, 4, 15)
        assert updated.pension is True
        assert updated.base_salary == Decimal("3000.00")

        reopened = await service.update_employee(ana.employee_id, end_date=None)
        assert reopened.end_date is None
        assert reopened.pension is True

    @pytest.mark.asyncio
    async def test_update_end_before_start_rejected(self, session, tenant_id, test_employees):
        service = EmployeeService(session, tenant_id)

        with pytest.raises(EmploymentDatesError):
            await service.update_employee(test_employees[0].employee_id, end_date=date(2022, 12, 31))

    @pytest.mark.asyncio
    async def test_update_missing(self, session, tenant_id):
        with pytest.raises(EmployeeNotFoundError):
            await EmployeeService(session, tenant_id).update_employee(uuid4(), pension=True)


class TestSalaryChanges:
    @pytest.mark.asyncio
    async def test_change_snapshots_old_salary(self, session, tenant_id, test_employees):
        service = EmployeeService(session, tenant_id)
        ana = test_employees[0]

        change = await service.record_salary_change(
            ana.employee_id, "3500", date(2024, 4, 15), note="Raise"
        )

        assert change.old_salary == Decimal("3000.00")
        assert change.new_salary == Decimal("3500.00")
        assert ana.base_salary == Decimal("3500.00")

    @pytest.mark.asyncio
    async def test_list_newest_first_and_delete(self, session, tenant_id, test_employees):
        service = EmployeeService(session, tenant_id)
        ana = test_employees[0]
        first = await service.record_salary_change(ana.employee_id, "3200", date(2024, 1, 1))
        second = await service.record_salary_change(ana.employee_id, "3400", date(2024, 6, 1))

        changes = await service.list_salary_changes(ana.employee_id)
        assert [c.salary_change_id for c in changes] == [
            second.salary_change_id,
            first.salary_change_id,
        ]

        await service.delete_salary_change(ana.employee_id, first.salary_change_id)
        assert len(await service.list_salary_changes(ana.employee_id)) == 1

        with pytest.raises(SalaryChangeNotFoundError):
            await service.delete_salary_change(ana.employee_id, first.salary_change_id)

    @pytest.mark.asyncio
    async def test_load_histories(self, session, tenant_id, test_employees):
        service = EmployeeService(session, tenant_id)
        ana, marko = test_employees
        await service.record_salary_change(ana.employee_id, "3600", date(2024, 5, 1))

        histories = await service.load_histories(test_employees)

        assert histories[ana.employee_id].salary_as_of(date(2024, 4, 30)) == Decimal("3000.00")
        assert histories[ana.employee_id].salary_as_of(date(2024, 5, 31)) == Decimal("3600.00")
        assert len(histories[marko.employee_id]) == 0
