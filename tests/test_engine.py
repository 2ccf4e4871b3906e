"""Unit tests for AccrualEngine.

The engine is pure, so every test builds its inputs in memory.
"""

import random
from dataclasses import replace
from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from payroll_accrual.calculators.calendar_resolver import CalendarResolver
from payroll_accrual.calculators.engine import SALARY_CHANGED_NOTE, AccrualEngine
from payroll_accrual.calculators.gross_up import gross_up
from payroll_accrual.calculators.salary_resolver import SalaryHistory
from payroll_accrual.calculators.types import DeferralState, Direction, SalaryChangeEntry
from payroll_accrual.calculators.unit_registry import UnitTypeRegistry


class TestCalculationIdGeneration:
    """Test deterministic calculation ID generation."""

    def test_same_inputs_produce_same_id(self):
        """Same inputs should always produce the same calculation ID."""
        engine = AccrualEngine.__new__(AccrualEngine)
        engine.settings = type("Settings", (), {"engine_version": "1.0.0"})()

        employee_id = uuid4()

        id1 = engine._generate_calculation_id(employee_id, "2024-04", "abc123")
        id2 = engine._generate_calculation_id(employee_id, "2024-04", "abc123")

        assert id1 == id2

    def test_different_inputs_produce_different_id(self):
        """Different inputs should produce different calculation IDs."""
        engine = AccrualEngine.__new__(AccrualEngine)
        engine.settings = type("Settings", (), {"engine_version": "1.0.0"})()

        employee_id = uuid4()

        id1 = engine._generate_calculation_id(employee_id, "2024-04", "abc123")
        id2 = engine._generate_calculation_id(employee_id, "2024-04", "xyz789")
        id3 = engine._generate_calculation_id(employee_id, "2024-05", "abc123")

        assert len({id1, id2, id3}) == 3

    def test_engine_version_affects_id(self):
        """Different engine versions should produce different IDs."""
        employee_id = uuid4()

        engine1 = AccrualEngine.__new__(AccrualEngine)
        engine1.settings = type("Settings", (), {"engine_version": "1.0.0"})()

        engine2 = AccrualEngine.__new__(AccrualEngine)
        engine2.settings = type("Settings", (), {"engine_version": "2.0.0"})()

        id1 = engine1._generate_calculation_id(employee_id, "2024-04", "abc")
        id2 = engine2._generate_calculation_id(employee_id, "2024-04", "abc")

        assert id1 != id2


class TestProration:
    """Active days and prorated accrual."""

    def test_full_month_accrues_exact_salary(self, accrual_engine, jan_2024, registry, make_employee):
        employee = make_employee(base_salary="3000.00")

        record = accrual_engine.accrue(employee, jan_2024, [], registry)

        assert record.days_worked == record.total_days == 21
        assert record.accrued_salary == record.resolved_salary == Decimal("3000.00")
        assert record.net_salary == Decimal("3000.00")
        assert record.is_mid_month_starter is False

    def test_full_month_without_rounding_drift(self, accrual_engine, jan_2024, registry, make_employee):
        """A salary that does not divide by the working days still accrues exactly."""
        employee = make_employee(base_salary="1000.01")

        record = accrual_engine.accrue(employee, jan_2024, [], registry)

        assert record.accrued_salary == Decimal("1000.01")

    def test_mid_month_starter(self, accrual_engine, apr_2024, registry, make_employee):
        employee = make_employee(base_salary="3000.00", start_date=date(2024, 4, 16))

        record = accrual_engine.accrue(employee, apr_2024, [], registry)

        assert record.total_days == 22
        assert record.days_worked == 11
        assert record.is_mid_month_starter is True
        assert record.accrued_salary == Decimal("1500.00")

    def test_start_on_first_day_is_not_mid_month(self, accrual_engine, apr_2024, registry, make_employee):
        employee = make_employee(start_date=date(2024, 4, 1))

        record = accrual_engine.accrue(employee, apr_2024, [], registry)

        assert record.is_mid_month_starter is False
        assert record.days_worked == 22

    def test_leaver_is_prorated(self, accrual_engine, apr_2024, registry, make_employee):
        employee = make_employee(base_salary="3000.00", end_date=date(2024, 4, 12))

        record = accrual_engine.accrue(employee, apr_2024, [], registry)

        assert record.days_worked == 10
        # 3000 * 10 / 22 = 1363.6363...
        assert record.accrued_salary == Decimal("1363.64")

    def test_not_employed_in_month(self, accrual_engine, apr_2024, registry, make_employee, make_entry):
        employee = make_employee(start_date=date(2024, 5, 1))
        entries = [make_entry(employee.employee_id, "Bonus", "100.00", date(2024, 4, 30))]

        record = accrual_engine.accrue(employee, apr_2024, entries, registry)

        assert record.days_worked == 0
        assert record.accrued_salary == Decimal("0.00")
        assert record.is_mid_month_starter is False
        assert record.net_salary == Decimal("100.00")

    def test_zero_working_days(self, accrual_engine, registry, make_employee):
        weekdays = [date(2024, 4, d) for d in range(1, 31) if date(2024, 4, d).weekday() < 5]
        calendar = CalendarResolver.resolve(2024, 4, weekdays)

        record = accrual_engine.accrue(make_employee(), calendar, [], registry)

        assert record.total_days == 0
        assert record.accrued_salary == Decimal("0.00")
        assert record.net_salary == Decimal("0.00")


class TestSalaryResolution:
    def test_mid_month_change_prorates_each_rate(self, accrual_engine, apr_2024, registry, make_employee):
        employee = make_employee(base_salary="2600.00")
        history = SalaryHistory(
            employee.base_salary,
            [
                SalaryChangeEntry(
                    effective_date=date(2024, 4, 15),
                    old_salary=Decimal("2000.00"),
                    new_salary=Decimal("2600.00"),
                )
            ],
        )

        record = accrual_engine.accrue(employee, apr_2024, [], registry, history=history)

        # 2000 * 10 / 22 + 2600 * 12 / 22 = 2327.2727...
        assert record.accrued_salary == Decimal("2327.27")
        assert record.resolved_salary == Decimal("2600.00")
        assert record.salary_note == SALARY_CHANGED_NOTE

    def test_future_change_does_not_rewrite_history(self, accrual_engine, apr_2024, registry, make_employee):
        """April keeps the old rate after a May raise moved the live salary."""
        employee = make_employee(base_salary="2600.00")
        history = SalaryHistory(
            employee.base_salary,
            [
                SalaryChangeEntry(
                    effective_date=date(2024, 5, 1),
                    old_salary=Decimal("2000.00"),
                    new_salary=Decimal("2600.00"),
                )
            ],
        )

        record = accrual_engine.accrue(employee, apr_2024, [], registry, history=history)

        assert record.accrued_salary == Decimal("2000.00")
        assert record.salary_note is None

    def test_change_on_first_day_has_no_note(self, accrual_engine, apr_2024, registry, make_employee):
        employee = make_employee(base_salary="2600.00")
        history = SalaryHistory(
            employee.base_salary,
            [
                SalaryChangeEntry(
                    effective_date=date(2024, 4, 1),
                    old_salary=Decimal("2000.00"),
                    new_salary=Decimal("2600.00"),
                )
            ],
        )

        record = accrual_engine.accrue(employee, apr_2024, [], registry, history=history)

        assert record.accrued_salary == Decimal("2600.00")
        assert record.salary_note is None

    def test_missing_salary_falls_back_to_zero(self, accrual_engine, apr_2024, registry, make_employee, make_entry):
        employee = make_employee(base_salary=None)
        entries = [make_entry(employee.employee_id, "Bonus", "50.00", date(2024, 4, 2))]

        record = accrual_engine.accrue(employee, apr_2024, entries, registry)

        assert record.resolved_salary == Decimal("0")
        assert record.accrued_salary == Decimal("0.00")
        assert record.net_salary == Decimal("50.00")
        assert record.anomalies


class TestLedgerAggregation:
    def test_end_to_end_example(self, accrual_engine, jan_2024, registry, make_employee, make_entry):
        """3000 base, Bonus 200, unknown Fitpass-like deduction 50."""
        employee = make_employee(base_salary="3000.00")
        registry = UnitTypeRegistry({"Bonus": "addition"})
        entries = [
            make_entry(employee.employee_id, "Bonus", "200.00", date(2024, 1, 15)),
            make_entry(employee.employee_id, "Fitpass", "50.00", date(2024, 1, 20)),
        ]

        record = accrual_engine.accrue(employee, jan_2024, entries, registry)

        assert record.total_additions == Decimal("200.00")
        assert record.total_deductions == Decimal("50.00")
        assert record.net_salary == Decimal("3150.00")
        assert gross_up(record.net_salary, employee.pension) == Decimal("3315.79")

    def test_overtime_is_addition_even_if_registered_as_deduction(
        self, accrual_engine, apr_2024, make_employee, make_entry
    ):
        employee = make_employee(base_salary="3000.00")
        registry = UnitTypeRegistry({"OT": "deduction"})
        entries = [make_entry(employee.employee_id, "OT", "120.00", date(2024, 4, 30))]

        record = accrual_engine.accrue(employee, apr_2024, entries, registry)

        assert record.total_additions == Decimal("120.00")
        assert record.units[0].direction is Direction.ADDITION
        assert record.net_salary == Decimal("3120.00")

    def test_insurance_is_not_double_counted(self, accrual_engine, apr_2024, registry, make_employee, make_entry):
        employee = make_employee(base_salary="3000.00")
        entries = [
            make_entry(employee.employee_id, "Insurance", "35.00", date(2024, 4, 30)),
            make_entry(employee.employee_id, "Fitpass", "50.00", date(2024, 4, 30)),
        ]

        record = accrual_engine.accrue(employee, apr_2024, entries, registry)

        assert record.insurance_deduction == Decimal("35.00")
        assert record.total_deductions == Decimal("85.00")
        assert record.net_salary == Decimal("2915.00")

    def test_entries_outside_month_are_ignored(self, accrual_engine, apr_2024, registry, make_employee, make_entry):
        employee = make_employee(base_salary="3000.00")
        entries = [
            make_entry(employee.employee_id, "Bonus", "100.00", date(2024, 3, 31)),
            make_entry(employee.employee_id, "Bonus", "100.00", date(2024, 5, 1)),
        ]

        record = accrual_engine.accrue(employee, apr_2024, entries, registry)

        assert record.units == ()
        assert record.net_salary == Decimal("3000.00")

    def test_negative_net_is_preserved(self, accrual_engine, apr_2024, registry, make_employee, make_entry):
        employee = make_employee(base_salary="100.00")
        entries = [make_entry(employee.employee_id, "Fitpass", "150.00", date(2024, 4, 10))]

        record = accrual_engine.accrue(employee, apr_2024, entries, registry)

        assert record.net_salary == Decimal("-50.00")

    def test_direction_change_reclassifies_history(self, accrual_engine, apr_2024, make_employee, make_entry):
        employee = make_employee(base_salary="1000.00")
        entries = [make_entry(employee.employee_id, "Travel", "100.00", date(2024, 4, 10))]

        as_addition = accrual_engine.accrue(
            employee, apr_2024, entries, UnitTypeRegistry({"Travel": "addition"})
        )
        as_deduction = accrual_engine.accrue(
            employee, apr_2024, entries, UnitTypeRegistry({"Travel": "deduction"})
        )

        assert as_addition.net_salary == Decimal("1100.00")
        assert as_deduction.net_salary == Decimal("900.00")
        assert as_addition.inputs_fingerprint != as_deduction.inputs_fingerprint


class TestDeferral:
    def test_deferred_month_excludes_base_accrual(self, accrual_engine, apr_2024, registry, make_employee, make_entry):
        employee = make_employee(base_salary="3000.00")
        deferral = DeferralState(
            employee_id=employee.employee_id,
            month="2024-04",
            deferred_amount=Decimal("3000.00"),
            deferral_id=uuid4(),
        )
        entries = [make_entry(employee.employee_id, "Bonus", "200.00", date(2024, 4, 30))]

        record = accrual_engine.accrue(employee, apr_2024, entries, registry, deferral=deferral)

        assert record.is_deferred is True
        assert record.deferral_id == deferral.deferral_id
        assert record.accrued_salary == Decimal("3000.00")
        assert record.original_accrued == Decimal("3000.00")
        assert record.net_salary == Decimal("200.00")

    def test_carry_over_lands_in_next_month(self, accrual_engine, registry, make_employee):
        employee = make_employee(base_salary="3000.00")
        may = CalendarResolver.resolve(2024, 5)

        record = accrual_engine.accrue(
            employee, may, [], registry, prior_carry_over=Decimal("3000.00")
        )

        assert record.carry_over == Decimal("3000.00")
        assert record.net_salary == Decimal("6000.00")

    def test_deferral_conserves_money_across_months(self, accrual_engine, registry, make_employee):
        employee = make_employee(base_salary="3000.00")
        april = CalendarResolver.resolve(2024, 4)
        may = CalendarResolver.resolve(2024, 5)
        deferral = DeferralState(employee.employee_id, "2024-04", Decimal("3000.00"))

        plain = [
            accrual_engine.accrue(employee, april, [], registry),
            accrual_engine.accrue(employee, may, [], registry),
        ]
        deferred = [
            accrual_engine.accrue(employee, april, [], registry, deferral=deferral),
            accrual_engine.accrue(
                employee, may, [], registry, prior_carry_over=deferral.deferred_amount
            ),
        ]

        assert sum(r.net_salary for r in plain) == sum(r.net_salary for r in deferred)


class TestDeterminism:
    def test_identical_inputs_identical_records(self, accrual_engine, apr_2024, registry, make_employee, make_entry):
        employee = make_employee(base_salary="2750.00", start_date=date(2024, 4, 8))
        entries = [
            make_entry(employee.employee_id, "Bonus", "100.00", date(2024, 4, 10)),
            make_entry(employee.employee_id, "Insurance", "30.00", date(2024, 4, 10)),
            make_entry(employee.employee_id, "OT", "45.50", date(2024, 4, 30)),
        ]
        shuffled = entries[:]
        random.Random(7).shuffle(shuffled)

        first = accrual_engine.accrue(employee, apr_2024, entries, registry)
        second = accrual_engine.accrue(employee, apr_2024, shuffled, registry)

        assert first == second
        assert first.calculation_id == second.calculation_id
        assert first.inputs_fingerprint == second.inputs_fingerprint

    def test_new_entry_changes_fingerprint(self, accrual_engine, apr_2024, registry, make_employee, make_entry):
        employee = make_employee()
        entries = [make_entry(employee.employee_id, "Bonus", "100.00", date(2024, 4, 10))]

        before = accrual_engine.accrue(employee, apr_2024, [], registry)
        after = accrual_engine.accrue(employee, apr_2024, entries, registry)

        assert before.inputs_fingerprint != after.inputs_fingerprint
        assert before.calculation_id != after.calculation_id


class TestAccrueMonth:
    def test_one_bad_employee_does_not_abort_batch(self, accrual_engine, apr_2024, registry, make_employee):
        good = make_employee(base_salary="3000.00")
        bad = replace(make_employee(first_name="Broken"), base_salary="not a number")

        records = accrual_engine.accrue_month([good, bad], apr_2024, [], registry)

        assert len(records) == 2
        assert records[0].net_salary == Decimal("3000.00")
        assert records[1].net_salary == Decimal("0.00")
        assert records[1].anomalies

    def test_failed_employee_keeps_carry_over(self, accrual_engine, apr_2024, registry, make_employee):
        bad = replace(make_employee(first_name="Broken"), base_salary="not a number")

        records = accrual_engine.accrue_month(
            [bad], apr_2024, [], registry, carry_overs={bad.employee_id: Decimal("3000.00")}
        )

        assert records[0].anomalies
        assert records[0].accrued_salary == Decimal("0.00")
        assert records[0].carry_over == Decimal("3000.00")
        assert records[0].net_salary == Decimal("3000.00")

    def test_deferrals_and_carry_overs_by_employee(self, accrual_engine, apr_2024, registry, make_employee):
        a = make_employee(base_salary="1000.00")
        b = make_employee(base_salary="2000.00")

        records = accrual_engine.accrue_month(
            [a, b],
            apr_2024,
            [],
            registry,
            deferrals={a.employee_id: DeferralState(a.employee_id, "2024-04", Decimal("1000.00"))},
            carry_overs={b.employee_id: Decimal("500.00")},
        )

        assert [r.net_salary for r in records] == [Decimal("0.00"), Decimal("2500.00")]

    @pytest.mark.parametrize("month", [1, 2, 6, 12])
    def test_full_month_identity_across_months(self, accrual_engine, registry, make_employee, month):
        calendar = CalendarResolver.resolve(2024, month)

        record = accrual_engine.accrue(make_employee(base_salary="4321.99"), calendar, [], registry)

        assert record.accrued_salary == Decimal("4321.99")
