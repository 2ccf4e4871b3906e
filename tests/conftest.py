"""Pytest fixtures for payroll accrual tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import AsyncGenerator
from uuid import UUID, uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from payroll_accrual.calculators import (
    AccrualEngine,
    CalendarResolver,
    EmployeeSnapshot,
    LedgerEntry,
    UnitTypeRegistry,
)
from payroll_accrual.config import Settings
from payroll_accrual.models import Base, Employee, Holiday, UnitType

# In-memory SQLite shared by every session of one test
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
def test_settings() -> Settings:
    """Settings independent of the process environment."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        engine_version="test-1.0.0",
        host="127.0.0.1",
        port=8000,
        debug=False,
        log_level="INFO",
        insurance_unit_types=("Insurance",),
        cors_origins=("*",),
    )


@pytest.fixture
def accrual_engine(test_settings: Settings) -> AccrualEngine:
    return AccrualEngine(test_settings)


@pytest.fixture
async def engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def tenant_id() -> UUID:
    return uuid4()


# ============================================================================
# Pure calculator fixtures
# ============================================================================


@pytest.fixture
def jan_2024():
    """January 2024 with New Year holidays on Monday 1st and Tuesday 2nd: 21 working days."""
    return CalendarResolver.resolve(2024, 1, [date(2024, 1, 1), date(2024, 1, 2)])


@pytest.fixture
def apr_2024():
    """April 2024 without holidays: 22 working days."""
    return CalendarResolver.resolve(2024, 4)


@pytest.fixture
def registry() -> UnitTypeRegistry:
    return UnitTypeRegistry(
        {
            "Bonus": "addition",
            "Travel": "addition",
            "Insurance": "deduction",
            "Fitpass": "deduction",
        }
    )


@pytest.fixture
def make_employee():
    """Factory for employee snapshots."""

    def _make(
        base_salary: str | None = "3000.00",
        start_date: date = date(2020, 1, 1),
        end_date: date | None = None,
        pension: bool = False,
        first_name: str = "Ana",
        last_name: str = "Petrovic",
    ) -> EmployeeSnapshot:
        return EmployeeSnapshot(
            employee_id=uuid4(),
            first_name=first_name,
            last_name=last_name,
            base_salary=Decimal(base_salary) if base_salary is not None else None,
            start_date=start_date,
            end_date=end_date,
            pension=pension,
        )

    return _make


@pytest.fixture
def make_entry():
    """Factory for ledger entries."""

    def _make(employee_id: UUID, type: str, amount: str, day: date) -> LedgerEntry:
        return LedgerEntry(
            entry_id=uuid4(),
            employee_id=employee_id,
            type=type,
            amount=Decimal(amount),
            date=day,
        )

    return _make


# ============================================================================
# Database fixtures
# ============================================================================


@pytest.fixture
async def test_employees(session: AsyncSession, tenant_id: UUID) -> list[Employee]:
    """A full-month employee and an April 16th starter."""
    employees = [
        Employee(
            tenant_id=tenant_id,
            first_name="Ana",
            last_name="Petrovic",
            base_salary=Decimal("3000.00"),
            start_date=date(2023, 1, 1),
            pension=False,
        ),
        Employee(
            tenant_id=tenant_id,
            first_name="Marko",
            last_name="Jovanovic",
            base_salary=Decimal("2200.00"),
            start_date=date(2024, 4, 16),
            pension=True,
        ),
    ]
    session.add_all(employees)
    await session.flush()
    return employees


@pytest.fixture
async def test_unit_types(session: AsyncSession, tenant_id: UUID) -> list[UnitType]:
    unit_types = [
        UnitType(tenant_id=tenant_id, name="Bonus", direction="addition"),
        UnitType(tenant_id=tenant_id, name="Fitpass", direction="deduction"),
        UnitType(tenant_id=tenant_id, name="Insurance", direction="deduction"),
    ]
    session.add_all(unit_types)
    await session.flush()
    return unit_types


@pytest.fixture
async def test_holidays(session: AsyncSession, tenant_id: UUID) -> list[Holiday]:
    holidays = [
        Holiday(tenant_id=tenant_id, date=date(2024, 1, 1), name="New Year"),
        Holiday(tenant_id=tenant_id, date=date(2024, 1, 2), name="New Year"),
    ]
    session.add_all(holidays)
    await session.flush()
    return holidays
