"""Unit ledger, unit type registry and overtime rate models."""

from __future__ import annotations

import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from payroll_accrual.calculators.types import LedgerEntry
from payroll_accrual.models.base import Base, TimestampMixin


class UnitType(Base, TimestampMixin):
    """Named adjustment type and the direction it moves net salary."""

    __tablename__ = "unit_type"

    unit_type_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    tenant_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    direction: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        UniqueConstraint("tenant_id", "name", name="unit_type_tenant_name_unique"),
        CheckConstraint(
            "direction IN ('addition', 'deduction')",
            name="unit_type_direction_check",
        ),
    )


class UnitAdjustment(Base, TimestampMixin):
    """Append-only ledger entry.

    ``type`` is free text resolved against UnitType by name when read, so
    deleting a type never breaks historical rows. Amounts are stored
    positive; the sign comes from the type's direction.
    """

    __tablename__ = "unit_adjustment"

    unit_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    tenant_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    type: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)

    __table_args__ = (
        CheckConstraint("amount > 0", name="unit_adjustment_amount_check"),
    )

    def to_entry(self) -> LedgerEntry:
        return LedgerEntry(
            entry_id=self.unit_id,
            employee_id=self.employee_id,
            type=self.type,
            amount=self.amount,
            date=self.date,
        )


class OvertimeRate(Base, TimestampMixin):
    """Named overtime multiplier, as a percentage (110.00 = 110%)."""

    __tablename__ = "overtime_rate"

    overtime_rate_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    tenant_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    label: Mapped[str] = mapped_column(String, nullable=False)
    rate: Mapped[Decimal] = mapped_column(Numeric(7, 2), nullable=False)
