"""Employee and salary change models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payroll_accrual.calculators.types import EmployeeSnapshot, SalaryChangeEntry
from payroll_accrual.models.base import Base, TimestampMixin


class Employee(Base, TimestampMixin):
    """Employee record.

    ``base_salary`` is the live salary; it only moves through SalaryChange
    rows so every change stays dated and auditable.
    """

    __tablename__ = "employee"

    employee_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    tenant_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    personal_id: Mapped[str | None] = mapped_column(String, nullable=True)
    position: Mapped[str | None] = mapped_column(String, nullable=True)
    base_salary: Mapped[Decimal] = mapped_column(nullable=False)
    # Legacy flat rate; overtime pay uses the overtime rate table
    overtime_rate: Mapped[Decimal | None] = mapped_column(nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    pension: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        CheckConstraint("base_salary >= 0", name="employee_base_salary_check"),
        CheckConstraint(
            "end_date IS NULL OR end_date >= start_date",
            name="employee_dates_check",
        ),
    )

    # Relationships
    salary_changes: Mapped[list[SalaryChange]] = relationship(
        back_populates="employee",
        cascade="all, delete-orphan",
        order_by="SalaryChange.effective_date",
    )

    @property
    def full_name(self) -> str:
        """Get full name."""
        return f"{self.first_name} {self.last_name}"

    def to_snapshot(self) -> EmployeeSnapshot:
        """Detach the fields the accrual engine reads."""
        return EmployeeSnapshot(
            employee_id=self.employee_id,
            first_name=self.first_name,
            last_name=self.last_name,
            base_salary=self.base_salary,
            start_date=self.start_date,
            end_date=self.end_date,
            pension=bool(self.pension),
            personal_id=self.personal_id,
            overtime_rate=self.overtime_rate,
        )


class SalaryChange(Base, TimestampMixin):
    """Effective-dated base salary change."""

    __tablename__ = "salary_change"

    salary_change_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    old_salary: Mapped[Decimal] = mapped_column(nullable=False)
    new_salary: Mapped[Decimal] = mapped_column(nullable=False)
    effective_date: Mapped[date] = mapped_column(Date, nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("new_salary >= 0", name="salary_change_new_salary_check"),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="salary_changes")

    def to_entry(self) -> SalaryChangeEntry:
        return SalaryChangeEntry(
            effective_date=self.effective_date,
            old_salary=self.old_salary,
            new_salary=self.new_salary,
            salary_change_id=self.salary_change_id,
            note=self.note,
        )
