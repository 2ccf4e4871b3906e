"""Salary deferral model."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from payroll_accrual.calculators.types import DeferralState
from payroll_accrual.models.base import Base, TimestampMixin


class SalaryDeferral(Base, TimestampMixin):
    """Moves one month's base accrual into the following month.

    At most one row per (tenant, employee, month).
    """

    __tablename__ = "salary_deferral"

    salary_deferral_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    tenant_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    month: Mapped[str] = mapped_column(String(7), nullable=False)
    deferred_amount: Mapped[Decimal] = mapped_column(nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "tenant_id", "employee_id", "month", name="salary_deferral_employee_month_unique"
        ),
    )

    def to_state(self) -> DeferralState:
        return DeferralState(
            employee_id=self.employee_id,
            month=self.month,
            deferred_amount=self.deferred_amount,
            deferral_id=self.salary_deferral_id,
        )
