"""Pydantic schemas for API request/response models."""

from datetime import date
from decimal import Decimal
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator

from payroll_accrual.calculators.types import Direction

# Surrounding whitespace is dropped before the length check
NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


# ============================================================================
# Employee schemas
# ============================================================================


class EmployeeCreate(BaseModel):
    """Schema for creating an employee."""

    first_name: NonBlankStr
    last_name: NonBlankStr
    base_salary: Decimal
    start_date: date
    end_date: date | None = None
    pension: bool = False
    personal_id: str | None = None
    position: str | None = None
    overtime_rate: Decimal | None = None

    @model_validator(mode="after")
    def check_dates(self) -> "EmployeeCreate":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class EmployeeUpdate(BaseModel):
    """Schema for updating employment terms. Omitted fields are left unchanged."""

    end_date: date | None = None
    pension: bool | None = None
    position: str | None = None
    overtime_rate: Decimal | None = Field(default=None, ge=0)


class EmployeeResponse(BaseModel):
    """Schema for employee response."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: UUID
    first_name: str
    last_name: str
    personal_id: str | None = None
    position: str | None = None
    base_salary: Decimal
    overtime_rate: Decimal | None = None
    start_date: date
    end_date: date | None = None
    pension: bool


class EmployeeListResponse(BaseModel):
    """Schema for listing employees."""

    employees: list[EmployeeResponse]
    total: int


class SalaryChangeCreate(BaseModel):
    """Schema for recording a salary change."""

    new_salary: Decimal
    effective_date: date
    note: str | None = None


class SalaryChangeResponse(BaseModel):
    """Schema for salary change response."""

    model_config = ConfigDict(from_attributes=True)

    salary_change_id: UUID
    employee_id: UUID
    old_salary: Decimal
    new_salary: Decimal
    effective_date: date
    note: str | None = None


class SalaryChangeListResponse(BaseModel):
    """Schema for listing salary changes."""

    salary_changes: list[SalaryChangeResponse]


# ============================================================================
# Ledger schemas
# ============================================================================


class UnitCreate(BaseModel):
    """Schema for appending a ledger entry."""

    type: str
    amount: Decimal
    date: date


class UnitResponse(BaseModel):
    """Schema for a ledger entry with its read-time direction."""

    model_config = ConfigDict(from_attributes=True)

    unit_id: UUID
    employee_id: UUID
    type: str
    amount: Decimal
    date: date
    direction: Direction | None = None


class UnitListResponse(BaseModel):
    """Schema for listing ledger entries."""

    units: list[UnitResponse]


class OvertimeCreate(BaseModel):
    """Schema for converting overtime hours into a ledger entry.

    Either ``rate_id`` (an overtime rate table row) or ``rate`` (a
    percentage) selects the multiplier.
    """

    month: str
    hours: Decimal
    rate_id: UUID | None = None
    rate: Decimal | None = None


class OvertimeResponse(BaseModel):
    """Schema for converted overtime."""

    unit: UnitResponse
    hourly_rate: Decimal
    rate_pct: Decimal
    hours: Decimal
    amount: Decimal


# ============================================================================
# Registry / reference table schemas
# ============================================================================


class UnitTypeCreate(BaseModel):
    """Schema for creating or updating a unit type."""

    name: NonBlankStr
    direction: Direction


class UnitTypeResponse(BaseModel):
    """Schema for unit type response."""

    model_config = ConfigDict(from_attributes=True)

    unit_type_id: UUID
    name: str
    direction: Direction


class UnitTypeListResponse(BaseModel):
    unit_types: list[UnitTypeResponse]


class OvertimeRateCreate(BaseModel):
    """Schema for creating or updating an overtime rate."""

    label: NonBlankStr
    rate: Decimal


class OvertimeRateResponse(BaseModel):
    """Schema for overtime rate response."""

    model_config = ConfigDict(from_attributes=True)

    overtime_rate_id: UUID
    label: str
    rate: Decimal


class OvertimeRateListResponse(BaseModel):
    overtime_rates: list[OvertimeRateResponse]


class HolidayCreate(BaseModel):
    """Schema for creating or updating a holiday."""

    date: date
    name: NonBlankStr


class HolidayResponse(BaseModel):
    """Schema for holiday response."""

    model_config = ConfigDict(from_attributes=True)

    holiday_id: UUID
    date: date
    name: str


class HolidayListResponse(BaseModel):
    holidays: list[HolidayResponse]


# ============================================================================
# Deferral schemas
# ============================================================================


class DeferralCreate(BaseModel):
    """Schema for deferring a month's accrual."""

    employee_id: UUID
    month: str
    deferred_amount: Decimal


class DeferralResponse(BaseModel):
    """Schema for deferral response."""

    model_config = ConfigDict(from_attributes=True)

    salary_deferral_id: UUID
    employee_id: UUID
    month: str
    deferred_amount: Decimal


# ============================================================================
# Salary accrual schemas
# ============================================================================


class EmployeeSnapshotResponse(BaseModel):
    """Employee fields as seen by the engine."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: UUID
    first_name: str
    last_name: str
    full_name: str
    personal_id: str | None = None
    base_salary: Decimal | None = None
    start_date: date
    end_date: date | None = None
    pension: bool


class UnitLineResponse(BaseModel):
    """A ledger line used in an accrual."""

    model_config = ConfigDict(from_attributes=True)

    entry_id: UUID
    type: str
    amount: Decimal
    date: date
    direction: Direction
    is_insurance: bool


class SalaryRecordResponse(BaseModel):
    """Schema for one employee's monthly salary record."""

    model_config = ConfigDict(from_attributes=True)

    employee: EmployeeSnapshotResponse
    month: str
    days_worked: int
    total_days: int
    resolved_salary: Decimal
    accrued_salary: Decimal
    original_accrued: Decimal
    total_additions: Decimal
    total_deductions: Decimal
    insurance_deduction: Decimal
    carry_over: Decimal
    net_salary: Decimal
    is_deferred: bool
    is_mid_month_starter: bool
    salary_note: str | None = None
    units: list[UnitLineResponse] = []
    deferral_id: UUID | None = None
    inputs_fingerprint: str
    calculation_id: UUID | None = None
    anomalies: list[str] = []


class SalariesResponse(BaseModel):
    """Schema for a month of salary records."""

    month: str
    working_days: int
    weekend_days: int
    holidays_count: int
    total_days: int
    salaries: list[SalaryRecordResponse]


class AccrualRowResponse(BaseModel):
    """Employer-side cost of one active record."""

    employee_id: UUID
    full_name: str
    pension: bool
    net_salary: Decimal
    gross_salary: Decimal
    pension_contribution: Decimal


class AccrualSummaryResponse(BaseModel):
    """Schema for accrual sheet totals."""

    month: str
    active_count: int
    total_accrued: Decimal
    total_additions: Decimal
    total_deductions: Decimal
    total_insurance: Decimal
    total_carry_over: Decimal
    total_net: Decimal
    total_gross: Decimal
    total_pension: Decimal
    totals_by_type: dict[str, Decimal]
    rows: list[AccrualRowResponse]


class GrossUpResponse(BaseModel):
    """Schema for a gross-up of one net salary."""

    model_config = ConfigDict(from_attributes=True)

    net_salary: Decimal
    gross_salary: Decimal
    pension_contribution: Decimal
    pension_enabled: bool


# ============================================================================
# Generic schemas
# ============================================================================


class MessageResponse(BaseModel):
    """Schema for plain acknowledgements."""

    message: str


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
