"""Employee, salary change and ledger endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Path, Query, status
from sqlalchemy import select

from payroll_accrual.api.dependencies import AppSettings, DbSession, TenantId
from payroll_accrual.api.schemas import (
    EmployeeCreate,
    EmployeeListResponse,
    EmployeeResponse,
    EmployeeUpdate,
    ErrorResponse,
    MessageResponse,
    OvertimeCreate,
    OvertimeResponse,
    SalaryChangeCreate,
    SalaryChangeListResponse,
    SalaryChangeResponse,
    UnitCreate,
    UnitListResponse,
    UnitResponse,
)
from payroll_accrual.calculators.calendar_resolver import InvalidMonthError, parse_month
from payroll_accrual.calculators.money import round_to_cents
from payroll_accrual.calculators.unit_registry import UnitTypeRegistry
from payroll_accrual.models import OvertimeRate, UnitAdjustment
from payroll_accrual.services.accrual_service import (
    AccrualService,
    OvertimeNotComputableError,
)
from payroll_accrual.services.employee_service import (
    EmployeeNotFoundError,
    EmployeeService,
    EmploymentDatesError,
    SalaryChangeNotFoundError,
    SalaryValidationError,
)
from payroll_accrual.services.ledger_service import (
    EntryNotFoundError,
    LedgerService,
    LedgerValidationError,
)

router = APIRouter(prefix="/employees", tags=["employees"])

EmployeeIdPath = Annotated[UUID, Path()]


def _not_found(e: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def _bad_request(e: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def _unit_response(entry: UnitAdjustment, registry: UnitTypeRegistry) -> UnitResponse:
    return UnitResponse(
        unit_id=entry.unit_id,
        employee_id=entry.employee_id,
        type=entry.type,
        amount=entry.amount,
        date=entry.date,
        direction=registry.direction_of(entry.type),
    )


# ============================================================================
# Employees
# ============================================================================


@router.post(
    "",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_employee(
    db: DbSession,
    tenant_id: TenantId,
    payload: EmployeeCreate,
) -> EmployeeResponse:
    """Create an employee."""
    service = EmployeeService(db, tenant_id)
    try:
        employee = await service.create_employee(**payload.model_dump())
    except SalaryValidationError as e:
        raise _bad_request(e)
    await db.commit()
    await db.refresh(employee)
    return EmployeeResponse.model_validate(employee)


@router.get("", response_model=EmployeeListResponse)
async def list_employees(
    db: DbSession,
    tenant_id: TenantId,
    search: Annotated[str | None, Query()] = None,
) -> EmployeeListResponse:
    """List employees, optionally filtered by name or personal id."""
    employees = await EmployeeService(db, tenant_id).list_employees(search)
    return EmployeeListResponse(
        employees=[EmployeeResponse.model_validate(e) for e in employees],
        total=len(employees),
    )


@router.get(
    "/{employee_id}",
    response_model=EmployeeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_employee(
    db: DbSession,
    tenant_id: TenantId,
    employee_id: EmployeeIdPath,
) -> EmployeeResponse:
    """Get one employee."""
    try:
        employee = await EmployeeService(db, tenant_id).get_employee(employee_id)
    except EmployeeNotFoundError as e:
        raise _not_found(e)
    return EmployeeResponse.model_validate(employee)


@router.patch(
    "/{employee_id}",
    response_model=EmployeeResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_employee(
    db: DbSession,
    tenant_id: TenantId,
    employee_id: EmployeeIdPath,
    payload: EmployeeUpdate,
) -> EmployeeResponse:
    """Update end date, pension enrolment, position or overtime rate."""
    changes = payload.model_dump(exclude_unset=True)
    if "pension" in changes and changes["pension"] is None:
        del changes["pension"]
    try:
        employee = await EmployeeService(db, tenant_id).update_employee(employee_id, **changes)
    except EmployeeNotFoundError as e:
        raise _not_found(e)
    except EmploymentDatesError as e:
        raise _bad_request(e)
    await db.commit()
    await db.refresh(employee)
    return EmployeeResponse.model_validate(employee)


# ============================================================================
# Salary changes
# ============================================================================


@router.get(
    "/{employee_id}/salary-changes",
    response_model=SalaryChangeListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def list_salary_changes(
    db: DbSession,
    tenant_id: TenantId,
    employee_id: EmployeeIdPath,
) -> SalaryChangeListResponse:
    """Salary history of an employee, newest first."""
    try:
        changes = await EmployeeService(db, tenant_id).list_salary_changes(employee_id)
    except EmployeeNotFoundError as e:
        raise _not_found(e)
    return SalaryChangeListResponse(
        salary_changes=[SalaryChangeResponse.model_validate(c) for c in changes]
    )


@router.post(
    "/{employee_id}/salary-changes",
    response_model=SalaryChangeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_salary_change(
    db: DbSession,
    tenant_id: TenantId,
    employee_id: EmployeeIdPath,
    payload: SalaryChangeCreate,
) -> SalaryChangeResponse:
    """Record a salary change effective on a date."""
    service = EmployeeService(db, tenant_id)
    try:
        change = await service.record_salary_change(
            employee_id,
            payload.new_salary,
            payload.effective_date,
            payload.note,
        )
    except EmployeeNotFoundError as e:
        raise _not_found(e)
    except SalaryValidationError as e:
        raise _bad_request(e)
    await db.commit()
    await db.refresh(change)
    return SalaryChangeResponse.model_validate(change)


@router.delete(
    "/{employee_id}/salary-changes/{salary_change_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_salary_change(
    db: DbSession,
    tenant_id: TenantId,
    employee_id: EmployeeIdPath,
    salary_change_id: Annotated[UUID, Path()],
) -> MessageResponse:
    """Delete a salary change row."""
    try:
        await EmployeeService(db, tenant_id).delete_salary_change(
            employee_id, salary_change_id
        )
    except (EmployeeNotFoundError, SalaryChangeNotFoundError) as e:
        raise _not_found(e)
    await db.commit()
    return MessageResponse(message="Salary change deleted")


# ============================================================================
# Unit ledger
# ============================================================================


@router.get(
    "/{employee_id}/units",
    response_model=UnitListResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def list_units(
    db: DbSession,
    tenant_id: TenantId,
    settings: AppSettings,
    employee_id: EmployeeIdPath,
    month: Annotated[str | None, Query(description="Month key, YYYY-MM")] = None,
) -> UnitListResponse:
    """Ledger entries of an employee, all or for one month."""
    ledger = LedgerService(db, tenant_id)
    try:
        if month is None:
            entries = await ledger.list_entries(employee_id)
        else:
            year, month_num = parse_month(month)
            await ledger.employees.get_employee(employee_id)
            entries = await ledger.list_entries_for_month(employee_id, year, month_num)
    except EmployeeNotFoundError as e:
        raise _not_found(e)
    except InvalidMonthError as e:
        raise _bad_request(e)

    registry = await AccrualService(db, tenant_id, settings).load_registry()
    return UnitListResponse(units=[_unit_response(e, registry) for e in entries])


@router.post(
    "/{employee_id}/units",
    response_model=UnitResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_unit(
    db: DbSession,
    tenant_id: TenantId,
    settings: AppSettings,
    employee_id: EmployeeIdPath,
    payload: UnitCreate,
) -> UnitResponse:
    """Append a ledger entry for an employee."""
    ledger = LedgerService(db, tenant_id)
    try:
        unit_id = await ledger.add_entry(
            employee_id, payload.type, payload.amount, payload.date
        )
    except EmployeeNotFoundError as e:
        raise _not_found(e)
    except LedgerValidationError as e:
        raise _bad_request(e)
    await db.commit()

    entry = await db.get(UnitAdjustment, unit_id)
    registry = await AccrualService(db, tenant_id, settings).load_registry()
    return _unit_response(entry, registry)


@router.delete(
    "/{employee_id}/units/{unit_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_unit(
    db: DbSession,
    tenant_id: TenantId,
    employee_id: EmployeeIdPath,
    unit_id: Annotated[UUID, Path()],
) -> MessageResponse:
    """Delete a ledger entry."""
    try:
        await LedgerService(db, tenant_id).delete_entry(unit_id, employee_id)
    except EntryNotFoundError as e:
        raise _not_found(e)
    await db.commit()
    return MessageResponse(message="Unit deleted")


@router.post(
    "/{employee_id}/overtime",
    response_model=OvertimeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_overtime(
    db: DbSession,
    tenant_id: TenantId,
    settings: AppSettings,
    employee_id: EmployeeIdPath,
    payload: OvertimeCreate,
) -> OvertimeResponse:
    """Convert overtime hours into an OT ledger entry at month end.

    The multiplier comes from ``rate_id``, then ``rate``, then the
    employee's own overtime rate.
    """
    service = AccrualService(db, tenant_id, settings)
    try:
        employee = await service.employees.get_employee(employee_id)
    except EmployeeNotFoundError as e:
        raise _not_found(e)

    rate_pct = payload.rate
    if payload.rate_id is not None:
        result = await db.execute(
            select(OvertimeRate).where(
                OvertimeRate.overtime_rate_id == payload.rate_id,
                OvertimeRate.tenant_id == tenant_id,
            )
        )
        overtime_rate = result.scalar_one_or_none()
        if overtime_rate is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Overtime rate not found: {payload.rate_id}",
            )
        rate_pct = overtime_rate.rate
    if rate_pct is None:
        rate_pct = employee.overtime_rate
    if rate_pct is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="An overtime rate is required (rate_id or rate)",
        )

    try:
        unit_id, conversion = await service.record_overtime(
            employee_id, payload.month, payload.hours, rate_pct
        )
    except (InvalidMonthError, OvertimeNotComputableError, LedgerValidationError) as e:
        raise _bad_request(e)
    await db.commit()

    entry = await db.get(UnitAdjustment, unit_id)
    registry = await service.load_registry()
    return OvertimeResponse(
        unit=_unit_response(entry, registry),
        hourly_rate=round_to_cents(conversion.hourly_rate),
        rate_pct=conversion.rate_pct,
        hours=conversion.hours,
        amount=conversion.amount,
    )
