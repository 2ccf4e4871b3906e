"""Holiday calendar endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Path, Query, status
from sqlalchemy import select

from payroll_accrual.api.dependencies import DbSession, TenantId
from payroll_accrual.api.schemas import (
    ErrorResponse,
    HolidayCreate,
    HolidayListResponse,
    HolidayResponse,
    MessageResponse,
)
from payroll_accrual.models import Holiday

router = APIRouter(prefix="/holidays", tags=["holidays"])


async def _get_holiday(db: DbSession, tenant_id: UUID, holiday_id: UUID) -> Holiday:
    result = await db.execute(
        select(Holiday).where(
            Holiday.holiday_id == holiday_id,
            Holiday.tenant_id == tenant_id,
        )
    )
    holiday = result.scalar_one_or_none()
    if holiday is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Holiday not found",
        )
    return holiday


@router.get("", response_model=HolidayListResponse)
async def list_holidays(
    db: DbSession,
    tenant_id: TenantId,
    year: Annotated[int | None, Query(ge=1, le=9999)] = None,
) -> HolidayListResponse:
    """List holidays in date order, optionally for one year."""
    query = select(Holiday).where(Holiday.tenant_id == tenant_id)
    if year is not None:
        query = query.where(
            Holiday.date >= date(year, 1, 1),
            Holiday.date <= date(year, 12, 31),
        )
    result = await db.execute(query.order_by(Holiday.date, Holiday.name))
    return HolidayListResponse(
        holidays=[HolidayResponse.model_validate(h) for h in result.scalars().all()]
    )


@router.post(
    "",
    response_model=HolidayResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_holiday(
    db: DbSession,
    tenant_id: TenantId,
    payload: HolidayCreate,
) -> HolidayResponse:
    """Add a holiday."""
    holiday = Holiday(tenant_id=tenant_id, date=payload.date, name=payload.name.strip())
    db.add(holiday)
    await db.commit()
    await db.refresh(holiday)
    return HolidayResponse.model_validate(holiday)


@router.put(
    "/{holiday_id}",
    response_model=HolidayResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_holiday(
    db: DbSession,
    tenant_id: TenantId,
    holiday_id: Annotated[UUID, Path()],
    payload: HolidayCreate,
) -> HolidayResponse:
    """Move or rename a holiday."""
    holiday = await _get_holiday(db, tenant_id, holiday_id)
    holiday.date = payload.date
    holiday.name = payload.name.strip()
    await db.commit()
    await db.refresh(holiday)
    return HolidayResponse.model_validate(holiday)


@router.delete(
    "/{holiday_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_holiday(
    db: DbSession,
    tenant_id: TenantId,
    holiday_id: Annotated[UUID, Path()],
) -> MessageResponse:
    """Delete a holiday."""
    holiday = await _get_holiday(db, tenant_id, holiday_id)
    await db.delete(holiday)
    await db.commit()
    return MessageResponse(message="Holiday deleted")
