"""Overtime rate table endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Path, status
from sqlalchemy import select

from payroll_accrual.api.dependencies import DbSession, TenantId
from payroll_accrual.api.schemas import (
    ErrorResponse,
    MessageResponse,
    OvertimeRateCreate,
    OvertimeRateListResponse,
    OvertimeRateResponse,
)
from payroll_accrual.models import OvertimeRate

router = APIRouter(prefix="/overtime-rates", tags=["overtime-rates"])


async def _get_rate(db: DbSession, tenant_id: UUID, overtime_rate_id: UUID) -> OvertimeRate:
    result = await db.execute(
        select(OvertimeRate).where(
            OvertimeRate.overtime_rate_id == overtime_rate_id,
            OvertimeRate.tenant_id == tenant_id,
        )
    )
    overtime_rate = result.scalar_one_or_none()
    if overtime_rate is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Overtime rate not found",
        )
    return overtime_rate


@router.get("", response_model=OvertimeRateListResponse)
async def list_overtime_rates(db: DbSession, tenant_id: TenantId) -> OvertimeRateListResponse:
    """List overtime rates, lowest first."""
    result = await db.execute(
        select(OvertimeRate)
        .where(OvertimeRate.tenant_id == tenant_id)
        .order_by(OvertimeRate.rate, OvertimeRate.label)
    )
    return OvertimeRateListResponse(
        overtime_rates=[OvertimeRateResponse.model_validate(r) for r in result.scalars().all()]
    )


@router.post(
    "",
    response_model=OvertimeRateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_overtime_rate(
    db: DbSession,
    tenant_id: TenantId,
    payload: OvertimeRateCreate,
) -> OvertimeRateResponse:
    """Add an overtime rate."""
    overtime_rate = OvertimeRate(
        tenant_id=tenant_id,
        label=payload.label.strip(),
        rate=payload.rate,
    )
    db.add(overtime_rate)
    await db.commit()
    await db.refresh(overtime_rate)
    return OvertimeRateResponse.model_validate(overtime_rate)


@router.put(
    "/{overtime_rate_id}",
    response_model=OvertimeRateResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_overtime_rate(
    db: DbSession,
    tenant_id: TenantId,
    overtime_rate_id: Annotated[UUID, Path()],
    payload: OvertimeRateCreate,
) -> OvertimeRateResponse:
    """Update an overtime rate."""
    overtime_rate = await _get_rate(db, tenant_id, overtime_rate_id)
    overtime_rate.label = payload.label.strip()
    overtime_rate.rate = payload.rate
    await db.commit()
    await db.refresh(overtime_rate)
    return OvertimeRateResponse.model_validate(overtime_rate)


@router.delete(
    "/{overtime_rate_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_overtime_rate(
    db: DbSession,
    tenant_id: TenantId,
    overtime_rate_id: Annotated[UUID, Path()],
) -> MessageResponse:
    """Delete an overtime rate."""
    overtime_rate = await _get_rate(db, tenant_id, overtime_rate_id)
    await db.delete(overtime_rate)
    await db.commit()
    return MessageResponse(message="Overtime rate deleted")
