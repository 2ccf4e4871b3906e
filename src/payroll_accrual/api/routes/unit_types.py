"""Unit type registry endpoints."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Path, status
from sqlalchemy import select

from payroll_accrual.api.dependencies import DbSession, TenantId
from payroll_accrual.api.schemas import (
    ErrorResponse,
    MessageResponse,
    UnitTypeCreate,
    UnitTypeListResponse,
    UnitTypeResponse,
)
from payroll_accrual.models import UnitType

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/units", tags=["unit-types"])


async def _get_unit_type(db: DbSession, tenant_id: UUID, unit_type_id: UUID) -> UnitType:
    result = await db.execute(
        select(UnitType).where(
            UnitType.unit_type_id == unit_type_id,
            UnitType.tenant_id == tenant_id,
        )
    )
    unit_type = result.scalar_one_or_none()
    if unit_type is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Unit type not found",
        )
    return unit_type


async def _ensure_name_free(
    db: DbSession, tenant_id: UUID, name: str, exclude_id: UUID | None = None
) -> None:
    query = select(UnitType.unit_type_id).where(
        UnitType.tenant_id == tenant_id,
        UnitType.name == name,
    )
    if exclude_id is not None:
        query = query.where(UnitType.unit_type_id != exclude_id)
    if await db.scalar(query) is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unit type already exists: {name}",
        )


@router.get("", response_model=UnitTypeListResponse)
async def list_unit_types(db: DbSession, tenant_id: TenantId) -> UnitTypeListResponse:
    """List unit types in creation order."""
    result = await db.execute(
        select(UnitType)
        .where(UnitType.tenant_id == tenant_id)
        .order_by(UnitType.created_at, UnitType.name)
    )
    return UnitTypeListResponse(
        unit_types=[UnitTypeResponse.model_validate(u) for u in result.scalars().all()]
    )


@router.post(
    "",
    response_model=UnitTypeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_unit_type(
    db: DbSession,
    tenant_id: TenantId,
    payload: UnitTypeCreate,
) -> UnitTypeResponse:
    """Register a unit type and its direction."""
    name = payload.name.strip()
    await _ensure_name_free(db, tenant_id, name)

    unit_type = UnitType(
        tenant_id=tenant_id,
        name=name,
        direction=payload.direction.value,
    )
    db.add(unit_type)
    await db.commit()
    await db.refresh(unit_type)
    logger.info("Created unit type %s (%s)", name, unit_type.direction)
    return UnitTypeResponse.model_validate(unit_type)


@router.put(
    "/{unit_type_id}",
    response_model=UnitTypeResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_unit_type(
    db: DbSession,
    tenant_id: TenantId,
    unit_type_id: Annotated[UUID, Path()],
    payload: UnitTypeCreate,
) -> UnitTypeResponse:
    """Rename a unit type or change its direction.

    Existing ledger entries are re-classified on the next read.
    """
    unit_type = await _get_unit_type(db, tenant_id, unit_type_id)
    name = payload.name.strip()
    await _ensure_name_free(db, tenant_id, name, exclude_id=unit_type_id)

    unit_type.name = name
    unit_type.direction = payload.direction.value
    await db.commit()
    await db.refresh(unit_type)
    logger.info("Updated unit type %s (%s)", name, unit_type.direction)
    return UnitTypeResponse.model_validate(unit_type)


@router.delete(
    "/{unit_type_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_unit_type(
    db: DbSession,
    tenant_id: TenantId,
    unit_type_id: Annotated[UUID, Path()],
) -> MessageResponse:
    """Delete a unit type. Entries of that type fall back to deductions."""
    unit_type = await _get_unit_type(db, tenant_id, unit_type_id)
    await db.delete(unit_type)
    await db.commit()
    logger.info("Deleted unit type %s", unit_type.name)
    return MessageResponse(message="Unit type deleted")
