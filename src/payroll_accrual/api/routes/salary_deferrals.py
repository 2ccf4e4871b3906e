"""Salary deferral endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Path, status

from payroll_accrual.api.dependencies import DbSession, TenantId
from payroll_accrual.api.schemas import (
    DeferralCreate,
    DeferralResponse,
    ErrorResponse,
    MessageResponse,
)
from payroll_accrual.calculators.calendar_resolver import InvalidMonthError
from payroll_accrual.services.deferral_service import DeferralService, DeferralValidationError
from payroll_accrual.services.employee_service import EmployeeNotFoundError

router = APIRouter(prefix="/salary-deferrals", tags=["salary-deferrals"])


@router.post(
    "",
    response_model=DeferralResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def set_deferral(
    db: DbSession,
    tenant_id: TenantId,
    payload: DeferralCreate,
) -> DeferralResponse:
    """Defer an employee's base accrual for a month (create or update)."""
    service = DeferralService(db, tenant_id)
    try:
        deferral = await service.set_deferral(
            payload.employee_id, payload.month, payload.deferred_amount
        )
    except EmployeeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except (InvalidMonthError, DeferralValidationError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    await db.commit()
    await db.refresh(deferral)
    return DeferralResponse.model_validate(deferral)


@router.delete(
    "/{employee_id}/{month}",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}},
)
async def unset_deferral(
    db: DbSession,
    tenant_id: TenantId,
    employee_id: Annotated[UUID, Path()],
    month: Annotated[str, Path()],
) -> MessageResponse:
    """Remove a deferral. Removing one that does not exist is not an error."""
    try:
        removed = await DeferralService(db, tenant_id).unset_deferral(employee_id, month)
    except InvalidMonthError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    await db.commit()
    return MessageResponse(message="Deferral removed" if removed else "No deferral to remove")
