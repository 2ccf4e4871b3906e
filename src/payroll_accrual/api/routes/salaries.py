"""Monthly salary accrual endpoints."""

from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from payroll_accrual.api.dependencies import AppSettings, DbSession, TenantId
from payroll_accrual.api.schemas import (
    AccrualRowResponse,
    AccrualSummaryResponse,
    ErrorResponse,
    GrossUpResponse,
    SalariesResponse,
    SalaryRecordResponse,
)
from payroll_accrual.calculators.calendar_resolver import InvalidMonthError
from payroll_accrual.calculators.gross_up import employer_cost
from payroll_accrual.services.accrual_service import AccrualService

router = APIRouter(tags=["salaries"])

MonthQuery = Annotated[str, Query(description="Month key, YYYY-MM")]


@router.get(
    "/salaries",
    response_model=SalariesResponse,
    responses={400: {"model": ErrorResponse}},
)
async def list_salaries(
    db: DbSession,
    tenant_id: TenantId,
    settings: AppSettings,
    month: MonthQuery,
) -> SalariesResponse:
    """Compute every employee's salary record for a month."""
    service = AccrualService(db, tenant_id, settings)
    try:
        accrual = await service.compute_month(month)
    except InvalidMonthError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    calendar = accrual.calendar
    return SalariesResponse(
        month=accrual.month,
        working_days=calendar.working_days,
        weekend_days=calendar.weekend_days,
        holidays_count=calendar.holiday_days,
        total_days=calendar.total_days,
        salaries=[SalaryRecordResponse.model_validate(r) for r in accrual.records],
    )


@router.get(
    "/salaries/summary",
    response_model=AccrualSummaryResponse,
    responses={400: {"model": ErrorResponse}},
)
async def salaries_summary(
    db: DbSession,
    tenant_id: TenantId,
    settings: AppSettings,
    month: MonthQuery,
) -> AccrualSummaryResponse:
    """Accrual sheet totals with gross salary and pension per active record."""
    service = AccrualService(db, tenant_id, settings)
    try:
        _, summary = await service.summarize_month(month)
    except InvalidMonthError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return AccrualSummaryResponse(
        month=summary.month,
        active_count=summary.active_count,
        total_accrued=summary.total_accrued,
        total_additions=summary.total_additions,
        total_deductions=summary.total_deductions,
        total_insurance=summary.total_insurance,
        total_carry_over=summary.total_carry_over,
        total_net=summary.total_net,
        total_gross=summary.total_gross,
        total_pension=summary.total_pension,
        totals_by_type=summary.totals_by_type,
        rows=[
            AccrualRowResponse(
                employee_id=row.record.employee_id,
                full_name=row.record.employee.full_name,
                pension=row.cost.pension_enabled,
                net_salary=row.cost.net_salary,
                gross_salary=row.cost.gross_salary,
                pension_contribution=row.cost.pension_contribution,
            )
            for row in summary.rows
        ],
    )


@router.get("/gross-up", response_model=GrossUpResponse)
async def gross_up_salary(
    net: Annotated[Decimal, Query(description="Net salary")],
    pension: bool = False,
) -> GrossUpResponse:
    """Gross salary and pension contribution for a net salary."""
    return GrossUpResponse.model_validate(employer_cost(net, pension))
