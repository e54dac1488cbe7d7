from fastapi import APIRouter

from workbench.schemas.dscr import DSCRBreakdown, DSCRRequest
from workbench.services import dscr_calculator

router = APIRouter(prefix="/dscr", tags=["dscr"])


@router.post(
    "/calculate",
    response_model=DSCRBreakdown,
    summary="Debt service coverage ratio for ad-hoc inputs",
)
async def calculate(payload: DSCRRequest) -> DSCRBreakdown:
    return dscr_calculator.build_dscr_breakdown(
        payload.loan_amount,
        payload.interest_rate,
        payload.monthly_rent,
        payload.annual_taxes,
        payload.annual_insurance,
        payload.annual_hoa,
        payload.interest_only,
    )
