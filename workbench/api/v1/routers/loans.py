from uuid import UUID

from fastapi import APIRouter, Depends, status

from workbench.api import deps
from workbench.schemas.loan import Loan, LoanCreate, LoanUpdate
from workbench.services import loan_aggregate
from workbench.services.stores import LoanStore

router = APIRouter(prefix="/loans", tags=["loans"])


@router.post(
    "",
    response_model=Loan,
    status_code=status.HTTP_201_CREATED,
    summary="Create a loan; DSCR, LTV and title are derived",
)
async def create_loan(
    payload: LoanCreate,
    store: LoanStore = Depends(deps.get_loan_store),
) -> Loan:
    return loan_aggregate.create_loan(store, payload)


@router.get("/{loan_id}", response_model=Loan, summary="Get a loan")
async def get_loan(
    loan_id: UUID,
    store: LoanStore = Depends(deps.get_loan_store),
) -> Loan:
    return loan_aggregate.get_loan(store, loan_id)


@router.patch("/{loan_id}", response_model=Loan, summary="Update a loan and recompute derived fields")
async def update_loan(
    loan_id: UUID,
    payload: LoanUpdate,
    store: LoanStore = Depends(deps.get_loan_store),
) -> Loan:
    return loan_aggregate.update_loan(store, loan_id, payload)
