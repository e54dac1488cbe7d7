from fastapi import APIRouter

from workbench.schemas.documents import LenderRequirementsResponse
from workbench.services import requirement_catalog

router = APIRouter(prefix="/lenders", tags=["lenders"])


@router.get("", response_model=list[str], summary="List lenders with a requirement table")
async def list_lenders() -> list[str]:
    return requirement_catalog.list_lenders()


@router.get(
    "/{lender}/requirements",
    response_model=LenderRequirementsResponse,
    summary="Document requirements for a lender",
)
async def get_lender_requirements(lender: str) -> LenderRequirementsResponse:
    # Unknown lenders fall back to the baseline table rather than 404.
    key = requirement_catalog.resolve_lender(lender) or requirement_catalog.BASELINE_KEY
    items = list(requirement_catalog.get_requirements_for_funder(key))
    return LenderRequirementsResponse(
        lender=key,
        items=items,
        total=len(items),
        required_total=requirement_catalog.get_required_document_count(key),
        funder_specific_required=requirement_catalog.get_funder_specific_count(key, required_only=True),
    )
