from fastapi import APIRouter

from workbench.api.v1.routers import (
    dscr,
    health,
    lenders,
    loan_documents,
    loans,
)

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(lenders.router)
api_router.include_router(dscr.router)
api_router.include_router(loans.router)
api_router.include_router(loan_documents.router)

__all__ = ["api_router"]
