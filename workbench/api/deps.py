from fastapi import Request

from workbench.services.stores import (
    DocumentStore,
    InMemoryCustomRequirementStore,
    InMemoryDocumentStore,
    InMemoryLoanStore,
    LoanStore,
)


def install_stores(app) -> None:
    """Attach fresh in-memory stores to ``app.state``."""
    app.state.loan_store = InMemoryLoanStore()
    app.state.document_store = InMemoryDocumentStore()
    app.state.custom_requirement_store = InMemoryCustomRequirementStore()


def get_loan_store(request: Request) -> LoanStore:
    return request.app.state.loan_store


def get_document_store(request: Request) -> DocumentStore:
    return request.app.state.document_store


def get_custom_requirement_store(request: Request) -> InMemoryCustomRequirementStore:
    return request.app.state.custom_requirement_store
