from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from workbench.api import deps
from workbench.schemas.documents import (
    CustomRequirementCreate,
    CustomRequirementsResponse,
    DocumentAssign,
    DocumentClassificationResponse,
    DocumentListResponse,
    DocumentMetadata,
    DocumentUpload,
    DocumentView,
    LoanDocument,
)
from workbench.schemas.loan import Loan
from workbench.services import document_classifier, document_lifecycle, loan_aggregate
from workbench.services.loan_aggregate import LoanAggregate
from workbench.services.stores import DocumentStore, InMemoryCustomRequirementStore, LoanStore

router = APIRouter(prefix="/loans/{loan_id}", tags=["loan-documents"])


def _load_aggregate(
    loan_id: UUID,
    loans: LoanStore = Depends(deps.get_loan_store),
    custom: InMemoryCustomRequirementStore = Depends(deps.get_custom_requirement_store),
) -> LoanAggregate:
    loan = loan_aggregate.get_loan(loans, loan_id)
    return LoanAggregate(loan=loan, custom_requirements=custom.for_loan(loan_id))


def _require_loan(aggregate: LoanAggregate = Depends(_load_aggregate)) -> Loan:
    return aggregate.loan


@router.get("/documents", response_model=DocumentListResponse, summary="List a loan's documents")
async def list_documents(
    view: DocumentView = Query(default=DocumentView.ALL),
    q: str | None = Query(default=None, max_length=255),
    aggregate: LoanAggregate = Depends(_load_aggregate),
    store: DocumentStore = Depends(deps.get_document_store),
) -> DocumentListResponse:
    documents = store.list(aggregate.loan.id)
    items = document_classifier.filter_documents(
        documents,
        aggregate.classify(documents),
        view=view,
        query=q,
    )
    return DocumentListResponse(items=items, total=len(items))


@router.post(
    "/documents",
    response_model=LoanDocument,
    status_code=status.HTTP_201_CREATED,
    summary="Record an uploaded document against a loan",
)
async def upload_document(
    payload: DocumentUpload,
    loan: Loan = Depends(_require_loan),
    store: DocumentStore = Depends(deps.get_document_store),
) -> LoanDocument:
    metadata = DocumentMetadata(**payload.model_dump(include=set(DocumentMetadata.model_fields)))
    return document_lifecycle.upload_document(
        store,
        loan_id=loan.id,
        lender=loan.lender,
        metadata=metadata,
        category=payload.category,
        notes=payload.notes,
    )


@router.get(
    "/documents/classification",
    response_model=DocumentClassificationResponse,
    summary="Missing, completed and unassigned documents with counts",
)
async def get_classification(
    aggregate: LoanAggregate = Depends(_load_aggregate),
    store: DocumentStore = Depends(deps.get_document_store),
) -> DocumentClassificationResponse:
    documents = store.list(aggregate.loan.id)
    classification = aggregate.classify(documents)
    return DocumentClassificationResponse(
        lender=aggregate.loan.lender,
        classification=classification,
        summary=document_classifier.summarize(classification, documents, aggregate.loan.lender),
    )


@router.post(
    "/documents/reset",
    response_model=DocumentListResponse,
    summary="Unassign every assigned document",
)
async def reset_documents(
    loan: Loan = Depends(_require_loan),
    store: DocumentStore = Depends(deps.get_document_store),
) -> DocumentListResponse:
    reset = document_lifecycle.reset_document_assignments(store, loan_id=loan.id)
    return DocumentListResponse(items=reset, total=len(reset))


@router.post(
    "/documents/{document_id}/assign",
    response_model=LoanDocument,
    summary="Assign a document to a requirement",
)
async def assign_document(
    document_id: UUID,
    payload: DocumentAssign,
    loan: Loan = Depends(_require_loan),
    store: DocumentStore = Depends(deps.get_document_store),
) -> LoanDocument:
    return document_lifecycle.assign_document(
        store, loan_id=loan.id, document_id=document_id, category=payload.category
    )


@router.post(
    "/documents/{document_id}/unassign",
    response_model=LoanDocument,
    summary="Move a document back to the unassigned pool",
)
async def unassign_document(
    document_id: UUID,
    loan: Loan = Depends(_require_loan),
    store: DocumentStore = Depends(deps.get_document_store),
) -> LoanDocument:
    return document_lifecycle.unassign_document(store, loan_id=loan.id, document_id=document_id)


@router.post("/documents/{document_id}/approve", response_model=LoanDocument, summary="Approve a document")
async def approve_document(
    document_id: UUID,
    loan: Loan = Depends(_require_loan),
    store: DocumentStore = Depends(deps.get_document_store),
) -> LoanDocument:
    return document_lifecycle.approve_document(store, loan_id=loan.id, document_id=document_id)


@router.post("/documents/{document_id}/reject", response_model=LoanDocument, summary="Reject a document")
async def reject_document(
    document_id: UUID,
    loan: Loan = Depends(_require_loan),
    store: DocumentStore = Depends(deps.get_document_store),
) -> LoanDocument:
    return document_lifecycle.reject_document(store, loan_id=loan.id, document_id=document_id)


@router.post(
    "/custom-requirements",
    response_model=CustomRequirementsResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add an ad-hoc document requirement to a loan",
)
async def add_custom_requirement(
    payload: CustomRequirementCreate,
    aggregate: LoanAggregate = Depends(_load_aggregate),
) -> CustomRequirementsResponse:
    added = aggregate.add_custom_requirement(payload.name)
    return CustomRequirementsResponse(
        loan_id=aggregate.loan.id,
        added=added,
        items=list(aggregate.custom_requirements),
    )
