from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable
from uuid import UUID, uuid4

from workbench.core.logging import get_audit_logger
from workbench.schemas.documents import DocumentMetadata, DocumentStatus, LoanDocument
from workbench.services import requirement_catalog
from workbench.services.document_classifier import is_assigned
from workbench.services.stores import DocumentStore

logger = logging.getLogger(__name__)
audit_logger = get_audit_logger()


@dataclass(frozen=True)
class DocumentLifecycleError(ValueError):
    code: str
    message: str
    details: dict

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class DocumentNotFoundError(LookupError):
    document_id: UUID
    loan_id: UUID | None = None

    code = "document_not_found"

    @property
    def message(self) -> str:
        return "Document not found"

    @property
    def details(self) -> dict:
        return {"document_id": str(self.document_id)}

    def __str__(self) -> str:
        return f"{self.message}: {self.document_id}"


# -- pure commands ----------------------------------------------------------


def upload(
    loan_id: UUID,
    metadata: DocumentMetadata,
    category: str,
    notes: str = "",
    required_ids: Iterable[str] = (),
    *,
    uploaded_at: datetime | None = None,
) -> LoanDocument:
    category = (category or "").strip()
    if not category:
        raise DocumentLifecycleError(
            code="category_required",
            message="Please select a file and category",
            details={"field": "category"},
        )
    return LoanDocument(
        id=uuid4(),
        loan_id=loan_id,
        category=category,
        status=DocumentStatus.UPLOADED,
        is_required=category in set(required_ids),
        notes=notes or "",
        file_name=metadata.file_name,
        custom_name=(metadata.custom_name or "").strip() or None,
        file_type=metadata.file_type,
        file_size=metadata.file_size,
        uploaded_by=metadata.uploaded_by,
        uploaded_at=uploaded_at or datetime.now(timezone.utc),
    )


def assign(document: LoanDocument, category: str) -> LoanDocument:
    """Attach ``document`` to a requirement; assignment always forces re-review."""
    category = (category or "").strip()
    if not category:
        raise DocumentLifecycleError(
            code="category_required",
            message="A requirement category is required to assign a document",
            details={"field": "category", "document_id": str(document.id)},
        )
    return document.model_copy(
        update={"category": category, "is_required": True, "status": DocumentStatus.UPLOADED.value}
    )


def unassign(document: LoanDocument) -> LoanDocument:
    # The document keeps its former category while it sits in the unassigned pool.
    return document.model_copy(update={"is_required": False, "status": DocumentStatus.UPLOADED.value})


def approve(document: LoanDocument) -> LoanDocument:
    return document.model_copy(update={"status": DocumentStatus.APPROVED.value})


def reject(document: LoanDocument) -> LoanDocument:
    return document.model_copy(update={"status": DocumentStatus.REJECTED.value})


def reset_all(documents: Iterable[LoanDocument]) -> list[LoanDocument]:
    """Unassign every currently assigned document; returns only the changed ones."""
    return [unassign(doc) for doc in documents if is_assigned(doc)]


# -- store-bound commands ---------------------------------------------------


def _load(store: DocumentStore, loan_id: UUID, document_id: UUID) -> LoanDocument:
    document = store.get(document_id)
    if document is None or document.loan_id != loan_id:
        raise DocumentNotFoundError(document_id=document_id, loan_id=loan_id)
    return document


def _commit(store: DocumentStore, before: LoanDocument, after: LoanDocument, action: str) -> LoanDocument:
    changes = {
        name: getattr(after, name)
        for name in ("category", "is_required", "status")
        if getattr(before, name) != getattr(after, name)
    }
    saved = store.update(after.id, changes) if changes else before
    if saved is None:
        raise DocumentNotFoundError(document_id=after.id, loan_id=after.loan_id)
    audit_logger.info(
        "loan_document.%s",
        action,
        extra={
            "document_id": str(saved.id),
            "old_value": {name: getattr(before, name) for name in changes},
            "new_value": changes,
        },
    )
    return saved


def upload_document(
    store: DocumentStore,
    *,
    loan_id: UUID,
    lender: str | None,
    metadata: DocumentMetadata,
    category: str,
    notes: str = "",
) -> LoanDocument:
    document = upload(
        loan_id,
        metadata,
        category,
        notes,
        requirement_catalog.get_required_ids(lender),
    )
    saved = store.add(document)
    logger.info(
        "Document uploaded",
        extra={
            "document_id": str(saved.id),
            "category": saved.category,
            "is_required": saved.is_required,
        },
    )
    return saved


def assign_document(store: DocumentStore, *, loan_id: UUID, document_id: UUID, category: str) -> LoanDocument:
    document = _load(store, loan_id, document_id)
    return _commit(store, document, assign(document, category), "assigned")


def unassign_document(store: DocumentStore, *, loan_id: UUID, document_id: UUID) -> LoanDocument:
    document = _load(store, loan_id, document_id)
    return _commit(store, document, unassign(document), "unassigned")


def approve_document(store: DocumentStore, *, loan_id: UUID, document_id: UUID) -> LoanDocument:
    document = _load(store, loan_id, document_id)
    return _commit(store, document, approve(document), "approved")


def reject_document(store: DocumentStore, *, loan_id: UUID, document_id: UUID) -> LoanDocument:
    document = _load(store, loan_id, document_id)
    return _commit(store, document, reject(document), "rejected")


def reset_document_assignments(store: DocumentStore, *, loan_id: UUID) -> list[LoanDocument]:
    current = {doc.id: doc for doc in store.list(loan_id)}
    reset = [_commit(store, current[doc.id], doc, "unassigned") for doc in reset_all(current.values())]
    logger.info("Document assignments reset", extra={"reset_count": len(reset)})
    return reset
