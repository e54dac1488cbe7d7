from __future__ import annotations

from typing import Any, Protocol
from uuid import UUID

from workbench.schemas.documents import LoanDocument
from workbench.schemas.loan import Loan
from workbench.services.document_classifier import CustomRequirementSet


class DocumentStore(Protocol):
    def add(self, document: LoanDocument) -> LoanDocument: ...

    def update(self, document_id: UUID, fields: dict[str, Any]) -> LoanDocument | None: ...

    def get(self, document_id: UUID) -> LoanDocument | None: ...

    def list(self, loan_id: UUID) -> list[LoanDocument]: ...


class LoanStore(Protocol):
    def add(self, loan: Loan) -> Loan: ...

    def update(self, loan_id: UUID, fields: dict[str, Any]) -> Loan | None: ...

    def get(self, loan_id: UUID) -> Loan | None: ...


class InMemoryDocumentStore:
    """Insertion-ordered document store used by the API and tests."""

    def __init__(self, documents: list[LoanDocument] | None = None) -> None:
        self._documents: dict[UUID, LoanDocument] = {}
        for document in documents or []:
            self.add(document)

    def add(self, document: LoanDocument) -> LoanDocument:
        self._documents[document.id] = document
        return document

    def update(self, document_id: UUID, fields: dict[str, Any]) -> LoanDocument | None:
        current = self._documents.get(document_id)
        if current is None:
            return None
        updated = current.model_copy(update=fields)
        self._documents[document_id] = updated
        return updated

    def get(self, document_id: UUID) -> LoanDocument | None:
        return self._documents.get(document_id)

    def list(self, loan_id: UUID) -> list[LoanDocument]:
        return [doc for doc in self._documents.values() if doc.loan_id == loan_id]


class InMemoryLoanStore:
    def __init__(self, loans: list[Loan] | None = None) -> None:
        self._loans: dict[UUID, Loan] = {}
        for loan in loans or []:
            self.add(loan)

    def add(self, loan: Loan) -> Loan:
        self._loans[loan.id] = loan
        return loan

    def update(self, loan_id: UUID, fields: dict[str, Any]) -> Loan | None:
        current = self._loans.get(loan_id)
        if current is None:
            return None
        updated = current.model_copy(update=fields)
        self._loans[loan_id] = updated
        return updated

    def get(self, loan_id: UUID) -> Loan | None:
        return self._loans.get(loan_id)


class InMemoryCustomRequirementStore:
    """Per-loan custom requirement sets, created on first access."""

    def __init__(self) -> None:
        self._sets: dict[UUID, CustomRequirementSet] = {}

    def for_loan(self, loan_id: UUID) -> CustomRequirementSet:
        return self._sets.setdefault(loan_id, CustomRequirementSet())
