"""Partition a loan's documents into missing, completed and unassigned."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from workbench.schemas.documents import (
    CatalogCategory,
    CustomCategory,
    DocumentClassification,
    DocumentStatus,
    DocumentSummary,
    DocumentView,
    LoanDocument,
    MissingRequirement,
)
from workbench.schemas.loan import Loan
from workbench.services import requirement_catalog

CUSTOM_REQUIREMENT_STAGE = "missing"
COMPLETED_STATUSES = {DocumentStatus.APPROVED.value, DocumentStatus.UPLOADED.value}


@dataclass(frozen=True)
class CustomRequirementError(ValueError):
    code: str
    message: str
    details: dict

    def __str__(self) -> str:
        return self.message


@dataclass
class CustomRequirementSet:
    """Ad-hoc requirements added to one loan, in the order they were added."""

    names: list[str] = field(default_factory=list)

    def __iter__(self):
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def add(self, name: str, *, lender: str | None = None) -> CatalogCategory | CustomCategory:
        cleaned = (name or "").strip()
        if not cleaned:
            raise CustomRequirementError(
                code="requirement_name_required",
                message="Please enter a requirement name",
                details={"field": "name"},
            )
        # Optional catalog ids are stored like any other custom name.
        if cleaned in requirement_catalog.get_required_ids(lender):
            return CatalogCategory(id=cleaned)
        if cleaned not in self.names:
            self.names.append(cleaned)
        return CustomCategory(name=cleaned)


def is_assigned(document: LoanDocument) -> bool:
    return document.is_required and document.status != DocumentStatus.REJECTED.value


def _fulfilled_categories(documents: Iterable[LoanDocument]) -> set[str]:
    return {doc.category for doc in documents if is_assigned(doc)}


def classify_documents(
    lender: str | None,
    documents: Sequence[LoanDocument],
    custom_requirements: Iterable[str] = (),
) -> DocumentClassification:
    requirements = [item for item in requirement_catalog.get_requirements_for_funder(lender) if item.required]
    assigned = [doc for doc in documents if is_assigned(doc)]
    fulfilled = _fulfilled_categories(assigned)

    missing: list[MissingRequirement] = [
        MissingRequirement(
            requirement=CatalogCategory(id=item.id),
            category=item.id,
            name=item.name,
            stage=requirement_catalog.get_document_stage(item.id),
            description=item.description,
        )
        for item in requirements
        if item.id not in fulfilled
    ]
    # A custom name equal to a catalog id is already covered by the catalog entry.
    seen_custom: set[str] = {item.id for item in requirements}
    for name in custom_requirements:
        if name in fulfilled or name in seen_custom:
            continue
        seen_custom.add(name)
        missing.append(
            MissingRequirement(
                requirement=CustomCategory(name=name),
                category=name,
                name=name,
                stage=CUSTOM_REQUIREMENT_STAGE,
            )
        )

    return DocumentClassification(
        missing=missing,
        completed=[doc for doc in assigned if doc.status in COMPLETED_STATUSES],
        unassigned=[doc for doc in documents if not doc.is_required],
    )


def classify(
    loan: Loan,
    documents: Sequence[LoanDocument],
    custom_requirements: Iterable[str] = (),
) -> DocumentClassification:
    return classify_documents(loan.lender, documents, custom_requirements)


def summarize(
    classification: DocumentClassification,
    documents: Sequence[LoanDocument],
    lender: str | None,
) -> DocumentSummary:
    return DocumentSummary(
        all=len(documents),
        missing=len(classification.missing),
        completed=len(classification.completed),
        required_total=requirement_catalog.get_required_document_count(lender),
        funder_specific=requirement_catalog.get_funder_specific_count(lender),
        funder_specific_required=requirement_catalog.get_funder_specific_count(lender, required_only=True),
    )


def _matches(document: LoanDocument, query: str) -> bool:
    needle = query.casefold()
    return needle in document.display_name.casefold() or needle in document.category.casefold()


def filter_documents(
    documents: Sequence[LoanDocument],
    classification: DocumentClassification,
    *,
    view: DocumentView = DocumentView.ALL,
    query: str | None = None,
) -> list[LoanDocument]:
    view = DocumentView(view)
    if view == DocumentView.ALL:
        items = list(documents)
    elif view == DocumentView.COMPLETED:
        items = list(classification.completed)
    else:
        # Missing requirements have no documents behind them.
        items = []
    if query and query.strip():
        items = [doc for doc in items if _matches(doc, query.strip())]
    return items
