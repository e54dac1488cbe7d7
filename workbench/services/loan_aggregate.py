from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Sequence
from uuid import UUID, uuid4

from workbench.core.logging import get_audit_logger
from workbench.schemas.documents import (
    CatalogCategory,
    CustomCategory,
    DocumentClassification,
    DocumentSummary,
    LoanDocument,
)
from workbench.schemas.loan import Loan, LoanCreate, LoanUpdate
from workbench.services import document_classifier, dscr_calculator
from workbench.services.document_classifier import CustomRequirementSet
from workbench.services.stores import LoanStore

logger = logging.getLogger(__name__)
audit_logger = get_audit_logger()

# Inputs that may be cleared with null; everything else keeps its value.
NULLABLE_FIELDS = frozenset(
    {
        "borrower_email",
        "borrower_phone",
        "borrowing_entity",
        "property_city",
        "property_state",
        "property_zip",
        "property_type",
        "occupancy_type",
        "target_close_date",
        "notes",
        "lender",
        "loan_amount",
        "property_value",
        "interest_rate",
        "monthly_rent",
        "annual_taxes",
        "annual_insurance",
        "annual_hoa",
    }
)
DERIVED_FIELDS = frozenset({"dscr", "dscr_band", "ltv", "title"})


@dataclass(frozen=True)
class LoanNotFoundError(LookupError):
    loan_id: UUID

    code = "loan_not_found"

    @property
    def message(self) -> str:
        return "Loan not found"

    @property
    def details(self) -> dict:
        return {"loan_id": str(self.loan_id)}

    def __str__(self) -> str:
        return f"{self.message}: {self.loan_id}"


def derive_fields(values: dict[str, Any]) -> dict[str, Any]:
    """DSCR, band, LTV and title computed from the raw loan inputs."""
    breakdown = dscr_calculator.build_dscr_breakdown(
        values.get("loan_amount"),
        values.get("interest_rate"),
        values.get("monthly_rent"),
        values.get("annual_taxes"),
        values.get("annual_insurance"),
        values.get("annual_hoa"),
        bool(values.get("interest_only")),
    )
    return {
        "dscr": breakdown.dscr,
        "dscr_band": breakdown.band,
        "ltv": dscr_calculator.calculate_ltv(values.get("loan_amount"), values.get("property_value")),
        "title": f"{values.get('property_address') or ''} - {values.get('loan_type') or ''}",
    }


def build_loan(payload: LoanCreate, *, loan_id: UUID | None = None, now: datetime | None = None) -> Loan:
    now = now or datetime.now(timezone.utc)
    values = payload.model_dump()
    values.update(derive_fields(values))
    return Loan(id=loan_id or uuid4(), created_at=now, updated_at=now, **values)


def apply_update(loan: Loan, updates: LoanUpdate | dict[str, Any], *, now: datetime | None = None) -> Loan:
    """New loan record with ``updates`` merged and every derived field recomputed."""
    if isinstance(updates, LoanUpdate):
        changes = updates.model_dump(exclude_unset=True)
    else:
        changes = LoanUpdate(**updates).model_dump(exclude_unset=True)
    values = loan.model_dump(exclude=set(DERIVED_FIELDS))
    values.update({name: value for name, value in changes.items() if value is not None or name in NULLABLE_FIELDS})
    values.update(derive_fields(values))
    values["updated_at"] = now or datetime.now(timezone.utc)
    return Loan(**values)


@dataclass
class LoanAggregate:
    """Authoritative loan record plus the per-loan custom requirement set."""

    loan: Loan
    custom_requirements: CustomRequirementSet = field(default_factory=CustomRequirementSet)

    @classmethod
    def create(cls, payload: LoanCreate) -> "LoanAggregate":
        return cls(loan=build_loan(payload))

    def update(self, updates: LoanUpdate | dict[str, Any]) -> Loan:
        before = self.loan
        after = apply_update(before, updates)
        self.loan = after
        if before.interest_only != after.interest_only:
            impact = dscr_calculator.interest_only_impact(
                after.loan_amount,
                after.interest_rate,
                after.monthly_rent,
                after.annual_taxes,
                after.annual_insurance,
                after.annual_hoa,
                interest_only=after.interest_only,
            )
            logger.info(
                "Interest only %s: DSCR %s -> %s",
                "enabled" if after.interest_only else "disabled",
                impact.previous_dscr,
                impact.dscr,
            )
        return after

    def add_custom_requirement(self, name: str) -> CatalogCategory | CustomCategory:
        return self.custom_requirements.add(name, lender=self.loan.lender)

    def classify(self, documents: Sequence[LoanDocument]) -> DocumentClassification:
        return document_classifier.classify(self.loan, documents, self.custom_requirements)

    def summary(self, documents: Sequence[LoanDocument]) -> DocumentSummary:
        return document_classifier.summarize(self.classify(documents), documents, self.loan.lender)


# -- store-bound helpers ----------------------------------------------------


def get_loan(store: LoanStore, loan_id: UUID) -> Loan:
    loan = store.get(loan_id)
    if loan is None:
        raise LoanNotFoundError(loan_id=loan_id)
    return loan


def create_loan(store: LoanStore, payload: LoanCreate) -> Loan:
    loan = store.add(build_loan(payload))
    audit_logger.info(
        "loan.created",
        extra={"loan": str(loan.id), "dscr": str(loan.dscr), "ltv": str(loan.ltv), "lender": loan.lender},
    )
    return loan


def update_loan(store: LoanStore, loan_id: UUID, updates: LoanUpdate) -> Loan:
    aggregate = LoanAggregate(loan=get_loan(store, loan_id))
    before = aggregate.loan
    after = aggregate.update(updates)
    fields = {
        name: getattr(after, name)
        for name in Loan.model_fields
        if getattr(before, name) != getattr(after, name)
    }
    saved = store.update(loan_id, fields)
    if saved is None:
        raise LoanNotFoundError(loan_id=loan_id)
    audit_logger.info(
        "loan.updated",
        extra={
            "loan": str(loan_id),
            "changed": sorted(name for name in fields if name != "updated_at"),
            "dscr": str(saved.dscr),
            "ltv": str(saved.ltv),
        },
    )
    return saved
