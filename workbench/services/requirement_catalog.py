"""Static per-lender document requirement tables.

Every lender table is the generic DSCR baseline with a lender overlay applied.
Overlay entries that reuse a baseline id replace that entry in place; new ids
are appended after the baseline, so ordering is stable across calls.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, Mapping

from workbench.schemas.documents import RequirementDescriptor

logger = logging.getLogger(__name__)

BASELINE_KEY = "Other"
DEFAULT_STAGE = "Documents"

_STAGES: Mapping[str, str] = MappingProxyType(
    {
        "Application": "Initial",
        "Income Verification": "Documents",
        "Tax Returns": "Documents",
        "Bank Statements": "Documents",
        "Credit Report": "Review",
        "Appraisal": "Underwriting",
        "Title Report": "Closing",
        "Insurance": "Closing",
        "Purchase Agreement": "Initial",
    }
)


def _req(
    id: str,
    name: str,
    category: str,
    *,
    required: bool = True,
    funder_specific: bool = False,
    description: str = "",
) -> RequirementDescriptor:
    return RequirementDescriptor(
        id=id,
        name=name,
        category=category,
        required=required,
        funder_specific=funder_specific,
        description=description,
    )


BASELINE_REQUIREMENTS: tuple[RequirementDescriptor, ...] = (
    _req("Application", "Loan Application", "Application", description="Signed loan application"),
    _req("Purchase Agreement", "Purchase Contract", "Property", description="Fully executed purchase contract"),
    _req("Bank Statements", "Bank Statements (2 months)", "Financial", description="Two most recent months, all pages"),
    _req("Credit Report", "Credit Authorization", "Borrower", description="Signed authorization to pull credit"),
    _req("Appraisal", "Appraisal", "Property", description="Appraisal with rent schedule (Form 1007)"),
    _req("Title Report", "Title Report", "Closing", description="Preliminary title commitment"),
    _req("Insurance", "Property Insurance", "Property", description="Hazard insurance quote or binder"),
    _req("Government ID", "Government ID (Front & Back)", "Borrower"),
    _req("Entity Documents", "Entity Documents (Articles, Operating Agreement)", "Borrower"),
    _req("Proof of Funds", "Proof of Funds for Down Payment", "Financial"),
    _req("Lease Agreements", "Rent Roll / Lease Agreements", "Property", required=False),
    _req("REO Schedule", "REO Schedule", "Financial", required=False),
    _req("Track Record", "Track Record / Experience", "Financial", required=False),
)

_OVERLAYS: dict[str, tuple[RequirementDescriptor, ...]] = {
    "Kiavi": (
        _req(
            "Kiavi Borrower Authorization",
            "Kiavi Borrower Authorization Form",
            "Lender",
            funder_specific=True,
            description="Download from the Kiavi portal and have every guarantor sign",
        ),
        _req(
            "Kiavi Background Consent",
            "Kiavi Background & Credit Consent",
            "Lender",
            funder_specific=True,
        ),
    ),
    "Visio": (
        _req(
            "Lease Agreements",
            "Executed Lease Agreements",
            "Property",
            funder_specific=True,
            description="Visio sizes on in-place rent; leases are required for occupied units",
        ),
        _req("Visio Term Sheet", "Signed Visio Term Sheet", "Lender", funder_specific=True),
    ),
    "ROC Capital": (
        _req(
            "REO Schedule",
            "REO Schedule (ROC template)",
            "Financial",
            funder_specific=True,
            description="ROC requires its own REO template",
        ),
        _req("ROC Borrower Questionnaire", "ROC Borrower Questionnaire", "Lender", funder_specific=True),
    ),
    "AHL": (
        _req("AHL Borrower Certification", "AHL Borrower Certification", "Lender", funder_specific=True),
        _req(
            "AHL Operating History",
            "AHL Property Operating History",
            "Property",
            required=False,
            funder_specific=True,
        ),
    ),
    "Velocity": (
        _req(
            "Velocity Business Purpose Affidavit",
            "Velocity Business Purpose Affidavit",
            "Lender",
            funder_specific=True,
        ),
        _req(
            "Velocity Occupancy Certification",
            "Velocity Non-Owner Occupancy Certification",
            "Lender",
            funder_specific=True,
        ),
    ),
}


def _apply_overlay(
    baseline: Iterable[RequirementDescriptor],
    overlay: Iterable[RequirementDescriptor],
) -> tuple[RequirementDescriptor, ...]:
    merged = {item.id: item for item in baseline}
    for item in overlay:
        merged[item.id] = item
    return tuple(merged.values())


def _normalize(lender: str) -> str:
    return " ".join(lender.split()).casefold()


def _build_catalog() -> Mapping[str, tuple[RequirementDescriptor, ...]]:
    tables: dict[str, tuple[RequirementDescriptor, ...]] = {BASELINE_KEY: BASELINE_REQUIREMENTS}
    for lender, overlay in _OVERLAYS.items():
        tables[lender] = _apply_overlay(BASELINE_REQUIREMENTS, overlay)
    for lender, table in tables.items():
        ids = [item.id for item in table]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate requirement ids in catalog for {lender}")
    return MappingProxyType(tables)


_CATALOG = _build_catalog()
_LENDER_INDEX: Mapping[str, str] = MappingProxyType({_normalize(key): key for key in _CATALOG})


def list_lenders() -> list[str]:
    return list(_CATALOG.keys())


def resolve_lender(lender: str | None) -> str | None:
    """Canonical catalog key for ``lender``.

    Returns ``None`` for a blank lender and the baseline key for a lender the
    catalog does not know.
    """
    if lender is None or not str(lender).strip():
        return None
    key = _LENDER_INDEX.get(_normalize(str(lender)))
    if key is None:
        logger.debug("Unknown lender %r, using baseline requirements", lender)
        return BASELINE_KEY
    return key


def get_requirements_for_funder(lender: str | None) -> tuple[RequirementDescriptor, ...]:
    key = resolve_lender(lender)
    if key is None:
        return ()
    return _CATALOG[key]


def get_required_ids(lender: str | None) -> list[str]:
    return [item.id for item in get_requirements_for_funder(lender) if item.required]


def get_required_document_count(lender: str | None) -> int:
    return sum(1 for item in get_requirements_for_funder(lender) if item.required)


def get_funder_specific_count(lender: str | None, *, required_only: bool = False) -> int:
    return sum(
        1
        for item in get_requirements_for_funder(lender)
        if item.funder_specific and (item.required or not required_only)
    )


def get_requirement(lender: str | None, requirement_id: str) -> RequirementDescriptor | None:
    for item in get_requirements_for_funder(lender):
        if item.id == requirement_id:
            return item
    return None


def get_document_stage(category: str) -> str:
    return _STAGES.get(category, DEFAULT_STAGE)


def get_category_display_name(category: str, lender: str | None = None) -> str:
    requirement = get_requirement(lender or BASELINE_KEY, category)
    return requirement.name if requirement else category
