import pytest

from workbench.services import requirement_catalog

BASELINE_REQUIRED = [
    "Application",
    "Purchase Agreement",
    "Bank Statements",
    "Credit Report",
    "Appraisal",
    "Title Report",
    "Insurance",
    "Government ID",
    "Entity Documents",
    "Proof of Funds",
]


def test_list_lenders_starts_with_baseline() -> None:
    lenders = requirement_catalog.list_lenders()
    assert lenders[0] == "Other"
    assert set(lenders) == {"Other", "Kiavi", "Visio", "ROC Capital", "AHL", "Velocity"}


def test_baseline_required_ids_in_catalog_order() -> None:
    assert requirement_catalog.get_required_ids("Other") == BASELINE_REQUIRED


@pytest.mark.parametrize(
    ("lender", "required_total", "funder_specific_required"),
    [
        ("Other", 10, 0),
        ("Kiavi", 12, 2),
        ("Visio", 12, 2),
        ("ROC Capital", 12, 2),
        ("AHL", 11, 1),
        ("Velocity", 12, 2),
    ],
)
def test_required_counts_per_lender(lender, required_total, funder_specific_required) -> None:
    assert requirement_catalog.get_required_document_count(lender) == required_total
    assert (
        requirement_catalog.get_funder_specific_count(lender, required_only=True)
        == funder_specific_required
    )


def test_required_count_matches_required_entries() -> None:
    for lender in requirement_catalog.list_lenders():
        entries = requirement_catalog.get_requirements_for_funder(lender)
        assert requirement_catalog.get_required_document_count(lender) == len(
            [item for item in entries if item.required]
        )


def test_requirement_ids_unique_per_lender() -> None:
    for lender in requirement_catalog.list_lenders():
        ids = [item.id for item in requirement_catalog.get_requirements_for_funder(lender)]
        assert len(ids) == len(set(ids))


def test_overlay_replaces_baseline_entry_in_place() -> None:
    baseline_ids = [item.id for item in requirement_catalog.get_requirements_for_funder("Other")]
    visio = requirement_catalog.get_requirements_for_funder("Visio")
    visio_ids = [item.id for item in visio]

    assert visio_ids.index("Lease Agreements") == baseline_ids.index("Lease Agreements")
    leases = requirement_catalog.get_requirement("Visio", "Lease Agreements")
    assert leases is not None
    assert leases.required is True
    assert leases.funder_specific is True
    assert visio_ids[-1] == "Visio Term Sheet"


def test_ahl_optional_funder_specific_entry_counts_only_without_filter() -> None:
    assert requirement_catalog.get_funder_specific_count("AHL") == 2
    assert requirement_catalog.get_funder_specific_count("AHL", required_only=True) == 1


def test_unknown_lender_uses_baseline() -> None:
    assert requirement_catalog.get_requirements_for_funder("Acme Lending") == (
        requirement_catalog.get_requirements_for_funder("Other")
    )
    assert requirement_catalog.resolve_lender("Acme Lending") == "Other"


@pytest.mark.parametrize("lender", [None, "", "   "])
def test_blank_lender_has_no_requirements(lender) -> None:
    assert requirement_catalog.get_requirements_for_funder(lender) == ()
    assert requirement_catalog.get_required_document_count(lender) == 0
    assert requirement_catalog.resolve_lender(lender) is None


def test_lender_lookup_ignores_case_and_spacing() -> None:
    assert requirement_catalog.resolve_lender("  roc   capital ") == "ROC Capital"
    assert requirement_catalog.get_requirements_for_funder("kiavi") == (
        requirement_catalog.get_requirements_for_funder("Kiavi")
    )


def test_lookups_are_stable_across_calls() -> None:
    first = requirement_catalog.get_requirements_for_funder("Kiavi")
    second = requirement_catalog.get_requirements_for_funder("Kiavi")
    assert first == second


def test_document_stage_table_and_default() -> None:
    assert requirement_catalog.get_document_stage("Appraisal") == "Underwriting"
    assert requirement_catalog.get_document_stage("Title Report") == "Closing"
    assert requirement_catalog.get_document_stage("Application") == "Initial"
    assert requirement_catalog.get_document_stage("Kiavi Borrower Authorization") == "Documents"


def test_category_display_name() -> None:
    assert requirement_catalog.get_category_display_name("Purchase Agreement") == "Purchase Contract"
    assert (
        requirement_catalog.get_category_display_name("Kiavi Borrower Authorization", "Kiavi")
        == "Kiavi Borrower Authorization Form"
    )
    assert requirement_catalog.get_category_display_name("HOA Questionnaire") == "HOA Questionnaire"
