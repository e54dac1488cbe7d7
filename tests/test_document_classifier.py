from uuid import uuid4

import pytest

from conftest import make_document, make_loan

from workbench.schemas.documents import CatalogCategory, CustomCategory, DocumentStatus, DocumentView
from workbench.services import document_classifier, requirement_catalog


def _missing_categories(classification) -> list[str]:
    return [item.category for item in classification.missing]


@pytest.mark.parametrize("lender", ["Other", "Kiavi", "Visio", "ROC Capital", "AHL", "Velocity"])
def test_no_documents_means_every_required_item_is_missing(lender) -> None:
    classification = document_classifier.classify_documents(lender, [])
    assert len(classification.missing) == requirement_catalog.get_required_document_count(lender)
    assert classification.completed == []
    assert classification.unassigned == []


def test_kiavi_approved_appraisal_is_completed_once() -> None:
    doc = make_document(category="Appraisal", status=DocumentStatus.APPROVED)
    classification = document_classifier.classify_documents("Kiavi", [doc])

    assert "Appraisal" not in _missing_categories(classification)
    assert [item.id for item in classification.completed] == [doc.id]
    assert len(classification.missing) == 11


def test_rejected_document_does_not_fulfil_requirement() -> None:
    doc = make_document(category="Appraisal", status=DocumentStatus.REJECTED)
    classification = document_classifier.classify_documents("Kiavi", [doc])

    assert "Appraisal" in _missing_categories(classification)
    assert classification.completed == []
    # Still assigned, so it is not in the unassigned pool either.
    assert classification.unassigned == []


def test_uploaded_assigned_document_counts_as_completed() -> None:
    doc = make_document(category="Insurance", status=DocumentStatus.UPLOADED)
    classification = document_classifier.classify_documents("Other", [doc])
    assert "Insurance" not in _missing_categories(classification)
    assert classification.completed == [doc]


def test_multiple_documents_fulfilling_one_category_all_complete() -> None:
    first = make_document(category="Bank Statements", file_name="march.pdf")
    second = make_document(category="Bank Statements", file_name="april.pdf")
    classification = document_classifier.classify_documents("Other", [first, second])

    assert "Bank Statements" not in _missing_categories(classification)
    assert [doc.file_name for doc in classification.completed] == ["march.pdf", "april.pdf"]


def test_unassigned_documents_do_not_fulfil_requirements() -> None:
    doc = make_document(category="Appraisal", is_required=False)
    classification = document_classifier.classify_documents("Other", [doc])

    assert "Appraisal" in _missing_categories(classification)
    assert classification.unassigned == [doc]
    assert classification.completed == []


def test_document_with_unknown_category_completes_nothing() -> None:
    doc = make_document(category="Photos")
    classification = document_classifier.classify_documents("Other", [doc])

    assert len(classification.missing) == 10
    assert classification.completed == [doc]


def test_missing_entries_carry_name_stage_and_kind() -> None:
    classification = document_classifier.classify_documents("Kiavi", [])
    by_category = {item.category: item for item in classification.missing}

    appraisal = by_category["Appraisal"]
    assert appraisal.stage == "Underwriting"
    assert appraisal.requirement == CatalogCategory(id="Appraisal")

    authorization = by_category["Kiavi Borrower Authorization"]
    assert authorization.name == "Kiavi Borrower Authorization Form"
    assert authorization.stage == "Documents"


def test_custom_requirements_appended_after_catalog() -> None:
    classification = document_classifier.classify_documents(
        "Other",
        [],
        ["HOA Questionnaire", "Appraisal", "HOA Questionnaire"],
    )
    custom = [item for item in classification.missing if item.requirement.kind == "custom"]

    assert [item.category for item in custom] == ["HOA Questionnaire"]
    assert custom[0].stage == document_classifier.CUSTOM_REQUIREMENT_STAGE
    assert classification.missing[-1].requirement == CustomCategory(name="HOA Questionnaire")
    assert len(classification.missing) == 11


def test_custom_requirement_fulfilled_by_assigned_document() -> None:
    doc = make_document(category="HOA Questionnaire")
    classification = document_classifier.classify_documents("Other", [doc], ["HOA Questionnaire"])
    assert "HOA Questionnaire" not in _missing_categories(classification)


def test_blank_lender_only_reports_custom_requirements() -> None:
    classification = document_classifier.classify_documents(None, [], ["Survey"])
    assert _missing_categories(classification) == ["Survey"]


def test_classify_is_idempotent() -> None:
    loan = make_loan()
    docs = [
        make_document(loan_id=loan.id, category="Appraisal", status=DocumentStatus.APPROVED),
        make_document(loan_id=loan.id, category="Title Report", is_required=False),
    ]
    first = document_classifier.classify(loan, docs, ["Survey"])
    second = document_classifier.classify(loan, docs, ["Survey"])
    assert first == second
    assert first.model_dump() == second.model_dump()


def test_classify_does_not_mutate_inputs() -> None:
    loan = make_loan()
    docs = [make_document(loan_id=loan.id, category="Appraisal")]
    snapshot = [doc.model_dump() for doc in docs]
    document_classifier.classify(loan, docs)
    assert [doc.model_dump() for doc in docs] == snapshot


def test_summary_counts() -> None:
    docs = [
        make_document(category="Appraisal", status=DocumentStatus.APPROVED),
        make_document(category="Insurance", is_required=False),
    ]
    classification = document_classifier.classify_documents("Kiavi", docs)
    summary = document_classifier.summarize(classification, docs, "Kiavi")

    assert summary.all == 2
    assert summary.missing == 11
    assert summary.completed == 1
    assert summary.required_total == 12
    assert summary.funder_specific == 2
    assert summary.funder_specific_required == 2


class TestCustomRequirementSet:
    def test_add_trims_and_deduplicates(self) -> None:
        requirements = document_classifier.CustomRequirementSet()
        assert requirements.add("  Survey ") == CustomCategory(name="Survey")
        requirements.add("Survey")
        assert list(requirements) == ["Survey"]
        assert "Survey" in requirements
        assert len(requirements) == 1

    def test_catalog_id_resolves_to_catalog_category(self) -> None:
        requirements = document_classifier.CustomRequirementSet()
        added = requirements.add("Kiavi Background Consent", lender="Kiavi")
        assert added == CatalogCategory(id="Kiavi Background Consent")
        assert len(requirements) == 0

    def test_optional_catalog_id_is_stored_as_custom(self) -> None:
        requirements = document_classifier.CustomRequirementSet()
        added = requirements.add("Lease Agreements", lender="Other")
        assert added == CustomCategory(name="Lease Agreements")
        assert list(requirements) == ["Lease Agreements"]

        classification = document_classifier.classify_documents("Other", [], requirements)
        missing = [item for item in classification.missing if item.category == "Lease Agreements"]
        assert len(missing) == 1
        assert missing[0].requirement == CustomCategory(name="Lease Agreements")

    def test_overridden_required_id_stays_catalog(self) -> None:
        requirements = document_classifier.CustomRequirementSet()
        added = requirements.add("Lease Agreements", lender="Visio")
        assert added == CatalogCategory(id="Lease Agreements")
        assert len(requirements) == 0

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name_rejected(self, name) -> None:
        requirements = document_classifier.CustomRequirementSet()
        with pytest.raises(document_classifier.CustomRequirementError) as excinfo:
            requirements.add(name)
        assert excinfo.value.code == "requirement_name_required"


class TestFilterDocuments:
    def _documents(self):
        loan_id = uuid4()
        return [
            make_document(loan_id=loan_id, category="Appraisal", file_name="appraisal.pdf"),
            make_document(
                loan_id=loan_id,
                category="Bank Statements",
                file_name="march.pdf",
                custom_name="Chase",
            ),
            make_document(loan_id=loan_id, category="Insurance", file_name="binder.pdf", is_required=False),
        ]

    def test_all_view_returns_everything(self) -> None:
        docs = self._documents()
        classification = document_classifier.classify_documents("Other", docs)
        assert document_classifier.filter_documents(docs, classification) == docs

    def test_completed_view(self) -> None:
        docs = self._documents()
        classification = document_classifier.classify_documents("Other", docs)
        items = document_classifier.filter_documents(docs, classification, view=DocumentView.COMPLETED)
        assert [doc.file_name for doc in items] == ["appraisal.pdf", "march.pdf"]

    def test_missing_view_has_no_documents(self) -> None:
        docs = self._documents()
        classification = document_classifier.classify_documents("Other", docs)
        assert document_classifier.filter_documents(docs, classification, view="missing") == []

    def test_query_matches_display_name_or_category(self) -> None:
        docs = self._documents()
        classification = document_classifier.classify_documents("Other", docs)
        by_name = document_classifier.filter_documents(docs, classification, query="chase")
        by_category = document_classifier.filter_documents(docs, classification, query="insur")
        assert [doc.file_name for doc in by_name] == ["march.pdf"]
        assert [doc.file_name for doc in by_category] == ["binder.pdf"]
