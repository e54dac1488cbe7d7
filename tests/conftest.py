"""Global test fixtures and shared test infrastructure.

Provides:
- Environment variable defaults (must be set before any app import)
- Model factories (make_loan, make_document)
- Shared pytest fixtures for fresh in-memory stores and a test client
"""

from __future__ import annotations

import os

# Environment defaults: must be set before importing the app, which triggers
# pydantic Settings validation on import.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("RATE_LIMIT_STORAGE_URI", "memory://")

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from workbench.api.deps import install_stores
from workbench.core.limiter import build_limiter
from workbench.main import app
from workbench.schemas.documents import DocumentStatus, LoanDocument
from workbench.schemas.loan import Loan, LoanCreate
from workbench.services import loan_aggregate


# ---------------------------------------------------------------------------
# Model factories
# ---------------------------------------------------------------------------


# Worked example used across the DSCR and loan tests.
SCENARIO_LOAN: dict[str, Any] = dict(
    borrower_name="Jordan Rivera",
    property_address="123 Main St",
    loan_type="DSCR",
    lender="Kiavi",
    loan_amount=Decimal("850000"),
    property_value=Decimal("1200000"),
    interest_rate=Decimal("7.5"),
    monthly_rent=Decimal("4500"),
    annual_taxes=Decimal("12000"),
    annual_insurance=Decimal("2400"),
    annual_hoa=Decimal("0"),
    interest_only=False,
)


def make_loan(**overrides: Any) -> Loan:
    defaults = dict(SCENARIO_LOAN)
    defaults.update(overrides)
    return loan_aggregate.build_loan(LoanCreate(**defaults))


def make_document(
    *,
    loan_id: UUID | None = None,
    category: str = "Appraisal",
    status: DocumentStatus = DocumentStatus.UPLOADED,
    is_required: bool = True,
    file_name: str = "file.pdf",
    **overrides: Any,
) -> LoanDocument:
    defaults: dict[str, Any] = dict(
        id=uuid4(),
        loan_id=loan_id or uuid4(),
        category=category,
        status=status,
        is_required=is_required,
        file_name=file_name,
        file_type="application/pdf",
        file_size=1024,
        uploaded_by="processor@example.com",
        uploaded_at=datetime(2025, 1, 15, tzinfo=timezone.utc),
    )
    defaults.update(overrides)
    return LoanDocument(**defaults)


# ---------------------------------------------------------------------------
# Shared pytest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _fresh_state():
    """Isolate tests: fresh in-memory limiter and stores on the shared app."""
    original = app.state.limiter
    app.state.limiter = build_limiter(10_000, storage_uri="memory://")
    install_stores(app)
    yield
    app.state.limiter = original


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def created_loan(client) -> dict:
    payload = {key: str(value) if isinstance(value, Decimal) else value for key, value in SCENARIO_LOAN.items()}
    response = client.post("/api/v1/loans", json=payload)
    assert response.status_code == 201
    return response.json()["data"]
