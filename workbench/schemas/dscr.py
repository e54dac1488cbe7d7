from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class DSCRBand(str, Enum):
    STRONG = "Strong"
    ACCEPTABLE = "Acceptable"
    BELOW_THRESHOLD = "Below Threshold"


class DSCRRequest(BaseModel):
    """Ad-hoc calculator input; amounts may arrive formatted (``"850,000"``)."""

    loan_amount: Decimal | str | None = None
    interest_rate: Decimal | str | None = None
    monthly_rent: Decimal | str | None = None
    annual_taxes: Decimal | str | None = None
    annual_insurance: Decimal | str | None = None
    annual_hoa: Decimal | str | None = None
    interest_only: bool = False


class DSCRBreakdown(BaseModel):
    model_config = ConfigDict(use_enum_values=True, frozen=True)

    interest_only: bool
    term_months: int
    monthly_debt_service: Decimal
    annual_debt_service: Decimal
    annual_income: Decimal
    annual_expenses: Decimal
    noi: Decimal
    dscr: Decimal
    band: DSCRBand


class InterestOnlyImpact(BaseModel):
    model_config = ConfigDict(use_enum_values=True, frozen=True)

    interest_only: bool
    previous_dscr: Decimal
    dscr: Decimal
    delta: Decimal = Field(description="dscr - previous_dscr")
