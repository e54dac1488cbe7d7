from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from workbench.schemas.dscr import DSCRBand


class DealStage(str, Enum):
    NEW = "New"
    DOCUMENTS = "Documents"
    REVIEW = "Review"
    UNDERWRITING = "Underwriting"
    APPROVED = "Approved"
    CLOSING = "Closing"
    FUNDED = "Funded"
    CANCELLED = "Cancelled"


class LoanBase(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    borrower_name: str = ""
    borrower_email: str | None = None
    borrower_phone: str | None = None
    borrowing_entity: str | None = None
    property_address: str = ""
    property_city: str | None = None
    property_state: str | None = None
    property_zip: str | None = None
    property_type: str | None = None
    occupancy_type: str | None = None
    loan_type: str = "DSCR"
    deal_stage: DealStage = DealStage.NEW
    target_close_date: date | None = None
    notes: str | None = None
    lender: str | None = None
    loan_amount: Decimal | None = Field(default=None, ge=0)
    property_value: Decimal | None = Field(default=None, ge=0)
    interest_only: bool = False
    interest_rate: Decimal | None = Field(default=None, ge=0)
    monthly_rent: Decimal | None = Field(default=None, ge=0)
    annual_taxes: Decimal | None = Field(default=None, ge=0)
    annual_insurance: Decimal | None = Field(default=None, ge=0)
    annual_hoa: Decimal | None = Field(default=None, ge=0)


class LoanCreate(LoanBase):
    # Derived values sent by a client (``dscr``, ``ltv``) are dropped.
    model_config = ConfigDict(use_enum_values=True, extra="ignore")

    borrower_name: str = Field(min_length=1)
    loan_amount: Decimal = Field(gt=0)
    property_value: Decimal = Field(gt=0)


class LoanUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, extra="ignore")

    borrower_name: str | None = Field(default=None, min_length=1)
    borrower_email: str | None = None
    borrower_phone: str | None = None
    borrowing_entity: str | None = None
    property_address: str | None = None
    property_city: str | None = None
    property_state: str | None = None
    property_zip: str | None = None
    property_type: str | None = None
    occupancy_type: str | None = None
    loan_type: str | None = None
    deal_stage: DealStage | None = None
    target_close_date: date | None = None
    notes: str | None = None
    lender: str | None = None
    loan_amount: Decimal | None = Field(default=None, ge=0)
    property_value: Decimal | None = Field(default=None, ge=0)
    interest_only: bool | None = None
    interest_rate: Decimal | None = Field(default=None, ge=0)
    monthly_rent: Decimal | None = Field(default=None, ge=0)
    annual_taxes: Decimal | None = Field(default=None, ge=0)
    annual_insurance: Decimal | None = Field(default=None, ge=0)
    annual_hoa: Decimal | None = Field(default=None, ge=0)


class Loan(LoanBase):
    model_config = ConfigDict(use_enum_values=True, frozen=True)

    id: UUID
    ltv: Decimal = Decimal("0")
    dscr: Decimal = Decimal("0")
    dscr_band: DSCRBand = DSCRBand.BELOW_THRESHOLD
    title: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
