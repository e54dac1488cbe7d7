from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field


class DocumentStatus(str, Enum):
    UPLOADED = "Uploaded"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class DocumentView(str, Enum):
    ALL = "all"
    MISSING = "missing"
    COMPLETED = "completed"


class RequirementDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: str
    required: bool = True
    funder_specific: bool = False
    description: str = ""


class CatalogCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["catalog"] = "catalog"
    id: str

    @property
    def key(self) -> str:
        return self.id


class CustomCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["custom"] = "custom"
    name: str

    @property
    def key(self) -> str:
        return self.name


CategoryRef = Annotated[Union[CatalogCategory, CustomCategory], Field(discriminator="kind")]


class DocumentMetadata(BaseModel):
    """What the upload collaborator tells us about a stored file."""

    file_name: str = Field(min_length=1, max_length=255)
    custom_name: str | None = Field(default=None, max_length=255)
    file_type: str | None = None
    file_size: int | None = Field(default=None, ge=0)
    uploaded_by: str | None = None


class DocumentUpload(DocumentMetadata):
    category: str = ""
    notes: str = ""


class DocumentAssign(BaseModel):
    category: str = Field(min_length=1)


class LoanDocument(BaseModel):
    model_config = ConfigDict(use_enum_values=True, frozen=True)

    id: UUID
    loan_id: UUID
    category: str
    status: DocumentStatus = DocumentStatus.UPLOADED
    is_required: bool = False
    notes: str = ""
    file_name: str
    custom_name: str | None = None
    file_type: str | None = None
    file_size: int | None = None
    uploaded_by: str | None = None
    uploaded_at: datetime | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_name(self) -> str:
        if self.custom_name:
            return f"{self.custom_name} - {self.file_name}"
        return self.file_name


class MissingRequirement(BaseModel):
    model_config = ConfigDict(frozen=True)

    requirement: CategoryRef
    category: str
    name: str
    stage: str
    description: str = ""


class DocumentClassification(BaseModel):
    model_config = ConfigDict(frozen=True)

    missing: list[MissingRequirement]
    completed: list[LoanDocument]
    unassigned: list[LoanDocument]


class DocumentSummary(BaseModel):
    all: int
    missing: int
    completed: int
    required_total: int
    funder_specific: int
    funder_specific_required: int


class DocumentClassificationResponse(BaseModel):
    lender: str | None
    classification: DocumentClassification
    summary: DocumentSummary


class DocumentListResponse(BaseModel):
    items: list[LoanDocument]
    total: int


class LenderRequirementsResponse(BaseModel):
    lender: str
    items: list[RequirementDescriptor]
    total: int
    required_total: int
    funder_specific_required: int


class CustomRequirementCreate(BaseModel):
    name: str = Field(max_length=255)
    description: str | None = None


class CustomRequirementsResponse(BaseModel):
    loan_id: UUID
    added: CategoryRef
    items: list[str]
