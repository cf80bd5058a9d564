"""Report job descriptor schemas."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

HEX_COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"


class ReportType(str, Enum):
    """Document template variants."""

    SUMMARY = "summary"
    DETAILED = "detailed"


class ReportFormat(str, Enum):
    """Output container formats."""

    PDF = "pdf"
    DOCX = "docx"

    @property
    def content_type(self) -> str:
        if self is ReportFormat.PDF:
            return "application/pdf"
        return "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class ReportConfigPayload(BaseModel):
    """Caller-supplied rendering options."""

    model_config = ConfigDict(extra="ignore")

    branding_color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)
    prepared_for: str | None = None
    is_public: bool = False

    @field_validator("prepared_for")
    @classmethod
    def strip_prepared_for(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None


class ReportJobRequest(BaseModel):
    """Job descriptor handed to the report worker by the dispatcher."""

    model_config = ConfigDict(extra="ignore")

    report_id: str
    project_id: str
    crawl_id: str
    user_id: str
    type: ReportType = ReportType.SUMMARY
    format: ReportFormat = ReportFormat.PDF
    config: ReportConfigPayload = Field(default_factory=ReportConfigPayload)

