"""Exception taxonomy for the report engine.

Missing optional data is never an error: it is modelled as ``None`` or an
empty tuple on the report. Everything else surfaces as one of the types
below so the job dispatcher can decide what the user sees.
"""

from typing import Any


class ReportError(Exception):
    """Base exception for the report engine."""

    def __init__(
        self,
        message: str,
        code: str = "error",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for job results."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(ReportError):
    """Invalid job descriptor or rendering option."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(
            message=message,
            code="validation_error",
            details=details,
        )


class InvariantViolationError(ReportError):
    """Input broke a data-model contract (negative counts, unknown severity)."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(
            message=message,
            code="invariant_violation",
            details=details,
        )


class RenderError(ReportError):
    """A rendering backend failed while producing a document."""

    def __init__(self, report_id: str | None, format: str, message: str):
        self.report_id = report_id
        self.format = format
        super().__init__(
            message=f"Failed to render {format} report: {message}",
            code="render_error",
            details={"report_id": report_id, "format": format},
        )
