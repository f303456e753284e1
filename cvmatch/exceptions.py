"""Typed failures raised by the CV matching core."""

from enum import Enum
from typing import Any


class CVMatchError(Exception):
    """Base exception for cvmatch."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/JSON output."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class FetchError(CVMatchError):
    """Raised when the CV document cannot be downloaded."""

    def __init__(self, url: str, reason: str, status_code: int | None = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        details: dict[str, Any] = {"url": url}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(
            f"failed to download CV: {reason}",
            error_code="FETCH_ERROR",
            details=details,
        )


class ExtractionFailure(str, Enum):
    """Why no usable text was recovered from a document."""

    SCANNED_PDF = "scanned_pdf"
    UNSUPPORTED_FORMAT = "unsupported_format"
    TEXT_TOO_SHORT = "text_too_short"


_EXTRACTION_MESSAGES = {
    ExtractionFailure.SCANNED_PDF: (
        "could not extract text from PDF. Please ensure the PDF contains readable "
        "text (not scanned images). For scanned PDFs, consider using OCR tools first."
    ),
    ExtractionFailure.UNSUPPORTED_FORMAT: (
        "could not extract readable text from CV file. Supported formats: "
        "PDF (with readable text), DOC, DOCX, TXT. For scanned images, "
        "please convert to text first."
    ),
    ExtractionFailure.TEXT_TOO_SHORT: "CV text too short or unreadable",
}


class ExtractionError(CVMatchError):
    """Raised when a document was downloaded but yielded no usable text."""

    def __init__(self, reason: ExtractionFailure, chars: int = 0):
        self.reason = reason
        self.chars = chars
        super().__init__(
            _EXTRACTION_MESSAGES[reason],
            error_code="EXTRACTION_ERROR",
            details={"reason": reason.value, "chars": chars},
        )


class CriteriaParseError(CVMatchError):
    """Raised when stored shortlist criteria JSON cannot be parsed."""

    def __init__(self, raw: str, cause: Exception | None = None):
        self.raw = raw
        self.cause = cause
        details: dict[str, Any] = {"raw": raw[:200]}
        if cause is not None:
            details["cause"] = str(cause)
        super().__init__(
            "failed to parse stored shortlist criteria",
            error_code="CRITERIA_PARSE_ERROR",
            details=details,
        )
