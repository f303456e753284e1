from enum import Enum

from pydantic import BaseModel, Field

from cvmatch.exceptions import ExtractionFailure


class DocumentFormat(str, Enum):
    """Document formats recognised from content type or URL suffix."""

    TEXT = "text"
    PDF = "pdf"
    DOCX = "docx"
    DOC = "doc"
    UNKNOWN = "unknown"


class FetchedDocument(BaseModel):
    """Raw CV document downloaded from its URL."""

    url: str = Field(description="URL the document was fetched from")
    content: bytes = Field(description="Raw document bytes")
    content_type: str = Field(default="", description="Declared Content-Type header")


class ExtractionResult(BaseModel):
    """Best-effort text extracted from a document."""

    text: str = Field(default="", description="Extracted text (empty on failure)")
    ok: bool = Field(description="Whether enough text was recovered")
    method: str = Field(default="", description="Name of the extractor that produced the text")
    failure: ExtractionFailure | None = Field(
        default=None,
        description="Failure reason when ok is False"
    )
