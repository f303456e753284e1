"""Best-effort text extraction from CV documents.

The default extractors are byte-level heuristics: they scan PDF content
streams and raw DOCX XML for printable text and will return garbled or
empty output for compressed (e.g. Flate-encoded) content. Every format sits
behind `BaseExtractor` so a real parser can be swapped in; `PyMuPDFExtractor`
is available for PDFs through the `CVMATCH_PDF_BACKEND=pymupdf` setting.
"""

import logging
import re
from abc import ABC, abstractmethod
from pathlib import PurePosixPath
from urllib.parse import urlparse

import fitz  # PyMuPDF

from cvmatch.config import MIN_EXTRACTED_CHARS, PDF_BACKEND
from cvmatch.exceptions import ExtractionError, ExtractionFailure
from cvmatch.schemas.document import DocumentFormat, ExtractionResult

logger = logging.getLogger(__name__)

# Letters (ASCII and Latin-1), digits, space, hyphen and underscore form words;
# any other byte ends one. 0xD7 and 0xF7 are the Latin-1 multiply and divide signs.
_WORD_RUN = re.compile(rb"[A-Za-z0-9 _\-\xaa\xb5\xba\xc0-\xd6\xd8-\xf6\xf8-\xff]+")
_MIN_WORD_LENGTH = 3

_STREAM_START = b"stream"
_STREAM_END = b"endstream"

_DOCX_TEXT_PATTERNS = [
    re.compile(rb"<w:t[^>]*>([^<]+)</w:t>"),
    re.compile(rb"<t[^>]*>([^<]+)</t>"),
    re.compile(rb"<text[^>]*>([^<]+)</text>"),
    re.compile(rb'xml:space="preserve">([^<]+)</w:t>'),
]
_DOCX_FALLBACK_PATTERN = re.compile(rb">([A-Za-z0-9\s.,:;!?-]+)<")


class BaseExtractor(ABC):
    """Turns raw document bytes into text."""

    name: str = "base"

    @abstractmethod
    def extract(self, content: bytes) -> str:
        """Extract text from raw document bytes."""


class PlainTextExtractor(BaseExtractor):
    name = "plain_text"

    def extract(self, content: bytes) -> str:
        return content.decode("utf-8", errors="replace")


class ReadableTextExtractor(BaseExtractor):
    """Generic printable-text scanner used for binary and unknown formats.

    Collects runs of letters, digits, spaces, hyphens and underscores, where
    letters include the Latin-1 range so legacy cp1252 documents keep their
    accented words.
    A run is kept only when it is longer than two characters, which drops
    most of the noise that binary data produces.
    """

    name = "readable_text"

    def extract(self, content: bytes) -> str:
        words = [
            run.decode("latin-1")
            for run in _WORD_RUN.findall(content)
            if len(run) >= _MIN_WORD_LENGTH
        ]
        return " ".join(words).strip()


class PdfStreamExtractor(BaseExtractor):
    """Reads printable text out of each `stream` ... `endstream` region."""

    name = "pdf_streams"

    def __init__(self, readable: ReadableTextExtractor | None = None):
        self.readable = readable or ReadableTextExtractor()

    def extract(self, content: bytes) -> str:
        parts = [self.readable.extract(region) for region in _iter_pdf_streams(content)]
        return " ".join(parts).strip()


class PyMuPDFExtractor(BaseExtractor):
    """Real PDF text extraction with PyMuPDF."""

    name = "pymupdf"

    def extract(self, content: bytes) -> str:
        try:
            with fitz.open(stream=content, filetype="pdf") as doc:
                text_parts = [page.get_text() for page in doc]
        except (RuntimeError, ValueError) as e:
            logger.warning(f"PyMuPDF could not open document: {e}")
            return ""

        return _clean_whitespace("\n".join(text_parts))


class DocxXmlExtractor(BaseExtractor):
    """Pulls Word run text out of raw DOCX XML with regular expressions.

    Works on the bytes as given; a deflated DOCX archive hides its XML from
    these patterns.
    """

    name = "docx_xml"

    def extract(self, content: bytes) -> str:
        parts = []
        for pattern in _DOCX_TEXT_PATTERNS:
            parts.extend(_decode(match) for match in pattern.findall(content))

        if len(" ".join(parts)) < MIN_EXTRACTED_CHARS:
            parts.extend(
                _decode(match)
                for match in _DOCX_FALLBACK_PATTERN.findall(content)
                if len(match) > 2
            )

        return " ".join(parts).strip()


def _iter_pdf_streams(data: bytes):
    """Yield the bytes between each `stream` marker and the next `endstream`."""
    position = 0
    while True:
        start = data.find(_STREAM_START, position)
        if start == -1:
            return
        end = data.find(_STREAM_END, start)
        if end == -1:
            return
        yield data[start + len(_STREAM_START):end]
        position = end + len(_STREAM_END)


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def _clean_whitespace(text: str) -> str:
    """Normalize whitespace in extracted text."""
    text = re.sub(r"\r\n", "\n", text)
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    text = text.strip()
    return text


def get_pdf_extractor(backend: str = PDF_BACKEND) -> BaseExtractor:
    """Return the configured PDF extractor."""
    if backend == "pymupdf":
        return PyMuPDFExtractor()
    return PdfStreamExtractor()


def detect_format(content_type: str = "", url: str = "") -> DocumentFormat:
    """Classify a document by declared content type, then URL path suffix."""
    content_type = (content_type or "").lower()
    suffix = PurePosixPath(urlparse(url or "").path).suffix.lower()

    if "text/plain" in content_type or suffix == ".txt":
        return DocumentFormat.TEXT
    if "pdf" in content_type or suffix == ".pdf":
        return DocumentFormat.PDF
    if "wordprocessingml" in content_type or suffix == ".docx":
        return DocumentFormat.DOCX
    if "msword" in content_type or suffix == ".doc":
        return DocumentFormat.DOC
    return DocumentFormat.UNKNOWN


def extract_document(
    content: bytes,
    content_type: str = "",
    url: str = "",
    pdf_extractor: BaseExtractor | None = None,
) -> ExtractionResult:
    """Extract text from a document, trying format-specific heuristics first.

    Plain text is returned verbatim. Other formats succeed once an attempt
    yields at least MIN_EXTRACTED_CHARS characters; the generic readable-text
    scan over the whole buffer is the last resort for every non-PDF format.

    Args:
        content: Raw document bytes.
        content_type: Declared Content-Type header, if any.
        url: Document URL, used for its file suffix.
        pdf_extractor: Override for the configured PDF extractor.

    Returns:
        ExtractionResult; `ok` is False when no attempt produced enough text.
    """
    doc_format = detect_format(content_type, url)
    readable = ReadableTextExtractor()

    if doc_format is DocumentFormat.TEXT:
        extractor = PlainTextExtractor()
        return _success(extractor.extract(content), extractor.name, doc_format)

    if doc_format is DocumentFormat.PDF:
        extractor = pdf_extractor or get_pdf_extractor()
        text = extractor.extract(content)
        if len(text) >= MIN_EXTRACTED_CHARS:
            return _success(text, extractor.name, doc_format)

        text = readable.extract(content)
        if len(text) >= MIN_EXTRACTED_CHARS:
            return _success(text, readable.name, doc_format)

        return _failure(text, ExtractionFailure.SCANNED_PDF, doc_format)

    if doc_format is DocumentFormat.DOCX:
        extractor = DocxXmlExtractor()
        text = extractor.extract(content)
        if len(text) >= MIN_EXTRACTED_CHARS:
            return _success(text, extractor.name, doc_format)

    text = readable.extract(content)
    if len(text) >= MIN_EXTRACTED_CHARS:
        return _success(text, readable.name, doc_format)

    return _failure(text, ExtractionFailure.UNSUPPORTED_FORMAT, doc_format)


def extract_text(
    content: bytes,
    content_type: str = "",
    url: str = "",
    pdf_extractor: BaseExtractor | None = None,
) -> str:
    """Extract text from a document or raise.

    Raises:
        ExtractionError: If no extraction attempt produced enough text.
    """
    result = extract_document(content, content_type, url, pdf_extractor)
    if not result.ok:
        raise ExtractionError(result.failure, chars=len(result.text))
    return result.text


def _success(text: str, method: str, doc_format: DocumentFormat) -> ExtractionResult:
    logger.info(f"Extracted {len(text)} characters from {doc_format.value} document using {method}")
    return ExtractionResult(text=text, ok=True, method=method)


def _failure(
    text: str,
    failure: ExtractionFailure,
    doc_format: DocumentFormat,
) -> ExtractionResult:
    logger.warning(
        f"Text extraction failed for {doc_format.value} document "
        f"({len(text)} characters, {failure.value})"
    )
    return ExtractionResult(text=text, ok=False, failure=failure)
