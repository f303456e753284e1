import logging

from cvmatch.config import MIN_CV_TEXT_CHARS
from cvmatch.cv.extractor import extract_text
from cvmatch.cv.fetcher import fetch_document
from cvmatch.exceptions import ExtractionError, ExtractionFailure

logger = logging.getLogger(__name__)


def check_cv_text(text: str) -> str:
    """Reject CV text too short to score.

    Raises:
        ExtractionError: If the text is shorter than MIN_CV_TEXT_CHARS.
    """
    if len(text) < MIN_CV_TEXT_CHARS:
        raise ExtractionError(ExtractionFailure.TEXT_TOO_SHORT, chars=len(text))
    return text


def read_cv_text(url: str) -> str:
    """Download a CV document and extract usable text from it.

    Args:
        url: Publicly reachable CV document URL.

    Returns:
        Extracted CV text, at least MIN_CV_TEXT_CHARS long.

    Raises:
        FetchError: If the document cannot be downloaded.
        ExtractionError: If no usable text could be extracted.
    """
    document = fetch_document(url)
    text = check_cv_text(extract_text(document.content, document.content_type, document.url))
    logger.info(f"Extracted {len(text)} characters from CV")
    return text
