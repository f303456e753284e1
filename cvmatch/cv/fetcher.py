import logging

import requests

from cvmatch.config import FETCH_TIMEOUT, MAX_DOCUMENT_BYTES, USER_AGENT
from cvmatch.exceptions import FetchError
from cvmatch.schemas.document import FetchedDocument

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


def fetch_document(
    url: str,
    timeout: float = FETCH_TIMEOUT,
    max_bytes: int = MAX_DOCUMENT_BYTES,
) -> FetchedDocument:
    """Download a CV document over HTTP(S).

    No authentication headers are sent and failures are not retried.

    Args:
        url: Publicly reachable document URL.
        timeout: Connect/read timeout in seconds.
        max_bytes: Maximum document size (0 disables the cap).

    Returns:
        FetchedDocument with the raw bytes and declared content type.

    Raises:
        FetchError: On network failure, non-2xx status or oversized document.
    """
    headers = {"User-Agent": USER_AGENT}

    try:
        response = requests.get(url, headers=headers, timeout=timeout, stream=True)
    except requests.exceptions.RequestException as e:
        raise FetchError(url, str(e)) from e

    try:
        if not 200 <= response.status_code < 300:
            raise FetchError(url, f"status {response.status_code}", response.status_code)

        chunks = []
        received = 0
        for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
            received += len(chunk)
            if max_bytes and received > max_bytes:
                raise FetchError(url, f"document exceeds {max_bytes} bytes")
            chunks.append(chunk)
    except requests.exceptions.RequestException as e:
        raise FetchError(url, str(e)) from e
    finally:
        response.close()

    content = b"".join(chunks)
    content_type = response.headers.get("Content-Type", "")
    logger.info(f"Downloaded {len(content)} bytes from {url} ({content_type or 'no content type'})")

    return FetchedDocument(url=url, content=content, content_type=content_type)
