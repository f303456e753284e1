"""Tests for CV document download and the fetch-extract pipeline."""

from unittest.mock import patch

import pytest
import requests

from cvmatch.config import FETCH_TIMEOUT, MIN_CV_TEXT_CHARS, USER_AGENT
from cvmatch.cv.fetcher import fetch_document
from cvmatch.cv.reader import check_cv_text, read_cv_text
from cvmatch.exceptions import ExtractionError, ExtractionFailure, FetchError

CV_URL = "https://files.example.com/cv.pdf"
CV_TEXT = b"Jane Doe, Senior Python Developer with 6 years of experience in Django and PostgreSQL."


class TestFetchDocument:
    def test_success(self, mock_fetch):
        mock_fetch.respond(content=b"hello", content_type="text/plain")

        document = fetch_document(CV_URL)

        assert document.content == b"hello"
        assert document.content_type == "text/plain"
        assert document.url == CV_URL
        mock_fetch.assert_called_once_with(
            CV_URL,
            headers={"User-Agent": USER_AGENT},
            timeout=FETCH_TIMEOUT,
            stream=True,
        )

    def test_joins_chunks(self, mock_fetch):
        mock_fetch.respond()
        mock_fetch.return_value.iter_content.return_value = [b"hel", b"lo"]

        assert fetch_document(CV_URL).content == b"hello"

    def test_non_2xx_status(self, mock_fetch):
        mock_fetch.respond(status_code=404)

        with pytest.raises(FetchError) as exc_info:
            fetch_document(CV_URL)

        assert exc_info.value.status_code == 404
        assert exc_info.value.to_dict()["error_code"] == "FETCH_ERROR"
        assert exc_info.value.to_dict()["details"] == {"url": CV_URL, "status_code": 404}

    def test_network_error(self, mock_fetch):
        mock_fetch.side_effect = requests.exceptions.Timeout("timed out")

        with pytest.raises(FetchError, match="timed out"):
            fetch_document(CV_URL)

    def test_error_while_streaming(self, mock_fetch):
        mock_fetch.respond()
        mock_fetch.return_value.iter_content.side_effect = requests.exceptions.ChunkedEncodingError("broken")

        with pytest.raises(FetchError, match="broken"):
            fetch_document(CV_URL)

        mock_fetch.return_value.close.assert_called_once()

    def test_oversized_document(self, mock_fetch):
        mock_fetch.respond(content=b"hello")

        with pytest.raises(FetchError, match="exceeds 4 bytes"):
            fetch_document(CV_URL, max_bytes=4)

        mock_fetch.return_value.close.assert_called_once()

    def test_zero_max_bytes_disables_cap(self, mock_fetch):
        mock_fetch.respond(content=b"hello")

        assert fetch_document(CV_URL, max_bytes=0).content == b"hello"


class TestCheckCvText:
    def test_long_enough(self):
        text = "x" * MIN_CV_TEXT_CHARS
        assert check_cv_text(text) == text

    def test_too_short(self):
        with pytest.raises(ExtractionError) as exc_info:
            check_cv_text("too short")

        assert exc_info.value.reason is ExtractionFailure.TEXT_TOO_SHORT
        assert exc_info.value.chars == 9


class TestReadCvText:
    def test_plain_text_document(self, mock_fetch):
        mock_fetch.respond(content=CV_TEXT, content_type="text/plain")

        assert read_cv_text(CV_URL) == CV_TEXT.decode()

    def test_short_text_is_rejected(self, mock_fetch):
        mock_fetch.respond(content=b"Jane Doe", content_type="text/plain")

        with pytest.raises(ExtractionError) as exc_info:
            read_cv_text(CV_URL)

        assert exc_info.value.reason is ExtractionFailure.TEXT_TOO_SHORT

    def test_49_characters_fail(self, mock_fetch):
        mock_fetch.respond(content=b"a" * 49, content_type="text/plain")

        with pytest.raises(ExtractionError) as exc_info:
            read_cv_text(CV_URL)

        assert exc_info.value.reason is ExtractionFailure.TEXT_TOO_SHORT
        assert exc_info.value.chars == 49

    def test_51_characters_pass(self, mock_fetch):
        mock_fetch.respond(content=b"a" * 51, content_type="text/plain")

        assert read_cv_text(CV_URL) == "a" * 51

    def test_unreadable_document(self, mock_fetch):
        mock_fetch.respond(content=b"\x00\x01\x02", content_type="application/octet-stream")

        with pytest.raises(ExtractionError) as exc_info:
            read_cv_text(CV_URL)

        assert exc_info.value.reason is ExtractionFailure.UNSUPPORTED_FORMAT

    def test_fetch_error_propagates(self):
        with patch(
            "cvmatch.cv.reader.fetch_document",
            side_effect=FetchError(CV_URL, "status 500", 500),
        ):
            with pytest.raises(FetchError):
                read_cv_text(CV_URL)
