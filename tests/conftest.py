"""Shared pytest fixtures for all tests."""

from unittest.mock import patch

import pytest


@pytest.fixture
def temp_db(tmp_path):
    """Create a temporary database for testing.

    Patches DB_PATH and DATA_DIR at the connection module level.
    """
    db_path = tmp_path / "test.db"
    data_dir = tmp_path

    # Patch at db.connection where they're used at runtime
    with (
        patch("cvmatch.db.connection.DB_PATH", db_path),
        patch("cvmatch.db.connection.DATA_DIR", data_dir),
        patch("cvmatch.db.connection.DATABASE_URL", None),  # Force SQLite
    ):
        from cvmatch.db.connection import init_tables

        init_tables()
        yield db_path


@pytest.fixture
def mock_fetch():
    """Patch requests.get in the fetcher and return the mock.

    The default response is a 200 plain-text document; tests override
    `content`, `content_type` or `status_code` through `respond()`.
    """
    with patch("cvmatch.cv.fetcher.requests.get") as mock_get:

        def respond(content: bytes = b"", content_type: str = "text/plain", status_code: int = 200):
            response = mock_get.return_value
            response.status_code = status_code
            response.headers = {"Content-Type": content_type}
            response.iter_content.return_value = [content] if content else []
            return mock_get

        respond()
        mock_get.respond = respond
        yield mock_get
