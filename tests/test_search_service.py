"""Tests for search and candidate details over stored applications."""

from unittest.mock import patch

import pytest

from cvmatch.db.applications import get_application, insert_applications
from cvmatch.exceptions import ExtractionError, ExtractionFailure
from cvmatch.schemas.search import SearchQuery
from cvmatch.services.search_service import get_candidate_details, search_stored_candidates
from tests.test_utils import SAMPLE_CV_TEXT, make_test_application

GOOD_URL = "https://files.example.com/good.pdf"
SCANNED_URL = "https://files.example.com/scanned.pdf"
OTHER_CV = "John Roe, frontend developer with React and TypeScript, based in Lisbon, Portugal."


def fake_read_cv_text(url: str) -> str:
    if url == GOOD_URL:
        return SAMPLE_CV_TEXT
    raise ExtractionError(ExtractionFailure.SCANNED_PDF)


@pytest.fixture
def mock_reader():
    with patch(
        "cvmatch.services.match_service.read_cv_text",
        side_effect=fake_read_cv_text,
    ) as mock_read:
        yield mock_read


class TestSearchStoredCandidates:
    def test_extracts_and_caches_missing_text(self, temp_db, mock_reader):
        insert_applications([
            make_test_application("a1", resume_url=GOOD_URL),
            make_test_application("a2", parsed_cv_text=OTHER_CV),
            make_test_application("a3", resume_url=SCANNED_URL),
        ])

        response = search_stored_candidates(SearchQuery(skills=["Kubernetes"]))

        assert [c.application.id for c in response.candidates] == ["a1"]
        assert response.total == 3
        assert get_application("a1").parsed_cv_text == SAMPLE_CV_TEXT
        assert get_application("a3").parsed_cv_text is None

    def test_filters_are_pushed_down(self, temp_db, mock_reader):
        insert_applications([
            make_test_application("a1", parsed_cv_text=SAMPLE_CV_TEXT, years_of_experience=6),
            make_test_application("a2", parsed_cv_text=OTHER_CV, years_of_experience=1),
            make_test_application("a3", job_id="job-2", parsed_cv_text=SAMPLE_CV_TEXT, years_of_experience=8),
        ])

        response = search_stored_candidates(SearchQuery(min_experience=5), job_id="job-1")

        assert [c.application.id for c in response.candidates] == ["a1"]
        # only a1 is loaded: a2 fails the filter and a3 belongs to another job
        assert response.total == 1

    def test_free_text_query(self, temp_db, mock_reader):
        insert_applications([
            make_test_application("a1", parsed_cv_text=SAMPLE_CV_TEXT),
            make_test_application("a2", parsed_cv_text=OTHER_CV),
        ])

        response = search_stored_candidates(SearchQuery(query="react lisbon"))

        assert [c.application.id for c in response.candidates] == ["a2"]
        mock_reader.assert_not_called()


class TestGetCandidateDetails:
    def test_not_found(self, temp_db):
        assert get_candidate_details("nope") is None

    def test_details_with_profile(self, temp_db, mock_reader):
        insert_applications([make_test_application("a1", resume_url=GOOD_URL)])

        details = get_candidate_details("a1")

        assert details.application.id == "a1"
        assert details.cv_text == SAMPLE_CV_TEXT
        assert details.profile.experience == 6
        assert "python" in details.profile.skills
        assert get_application("a1").parsed_cv_text == SAMPLE_CV_TEXT

    def test_extraction_failure_leaves_profile_empty(self, temp_db, mock_reader):
        insert_applications([make_test_application("a1", resume_url=SCANNED_URL)])

        details = get_candidate_details("a1")

        assert details.cv_text == ""
        assert details.profile.skills == []
        assert details.profile.experience == 0
