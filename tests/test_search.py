"""Tests for candidate search over an in-memory pool."""

from unittest.mock import MagicMock, patch

import pytest

from cvmatch.exceptions import FetchError
from cvmatch.matching.search import load_application_text, passes_filters, search_candidates
from cvmatch.schemas.search import SearchQuery
from tests.test_utils import make_test_application

ALICE_CV = "Alice Smith, backend developer with Python, Django and PostgreSQL. Speaks English and German."
BOB_CV = "Bob Jones, frontend developer with React and TypeScript. Speaks English and French fluently."
CAROL_CV = "Carol White, data analyst working with SQL, Excel and Tableau dashboards every day."


def make_pool():
    return [
        make_test_application(
            "alice",
            parsed_cv_text=ALICE_CV,
            years_of_experience=5,
            current_position="Backend Engineer",
            portfolio_url="https://alice.dev",
            linkedin_url="https://linkedin.com/in/alice",
        ),
        make_test_application(
            "bob",
            parsed_cv_text=BOB_CV,
            years_of_experience=2,
            current_position="Frontend Engineer",
            status="shortlisted",
        ),
        make_test_application(
            "carol",
            parsed_cv_text=CAROL_CV,
            years_of_experience=8,
            current_position="Data Analyst",
            linkedin_url="https://linkedin.com/in/carol",
        ),
    ]


def result_ids(response):
    return [c.application.id for c in response.candidates]


class TestSearchCandidates:
    def test_empty_query_returns_everyone_at_default_score(self):
        response = search_candidates(make_pool(), SearchQuery())

        assert result_ids(response) == ["alice", "bob", "carol"]
        assert [c.match_score for c in response.candidates] == [50, 50, 50]
        assert response.count == 3
        assert response.total == 3

    def test_free_text_query(self):
        response = search_candidates(make_pool(), SearchQuery(query="python django"))

        assert result_ids(response) == ["alice"]
        assert response.candidates[0].match_score == 100
        assert response.candidates[0].matched_reasons == ["Matched 2/2 search terms"]

    def test_query_needs_more_than_half_the_terms(self):
        response = search_candidates(make_pool(), SearchQuery(query="python react"))

        assert response.count == 0
        assert response.total == 3

    def test_short_query_tokens_are_ignored(self):
        response = search_candidates(make_pool(), SearchQuery(query="go to python"))

        assert result_ids(response) == ["alice"]
        assert response.candidates[0].matched_reasons == ["Matched 1/1 search terms"]

    @pytest.mark.parametrize("text", ["Go", "C# UI", "  go  "])
    def test_query_of_only_short_tokens_matches_nobody(self, text):
        response = search_candidates(make_pool(), SearchQuery(query=text))

        assert response.count == 0
        assert response.total == 3

    def test_blank_query_counts_as_no_query(self):
        response = search_candidates(make_pool(), SearchQuery(query="   "))

        assert result_ids(response) == ["alice", "bob", "carol"]
        assert [c.match_score for c in response.candidates] == [50, 50, 50]

    def test_skills(self):
        response = search_candidates(make_pool(), SearchQuery(skills=["Python", "React"]))

        assert result_ids(response) == ["alice", "bob"]
        assert response.candidates[0].match_score == 50
        assert response.candidates[0].matched_skills == ["Python"]
        assert response.candidates[1].matched_skills == ["React"]
        assert response.candidates[0].matched_reasons == ["Found 1/2 required skills: Python"]

    def test_sorted_by_score(self):
        pool = make_pool()
        pool.reverse()

        response = search_candidates(pool, SearchQuery(skills=["Python", "SQL"]))

        assert result_ids(response) == ["alice", "carol"]
        assert [c.match_score for c in response.candidates] == [100, 50]

    def test_ties_keep_pool_order(self):
        pool = make_pool()
        pool.reverse()

        response = search_candidates(pool, SearchQuery())

        assert result_ids(response) == ["carol", "bob", "alice"]

    def test_min_experience_filters_and_scores(self):
        response = search_candidates(make_pool(), SearchQuery(min_experience=4))

        assert result_ids(response) == ["alice", "carol"]
        assert response.candidates[0].match_score == 20
        assert response.candidates[0].matched_reasons == [
            "Has 5 years of experience (required: 4+)"
        ]

    def test_languages(self):
        response = search_candidates(make_pool(), SearchQuery(languages=["French"]))

        assert result_ids(response) == ["bob"]
        assert response.candidates[0].match_score == 20
        assert response.candidates[0].matched_reasons == ["Found languages: French"]

    def test_current_position(self):
        response = search_candidates(make_pool(), SearchQuery(current_position="backend"))

        assert result_ids(response) == ["alice"]
        assert response.candidates[0].match_score == 15
        assert response.candidates[0].matched_reasons == [
            "Current position matches: Backend Engineer"
        ]

    def test_query_and_skills_are_clamped(self):
        response = search_candidates(
            make_pool(),
            SearchQuery(query="python", skills=["Python"]),
        )

        assert result_ids(response) == ["alice"]
        assert response.candidates[0].match_score == 100

    def test_query_must_match_even_with_criteria(self):
        response = search_candidates(
            make_pool(),
            SearchQuery(query="kotlin swift", skills=["Python"]),
        )

        assert response.count == 0

    def test_filters_do_not_score(self):
        response = search_candidates(make_pool(), SearchQuery(has_portfolio=True))

        assert result_ids(response) == ["alice"]
        assert response.candidates[0].match_score == 50

    def test_limit(self):
        response = search_candidates(make_pool(), SearchQuery(limit=2))

        assert result_ids(response) == ["alice", "bob"]
        assert response.count == 2
        assert response.total == 3

    def test_short_text_is_skipped(self):
        pool = make_pool() + [make_test_application("dave", parsed_cv_text="Too short")]

        response = search_candidates(pool, SearchQuery())

        assert "dave" not in result_ids(response)
        assert response.total == 4

    def test_custom_loader(self):
        pool = [make_test_application("erin")]
        loader = MagicMock(return_value=ALICE_CV)

        response = search_candidates(pool, SearchQuery(query="django"), load_text=loader)

        loader.assert_called_once_with(pool[0])
        assert result_ids(response) == ["erin"]

    def test_loader_not_called_for_filtered_out_records(self):
        pool = [make_test_application("erin", status="rejected")]
        loader = MagicMock(return_value=ALICE_CV)

        search_candidates(pool, SearchQuery(status="pending"), load_text=loader)

        loader.assert_not_called()


class TestPassesFilters:
    def test_status(self):
        alice, bob, _ = make_pool()
        query = SearchQuery(status="shortlisted")

        assert not passes_filters(alice, query)
        assert passes_filters(bob, query)

    def test_linkedin(self):
        alice, bob, carol = make_pool()
        query = SearchQuery(has_linkedin=True)

        assert passes_filters(alice, query)
        assert not passes_filters(bob, query)
        assert passes_filters(carol, query)

    def test_experience_range(self):
        alice, bob, carol = make_pool()
        query = SearchQuery(min_experience=3, max_experience=6)

        assert passes_filters(alice, query)
        assert not passes_filters(bob, query)
        assert not passes_filters(carol, query)

    def test_position_is_case_insensitive(self):
        alice, _, _ = make_pool()
        assert passes_filters(alice, SearchQuery(current_position="BACKEND"))


class TestLoadApplicationText:
    def test_cached_text(self):
        application = make_test_application("a1", parsed_cv_text=ALICE_CV, resume_url="https://x/cv.pdf")

        with patch("cvmatch.matching.search.read_cv_text") as mock_read:
            assert load_application_text(application) == ALICE_CV
            mock_read.assert_not_called()

    def test_no_resume_url(self):
        assert load_application_text(make_test_application("a1")) is None

    def test_extracts_and_caches_on_record(self):
        application = make_test_application("a1", resume_url="https://x/cv.pdf")

        with patch("cvmatch.matching.search.read_cv_text", return_value=BOB_CV) as mock_read:
            assert load_application_text(application) == BOB_CV

        mock_read.assert_called_once_with("https://x/cv.pdf")
        assert application.parsed_cv_text == BOB_CV

    def test_failure_returns_none(self):
        application = make_test_application("a1", resume_url="https://x/cv.pdf")

        with patch(
            "cvmatch.matching.search.read_cv_text",
            side_effect=FetchError("https://x/cv.pdf", "status 404", 404),
        ):
            assert load_application_text(application) is None

        assert application.parsed_cv_text is None
