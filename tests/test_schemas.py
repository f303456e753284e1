"""Tests for Pydantic schemas."""

import pytest
from pydantic import ValidationError

from cvmatch.config import SEARCH_DEFAULT_LIMIT
from cvmatch.schemas.criteria import Criteria
from cvmatch.schemas.match import AnalysisOutcome, MatchResult
from cvmatch.schemas.search import SearchQuery


class TestCriteria:
    def test_defaults(self):
        criteria = Criteria()

        assert criteria.required_skills == ()
        assert criteria.min_experience == 0
        assert criteria.match_job_description is False
        assert not criteria.has_requirements

    def test_lists_become_tuples(self):
        criteria = Criteria(required_skills=["Python", "SQL"], required_languages=["English"])

        assert criteria.required_skills == ("Python", "SQL")
        assert criteria.required_languages == ("English",)

    def test_none_values(self):
        criteria = Criteria(
            required_skills=None,
            required_languages=None,
            job_description=None,
            job_requirements=None,
        )

        assert criteria == Criteria()

    def test_negative_experience_rejected(self):
        with pytest.raises(ValidationError):
            Criteria(min_experience=-1)

    def test_is_frozen(self):
        criteria = Criteria()
        with pytest.raises(ValidationError):
            criteria.min_experience = 3

    @pytest.mark.parametrize(
        "fields",
        [
            {"required_skills": ["Python"]},
            {"min_experience": 2},
            {"required_languages": ["English"]},
        ],
    )
    def test_has_requirements(self, fields):
        assert Criteria(**fields).has_requirements

    def test_job_description_alone_is_not_a_requirement(self):
        criteria = Criteria(match_job_description=True, job_description="Build APIs")
        assert not criteria.has_requirements


class TestSearchQuery:
    def test_defaults(self):
        query = SearchQuery()

        assert query.limit == SEARCH_DEFAULT_LIMIT
        assert not query.has_scored_criteria

    @pytest.mark.parametrize("limit", [0, -5, 101])
    def test_out_of_range_limit_uses_default(self, limit):
        assert SearchQuery(limit=limit).limit == SEARCH_DEFAULT_LIMIT

    def test_valid_limit(self):
        assert SearchQuery(limit=100).limit == 100
        assert SearchQuery(limit=1).limit == 1

    def test_filters_are_not_scored_criteria(self):
        query = SearchQuery(has_portfolio=True, has_linkedin=True, status="pending", max_experience=5)
        assert not query.has_scored_criteria

    @pytest.mark.parametrize(
        "fields",
        [
            {"skills": ["Python"]},
            {"min_experience": 0},
            {"languages": ["English"]},
            {"current_position": "engineer"},
        ],
    )
    def test_scored_criteria(self, fields):
        assert SearchQuery(**fields).has_scored_criteria


class TestMatchResult:
    def test_score_bounds(self):
        with pytest.raises(ValidationError):
            MatchResult(match_score=101, skills_match=0, experience_match=0, language_match=0)

    def test_json_round_trip(self):
        result = MatchResult(
            match_score=69,
            skills=["Python"],
            missing_skills=["SQL"],
            experience=2,
            skills_match=50,
            experience_match=66,
            language_match=100,
        )

        assert MatchResult.model_validate_json(result.model_dump_json()) == result


class TestAnalysisOutcome:
    def test_ok(self):
        assert AnalysisOutcome(application_id="a1", match_score=80).ok
        assert not AnalysisOutcome(application_id="a1", error="boom").ok
