"""Free-text and structured search over a pool of candidate applications."""

import logging
import re
from collections.abc import Callable, Iterable

from cvmatch.config import (
    MIN_CV_TEXT_CHARS,
    QUERY_MATCH_THRESHOLD,
    QUERY_MIN_TOKEN_LENGTH,
    SEARCH_DEFAULT_SCORE,
    SEARCH_EXPERIENCE_BONUS,
    SEARCH_LANGUAGE_DIVISOR,
    SEARCH_POSITION_BONUS,
)
from cvmatch.cv.reader import read_cv_text
from cvmatch.exceptions import CVMatchError
from cvmatch.matching.analyzers import extract_languages, match_skills
from cvmatch.schemas.candidate import Application
from cvmatch.schemas.search import CandidateSearchResult, SearchQuery, SearchResponse
from cvmatch.skills.catalog import SkillCatalog, get_default_catalog

logger = logging.getLogger(__name__)

TextLoader = Callable[[Application], str | None]


def load_application_text(application: Application) -> str | None:
    """Return the cached CV text, extracting and caching it on the record if missing.

    Returns:
        CV text, or None when the record has no usable document.
    """
    if application.parsed_cv_text:
        return application.parsed_cv_text

    if not application.resume_url:
        return None

    try:
        text = read_cv_text(application.resume_url)
    except CVMatchError as e:
        logger.warning(f"Could not load CV for application {application.id}: {e}")
        return None

    application.parsed_cv_text = text
    return text


def passes_filters(application: Application, query: SearchQuery) -> bool:
    """Check the record-level filters, which never contribute to the score."""
    if query.status and application.status != query.status:
        return False
    if query.has_portfolio and not application.portfolio_url:
        return False
    if query.has_linkedin and not application.linkedin_url:
        return False
    if query.min_experience is not None and application.years_of_experience < query.min_experience:
        return False
    if query.max_experience is not None and application.years_of_experience > query.max_experience:
        return False
    if query.current_position and query.current_position.lower() not in application.current_position.lower():
        return False
    return True


def _query_tokens(query: str) -> list[str]:
    return [token for token in query.lower().split() if len(token) > QUERY_MIN_TOKEN_LENGTH]


def _token_in_text(text_lower: str, token: str) -> bool:
    return token in text_lower or bool(re.search(r"\b" + re.escape(token) + r"\b", text_lower))


def score_candidate(
    application: Application,
    text: str,
    query: SearchQuery,
    catalog: SkillCatalog,
) -> CandidateSearchResult | None:
    """Score one candidate, or return None when it does not qualify.

    A candidate qualifies when the free-text query matched (or none was
    given) and at least one scored criterion matched (or none was given).
    """
    text_lower = text.lower()
    score = 0
    reasons: list[str] = []
    matched_skills: list[str] = []

    has_query = bool(query.query.strip())
    tokens = _query_tokens(query.query)
    # a query made only of short tokens can never match
    query_matched = not has_query
    if tokens:
        matched_tokens = sum(1 for token in tokens if _token_in_text(text_lower, token))
        query_score = matched_tokens * 100 // len(tokens)
        if query_score > QUERY_MATCH_THRESHOLD:
            query_matched = True
            score += query_score
            reasons.append(f"Matched {matched_tokens}/{len(tokens)} search terms")

    if not query_matched:
        return None

    criterion_matched = False

    if query.skills:
        matched_skills, _ = match_skills(text, query.skills, catalog=catalog)
        if matched_skills:
            criterion_matched = True
            score += len(matched_skills) * 100 // len(query.skills)
            reasons.append(
                f"Found {len(matched_skills)}/{len(query.skills)} required skills: "
                f"{', '.join(matched_skills)}"
            )

    if query.min_experience is not None and application.years_of_experience >= query.min_experience:
        criterion_matched = True
        score += SEARCH_EXPERIENCE_BONUS
        reasons.append(
            f"Has {application.years_of_experience} years of experience "
            f"(required: {query.min_experience}+)"
        )

    if query.languages:
        languages = extract_languages(text, query.languages, catalog=catalog)
        if languages:
            criterion_matched = True
            score += len(languages) * 100 // len(query.languages) // SEARCH_LANGUAGE_DIVISOR
            reasons.append(f"Found languages: {', '.join(languages)}")

    if query.current_position and query.current_position.lower() in application.current_position.lower():
        criterion_matched = True
        score += SEARCH_POSITION_BONUS
        reasons.append(f"Current position matches: {application.current_position}")

    if query.has_scored_criteria and not criterion_matched:
        return None

    if not has_query and not query.has_scored_criteria:
        score = SEARCH_DEFAULT_SCORE

    return CandidateSearchResult(
        application=application,
        match_score=min(score, 100),
        matched_skills=matched_skills,
        matched_reasons=reasons,
    )


def search_candidates(
    applications: Iterable[Application],
    query: SearchQuery,
    load_text: TextLoader | None = None,
    catalog: SkillCatalog | None = None,
) -> SearchResponse:
    """Rank candidate applications against a search query.

    Args:
        applications: Candidate pool, in the order ties should keep.
        query: Free-text query, scored criteria and record filters.
        load_text: Returns a candidate's CV text, extracting and caching it
            when needed. Defaults to `load_application_text`.
        catalog: Skill tables (defaults to the built-in catalog).

    Returns:
        SearchResponse sorted by descending score and truncated to the limit.
    """
    load_text = load_text or load_application_text
    catalog = catalog or get_default_catalog()

    pool = list(applications)
    results: list[CandidateSearchResult] = []
    skipped = 0

    for application in pool:
        if not passes_filters(application, query):
            continue

        text = load_text(application)
        if not text or len(text) < MIN_CV_TEXT_CHARS:
            skipped += 1
            continue

        result = score_candidate(application, text, query, catalog)
        if result is not None:
            results.append(result)

    # sort() is stable, so equal scores keep pool order
    results.sort(key=lambda r: r.match_score, reverse=True)
    results = results[:query.limit]

    logger.info(
        f"Search returned {len(results)} of {len(pool)} candidates "
        f"({skipped} without usable CV text)"
    )

    return SearchResponse(candidates=results, count=len(results), total=len(pool))
