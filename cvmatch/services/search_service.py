"""Candidate search and details over stored applications."""

import logging

from cvmatch.db.applications import get_application, get_applications
from cvmatch.exceptions import CVMatchError
from cvmatch.matching.analyzers import build_candidate_profile
from cvmatch.matching.search import search_candidates
from cvmatch.schemas.candidate import Application, CandidateDetails, CandidateProfile
from cvmatch.schemas.search import SearchQuery, SearchResponse
from cvmatch.services.match_service import get_or_extract_text

logger = logging.getLogger(__name__)


def _load_and_cache_text(application: Application) -> str | None:
    """Text loader for search that writes newly extracted text back to the store."""
    try:
        return get_or_extract_text(application, persist=True)
    except CVMatchError as e:
        logger.warning(f"Skipping application {application.id}: {e}")
        return None


def search_stored_candidates(query: SearchQuery, job_id: str | None = None) -> SearchResponse:
    """Search stored applications.

    Record filters are pushed down to the database; the remaining pool is
    ranked by `search_candidates`.

    Args:
        query: Search query and filters.
        job_id: Only search applications to this job.

    Returns:
        Ranked SearchResponse; `total` counts the candidates loaded.
    """
    applications = get_applications(
        job_id=job_id,
        status=query.status or None,
        has_portfolio=query.has_portfolio,
        has_linkedin=query.has_linkedin,
        min_experience=query.min_experience,
        max_experience=query.max_experience,
        current_position=query.current_position or None,
    )
    logger.info(f"Loaded {len(applications)} candidates for search")

    return search_candidates(applications, query, load_text=_load_and_cache_text)


def get_candidate_details(application_id: str) -> CandidateDetails | None:
    """Get a stored candidate with CV text and the profile read from it.

    Extraction failures leave the text and profile empty.

    Returns:
        CandidateDetails, or None if the application does not exist.
    """
    application = get_application(application_id)
    if application is None:
        return None

    text = _load_and_cache_text(application) or ""
    profile = build_candidate_profile(text) if text else CandidateProfile()

    return CandidateDetails(application=application, cv_text=text, profile=profile)
