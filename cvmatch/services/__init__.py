"""Service layer for cvmatch operations."""

from cvmatch.services.match_service import (
    analyze_application,
    analyze_pending_applications,
    batch_analyze,
    get_or_extract_text,
    match_from_url,
    parse_criteria,
    reparse_missing_cvs,
    resolve_criteria,
)
from cvmatch.services.search_service import get_candidate_details, search_stored_candidates

__all__ = [
    "match_from_url",
    "parse_criteria",
    "resolve_criteria",
    "get_or_extract_text",
    "analyze_application",
    "analyze_pending_applications",
    "batch_analyze",
    "reparse_missing_cvs",
    "search_stored_candidates",
    "get_candidate_details",
]
