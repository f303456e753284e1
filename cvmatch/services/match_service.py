"""Match service for scoring stored applications against their job's criteria.

This service handles:
- Scoring a CV straight from its URL
- Resolving which criteria apply (request override, job criteria, defaults)
- Caching extracted CV text on the application (extract once, reuse)
- Analyzing single applications, whole jobs, and reparsing missing CV text
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from cvmatch.cv.reader import check_cv_text, read_cv_text
from cvmatch.db.applications import (
    get_application,
    get_applications,
    get_applications_missing_text,
    get_unscored_applications,
    save_analysis,
    save_parsed_text,
)
from cvmatch.db.jobs import get_job
from cvmatch.exceptions import CriteriaParseError, CVMatchError
from cvmatch.matching.scorer import match_cv
from cvmatch.schemas.candidate import Application
from cvmatch.schemas.criteria import Criteria
from cvmatch.schemas.job import Job
from cvmatch.schemas.match import AnalysisOutcome, MatchResult

logger = logging.getLogger(__name__)


def match_from_url(url: str, criteria: Criteria, job_title: str = "") -> MatchResult:
    """Download a CV, extract its text and score it.

    No retries; the first failing stage raises.

    Args:
        url: Publicly reachable CV document URL.
        criteria: Shortlisting rubric.
        job_title: Title of the job being matched (informational only).

    Returns:
        MatchResult for the CV.

    Raises:
        FetchError: If the document cannot be downloaded.
        ExtractionError: If no usable text could be extracted.
    """
    text = read_cv_text(url)
    return match_cv(text, criteria, job_title=job_title)


def parse_criteria(raw: str) -> Criteria:
    """Parse stored shortlist criteria JSON.

    Raises:
        CriteriaParseError: If the JSON is malformed or has the wrong shape.
    """
    try:
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        return Criteria.model_validate(data)
    except (ValueError, TypeError, ValidationError) as e:
        raise CriteriaParseError(raw, e) from e


def resolve_criteria(job: Job | None, override: Criteria | None = None) -> Criteria:
    """Decide which criteria apply to an analysis.

    An override with any requirement wins. Otherwise the job's stored
    criteria are used, falling back to defaults that score overlap with the
    job description when none are stored or they cannot be parsed. The job's
    description and requirements are always taken from the job.

    Args:
        job: Job the application belongs to, if it still exists.
        override: Criteria supplied by the caller.

    Returns:
        Criteria to score against.
    """
    description = job.description if job else ""
    requirements = job.requirements if job else ""
    job_fields = {"job_description": description, "job_requirements": requirements}

    if override is not None and override.has_requirements:
        logger.info("Using criteria supplied with the request")
        return override.model_copy(update=job_fields)

    if job is not None and job.shortlist_criteria:
        try:
            criteria = parse_criteria(job.shortlist_criteria)
        except CriteriaParseError as e:
            logger.warning(
                f"Failed to parse shortlist criteria for job '{job.title}': "
                f"{e.details.get('cause')}. Using default criteria."
            )
        else:
            logger.info(f"Using shortlist criteria of job '{job.title}'")
            return criteria.model_copy(update=job_fields)
    elif job is not None:
        logger.info(f"No shortlist criteria set for job '{job.title}'. Using default criteria.")

    return Criteria(match_job_description=True, **job_fields)


def get_or_extract_text(application: Application, persist: bool = True) -> str:
    """Get CV text from the application cache or extract it from the CV URL.

    Args:
        application: Application to read; its cached text is updated in place.
        persist: Write newly extracted text back to the database.

    Returns:
        CV text, at least MIN_CV_TEXT_CHARS long.

    Raises:
        FetchError: If the document cannot be downloaded.
        ExtractionError: If no usable text could be extracted.
    """
    if application.parsed_cv_text:
        logger.info(f"Using cached CV text for application {application.id}")
        return check_cv_text(application.parsed_cv_text)

    text = read_cv_text(application.resume_url)
    application.parsed_cv_text = text

    if persist:
        save_parsed_text(application.id, text)
        logger.info(f"Saved CV text for application {application.id}")

    return text


def _analyze(application: Application, job: Job | None, criteria: Criteria | None) -> MatchResult:
    resolved = resolve_criteria(job, criteria)
    job_title = job.title if job else ""

    logger.info(f"Analyzing CV for {application.full_name} (application {application.id})")
    text = get_or_extract_text(application)
    result = match_cv(text, resolved, job_title=job_title)

    save_analysis(application.id, result)
    logger.info(
        f"CV match for {application.full_name}: score={result.match_score}%, "
        f"skills={result.skills}, experience={result.experience} years"
    )
    return result


def analyze_application(
    application_id: str,
    criteria: Criteria | None = None,
) -> MatchResult | None:
    """Score one application and store the result.

    Safe to run as a background task: matching failures are logged, not
    raised.

    Args:
        application_id: Application to analyze.
        criteria: Optional criteria overriding the job's.

    Returns:
        The stored MatchResult, or None if the application was not found or
        could not be analyzed.
    """
    application = get_application(application_id)
    if application is None:
        logger.warning(f"Application {application_id} not found")
        return None

    job = get_job(application.job_id) if application.job_id else None

    try:
        return _analyze(application, job, criteria)
    except CVMatchError as e:
        logger.error(
            f"Failed to analyze CV for {application.full_name} "
            f"(application {application.id}): {e}"
        )
        logger.error(f"CV URL: {application.resume_url}")
        return None


def batch_analyze(
    job_id: str,
    criteria: Criteria | None = None,
    status: str | None = "pending",
) -> list[AnalysisOutcome]:
    """Score every application to a job.

    Args:
        job_id: Job whose applications are analyzed.
        criteria: Optional criteria overriding the job's.
        status: Only analyze applications with this status (None for all).

    Returns:
        One outcome per application, in application order.
    """
    job = get_job(job_id)
    if job is None:
        logger.warning(f"Job {job_id} not found")
        return []

    applications = get_applications(job_id=job_id, status=status)
    logger.info(f"Analyzing {len(applications)} applications for job '{job.title}'")

    outcomes = []
    for application in applications:
        try:
            result = _analyze(application, job, criteria)
        except CVMatchError as e:
            logger.error(f"Failed to analyze application {application.id}: {e}")
            outcomes.append(
                AnalysisOutcome(
                    application_id=application.id,
                    full_name=application.full_name,
                    error=str(e),
                )
            )
            continue

        outcomes.append(
            AnalysisOutcome(
                application_id=application.id,
                full_name=application.full_name,
                match_score=result.match_score,
            )
        )

    succeeded = sum(1 for outcome in outcomes if outcome.ok)
    logger.info(f"Batch analysis complete: {succeeded}/{len(outcomes)} succeeded")
    return outcomes


def reparse_missing_cvs(job_id: str | None = None) -> dict[str, Any]:
    """Extract and cache CV text for applications that have none.

    Args:
        job_id: Only applications to this job (None for all).

    Returns:
        Stats dict with total, succeeded and failed counts.
    """
    applications = get_applications_missing_text(job_id)
    stats = {"total": len(applications), "succeeded": 0, "failed": 0}

    for application in applications:
        try:
            get_or_extract_text(application)
            stats["succeeded"] += 1
        except CVMatchError as e:
            logger.warning(f"Failed to parse CV for application {application.id}: {e}")
            stats["failed"] += 1

    logger.info(f"Reparse complete: {stats}")
    return stats


def analyze_pending_applications(job_id: str | None = None) -> dict[str, Any]:
    """Analyze every pending application that has no stored result yet.

    Called by the scheduled runner to catch up on applications submitted
    since the last run.

    Args:
        job_id: Only applications to this job (None for all).

    Returns:
        Stats dict with total, analyzed and failed counts.
    """
    applications = get_unscored_applications(job_id)
    stats = {"total": len(applications), "analyzed": 0, "failed": 0}
    jobs: dict[str, Job | None] = {}

    for application in applications:
        if application.job_id and application.job_id not in jobs:
            jobs[application.job_id] = get_job(application.job_id)
        job = jobs.get(application.job_id) if application.job_id else None

        try:
            _analyze(application, job, None)
            stats["analyzed"] += 1
        except CVMatchError as e:
            logger.error(f"Failed to auto-analyze application {application.id}: {e}")
            logger.error(f"CV URL: {application.resume_url}")
            stats["failed"] += 1

    logger.info(f"Pending analysis complete: {stats}")
    return stats
