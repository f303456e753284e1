"""Weighted CV scoring against shortlisting criteria.

All arithmetic is integer with truncating division, so the same inputs
always produce the same score:

    match_score = (skills*40 + experience*30 + languages*20 + job_description*10) // 100
"""

import logging

from cvmatch.config import (
    EXPERIENCE_WEIGHT,
    JOB_DESCRIPTION_MIN_WORD_LENGTH,
    JOB_DESCRIPTION_WEIGHT,
    LANGUAGE_WEIGHT,
    SKILLS_WEIGHT,
)
from cvmatch.explainer.generator import (
    generate_match_reason,
    generate_summary,
    identify_strengths,
)
from cvmatch.matching.analyzers import extract_experience, extract_languages, match_skills
from cvmatch.schemas.criteria import Criteria
from cvmatch.schemas.match import MatchResult
from cvmatch.skills.catalog import SkillCatalog

logger = logging.getLogger(__name__)


def _clamp(value: int) -> int:
    return max(0, min(100, value))


def compute_ratio_match(matched: int, required: int) -> int:
    """Score the share of required items found; nothing required is a full match."""
    if required <= 0:
        return 100
    return _clamp(matched * 100 // required)


def compute_experience_match(experience: int, min_experience: int) -> int:
    """Score detected experience against the minimum required.

    Args:
        experience: Years detected in the CV (0 when not detected).
        min_experience: Minimum years required (0 means no requirement).

    Returns:
        100 when the requirement is met or absent, the truncated share of it
        otherwise, 0 when nothing was detected.
    """
    if min_experience <= 0 or experience >= min_experience:
        return 100
    if experience > 0:
        return _clamp(experience * 100 // min_experience)
    return 0


def compute_job_description_match(text: str, criteria: Criteria) -> int:
    """Score word overlap between the job description and the CV.

    Description and requirements are split on whitespace; only lowercase
    tokens longer than JOB_DESCRIPTION_MIN_WORD_LENGTH count, and each one
    found anywhere in the CV text counts as a hit.
    """
    job_text = " ".join(part for part in (criteria.job_description, criteria.job_requirements) if part)
    if not criteria.match_job_description or not job_text.strip():
        return 100

    words = [word for word in job_text.lower().split() if len(word) > JOB_DESCRIPTION_MIN_WORD_LENGTH]
    if not words:
        return 100

    text_lower = text.lower()
    matched = sum(1 for word in words if word in text_lower)
    return _clamp(matched * 100 // len(words))


def combine_scores(
    skills_match: int,
    experience_match: int,
    language_match: int,
    job_description_match: int,
) -> int:
    """Combine component scores into the weighted overall score."""
    total = (
        skills_match * SKILLS_WEIGHT
        + experience_match * EXPERIENCE_WEIGHT
        + language_match * LANGUAGE_WEIGHT
        + job_description_match * JOB_DESCRIPTION_WEIGHT
    )
    return _clamp(total // 100)


def match_cv(
    text: str,
    criteria: Criteria,
    job_title: str = "",
    catalog: SkillCatalog | None = None,
) -> MatchResult:
    """Score CV text against shortlisting criteria.

    Pure and deterministic given the same text, criteria and catalog.

    Args:
        text: Extracted CV text.
        criteria: Shortlisting rubric.
        job_title: Title of the job being matched (informational only).
        catalog: Skill tables (defaults to the built-in catalog).

    Returns:
        MatchResult with the overall score, its components and presentation
        strings.
    """
    required = list(criteria.required_skills)
    matched_skills, additional_skills = match_skills(text, required, catalog=catalog)
    missing_skills = [skill for skill in required if skill not in matched_skills]

    experience = extract_experience(text)
    languages = extract_languages(text, criteria.required_languages, catalog=catalog)

    skills_match = compute_ratio_match(len(matched_skills), len(required))
    experience_match = compute_experience_match(experience, criteria.min_experience)
    language_match = compute_ratio_match(len(languages), len(criteria.required_languages))
    job_description_match = compute_job_description_match(text, criteria)

    result = MatchResult(
        match_score=combine_scores(skills_match, experience_match, language_match, job_description_match),
        skills=matched_skills,
        missing_skills=missing_skills,
        additional_skills=additional_skills,
        experience=experience,
        languages=languages,
        skills_match=skills_match,
        experience_match=experience_match,
        language_match=language_match,
        job_description_match=job_description_match,
    )
    result.summary = generate_summary(result, criteria)
    result.match_reason = generate_match_reason(result, criteria)
    result.strengths = identify_strengths(result, text)

    if job_title:
        logger.debug(f"Scored CV for '{job_title}': {result.match_score}")

    return result

