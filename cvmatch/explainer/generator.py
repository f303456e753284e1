"""Template-based explanation strings for CV matches.

These are presentation-only: they read a finished MatchResult and never
change its scores.
"""

from cvmatch.schemas.criteria import Criteria
from cvmatch.schemas.match import MatchResult

STRONG_SKILLS_THRESHOLD = 80
PARTIAL_SKILLS_THRESHOLD = 50
EXTENSIVE_EXPERIENCE_YEARS = 5
DIVERSE_SKILLS_COUNT = 5

_EDUCATION_KEYWORDS = ("degree", "bachelor", "master")
_CERTIFICATION_KEYWORDS = ("certification", "certified")


def generate_summary(result: MatchResult, criteria: Criteria) -> str:
    """Summarize the candidate profile in one line.

    Args:
        result: Scored match.
        criteria: Criteria the match was scored against.

    Returns:
        e.g. "4 years experience, 2/3 required skills, 1 languages".
    """
    parts = []

    if result.experience > 0:
        parts.append(f"{result.experience} years experience")

    if result.skills:
        parts.append(f"{len(result.skills)}/{len(criteria.required_skills)} required skills")

    if result.languages:
        parts.append(f"{len(result.languages)} languages")

    if parts:
        return ", ".join(parts)

    return "Candidate profile analyzed"


def generate_match_reason(result: MatchResult, criteria: Criteria) -> str:
    """Explain the match in terms of skills, experience and languages."""
    reasons = []

    if result.skills_match >= STRONG_SKILLS_THRESHOLD:
        reasons.append("Strong skills match")
    elif result.skills_match >= PARTIAL_SKILLS_THRESHOLD:
        reasons.append("Partial skills match")
    elif criteria.required_skills:
        reasons.append("Missing key skills")

    if result.experience_match >= 100:
        reasons.append("Meets experience requirement")
    elif result.experience_match > 0:
        reasons.append("Below experience requirement")

    if result.language_match >= 100:
        reasons.append("Meets language requirements")
    elif criteria.required_languages:
        reasons.append("Missing language requirements")

    if reasons:
        return ". ".join(reasons)

    return "Basic profile match"


def identify_strengths(result: MatchResult, text: str) -> list[str]:
    """List qualitative strengths visible in the CV.

    Args:
        result: Scored match.
        text: CV text, scanned for education and certification keywords.

    Returns:
        Strength labels in a fixed order.
    """
    text_lower = text.lower()
    strengths = []

    if result.experience >= EXTENSIVE_EXPERIENCE_YEARS:
        strengths.append("Extensive experience")

    if len(result.skills) + len(result.additional_skills) >= DIVERSE_SKILLS_COUNT:
        strengths.append("Diverse skill set")

    if result.skills_match >= STRONG_SKILLS_THRESHOLD:
        strengths.append("Strong technical match")

    if any(keyword in text_lower for keyword in _EDUCATION_KEYWORDS):
        strengths.append("Educational background")

    if any(keyword in text_lower for keyword in _CERTIFICATION_KEYWORDS):
        strengths.append("Professional certifications")

    return strengths
