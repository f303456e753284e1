"""Pure text analyzers: skills, languages, experience and job title."""

import re
from functools import lru_cache

from cvmatch.schemas.candidate import CandidateProfile
from cvmatch.skills.catalog import SkillCatalog, get_default_catalog, normalize_skill
from cvmatch.utils import contains_ignore_case

_ROLE_WORDS = r"(?:developer|engineer|manager|analyst|designer|lead|architect)"

# Most to least specific; the first pattern that matches decides.
_TITLE_PATTERNS = [
    re.compile(r"(?:position|role|title|job)[:\s]+([a-z\s]+" + _ROLE_WORDS + ")"),
    re.compile(r"((?:senior|junior|mid-level)\s+[a-z\s]*" + _ROLE_WORDS + ")"),
    re.compile(r"([a-z\s]+" + _ROLE_WORDS + ")"),
]
_MIN_TITLE_LENGTH = 3
_MAX_TITLE_LENGTH = 50

_EXPERIENCE_PATTERNS = [
    re.compile(r"(\d+)\s*\+?\s*years?\s*(?:of\s*)?experience"),
    re.compile(r"experience[:\s]+(\d+)\s*years?"),
    re.compile(r"(\d+)\s*years?\s*experience"),
    re.compile(r"(\d+)\s*y\.?o\.?e\.?"),
]
_YEAR_PATTERN = re.compile(r"(?:19|20)\d{2}")

_MIN_PARTIAL_WORD_LENGTH = 4


@lru_cache(maxsize=1024)
def _whole_word_pattern(term: str) -> re.Pattern[str]:
    return re.compile(r"(?<!\w)" + re.escape(term) + r"(?!\w)")


def _term_in_text(text_lower: str, term: str) -> bool:
    """Substring or whole-word match of a lowercased term."""
    if not term:
        return False
    return term in text_lower or bool(_whole_word_pattern(term).search(text_lower))


def _word_in_text(text_lower: str, term: str) -> bool:
    """Whole-word match only, so "go" does not match "google"."""
    if not term:
        return False
    return bool(_whole_word_pattern(term).search(text_lower))


def extract_job_title(text: str) -> str:
    """Extract the candidate's job title from CV text.

    Args:
        text: CV text.

    Returns:
        Lowercased job title, or an empty string if none was found.
    """
    text_lower = text.lower()

    for pattern in _TITLE_PATTERNS:
        match = pattern.search(text_lower)
        if match:
            title = match.group(1).strip()
            if _MIN_TITLE_LENGTH < len(title) < _MAX_TITLE_LENGTH:
                return title

    return ""


def _has_required_skill(
    text_lower: str,
    skill: str,
    inferred_skills: list[str],
    catalog: SkillCatalog,
) -> bool:
    normalized = normalize_skill(skill)
    if not normalized:
        return False

    if _term_in_text(text_lower, normalized):
        return True

    for synonym in catalog.get_skill_synonyms(skill):
        if _term_in_text(text_lower, normalize_skill(synonym)):
            return True

    # Compound skills: "React.js" is satisfied by "react"
    first_word = normalized.split()[0]
    if len(first_word) >= _MIN_PARTIAL_WORD_LENGTH and first_word in text_lower:
        return True

    for inferred in inferred_skills:
        inferred_lower = inferred.lower()
        if inferred_lower in normalized or normalized in inferred_lower:
            return True

    return False


def match_skills(
    text: str,
    required_skills: list[str] | tuple[str, ...],
    catalog: SkillCatalog | None = None,
) -> tuple[list[str], list[str]]:
    """Find skills in CV text using synonyms and job-title inference.

    Required skills are checked in order with, in turn, direct and whole-word
    matching, synonym matching, first-word partial matching and finally the
    skills implied by the job title detected in the CV. Afterwards any
    well-known technologies mentioned in the CV, and any title-implied skills
    the CV spells out, are appended if not already present.

    Args:
        text: CV text.
        required_skills: Skills requested by the caller (may be empty).
        catalog: Lookup tables (defaults to the built-in catalog).

    Returns:
        Tuple of (matched required skills in input order, discovered skills).
    """
    catalog = catalog or get_default_catalog()
    text_lower = text.lower()

    inferred_skills = catalog.infer_skills_from_job_title(extract_job_title(text))

    matched: list[str] = [
        skill
        for skill in required_skills
        if _has_required_skill(text_lower, skill, inferred_skills, catalog)
    ]
    additional: list[str] = []

    for skill in catalog.common_skills:
        if contains_ignore_case(matched, skill) or contains_ignore_case(additional, skill):
            continue
        if any(_word_in_text(text_lower, term.lower()) for term in catalog.get_skill_synonyms(skill)):
            additional.append(skill)

    for inferred in inferred_skills:
        if contains_ignore_case(matched, inferred) or contains_ignore_case(additional, inferred):
            continue
        if inferred.lower() in text_lower:
            additional.append(inferred)

    return matched, additional


def extract_skills(
    text: str,
    required_skills: list[str] | tuple[str, ...],
    catalog: SkillCatalog | None = None,
) -> list[str]:
    """Matched required skills in input order, followed by discovered skills."""
    matched, additional = match_skills(text, required_skills, catalog=catalog)
    return matched + additional


def extract_languages(
    text: str,
    required_languages: list[str] | tuple[str, ...],
    catalog: SkillCatalog | None = None,
) -> list[str]:
    """Find required spoken languages in CV text.

    Known languages also match their native-script and alternate names
    ("chinese" matches "mandarin" and "中文").

    Returns:
        Matched languages in input order.
    """
    catalog = catalog or get_default_catalog()
    text_lower = text.lower()

    found = []
    for language in required_languages:
        variants = catalog.get_language_variants(language)
        if variants is not None:
            if any(variant in text_lower for variant in variants):
                found.append(language)
        elif language.strip().lower() and language.strip().lower() in text_lower:
            found.append(language)

    return found


def extract_experience(text: str) -> int:
    """Estimate years of experience from CV text.

    Explicit statements ("5+ years of experience", "experience: 4 years",
    "6 yoe") win, taking the largest number stated. Without any, the span
    between the first and the last 19xx/20xx year in reading order is used
    when it is positive.

    Returns:
        Years of experience, 0 when not detected.
    """
    text_lower = text.lower()

    max_years = 0
    for pattern in _EXPERIENCE_PATTERNS:
        for match in pattern.finditer(text_lower):
            max_years = max(max_years, int(match.group(1)))

    if max_years == 0:
        years = _YEAR_PATTERN.findall(text)
        if len(years) >= 2:
            span = int(years[-1]) - int(years[0])
            if span > 0:
                max_years = span

    return max_years


def build_candidate_profile(text: str, catalog: SkillCatalog | None = None) -> CandidateProfile:
    """Summarize a CV without any requirements (candidate details view)."""
    catalog = catalog or get_default_catalog()
    job_title = extract_job_title(text)

    return CandidateProfile(
        skills=extract_skills(text, [], catalog=catalog),
        experience=extract_experience(text),
        job_title=job_title,
        inferred_skills=catalog.infer_skills_from_job_title(job_title),
    )
