from pydantic import BaseModel, Field, field_validator

from cvmatch.config import SEARCH_DEFAULT_LIMIT, SEARCH_MAX_LIMIT
from cvmatch.schemas.candidate import Application


class SearchQuery(BaseModel):
    """Free-text query plus structured filters for candidate search."""

    query: str = Field(default="", description="General free-text search")
    skills: list[str] = Field(default_factory=list, description="Required skills")
    min_experience: int | None = Field(default=None, description="Minimum years of experience")
    max_experience: int | None = Field(default=None, description="Maximum years of experience")
    current_position: str = Field(default="", description="Current position keyword")
    languages: list[str] = Field(default_factory=list, description="Required languages")
    has_portfolio: bool | None = Field(default=None, description="Require a portfolio URL")
    has_linkedin: bool | None = Field(default=None, description="Require a LinkedIn URL")
    status: str = Field(default="", description="Application status filter")
    limit: int = Field(default=SEARCH_DEFAULT_LIMIT, description="Maximum results to return")

    @field_validator("limit", mode="before")
    @classmethod
    def _normalize_limit(cls, value):
        """Out-of-range limits fall back to the default."""
        if value is None or value <= 0 or value > SEARCH_MAX_LIMIT:
            return SEARCH_DEFAULT_LIMIT
        return value

    @property
    def has_scored_criteria(self) -> bool:
        """True when any criterion that contributes to the score is set."""
        return bool(
            self.skills
            or self.min_experience is not None
            or self.languages
            or self.current_position
        )


class CandidateSearchResult(BaseModel):
    """One ranked candidate returned by search."""

    application: Application = Field(description="The matched application record")
    match_score: int = Field(ge=0, le=100, description="Search relevance score (0-100)")
    matched_skills: list[str] = Field(
        default_factory=list,
        description="Requested skills found in the CV"
    )
    matched_reasons: list[str] = Field(
        default_factory=list,
        description="Human-readable reasons why the candidate matched"
    )


class SearchResponse(BaseModel):
    """Ranked, truncated search results."""

    candidates: list[CandidateSearchResult] = Field(default_factory=list)
    count: int = Field(default=0, description="Number of results returned")
    total: int = Field(default=0, description="Number of candidates considered")
