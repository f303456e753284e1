from pydantic import BaseModel, Field


class MatchResult(BaseModel):
    """Result of matching a CV against shortlisting criteria."""

    match_score: int = Field(
        ge=0, le=100,
        description="Weighted overall match percentage (0-100)"
    )
    skills: list[str] = Field(
        default_factory=list,
        description="Required skills found in the CV, in criteria order"
    )
    missing_skills: list[str] = Field(
        default_factory=list,
        description="Required skills not found in the CV"
    )
    additional_skills: list[str] = Field(
        default_factory=list,
        description="Well-known or title-inferred skills found but not required"
    )
    experience: int = Field(
        default=0,
        ge=0,
        description="Years of experience detected in the CV (0 when not detected)"
    )
    languages: list[str] = Field(
        default_factory=list,
        description="Required languages found in the CV"
    )
    summary: str = Field(
        default="",
        description="Short summary of the candidate profile"
    )
    match_reason: str = Field(
        default="",
        description="Why the candidate matched or did not match"
    )
    strengths: list[str] = Field(
        default_factory=list,
        description="Qualitative strengths found in the CV"
    )
    skills_match: int = Field(ge=0, le=100, description="Skills component (0-100)")
    experience_match: int = Field(ge=0, le=100, description="Experience component (0-100)")
    language_match: int = Field(ge=0, le=100, description="Language component (0-100)")
    job_description_match: int = Field(
        default=100,
        ge=0, le=100,
        description="Job description overlap component (0-100)"
    )


class AnalysisOutcome(BaseModel):
    """Outcome of analyzing one application in a batch."""

    application_id: str = Field(description="Application that was analyzed")
    full_name: str = Field(default="", description="Candidate full name")
    match_score: int | None = Field(
        default=None,
        description="Stored match score, None when analysis failed"
    )
    error: str | None = Field(default=None, description="Failure message, if any")

    @property
    def ok(self) -> bool:
        return self.error is None
