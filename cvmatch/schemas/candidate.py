from pydantic import BaseModel, Field


class Application(BaseModel):
    """A candidate's application record, as held by the persistence layer."""

    id: str = Field(description="Unique identifier for the application")
    job_id: str | None = Field(default=None, description="Job applied to (None if deleted)")
    full_name: str = Field(default="", description="Candidate full name")
    email: str = Field(default="", description="Candidate email")
    resume_url: str = Field(default="", description="Publicly fetchable CV document URL")
    years_of_experience: int = Field(
        default=0,
        description="Years of experience declared on the application form"
    )
    current_position: str = Field(default="", description="Declared current position")
    linkedin_url: str = Field(default="", description="LinkedIn profile URL")
    portfolio_url: str = Field(default="", description="Portfolio URL")
    status: str = Field(default="pending", description="Application status")
    score: int = Field(default=0, description="Last computed match score (0-100)")
    analysis_result: str | None = Field(
        default=None,
        description="Last MatchResult serialized as JSON"
    )
    parsed_cv_text: str | None = Field(
        default=None,
        description="Cached text extracted from the CV document"
    )


class CandidateProfile(BaseModel):
    """Skills and experience read from a CV without any requirements."""

    skills: list[str] = Field(
        default_factory=list,
        description="Well-known and title-inferred skills found in the CV"
    )
    experience: int = Field(
        default=0,
        description="Years of experience detected (0 when not detected)"
    )
    job_title: str = Field(
        default="",
        description="Job title detected in the CV text, empty if none"
    )
    inferred_skills: list[str] = Field(
        default_factory=list,
        description="Skills implied by the detected job title"
    )


class CandidateDetails(BaseModel):
    """A stored candidate with its CV text and the profile read from it."""

    application: Application = Field(description="The application record")
    cv_text: str = Field(default="", description="CV text, empty if it could not be extracted")
    profile: CandidateProfile = Field(
        default_factory=CandidateProfile,
        description="Skills and experience read from the CV text"
    )
