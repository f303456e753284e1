from pydantic import BaseModel, ConfigDict, Field, field_validator


class Criteria(BaseModel):
    """Shortlisting rubric for one matching operation."""

    model_config = ConfigDict(frozen=True)

    required_skills: tuple[str, ...] = Field(
        default=(),
        description="Skills the candidate must have, in priority order"
    )
    min_experience: int = Field(
        default=0,
        ge=0,
        description="Minimum years of professional experience"
    )
    required_languages: tuple[str, ...] = Field(
        default=(),
        description="Spoken languages the candidate must know"
    )
    match_job_description: bool = Field(
        default=False,
        description="Whether to score word overlap with the job description"
    )
    job_description: str = Field(
        default="",
        description="Job description text (used only when match_job_description is set)"
    )
    job_requirements: str = Field(
        default="",
        description="Job requirements text (used only when match_job_description is set)"
    )

    @field_validator("required_skills", "required_languages", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        """Stored JSON may carry null instead of an empty list."""
        if value is None:
            return ()
        return value

    @field_validator("job_description", "job_requirements", mode="before")
    @classmethod
    def _none_as_blank(cls, value):
        if value is None:
            return ""
        return value

    @property
    def has_requirements(self) -> bool:
        """True when any skill, experience or language requirement is set."""
        return bool(self.required_skills or self.min_experience or self.required_languages)
