from pydantic import BaseModel, Field


class Job(BaseModel):
    """A job posting whose applications are scored."""

    id: str = Field(description="Unique identifier for the job")
    title: str = Field(description="Job title")
    description: str = Field(default="", description="Free-text job description")
    requirements: str = Field(default="", description="Free-text job requirements")
    company_id: str | None = Field(default=None, description="Owning company identifier")
    shortlist_criteria: str | None = Field(
        default=None,
        description="Stored shortlisting criteria as a raw JSON blob"
    )
