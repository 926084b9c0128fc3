"""Request and response schemas for the onboarding questionnaire import."""

from pydantic import BaseModel, Field

# -- Requests --


class OnboardingProject(BaseModel):
    """A project the user described during onboarding.

    Blank titles and blank next steps are accepted here and skipped by the
    import rather than failing the whole batch.
    """

    title: str
    description: str = ""
    next_steps: list[str] = Field(min_length=1)


class PassionDetail(BaseModel):
    passion_id: str
    specific_area: str | None = None
    current_level: str | None = None
    active_projects: list[OnboardingProject] = Field(default_factory=list)


class PassionDetailsRequest(BaseModel):
    """Questionnaire answers keyed by passion_id."""

    passion_details: dict[str, PassionDetail]


# -- Responses --


class OnboardingResult(BaseModel):
    success: bool = True
    projects_created: int = 0
    skipped: int = 0
