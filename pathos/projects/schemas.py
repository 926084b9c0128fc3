"""Request and response schemas for project endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from pathos.models import PrivacyLevel, ProjectStage, ProjectStatus
from pathos.passions.schemas import PassionSummary

# -- Requests --


class CreateProjectRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    passion_id: str
    status: ProjectStatus = "active"
    stage: ProjectStage = "idea"
    privacy: PrivacyLevel = "public"
    start_date: datetime | None = None
    end_date: datetime | None = None


class PatchProjectRequest(BaseModel):
    """Fields to update on a project. Only fields present in the request body are changed.

    The passion a project belongs to is fixed at creation.
    """

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    status: ProjectStatus | None = None
    stage: ProjectStage | None = None
    privacy: PrivacyLevel | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


# -- Responses --


class OwnerSummary(BaseModel):
    user_id: str
    username: str
    name: str | None = None


class ProjectResponse(BaseModel):
    project_id: str
    user_id: str
    passion_id: str
    title: str
    description: str | None = None
    status: str
    stage: str
    privacy: str
    start_date: str | None = None
    end_date: str | None = None
    created_at: str
    updated_at: str
    passion: PassionSummary | None = None
    owner: OwnerSummary | None = None
