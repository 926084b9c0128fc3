"""Request and response schemas for milestone endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from pathos.milestones.progress import MilestoneProgress
from pathos.models import MilestoneStatus

# -- Requests --


class CreateMilestoneRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    project_id: str = Field(min_length=1)
    parent_id: str | None = None
    target_date: datetime | None = None
    order: int = Field(default=0, ge=0)


class PatchMilestoneRequest(BaseModel):
    """Fields to update on a milestone. Only fields present in the request body are changed.

    ``parent_id: null`` makes the milestone a root.
    """

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    status: MilestoneStatus | None = None
    parent_id: str | None = None
    target_date: datetime | None = None
    order: int | None = Field(default=None, ge=0)


# -- Responses --


class MilestoneRef(BaseModel):
    milestone_id: str
    title: str
    status: str
    completed_at: str | None = None
    target_date: str | None = None


class MilestoneTaskRef(BaseModel):
    task_id: str
    title: str
    completed: bool
    completed_at: str | None = None
    due_date: str | None = None


class MilestoneEntryRef(BaseModel):
    entry_id: str
    title: str
    type: str
    published_at: str | None = None


class MilestoneResponse(BaseModel):
    milestone_id: str
    user_id: str
    project_id: str
    parent_id: str | None = None
    title: str
    description: str | None = None
    status: str
    target_date: str | None = None
    completed_at: str | None = None
    order: int = 0
    created_at: str
    project_title: str | None = None
    parent: MilestoneRef | None = None
    children: list[MilestoneRef] = Field(default_factory=list)
    tasks: list[MilestoneTaskRef] = Field(default_factory=list)
    entries: list[MilestoneEntryRef] = Field(default_factory=list)
    progress: MilestoneProgress
