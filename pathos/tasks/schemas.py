"""Request and response schemas for task endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

# -- Requests --


class CreateTaskRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    project_id: str | None = None
    milestone_id: str | None = None
    due_date: datetime | None = None
    order: int = Field(default=0, ge=0)


class PatchTaskRequest(BaseModel):
    """Fields to update on a task. Only fields present in the request body are changed."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    completed: bool | None = None
    project_id: str | None = None
    milestone_id: str | None = None
    due_date: datetime | None = None
    order: int | None = Field(default=None, ge=0)


# -- Responses --


class TaskMilestoneRef(BaseModel):
    milestone_id: str
    title: str
    status: str
    target_date: str | None = None
    completed_at: str | None = None


class TaskResponse(BaseModel):
    task_id: str
    user_id: str
    project_id: str | None = None
    milestone_id: str | None = None
    title: str
    description: str | None = None
    completed: bool = False
    completed_at: str | None = None
    due_date: str | None = None
    order: int = 0
    created_at: str
    project_title: str | None = None
    milestone: TaskMilestoneRef | None = None
