"""Request and response schemas for time tracking."""

from datetime import datetime

from pydantic import BaseModel, Field

# -- Requests --


class LogTimeEntryRequest(BaseModel):
    """A block of time spent. ``duration`` is in minutes.

    When ``duration`` is omitted it is derived from the two timestamps.
    """

    description: str | None = None
    duration: int | None = None
    project_id: str | None = None
    task_id: str | None = None
    milestone_id: str | None = None
    started_at: datetime
    ended_at: datetime


# -- Responses --


class TimeEntryResponse(BaseModel):
    time_entry_id: str
    user_id: str
    project_id: str | None = None
    task_id: str | None = None
    milestone_id: str | None = None
    description: str | None = None
    duration: int
    started_at: str
    ended_at: str
    created_at: str
    project_title: str | None = None
    task_title: str | None = None
    milestone_title: str | None = None


class TimeEntryListResponse(BaseModel):
    time_entries: list[TimeEntryResponse] = Field(default_factory=list)
    total_time: int = 0
    count: int = 0
