"""Request and response schemas for entry endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field, HttpUrl

from pathos.models import EntryType, PrivacyLevel

# -- Requests --


class CreateEntryRequest(BaseModel):
    """A progress update, note, or link post under a project.

    Omitting ``published_at`` publishes immediately; sending ``null``
    saves a draft.
    """

    title: str = Field(min_length=1, max_length=200)
    content: str | None = None
    type: EntryType = "progress"
    privacy: PrivacyLevel = "public"
    project_id: str = Field(min_length=1)
    milestone_id: str | None = None
    media_urls: list[HttpUrl] = Field(default_factory=list)
    links: list[HttpUrl] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    published_at: datetime | None = None


class PatchEntryRequest(BaseModel):
    """Fields to update on an entry. ``published_at: null`` unpublishes it."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    content: str | None = None
    type: EntryType | None = None
    privacy: PrivacyLevel | None = None
    milestone_id: str | None = None
    media_urls: list[HttpUrl] | None = None
    links: list[HttpUrl] | None = None
    tags: list[str] | None = None
    published_at: datetime | None = None


# -- Responses --


class EntryMilestoneRef(BaseModel):
    milestone_id: str
    title: str
    status: str


class EntryResponse(BaseModel):
    entry_id: str
    user_id: str
    project_id: str
    milestone_id: str | None = None
    title: str
    content: str | None = None
    type: str
    privacy: str
    media_urls: list[str] = Field(default_factory=list)
    links: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    published_at: str | None = None
    created_at: str
    project_title: str | None = None
    milestone: EntryMilestoneRef | None = None
