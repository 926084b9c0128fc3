"""Request and response schemas for passion and user-passion endpoints."""

from pydantic import BaseModel, Field

# -- Requests --


class CreatePassionRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    parent_id: str | None = None
    icon: str | None = None
    color: str | None = None


class AddUserPassionRequest(BaseModel):
    passion_id: str


# -- Responses --


class PassionSummary(BaseModel):
    passion_id: str
    name: str
    slug: str
    icon: str | None = None
    color: str | None = None


class PassionResponse(BaseModel):
    passion_id: str
    name: str
    slug: str
    parent_id: str | None = None
    is_custom: bool = False
    description: str | None = None
    icon: str | None = None
    color: str | None = None
    created_at: str
    parent: PassionSummary | None = None
    children: list[PassionSummary] = Field(default_factory=list)
    user_count: int = 0
    project_count: int = 0
    is_joined: bool | None = None  # only when the caller asked for membership


class UserPassionResponse(BaseModel):
    user_id: str
    passion_id: str
    created_at: str
    passion: PassionResponse
