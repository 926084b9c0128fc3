"""Request and response schemas for signup, login, and profile endpoints."""

from pydantic import BaseModel, EmailStr, Field

from pathos.models import PrivacyLevel

# -- Requests --


class SignupRequest(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr | None = None
    password: str = Field(min_length=6)


class LoginRequest(BaseModel):
    username: str
    password: str


class UpdateProfileRequest(BaseModel):
    name: str = Field(min_length=1)
    location: str | None = None
    privacy: PrivacyLevel


# -- Responses --


class SignupResponse(BaseModel):
    message: str = "User created successfully"
    user_id: str


class LoginResponse(BaseModel):
    user_id: str
    username: str


class ProfileResponse(BaseModel):
    user_id: str
    username: str
    email: str | None = None
    name: str | None = None
    location: str | None = None
    privacy: str = "public"
    created_at: str
    updated_at: str
