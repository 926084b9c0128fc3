"""FastAPI routes for signup, login, and the caller's profile."""

from fastapi import APIRouter, Depends, status

from pathos.auth import get_current_user_id, get_user_service
from pathos.users.schemas import (
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    SignupRequest,
    SignupResponse,
    UpdateProfileRequest,
)
from pathos.users.service import UserService

router = APIRouter(prefix="/api", tags=["users"])


@router.post("/auth/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    request: SignupRequest,
    service: UserService = Depends(get_user_service),
) -> SignupResponse:
    user_id = await service.signup(request)
    return SignupResponse(user_id=user_id)


@router.post("/auth/login")
async def login(
    request: LoginRequest,
    service: UserService = Depends(get_user_service),
) -> LoginResponse:
    profile = await service.verify_credentials(request)
    return LoginResponse(user_id=profile.user_id, username=profile.username)


@router.get("/profile")
async def get_profile(
    user_id: str = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
) -> ProfileResponse:
    return await service.get_profile(user_id)


@router.put("/profile")
async def update_profile(
    request: UpdateProfileRequest,
    user_id: str = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
) -> ProfileResponse:
    return await service.update_profile(user_id, request)
