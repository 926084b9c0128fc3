"""FastAPI route for the onboarding questionnaire import."""

from fastapi import APIRouter, Depends

from pathos.auth import get_current_user_id
from pathos.onboarding.schemas import OnboardingResult, PassionDetailsRequest
from pathos.onboarding.service import OnboardingService

router = APIRouter(prefix="/api/onboarding", tags=["onboarding"])


def get_onboarding_service() -> OnboardingService:
    """Dependency placeholder — replaced at app startup."""
    raise RuntimeError("OnboardingService not initialized")


@router.post("/passion-details")
async def import_passion_details(
    request: PassionDetailsRequest,
    user_id: str = Depends(get_current_user_id),
    service: OnboardingService = Depends(get_onboarding_service),
) -> OnboardingResult:
    return await service.import_passion_details(user_id, request)
