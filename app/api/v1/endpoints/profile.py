"""Provider profile endpoints."""

from fastapi import APIRouter

from app.dependencies import Cache, CurrentUser, DatabaseSession
from app.schemas.profile import ProviderProfilePatch, ProviderProfileResponse
from app.services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("/provider", response_model=ProviderProfileResponse)
async def get_provider_profile(
    current_user: CurrentUser,
    db: DatabaseSession,
    cache_manager: Cache,
):
    """Get the caller's identity and provider profile, if any."""
    return await ProfileService(cache_manager).get_provider_profile(db, current_user["id"])


@router.patch("/provider", response_model=ProviderProfileResponse)
async def update_provider_profile(
    payload: ProviderProfilePatch,
    current_user: CurrentUser,
    db: DatabaseSession,
    cache_manager: Cache,
):
    """
    Save identity and provider fields together.

    A provider account gets its profile created or updated and activated;
    any other account type gets an existing profile deactivated.
    """
    return await ProfileService(cache_manager).update_provider_profile(
        db, current_user["id"], payload
    )
