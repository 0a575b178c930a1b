"""Provider directory endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from app.dependencies import Cache, CurrentUser, DatabaseSession
from app.schemas.providers import (
    ProviderCreate,
    ProviderItemResponse,
    ProviderListResponse,
    ProviderUpdate,
)
from app.services.provider_service import ProviderService

router = APIRouter(prefix="/prestadores", tags=["Providers"])


@router.get("", response_model=ProviderListResponse)
async def list_providers(
    db: DatabaseSession,
    cache_manager: Cache,
    provider_id: UUID | None = Query(None, alias="id"),
    user_id: UUID | None = Query(None),
    user_email: str | None = Query(None),
    categoria_id: UUID | None = Query(None),
    ativo: str | None = Query(None),
    destaque: str | None = Query(None),
    sort: str | None = Query(None, description="Sort field, prefix with - for descending"),
):
    """List providers with optional filters."""
    items = await ProviderService(cache_manager).list_providers(
        db,
        provider_id=provider_id,
        user_id=user_id,
        user_email=user_email,
        categoria_id=categoria_id,
        ativo=ativo,
        destaque=destaque,
        sort=sort,
    )
    return {"items": items}


@router.post("", response_model=ProviderItemResponse, status_code=status.HTTP_201_CREATED)
async def create_provider(
    data: ProviderCreate,
    response: Response,
    current_user: CurrentUser,
    db: DatabaseSession,
    cache_manager: Cache,
):
    """
    Create the caller's provider profile.

    When the caller already owns a profile it is returned with 200
    instead of creating a second one.
    """
    item, created = await ProviderService(cache_manager).create_for_owner(db, current_user, data)
    if not created:
        response.status_code = status.HTTP_200_OK
    return {"item": item}


@router.patch("/{provider_id}", response_model=ProviderItemResponse)
async def update_provider(
    provider_id: UUID,
    data: ProviderUpdate,
    current_user: CurrentUser,
    db: DatabaseSession,
    cache_manager: Cache,
):
    """Update a provider profile as its owner or as an admin."""
    item = await ProviderService(cache_manager).update_provider(
        db, current_user, provider_id, data
    )
    return {"item": item}
