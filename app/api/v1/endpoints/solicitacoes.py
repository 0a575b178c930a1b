"""Service request endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from app.dependencies import Cache, CurrentUser, DatabaseSession
from app.schemas.solicitacoes import (
    SolicitacaoCreate,
    SolicitacaoItemResponse,
    SolicitacaoListResponse,
    SolicitacaoUpdate,
)
from app.services.request_service import RequestService

router = APIRouter(prefix="/solicitacoes", tags=["Requests"])


@router.get("", response_model=SolicitacaoListResponse)
async def list_requests(
    current_user: CurrentUser,
    db: DatabaseSession,
    cache_manager: Cache,
    cliente_email: str | None = Query(None),
    prestador_email: str | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    sort: str | None = Query(None),
):
    """List the caller's requests; admins see all of them."""
    items = await RequestService(cache_manager).list_requests(
        db,
        current_user,
        cliente_email=cliente_email,
        prestador_email=prestador_email,
        status=status_filter,
        sort=sort,
    )
    return {"items": items}


@router.post("", response_model=SolicitacaoItemResponse, status_code=status.HTTP_201_CREATED)
async def create_request(
    data: SolicitacaoCreate,
    current_user: CurrentUser,
    db: DatabaseSession,
    cache_manager: Cache,
):
    """Send a request to a provider."""
    item = await RequestService(cache_manager).create_request(db, current_user, data)
    return {"item": item}


@router.patch("/{request_id}", response_model=SolicitacaoItemResponse)
async def update_request(
    request_id: UUID,
    data: SolicitacaoUpdate,
    current_user: CurrentUser,
    db: DatabaseSession,
    cache_manager: Cache,
):
    """Update a request as its client, its provider or an admin."""
    item = await RequestService(cache_manager).update_request(
        db, current_user, request_id, data
    )
    return {"item": item}
