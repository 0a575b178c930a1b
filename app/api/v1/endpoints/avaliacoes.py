"""Review endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from app.dependencies import Cache, CurrentUser, DatabaseSession
from app.schemas.avaliacoes import (
    AvaliacaoCreate,
    AvaliacaoItemResponse,
    AvaliacaoListResponse,
)
from app.services.review_service import ReviewService

router = APIRouter(prefix="/avaliacoes", tags=["Reviews"])


@router.get("", response_model=AvaliacaoListResponse)
async def list_reviews(
    db: DatabaseSession,
    cache_manager: Cache,
    prestador_id: UUID | None = Query(None, description="Provider whose reviews to list"),
):
    """List a provider's reviews, newest first."""
    items = await ReviewService(cache_manager).list_reviews(db, prestador_id)
    return {"items": items}


@router.get("/solicitacao/{solicitacao_id}", response_model=AvaliacaoItemResponse)
async def get_request_review(
    solicitacao_id: UUID,
    db: DatabaseSession,
    cache_manager: Cache,
):
    item = await ReviewService(cache_manager).get_review_for_request(db, solicitacao_id)
    return {"item": item}


@router.post("", response_model=AvaliacaoItemResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    data: AvaliacaoCreate,
    current_user: CurrentUser,
    db: DatabaseSession,
    cache_manager: Cache,
):
    """Review a completed request and refresh the provider's rating."""
    item = await ReviewService(cache_manager).create_review(db, current_user, data)
    return {"item": item}
