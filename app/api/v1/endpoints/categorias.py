"""Category endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from app.core.normalization import parse_boolean
from app.dependencies import AdminUser, Cache, DatabaseSession
from app.schemas.categorias import (
    CategoriaCreate,
    CategoriaItemResponse,
    CategoriaListResponse,
    CategoriaUpdate,
)
from app.services.category_service import CategoryService

router = APIRouter(prefix="/categorias", tags=["Categories"])


@router.get("", response_model=CategoriaListResponse)
async def list_categories(
    db: DatabaseSession,
    cache_manager: Cache,
    ativo: str | None = Query(None, description="Filter by active flag"),
    sort: str | None = Query(None, description="Sort field, prefix with - for descending"),
):
    """List categories."""
    items = await CategoryService(cache_manager).list_categories(
        db, ativo=parse_boolean(ativo), sort=sort
    )
    return {"items": items}


@router.post("", response_model=CategoriaItemResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoriaCreate,
    _admin: AdminUser,
    db: DatabaseSession,
    cache_manager: Cache,
):
    """Create a category (admin only)."""
    item = await CategoryService(cache_manager).create_category(db, data)
    return {"item": item}


@router.patch("/{category_id}", response_model=CategoriaItemResponse)
async def update_category(
    category_id: UUID,
    data: CategoriaUpdate,
    _admin: AdminUser,
    db: DatabaseSession,
    cache_manager: Cache,
):
    """Update a category (admin only)."""
    item = await CategoryService(cache_manager).update_category(db, category_id, data)
    return {"item": item}


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: UUID,
    _admin: AdminUser,
    db: DatabaseSession,
    cache_manager: Cache,
) -> Response:
    """Delete a category no provider uses (admin only)."""
    await CategoryService(cache_manager).delete_category(db, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
