"""Admin user management endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from app.dependencies import AdminUser, Cache, DatabaseSession
from app.schemas.users import UserAdminUpdate, UserItemResponse, UserListResponse
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=UserListResponse)
async def list_users(
    _admin: AdminUser,
    db: DatabaseSession,
    cache_manager: Cache,
    sort: str | None = Query(None, description="Sort field, prefix with - for descending"),
):
    """List all users (admin only)."""
    items = await UserService(cache_manager).list_users(db, sort=sort)
    return {"items": items}


@router.patch("/{user_id}", response_model=UserItemResponse)
async def update_user(
    user_id: UUID,
    data: UserAdminUpdate,
    _admin: AdminUser,
    db: DatabaseSession,
    cache_manager: Cache,
):
    """Change an account's type or a provider's active flag (admin only)."""
    item = await UserService(cache_manager).admin_update_user(db, user_id, data)
    return {"item": item}


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID,
    admin: AdminUser,
    db: DatabaseSession,
    cache_manager: Cache,
) -> Response:
    """Delete an account and its provider profile (admin only)."""
    await UserService(cache_manager).delete_user(db, admin["id"], user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
