"""User service for business logic."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

import structlog
from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestException, ConflictException, NotFoundException
from app.core.normalization import (
    InvalidDateError,
    is_valid_email,
    normalize_date_only,
    normalize_email,
    parse_boolean,
)
from app.core.redis_client import CacheManager
from app.core.security import get_password_hash
from app.core.sorting import sort_clause
from app.models.prestadores import prestadores
from app.models.users import users
from app.schemas.users import UserAdminUpdate, UserPatch

logger = structlog.get_logger(__name__)

TIPO_ALIASES = {"client": "cliente", "provider": "prestador"}

USER_SORT_COLUMNS = {"created_at", "updated_at", "full_name", "email", "tipo"}


def normalize_tipo(value: Any) -> str:
    """Map accepted aliases onto the stored account type."""
    raw = str(value or "").strip().lower()
    return TIPO_ALIASES.get(raw, raw)


class UserService:
    """Service for identity (user) operations."""

    def __init__(self, cache_manager: CacheManager | None = None):
        """Initialize service with optional cache manager."""
        self.cache = cache_manager

    async def get_user_by_id(self, db: AsyncSession, user_id: UUID) -> dict | None:
        """Get user by internal ID."""
        query = select(users).where(users.c.id == user_id)
        result = await db.execute(query)
        user = result.mappings().first()
        return dict(user) if user else None

    async def get_user_by_email(self, db: AsyncSession, email: str) -> dict | None:
        """Get user by normalized email."""
        query = select(users).where(users.c.email == normalize_email(email))
        result = await db.execute(query)
        user = result.mappings().first()
        return dict(user) if user else None

    async def email_taken(
        self, db: AsyncSession, email: str, exclude_id: UUID | None = None
    ) -> bool:
        """Whether another account already uses ``email``."""
        query = select(users.c.id).where(users.c.email == normalize_email(email))
        if exclude_id is not None:
            query = query.where(users.c.id != exclude_id)
        result = await db.execute(query.limit(1))
        return result.first() is not None

    async def create_user(
        self,
        db: AsyncSession,
        *,
        full_name: str,
        email: str,
        password: str,
        tipo: str = "cliente",
        **fields: Any,
    ) -> dict:
        """Create a new user with a hashed password."""
        user_id = uuid4()
        query = users.insert().values(
            id=user_id,
            full_name=full_name,
            email=normalize_email(email),
            password_hash=get_password_hash(password),
            tipo=tipo,
            ativo=True,
            **fields,
        )

        try:
            await db.execute(query)
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise ConflictException("Email already registered") from e

        user = await self.get_user_by_id(db, user_id)
        if not user:
            raise ValueError("Failed to create user")

        logger.info("user_created", user_id=str(user_id), tipo=tipo)
        return user

    async def build_identity_changes(
        self, db: AsyncSession, current_user: dict, patch: UserPatch
    ) -> dict[str, Any]:
        """
        Validate the present identity fields of ``patch`` against ``current_user``.

        Returns the column values to write. Nothing is written here, so a
        rejected payload leaves the database untouched.

        Raises:
            BadRequestException: Empty name, malformed email, unknown account
                type or unparseable birthdate
            ConflictException: Email already used by another account
        """
        changes: dict[str, Any] = {}

        for field, value in patch.provided().items():
            if field == "full_name":
                name = str(value or "").strip()
                if not name:
                    raise BadRequestException("Name is required")
                changes["full_name"] = name

            elif field == "email":
                email = normalize_email(value)
                if not email or not is_valid_email(email):
                    raise BadRequestException("Invalid email")
                if email != current_user["email"] and await self.email_taken(
                    db, email, exclude_id=current_user["id"]
                ):
                    raise ConflictException("Email already registered")
                changes["email"] = email

            elif field == "tipo":
                tipo = normalize_tipo(value)
                allowed = {"cliente", "prestador"}
                if current_user["tipo"] == "admin":
                    allowed.add("admin")
                if tipo not in allowed:
                    raise BadRequestException("Invalid account type")
                changes["tipo"] = tipo

            elif field == "data_nascimento":
                try:
                    changes["data_nascimento"] = normalize_date_only(value)
                except InvalidDateError as e:
                    raise BadRequestException("Invalid birth date") from e

            else:
                changes[field] = value

        return changes

    async def update_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        changes: dict[str, Any],
        commit: bool = True,
    ) -> dict | None:
        """
        Write ``changes`` onto a user row.

        With ``commit=False`` the write joins the caller's transaction.
        A unique-index violation on email is reported as a conflict.
        """
        if changes:
            values = {**changes, "updated_at": datetime.now(UTC)}
            query = update(users).where(users.c.id == user_id).values(**values)
            try:
                await db.execute(query)
            except IntegrityError as e:
                raise ConflictException("Email already registered") from e
            if commit:
                await db.commit()

        return await self.get_user_by_id(db, user_id)

    async def list_users(self, db: AsyncSession, sort: str | None = None) -> list[dict]:
        """List all users."""
        query = select(users).order_by(sort_clause(users, sort, USER_SORT_COLUMNS), users.c.id)
        result = await db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    async def admin_update_user(
        self, db: AsyncSession, user_id: UUID, patch: UserAdminUpdate
    ) -> dict:
        """
        Apply an admin edit to another account.

        ``tipo`` may only move an account between cliente and admin, and
        ``ativo`` only applies to providers, where it is mirrored onto the
        provider profile.
        """
        if not (patch.has("tipo") or patch.has("ativo")):
            raise BadRequestException("No valid field to update")

        target = await self.get_user_by_id(db, user_id)
        if not target:
            raise NotFoundException("User not found")

        changes: dict[str, Any] = {}

        if patch.has("tipo"):
            tipo = normalize_tipo(patch.tipo)
            if tipo not in ("cliente", "admin"):
                raise BadRequestException("Invalid account type")
            if target["tipo"] == "prestador":
                raise BadRequestException("Provider accounts cannot change type here")
            if target["tipo"] == "admin" and tipo != "admin":
                await self._ensure_not_last_admin(db, user_id)
            changes["tipo"] = tipo

        if patch.has("ativo"):
            ativo = parse_boolean(patch.ativo)
            if ativo is None:
                raise BadRequestException("Invalid active flag")
            if target["tipo"] != "prestador":
                raise BadRequestException("Only provider accounts can be activated or deactivated")
            changes["ativo"] = ativo

        try:
            user = await self.update_user(db, user_id, changes, commit=False)
            if "ativo" in changes:
                await db.execute(
                    update(prestadores)
                    .where(
                        or_(
                            prestadores.c.user_id == user_id,
                            func.lower(func.trim(prestadores.c.user_email)) == target["email"],
                        )
                    )
                    .values(ativo=changes["ativo"], updated_at=datetime.now(UTC))
                )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("user_updated_by_admin", user_id=str(user_id), fields=sorted(changes))
        return user  # type: ignore[return-value]

    async def delete_user(self, db: AsyncSession, actor_id: UUID, user_id: UUID) -> None:
        """
        Delete an account and its provider profile.

        Raises:
            BadRequestException: Deleting yourself or the last admin
            NotFoundException: Unknown user
        """
        if actor_id == user_id:
            raise BadRequestException("You cannot delete your own account")

        target = await self.get_user_by_id(db, user_id)
        if not target:
            raise NotFoundException("User not found")

        if target["tipo"] == "admin":
            await self._ensure_not_last_admin(db, user_id)

        try:
            await db.execute(
                delete(prestadores).where(
                    or_(
                        prestadores.c.user_id == user_id,
                        func.lower(func.trim(prestadores.c.user_email)) == target["email"],
                    )
                )
            )
            await db.execute(delete(users).where(users.c.id == user_id))
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("user_deleted", user_id=str(user_id))

    async def _ensure_not_last_admin(self, db: AsyncSession, user_id: UUID) -> None:
        query = select(func.count()).select_from(users).where(
            users.c.tipo == "admin", users.c.id != user_id
        )
        remaining = (await db.execute(query)).scalar_one()
        if remaining == 0:
            raise BadRequestException("Cannot remove the last admin")
