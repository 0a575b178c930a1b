"""Combined identity and provider profile updates."""

from typing import Any
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestException, NotFoundException
from app.core.redis_client import CacheManager
from app.schemas.profile import ProviderProfilePatch
from app.schemas.providers import PROFILE_FIELDS, ProviderPatch
from app.schemas.users import UserPatch
from app.services.cascade_service import CascadePropagator
from app.services.category_service import CategoryService
from app.services.ownership_service import OwnershipReconciler
from app.services.provider_service import ProviderService, column_values
from app.services.user_service import UserService

logger = structlog.get_logger(__name__)

# Provider columns that always follow the identity
IDENTITY_COPIED_FIELDS = (
    "cpf",
    "data_nascimento",
    "nome_empresa",
    "cnpj",
    "rua",
    "numero",
    "bairro",
    "cidade",
    "estado",
    "cep",
)


class ProfileService:
    """
    Keep an identity and its provider profile consistent.

    The identity is the source of truth for every field the two rows share
    (owner link, name, phone, documents and address). The provider profile
    is created lazily on the first save of a provider account, re-activated
    on later saves and soft-deactivated, never deleted, when the account
    switches to another type.
    """

    def __init__(self, cache_manager: CacheManager | None = None):
        """Initialize service with optional cache manager."""
        self.users = UserService(cache_manager)
        self.providers = ProviderService(cache_manager)
        self.categories = CategoryService(cache_manager)
        self.reconciler = OwnershipReconciler()
        self.cascade = CascadePropagator()

    async def _load_user(self, db: AsyncSession, user_id: UUID) -> dict:
        user = await self.users.get_user_by_id(db, user_id)
        if not user:
            raise NotFoundException("User not found")
        return user

    async def get_provider_profile(self, db: AsyncSession, user_id: UUID) -> dict:
        """Return ``{user, provider}`` for the caller, healing the owner link."""
        user = await self._load_user(db, user_id)
        try:
            provider = await self.reconciler.reconcile(db, user["id"], user["email"])
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return {"user": user, "provider": provider}

    async def apply_identity_patch(
        self, db: AsyncSession, current_user: dict, patch: UserPatch
    ) -> dict:
        """
        Write the identity part of a payload and cascade renames.

        Runs inside the caller's transaction and returns the re-read user.
        """
        changes = await self.users.build_identity_changes(db, current_user, patch)
        user = await self.users.update_user(db, current_user["id"], changes, commit=False)
        if user is None:
            raise NotFoundException("User not found")

        await self.cascade.propagate(
            db,
            user["id"],
            old_email=current_user["email"],
            new_email=user["email"],
            old_name=current_user["full_name"],
            new_name=user["full_name"],
        )
        return user

    async def update_identity(self, db: AsyncSession, user_id: UUID, patch: UserPatch) -> dict:
        """Update the caller's own identity fields only."""
        if not patch.provided():
            raise BadRequestException("No valid field to update")

        current = await self._load_user(db, user_id)
        try:
            user = await self.apply_identity_patch(db, current, patch)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("identity_updated", user_id=str(user_id), fields=sorted(patch.provided()))
        return user

    async def update_provider_profile(
        self, db: AsyncSession, user_id: UUID, payload: ProviderProfilePatch
    ) -> dict:
        """
        Apply a combined identity and provider payload in one transaction.

        Raises:
            NotFoundException: The caller's account no longer exists
            BadRequestException: Invalid identity field, or a provider account
                without an existing category or a phone
            ConflictException: Email taken, or a concurrent first save
                already created the profile
        """
        current = await self._load_user(db, user_id)

        try:
            user = await self.apply_identity_patch(db, current, payload.user)
            provider = await self.reconciler.reconcile(db, user["id"], user["email"])

            if user["tipo"] == "prestador":
                provider = await self._save_provider(db, user, provider, payload.provider)
            elif provider is not None:
                provider = await self._deactivate_provider(db, user, provider)

            await db.commit()
        except Exception:
            await db.rollback()
            raise

        return {"user": user, "provider": provider}

    async def _save_provider(
        self,
        db: AsyncSession,
        user: dict,
        provider: dict | None,
        patch: ProviderPatch,
    ) -> dict:
        existing = provider or {}

        categoria_id = patch.categoria_id if patch.has("categoria_id") else existing.get("categoria_id")
        if not categoria_id:
            raise BadRequestException("A category is required for provider accounts")

        categoria_nome = await self.categories.require_category_name(db, categoria_id)

        telefone = user.get("telefone") or patch.telefone or existing.get("telefone")
        if not telefone:
            raise BadRequestException("A phone number is required for provider accounts")

        values: dict[str, Any] = {
            "user_id": user["id"],
            "user_email": user["email"],
            "nome": user["full_name"],
            "telefone": telefone,
            "categoria_id": categoria_id,
            "categoria_nome": categoria_nome,
            "ativo": True,
        }
        values.update({field: user.get(field) for field in IDENTITY_COPIED_FIELDS})
        values.update(column_values(patch, PROFILE_FIELDS))

        if provider is None:
            values["status_aprovacao"] = "pendente"
            created = await self.providers.insert_provider(db, values)
            logger.info(
                "provider_profile_created",
                provider_id=str(created["id"]),
                owner_id=str(user["id"]),
            )
            return created

        updated = await self.providers.update_provider_row(db, provider["id"], values)
        logger.info(
            "provider_profile_updated",
            provider_id=str(provider["id"]),
            owner_id=str(user["id"]),
            reactivated=not provider["ativo"],
        )
        return updated

    async def _deactivate_provider(self, db: AsyncSession, user: dict, provider: dict) -> dict:
        values = {
            "user_id": user["id"],
            "user_email": user["email"],
            "nome": user["full_name"] or provider["nome"],
            "telefone": user.get("telefone") or provider["telefone"],
            "ativo": False,
        }
        updated = await self.providers.update_provider_row(db, provider["id"], values)
        logger.info(
            "provider_profile_deactivated",
            provider_id=str(provider["id"]),
            owner_id=str(user["id"]),
            tipo=user["tipo"],
        )
        return updated
