"""Provider (prestador) service for business logic."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

import structlog
from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    BadRequestException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
)
from app.core.normalization import (
    InvalidDateError,
    normalize_date_only,
    normalize_email,
    parse_boolean,
)
from app.core.redis_client import CacheManager
from app.core.sorting import sort_clause
from app.models.prestadores import prestadores
from app.models.users import users
from app.schemas.base import PatchModel
from app.schemas.providers import ADMIN_FIELDS, ProviderCreate, ProviderUpdate
from app.services.category_service import CategoryService
from app.services.ownership_service import OwnershipReconciler

logger = structlog.get_logger(__name__)

PROVIDER_SORT_COLUMNS = {"created_at", "updated_at", "nome", "preco_base", "destaque", "avaliacao"}

# Columns a direct edit may touch, besides the admin-only ones
EDITABLE_FIELDS = (
    "nome",
    "cpf",
    "data_nascimento",
    "telefone",
    "nome_empresa",
    "cnpj",
    "tipo_empresa",
    "categoria_id",
    "descricao",
    "servicos",
    "valor_hora",
    "preco_base",
    "tempo_medio_atendimento",
    "dias_disponiveis",
    "horarios_disponiveis",
    "rua",
    "numero",
    "bairro",
    "cidade",
    "estado",
    "cep",
    "raio_atendimento",
    "foto",
    "foto_facial",
    "foto_documento",
    "logo_empresa",
    "fotos_trabalhos",
    "latitude",
    "longitude",
)

REQUIRED_ON_CREATE = ("nome", "categoria_id", "telefone")


def column_values(patch: PatchModel, fields: tuple[str, ...]) -> dict[str, Any]:
    """
    Column values for the fields of ``patch`` that were sent.

    ``servicos`` and ``fotos_trabalhos`` are stored as JSON lists and are
    always replaced as a whole.
    """
    values: dict[str, Any] = {}
    for field in fields:
        if not patch.has(field):
            continue
        value = getattr(patch, field)
        if field == "servicos":
            values[field] = [item.model_dump(mode="json") for item in value or []]
        elif field == "fotos_trabalhos":
            values[field] = list(value or [])
        elif field == "data_nascimento":
            try:
                values[field] = normalize_date_only(value)
            except InvalidDateError as e:
                raise BadRequestException("Invalid birth date") from e
        else:
            values[field] = value
    return values


class ProviderService:
    """Service for provider profile operations."""

    def __init__(self, cache_manager: CacheManager | None = None):
        """Initialize service with optional cache manager."""
        self.cache = cache_manager
        self.categories = CategoryService(cache_manager)
        self.reconciler = OwnershipReconciler()

    async def get_provider(self, db: AsyncSession, provider_id: UUID) -> dict | None:
        """Get provider by ID."""
        result = await db.execute(select(prestadores).where(prestadores.c.id == provider_id))
        row = result.mappings().first()
        return dict(row) if row else None

    async def list_providers(
        self,
        db: AsyncSession,
        *,
        provider_id: UUID | None = None,
        user_id: UUID | None = None,
        user_email: str | None = None,
        categoria_id: UUID | None = None,
        ativo: str | None = None,
        destaque: str | None = None,
        sort: str | None = None,
    ) -> list[dict]:
        """List providers with optional filters."""
        query = select(prestadores)

        if provider_id is not None:
            query = query.where(prestadores.c.id == provider_id)
        if user_id is not None:
            query = query.where(prestadores.c.user_id == user_id)
        if user_email is not None:
            query = query.where(
                func.lower(func.trim(prestadores.c.user_email)) == normalize_email(user_email)
            )
        if categoria_id is not None:
            query = query.where(prestadores.c.categoria_id == categoria_id)

        # Unparseable flags are ignored rather than rejected
        ativo_flag = parse_boolean(ativo)
        if ativo_flag is not None:
            query = query.where(prestadores.c.ativo == ativo_flag)
        destaque_flag = parse_boolean(destaque)
        if destaque_flag is not None:
            query = query.where(prestadores.c.destaque == destaque_flag)

        query = query.order_by(
            sort_clause(prestadores, sort, PROVIDER_SORT_COLUMNS), prestadores.c.id
        )
        result = await db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    async def insert_provider(self, db: AsyncSession, values: dict[str, Any]) -> dict:
        """
        Insert a provider row inside the caller's transaction.

        Raises:
            ConflictException: The owner already has a profile
        """
        provider_id = uuid4()
        values.setdefault("servicos", [])
        values.setdefault("fotos_trabalhos", [])
        try:
            await db.execute(prestadores.insert().values(id=provider_id, **values))
        except IntegrityError as e:
            raise ConflictException("Provider profile already exists") from e
        return await self.get_provider(db, provider_id)  # type: ignore[return-value]

    async def update_provider_row(
        self, db: AsyncSession, provider_id: UUID, values: dict[str, Any]
    ) -> dict:
        """Write ``values`` onto a provider row inside the caller's transaction."""
        query = (
            update(prestadores)
            .where(prestadores.c.id == provider_id)
            .values(**values, updated_at=datetime.now(UTC))
        )
        try:
            await db.execute(query)
        except IntegrityError as e:
            raise ConflictException("Provider profile already exists") from e
        return await self.get_provider(db, provider_id)  # type: ignore[return-value]

    async def create_for_owner(
        self, db: AsyncSession, current_user: dict, data: ProviderCreate
    ) -> tuple[dict, bool]:
        """
        Create the caller's provider profile unless one already exists.

        Returns the profile and whether it was created. An existing profile
        is returned as found by the ownership reconciler, with its owner
        link healed.
        """
        for field in REQUIRED_ON_CREATE:
            if not getattr(data, field):
                raise BadRequestException(f"Missing required field: {field}")

        is_admin = current_user["tipo"] == "admin"

        try:
            existing = await self.reconciler.reconcile(
                db, current_user["id"], current_user["email"]
            )
            if existing:
                await db.commit()
                return existing, False

            values = column_values(data, EDITABLE_FIELDS)
            values["categoria_nome"] = await self.categories.require_category_name(
                db, data.categoria_id
            )
            values["user_id"] = current_user["id"]
            values["user_email"] = current_user["email"]
            values["status_aprovacao"] = "pendente"
            values["ativo"] = True

            if is_admin:
                values.update(self._admin_values(data))

            provider = await self.insert_provider(db, values)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "provider_created",
            provider_id=str(provider["id"]),
            owner_id=str(current_user["id"]),
        )
        return provider, True

    async def update_provider(
        self, db: AsyncSession, current_user: dict, provider_id: UUID, data: ProviderUpdate
    ) -> dict:
        """
        Edit a provider row as its owner or as an admin.

        Ownership is matched by id or by normalized email; an owner edit
        also re-points a stale owner link. Admin-only fields sent by a
        non-admin are ignored. An admin change to ``ativo`` is mirrored
        onto the owning identity.
        """
        existing = await self.get_provider(db, provider_id)
        if not existing:
            raise NotFoundException("Provider not found")

        caller_email = normalize_email(current_user["email"])
        owner_email = normalize_email(existing["user_email"])
        is_owner = (
            existing["user_id"] is not None and existing["user_id"] == current_user["id"]
        ) or (bool(caller_email) and caller_email == owner_email)
        is_admin = current_user["tipo"] == "admin"

        if not is_owner and not is_admin:
            raise ForbiddenException("Not allowed to update this provider")

        values = column_values(data, EDITABLE_FIELDS)
        if data.has("categoria_id"):
            values["categoria_nome"] = (
                await self.categories.require_category_name(db, data.categoria_id)
                if data.categoria_id is not None
                else None
            )
        if is_admin:
            values.update(self._admin_values(data))

        if not values:
            raise BadRequestException("No valid field to update")

        if is_owner:
            drift = self.reconciler.ownership_drift(
                existing, current_user["id"], current_user["email"]
            )
            if drift:
                values.update(drift)
                logger.info(
                    "provider_ownership_healed",
                    provider_id=str(provider_id),
                    owner_id=str(current_user["id"]),
                    fields=sorted(drift),
                )

        try:
            provider = await self.update_provider_row(db, provider_id, values)

            if "ativo" in values:
                await db.execute(
                    update(users)
                    .where(
                        or_(
                            users.c.id == existing["user_id"],
                            func.lower(func.trim(users.c.email)) == owner_email,
                        )
                    )
                    .values(ativo=values["ativo"], updated_at=datetime.now(UTC))
                )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("provider_updated", provider_id=str(provider_id), fields=sorted(values))
        return provider

    @staticmethod
    def _admin_values(data: ProviderUpdate) -> dict[str, Any]:
        values = column_values(data, ADMIN_FIELDS)
        if "ativo" in values:
            ativo = parse_boolean(values["ativo"])
            if ativo is None:
                raise BadRequestException("Invalid active flag")
            values["ativo"] = ativo
        for field in ("avaliacao", "destaque", "status_aprovacao"):
            if field in values and values[field] is None:
                raise BadRequestException(f"Invalid value for {field}")
        return values
