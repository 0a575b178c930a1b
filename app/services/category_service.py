"""Category service for business logic."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestException, ConflictException, NotFoundException
from app.core.redis_client import CacheManager
from app.core.sorting import sort_clause
from app.models.categorias import categorias
from app.models.prestadores import prestadores
from app.schemas.categorias import CategoriaCreate, CategoriaUpdate

logger = structlog.get_logger(__name__)

CATEGORY_SORT_COLUMNS = {"created_at", "nome", "ativo"}


class CategoryService:
    """Service for category operations."""

    # Cache TTL in seconds (10 minutes for the category list)
    CATEGORY_LIST_CACHE_TTL = 600

    def __init__(self, cache_manager: CacheManager | None = None):
        """Initialize service with optional cache manager."""
        self.cache = cache_manager

    @staticmethod
    def _get_list_cache_key(ativo: bool | None, sort: str | None) -> str:
        """Generate cache key for a category listing."""
        return f"categoria:list:{ativo}:{sort or ''}"

    def _invalidate_list_cache(self) -> None:
        if self.cache:
            self.cache.delete_pattern("categoria:list:*")

    async def list_categories(
        self, db: AsyncSession, ativo: bool | None = None, sort: str | None = None
    ) -> list[dict]:
        """List categories with caching."""
        cache_key = self._get_list_cache_key(ativo, sort)
        if self.cache:
            cached = self.cache.get_json(cache_key)
            if cached is not None:
                return cached

        query = select(categorias)
        if ativo is not None:
            query = query.where(categorias.c.ativo == ativo)
        query = query.order_by(
            sort_clause(categorias, sort, CATEGORY_SORT_COLUMNS, default="nome"),
            categorias.c.id,
        )

        result = await db.execute(query)
        items = [dict(row) for row in result.mappings().all()]

        if self.cache:
            self.cache.set_json(cache_key, items, ttl=self.CATEGORY_LIST_CACHE_TTL)

        return items

    async def get_category(self, db: AsyncSession, category_id: UUID) -> dict | None:
        """Get category by ID."""
        result = await db.execute(select(categorias).where(categorias.c.id == category_id))
        row = result.mappings().first()
        return dict(row) if row else None

    async def require_category_name(self, db: AsyncSession, category_id: UUID) -> str:
        """
        Current name of a category, looked up before any dependent write.

        Raises:
            BadRequestException: No category has this id
        """
        result = await db.execute(select(categorias.c.nome).where(categorias.c.id == category_id))
        nome = result.scalar_one_or_none()
        if nome is None:
            raise BadRequestException("Category not found")
        return nome

    async def create_category(self, db: AsyncSession, data: CategoriaCreate) -> dict:
        """Create a new category."""
        nome = (data.nome or "").strip()
        if not nome:
            raise BadRequestException("Category name is required")

        category_id = uuid4()
        await db.execute(
            categorias.insert().values(
                id=category_id,
                nome=nome,
                icone=data.icone or "User",
                ativo=data.ativo,
            )
        )
        await db.commit()
        self._invalidate_list_cache()

        logger.info("category_created", category_id=str(category_id))
        return await self.get_category(db, category_id)  # type: ignore[return-value]

    async def update_category(
        self, db: AsyncSession, category_id: UUID, data: CategoriaUpdate
    ) -> dict:
        """
        Update a category.

        A rename is copied onto every provider's denormalized
        ``categoria_nome``.
        """
        changes = data.provided()
        if not changes:
            raise BadRequestException("No valid field to update")
        if "nome" in changes:
            changes["nome"] = (changes["nome"] or "").strip()
            if not changes["nome"]:
                raise BadRequestException("Category name is required")
        if "ativo" in changes and changes["ativo"] is None:
            raise BadRequestException("Invalid active flag")

        existing = await self.get_category(db, category_id)
        if not existing:
            raise NotFoundException("Category not found")

        try:
            await db.execute(
                update(categorias)
                .where(categorias.c.id == category_id)
                .values(**changes, updated_at=datetime.now(UTC))
            )
            if "nome" in changes:
                await db.execute(
                    update(prestadores)
                    .where(prestadores.c.categoria_id == category_id)
                    .values(categoria_nome=changes["nome"])
                )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        self._invalidate_list_cache()
        return await self.get_category(db, category_id)  # type: ignore[return-value]

    async def delete_category(self, db: AsyncSession, category_id: UUID) -> None:
        """Delete a category no provider references."""
        count_query = (
            select(func.count())
            .select_from(prestadores)
            .where(prestadores.c.categoria_id == category_id)
        )
        if (await db.execute(count_query)).scalar_one() > 0:
            raise ConflictException("Cannot delete a category linked to providers")

        result = await db.execute(delete(categorias).where(categorias.c.id == category_id))
        await db.commit()

        if result.rowcount == 0:  # type: ignore[attr-defined]
            raise NotFoundException("Category not found")

        self._invalidate_list_cache()
        logger.info("category_deleted", category_id=str(category_id))
