"""Review (avaliacao) service and provider rating recalculation."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    BadRequestException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
)
from app.core.normalization import normalize_email
from app.core.redis_client import CacheManager
from app.models.avaliacoes import avaliacoes
from app.models.prestadores import prestadores
from app.models.solicitacoes import solicitacoes
from app.schemas.avaliacoes import AvaliacaoCreate

logger = structlog.get_logger(__name__)


class ReviewService:
    """Service for client reviews of completed requests."""

    # Cache TTL in seconds (5 minutes for a provider's review list)
    REVIEW_LIST_CACHE_TTL = 300

    def __init__(self, cache_manager: CacheManager | None = None):
        """Initialize service with optional cache manager."""
        self.cache = cache_manager

    @staticmethod
    def _get_list_cache_key(prestador_id: UUID) -> str:
        return f"avaliacao:list:{prestador_id}"

    async def get_review(self, db: AsyncSession, review_id: UUID) -> dict | None:
        """Get review by ID."""
        result = await db.execute(select(avaliacoes).where(avaliacoes.c.id == review_id))
        row = result.mappings().first()
        return dict(row) if row else None

    async def get_review_for_request(self, db: AsyncSession, solicitacao_id: UUID) -> dict | None:
        """The review left on a request, if any."""
        result = await db.execute(
            select(avaliacoes).where(avaliacoes.c.solicitacao_id == solicitacao_id).limit(1)
        )
        row = result.mappings().first()
        return dict(row) if row else None

    async def list_reviews(self, db: AsyncSession, prestador_id: UUID | None) -> list[dict]:
        """List a provider's reviews, newest first."""
        if prestador_id is None:
            raise BadRequestException("prestador_id is required")

        cache_key = self._get_list_cache_key(prestador_id)
        if self.cache:
            cached = self.cache.get_json(cache_key)
            if cached is not None:
                return cached

        result = await db.execute(
            select(avaliacoes)
            .where(avaliacoes.c.prestador_id == prestador_id)
            .order_by(avaliacoes.c.created_at.desc(), avaliacoes.c.id)
        )
        items = [dict(row) for row in result.mappings().all()]

        if self.cache:
            self.cache.set_json(cache_key, items, ttl=self.REVIEW_LIST_CACHE_TTL)

        return items

    async def create_review(
        self, db: AsyncSession, current_user: dict, data: AvaliacaoCreate
    ) -> dict:
        """
        Review a completed request as its client and refresh the provider rating.

        The provider's ``avaliacao`` becomes the average of all its reviews,
        rounded to two decimals.

        Raises:
            BadRequestException: Missing request, stars outside 1..5, or the
                request is not completed
            NotFoundException: The request does not exist
            ForbiddenException: The caller is not the request's client
            ConflictException: The request was already reviewed
        """
        if data.solicitacao_id is None:
            raise BadRequestException("solicitacao_id is required")

        estrelas = data.estrelas
        if estrelas is None or estrelas != estrelas.to_integral_value() or not 1 <= estrelas <= 5:
            raise BadRequestException("Stars must be an integer between 1 and 5")

        result = await db.execute(
            select(solicitacoes).where(solicitacoes.c.id == data.solicitacao_id)
        )
        request = result.mappings().first()
        if not request:
            raise NotFoundException("Request not found")
        if request["status"] != "concluido":
            raise BadRequestException("Only completed requests can be reviewed")

        is_client = request["cliente_id"] == current_user["id"] or (
            normalize_email(request["cliente_email"]) == normalize_email(current_user["email"])
        )
        if not is_client:
            raise ForbiddenException("Only the request's client can review it")

        if await self.get_review_for_request(db, data.solicitacao_id):
            raise ConflictException("Request already reviewed")

        review_id = uuid4()
        prestador_id = request["prestador_id"]
        try:
            await db.execute(
                avaliacoes.insert().values(
                    id=review_id,
                    solicitacao_id=data.solicitacao_id,
                    prestador_id=prestador_id,
                    cliente_id=current_user["id"],
                    cliente_nome=current_user["full_name"] or current_user["email"],
                    estrelas=int(estrelas),
                    comentario=(data.comentario or "").strip() or None,
                )
            )
            average = (
                select(func.round(func.avg(avaliacoes.c.estrelas), 2))
                .where(avaliacoes.c.prestador_id == prestador_id)
                .scalar_subquery()
            )
            await db.execute(
                update(prestadores)
                .where(prestadores.c.id == prestador_id)
                .values(avaliacao=average, updated_at=datetime.now(UTC))
            )
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise ConflictException("Request already reviewed") from e
        except Exception:
            await db.rollback()
            raise

        if self.cache:
            self.cache.delete(self._get_list_cache_key(prestador_id))

        logger.info(
            "review_created",
            review_id=str(review_id),
            solicitacao_id=str(data.solicitacao_id),
            prestador_id=str(prestador_id),
            estrelas=int(estrelas),
        )
        return await self.get_review(db, review_id)  # type: ignore[return-value]
