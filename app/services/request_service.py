"""Service request (solicitacao) business logic."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestException, ForbiddenException, NotFoundException
from app.core.normalization import normalize_email
from app.core.redis_client import CacheManager
from app.core.sorting import sort_clause
from app.models.prestadores import prestadores
from app.models.solicitacoes import solicitacoes
from app.schemas.solicitacoes import SolicitacaoCreate, SolicitacaoUpdate

logger = structlog.get_logger(__name__)

REQUEST_SORT_COLUMNS = {"created_at", "updated_at", "status", "preco_proposto", "preco_acordado"}


class RequestService:
    """Service for client requests addressed to providers."""

    def __init__(self, cache_manager: CacheManager | None = None):
        """Initialize service with optional cache manager."""
        self.cache = cache_manager

    async def get_request(self, db: AsyncSession, request_id: UUID) -> dict | None:
        """Get request by ID."""
        result = await db.execute(select(solicitacoes).where(solicitacoes.c.id == request_id))
        row = result.mappings().first()
        return dict(row) if row else None

    async def list_requests(
        self,
        db: AsyncSession,
        current_user: dict,
        *,
        cliente_email: str | None = None,
        prestador_email: str | None = None,
        status: str | None = None,
        sort: str | None = None,
    ) -> list[dict]:
        """
        List requests visible to the caller.

        Admins see everything. Anyone else only sees requests where they are
        the client or the provider, and may not filter on someone else's
        email.
        """
        own_email = normalize_email(current_user["email"])
        query = select(solicitacoes)

        if current_user["tipo"] != "admin":
            for requested in (cliente_email, prestador_email):
                if requested and normalize_email(requested) != own_email:
                    raise ForbiddenException("Not allowed to query other accounts' requests")
            if not cliente_email and not prestador_email:
                query = query.where(
                    or_(
                        solicitacoes.c.cliente_id == current_user["id"],
                        func.lower(func.trim(solicitacoes.c.cliente_email)) == own_email,
                        func.lower(func.trim(solicitacoes.c.prestador_email)) == own_email,
                    )
                )

        if cliente_email:
            query = query.where(
                func.lower(func.trim(solicitacoes.c.cliente_email)) == normalize_email(cliente_email)
            )
        if prestador_email:
            query = query.where(
                func.lower(func.trim(solicitacoes.c.prestador_email))
                == normalize_email(prestador_email)
            )
        if status:
            query = query.where(solicitacoes.c.status == status)

        query = query.order_by(
            sort_clause(solicitacoes, sort, REQUEST_SORT_COLUMNS), solicitacoes.c.id
        )
        result = await db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    async def create_request(
        self, db: AsyncSession, current_user: dict, data: SolicitacaoCreate
    ) -> dict:
        """Create a request, snapshotting the client's and provider's details."""
        descricao = (data.descricao or "").strip()
        if data.prestador_id is None or not descricao:
            raise BadRequestException("Provider and description are required")

        result = await db.execute(select(prestadores).where(prestadores.c.id == data.prestador_id))
        provider = result.mappings().first()
        if not provider:
            raise NotFoundException("Provider not found")

        request_id = uuid4()
        await db.execute(
            solicitacoes.insert().values(
                id=request_id,
                cliente_id=current_user["id"],
                cliente_email=current_user["email"],
                cliente_nome=current_user["full_name"],
                prestador_id=provider["id"],
                prestador_email=provider["user_email"],
                prestador_nome=provider["nome"],
                categoria_nome=provider["categoria_nome"],
                descricao=descricao,
                preco_proposto=data.preco_proposto or provider["preco_base"],
                preco_acordado=data.preco_acordado,
                status=data.status,
                resposta_prestador=data.resposta_prestador,
            )
        )
        await db.commit()

        logger.info(
            "request_created",
            request_id=str(request_id),
            prestador_id=str(provider["id"]),
        )
        return await self.get_request(db, request_id)  # type: ignore[return-value]

    async def update_request(
        self,
        db: AsyncSession,
        current_user: dict,
        request_id: UUID,
        data: SolicitacaoUpdate,
    ) -> dict:
        """Update status, prices or the provider's answer as a participant or admin."""
        existing = await self.get_request(db, request_id)
        if not existing:
            raise NotFoundException("Request not found")

        own_email = normalize_email(current_user["email"])
        is_client = existing["cliente_id"] == current_user["id"] or (
            normalize_email(existing["cliente_email"]) == own_email
        )
        is_provider = bool(own_email) and normalize_email(existing["prestador_email"]) == own_email
        if current_user["tipo"] != "admin" and not is_client and not is_provider:
            raise ForbiddenException("Not allowed to update this request")

        changes = data.provided()
        if not changes:
            raise BadRequestException("No valid field to update")
        if "status" in changes and changes["status"] is None:
            raise BadRequestException("Invalid status")

        await db.execute(
            update(solicitacoes)
            .where(solicitacoes.c.id == request_id)
            .values(**changes, updated_at=datetime.now(UTC))
        )
        await db.commit()

        logger.info("request_updated", request_id=str(request_id), fields=sorted(changes))
        return await self.get_request(db, request_id)  # type: ignore[return-value]
