"""Propagate identity renames onto denormalized copies."""

from uuid import UUID

import structlog
from sqlalchemy import func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.normalization import normalize_email
from app.models.prestadores import prestadores
from app.models.solicitacoes import solicitacoes

logger = structlog.get_logger(__name__)


def _normalized(column):
    return func.lower(func.trim(column))


class CascadePropagator:
    """
    Rewrite snapshots of an identity's email and name.

    Provider profiles and service requests keep their own copies of the
    owner's email and name. Each statement may touch zero or many rows;
    all of them run inside the caller's transaction.
    """

    async def propagate(
        self,
        db: AsyncSession,
        user_id: UUID,
        old_email: str,
        new_email: str,
        old_name: str,
        new_name: str,
    ) -> dict[str, int]:
        """Apply email and name cascades, returning affected row counts."""
        counts: dict[str, int] = {}
        old_key = normalize_email(old_email)
        new_key = normalize_email(new_email)

        if new_key != old_key:
            counts["prestadores.user_email"] = await self._execute(
                db,
                update(prestadores)
                .where(
                    or_(
                        prestadores.c.user_id == user_id,
                        _normalized(prestadores.c.user_email) == old_key,
                    )
                )
                .values(user_email=new_email),
            )
            counts["solicitacoes.cliente_email"] = await self._execute(
                db,
                update(solicitacoes)
                .where(
                    or_(
                        solicitacoes.c.cliente_id == user_id,
                        _normalized(solicitacoes.c.cliente_email) == old_key,
                    )
                )
                .values(cliente_email=new_email),
            )
            counts["solicitacoes.prestador_email"] = await self._execute(
                db,
                update(solicitacoes)
                .where(_normalized(solicitacoes.c.prestador_email) == old_key)
                .values(prestador_email=new_email),
            )

        if new_name != old_name:
            counts["solicitacoes.cliente_nome"] = await self._execute(
                db,
                update(solicitacoes)
                .where(
                    or_(
                        solicitacoes.c.cliente_id == user_id,
                        _normalized(solicitacoes.c.cliente_email) == new_key,
                    )
                )
                .values(cliente_nome=new_name),
            )
            counts["solicitacoes.prestador_nome"] = await self._execute(
                db,
                update(solicitacoes)
                .where(_normalized(solicitacoes.c.prestador_email) == new_key)
                .values(prestador_nome=new_name),
            )

        if counts:
            logger.info("identity_cascade_applied", user_id=str(user_id), rows=counts)
        return counts

    @staticmethod
    async def _execute(db: AsyncSession, statement) -> int:
        result = await db.execute(statement)
        return result.rowcount or 0  # type: ignore[attr-defined]
