"""Locate and heal the link between an identity and its provider profile."""

from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.normalization import normalize_email
from app.models.prestadores import prestadores

logger = structlog.get_logger(__name__)


class OwnershipReconciler:
    """
    Find the provider profile that belongs to an identity.

    A profile matches when its ``user_id`` equals the owner's id. Failing
    that, legacy rows are matched on the normalized ``user_email``; when
    several rows share the email the oldest one wins (``created_at``, then
    ``id``). A matched row whose owner fields lag behind the identity is
    re-pointed in place, so a second pass finds it by id and writes nothing.
    """

    async def find_owned_provider(
        self, db: AsyncSession, owner_id: UUID, owner_email: str | None
    ) -> dict | None:
        """Apply the matching rule without writing anything."""
        by_id = select(prestadores).where(prestadores.c.user_id == owner_id).limit(1)
        row = (await db.execute(by_id)).mappings().first()
        if row:
            return dict(row)

        email = normalize_email(owner_email)
        if not email:
            return None

        by_email = (
            select(prestadores)
            .where(func.lower(func.trim(prestadores.c.user_email)) == email)
            .order_by(prestadores.c.created_at.asc(), prestadores.c.id.asc())
            .limit(1)
        )
        row = (await db.execute(by_email)).mappings().first()
        return dict(row) if row else None

    @staticmethod
    def ownership_drift(provider: dict, owner_id: UUID, owner_email: str | None) -> dict:
        """Owner columns of ``provider`` that differ from the identity."""
        drift = {}
        if provider.get("user_id") != owner_id:
            drift["user_id"] = owner_id
        if provider.get("user_email") != owner_email:
            drift["user_email"] = owner_email
        return drift

    async def reconcile(
        self, db: AsyncSession, owner_id: UUID, owner_email: str | None
    ) -> dict | None:
        """
        Return the caller's provider profile, healing a stale owner link.

        The heal joins the caller's transaction; committing is left to them.
        """
        provider = await self.find_owned_provider(db, owner_id, owner_email)
        if provider is None:
            return None

        drift = self.ownership_drift(provider, owner_id, owner_email)
        if not drift:
            return provider

        await db.execute(
            update(prestadores)
            .where(prestadores.c.id == provider["id"])
            .values(**drift, updated_at=datetime.now(UTC))
        )
        logger.info(
            "provider_ownership_healed",
            provider_id=str(provider["id"]),
            owner_id=str(owner_id),
            fields=sorted(drift),
        )

        result = await db.execute(select(prestadores).where(prestadores.c.id == provider["id"]))
        return dict(result.mappings().one())
