"""Review (avaliacao) schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AvaliacaoCreate(BaseModel):
    """A client's review of a completed request."""

    solicitacao_id: UUID | None = None
    # Checked by the service so that 4.5 or 6 answer 400 like other business rules
    estrelas: Decimal | None = None
    comentario: str | None = None


class AvaliacaoResponse(BaseModel):
    """Review response schema."""

    id: UUID
    solicitacao_id: UUID
    prestador_id: UUID
    cliente_id: UUID | None = None
    cliente_nome: str | None = None
    estrelas: int
    comentario: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AvaliacaoListResponse(BaseModel):
    """Review list wrapper."""

    items: list[AvaliacaoResponse]


class AvaliacaoItemResponse(BaseModel):
    """Single review wrapper; ``item`` is null when the request has no review."""

    item: AvaliacaoResponse | None
