"""Service request (solicitacao) schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from app.schemas.base import PatchModel, decimal_to_float

RequestStatus = Literal["aberto", "aceito", "concluido", "cancelado"]


class SolicitacaoCreate(BaseModel):
    """Schema for creating a service request."""

    prestador_id: UUID | None = None
    descricao: str | None = None
    preco_proposto: Decimal | None = Field(None, ge=0)
    preco_acordado: Decimal | None = Field(None, ge=0)
    status: RequestStatus = "aberto"
    resposta_prestador: str | None = None


class SolicitacaoUpdate(PatchModel):
    """Fields a participant may change on a request."""

    status: RequestStatus | None = None
    preco_proposto: Decimal | None = Field(None, ge=0)
    preco_acordado: Decimal | None = Field(None, ge=0)
    resposta_prestador: str | None = None


class SolicitacaoResponse(BaseModel):
    """Service request response schema."""

    id: UUID
    cliente_id: UUID | None = None
    cliente_email: str
    cliente_nome: str | None = None
    prestador_id: UUID
    prestador_email: str | None = None
    prestador_nome: str | None = None
    categoria_nome: str | None = None
    descricao: str
    preco_proposto: Decimal | None = None
    preco_acordado: Decimal | None = None
    status: str
    resposta_prestador: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("preco_proposto", "preco_acordado", when_used="json")
    def serialize_decimal(self, value: Decimal | None) -> float | None:
        """Serialize Decimal to float for JSON."""
        return decimal_to_float(value)


class SolicitacaoListResponse(BaseModel):
    """Service request list wrapper."""

    items: list[SolicitacaoResponse]


class SolicitacaoItemResponse(BaseModel):
    """Single service request wrapper."""

    item: SolicitacaoResponse
