"""Provider (prestador) schemas for request/response validation."""

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from app.schemas.base import PatchModel, decimal_to_float

CompanyType = Literal["MEI", "LTDA", "Autônomo", "Outro"]
ApprovalStatus = Literal["pendente", "aprovado", "reprovado"]

# Fields the owner edits through the profile screen
PROFILE_FIELDS = (
    "tipo_empresa",
    "descricao",
    "servicos",
    "valor_hora",
    "preco_base",
    "tempo_medio_atendimento",
    "dias_disponiveis",
    "horarios_disponiveis",
    "raio_atendimento",
    "foto",
    "foto_facial",
    "foto_documento",
    "logo_empresa",
    "fotos_trabalhos",
    "latitude",
    "longitude",
)

# Fields only an admin may set directly
ADMIN_FIELDS = ("avaliacao", "destaque", "status_aprovacao", "ativo")


class ServiceItem(BaseModel):
    """One entry of a provider's priced service list."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    nome: str
    preco: Decimal | None = None

    @field_serializer("preco")
    def serialize_preco(self, value: Decimal | None) -> float | None:
        return decimal_to_float(value)


class ProviderPatch(PatchModel):
    """Provider-specific part of the profile payload."""

    categoria_id: UUID | None = None
    # Accepted and ignored; the stored name always comes from the category row
    categoria_nome: str | None = None
    # Only a fallback when the identity has no phone on file
    telefone: str | None = None

    tipo_empresa: CompanyType | None = None
    descricao: str | None = None
    servicos: list[ServiceItem] | None = None
    valor_hora: Decimal | None = Field(None, ge=0)
    preco_base: Decimal | None = Field(None, ge=0)
    tempo_medio_atendimento: str | None = None
    dias_disponiveis: str | None = None
    horarios_disponiveis: str | None = None
    raio_atendimento: Decimal | None = Field(None, ge=0)
    foto: str | None = None
    foto_facial: str | None = None
    foto_documento: str | None = None
    logo_empresa: str | None = None
    fotos_trabalhos: list[str] | None = None
    latitude: Decimal | None = Field(None, ge=-90, le=90)
    longitude: Decimal | None = Field(None, ge=-180, le=180)


class ProviderUpdate(ProviderPatch):
    """Direct edit of a provider row by its owner or an admin."""

    nome: str | None = None
    cpf: str | None = None
    data_nascimento: str | date | None = None
    nome_empresa: str | None = None
    cnpj: str | None = None
    rua: str | None = None
    numero: str | None = None
    bairro: str | None = None
    cidade: str | None = None
    estado: str | None = None
    cep: str | None = None
    avaliacao: Decimal | None = Field(None, ge=1, le=5)
    destaque: bool | None = None
    status_aprovacao: ApprovalStatus | None = None
    ativo: bool | str | None = None


class ProviderCreate(ProviderUpdate):
    """Provider creation payload; nome, categoria_id and telefone are required."""


class ProviderResponse(BaseModel):
    """Provider response schema."""

    id: UUID
    user_id: UUID | None = None
    user_email: str | None = None
    nome: str
    cpf: str | None = None
    data_nascimento: date | None = None
    telefone: str
    nome_empresa: str | None = None
    cnpj: str | None = None
    tipo_empresa: str | None = None
    categoria_id: UUID | None = None
    categoria_nome: str | None = None
    descricao: str | None = None
    servicos: list[ServiceItem] = Field(default_factory=list)
    valor_hora: Decimal | None = None
    preco_base: Decimal | None = None
    tempo_medio_atendimento: str | None = None
    dias_disponiveis: str | None = None
    horarios_disponiveis: str | None = None
    rua: str | None = None
    numero: str | None = None
    bairro: str | None = None
    cidade: str | None = None
    estado: str | None = None
    cep: str | None = None
    raio_atendimento: Decimal | None = None
    foto: str | None = None
    foto_facial: str | None = None
    foto_documento: str | None = None
    logo_empresa: str | None = None
    fotos_trabalhos: list[str] = Field(default_factory=list)
    avaliacao: Decimal
    destaque: bool
    status_aprovacao: str
    ativo: bool
    latitude: Decimal | None = None
    longitude: Decimal | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("servicos", "fotos_trabalhos", mode="before")
    @classmethod
    def default_empty_list(cls, value: Any) -> Any:
        """Legacy rows may hold NULL or a JSON-encoded string."""
        if value is None:
            return []
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError:
                return []
        return value if isinstance(value, list) else []

    @field_serializer(
        "valor_hora",
        "preco_base",
        "raio_atendimento",
        "avaliacao",
        "latitude",
        "longitude",
        when_used="json",
    )
    def serialize_decimal(self, value: Decimal | None) -> float | None:
        """Serialize Decimal to float for JSON."""
        return decimal_to_float(value)


class ProviderListResponse(BaseModel):
    """Provider list wrapper."""

    items: list[ProviderResponse]


class ProviderItemResponse(BaseModel):
    """Single provider wrapper."""

    item: ProviderResponse
