"""User schemas for request/response validation."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, computed_field

from app.schemas.base import PatchModel


class UserPatch(PatchModel):
    """Identity fields a caller may change on their own account."""

    full_name: str | None = None
    email: str | None = None
    telefone: str | None = None
    cpf: str | None = None
    cnpj: str | None = None
    nome_empresa: str | None = None
    data_nascimento: str | date | None = None
    rua: str | None = None
    numero: str | None = None
    complemento: str | None = None
    bairro: str | None = None
    cidade: str | None = None
    estado: str | None = None
    cep: str | None = None
    tipo: str | None = None
    avatar: str | None = None


class UserResponse(BaseModel):
    """Public view of a user; never carries the password hash."""

    id: UUID
    full_name: str
    email: str
    tipo: str
    ativo: bool
    avatar: str | None = None
    telefone: str | None = None
    cpf: str | None = None
    cnpj: str | None = None
    nome_empresa: str | None = None
    data_nascimento: date | None = None
    rua: str | None = None
    numero: str | None = None
    complemento: str | None = None
    bairro: str | None = None
    cidade: str | None = None
    estado: str | None = None
    cep: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def role(self) -> str:
        """Coarse role used by the frontend for routing."""
        return "admin" if self.tipo == "admin" else "user"


class UserAdminUpdate(PatchModel):
    """Fields an admin may change on another account."""

    tipo: str | None = None
    ativo: bool | str | None = None


class UserListResponse(BaseModel):
    """User list wrapper."""

    items: list[UserResponse]


class UserItemResponse(BaseModel):
    """Single user wrapper."""

    item: UserResponse
