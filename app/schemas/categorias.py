"""Category schemas for request/response validation."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.schemas.base import PatchModel


class CategoriaCreate(BaseModel):
    """Schema for creating a category."""

    nome: str | None = None
    icone: str | None = None
    ativo: bool = True


class CategoriaUpdate(PatchModel):
    """Schema for updating a category."""

    nome: str | None = None
    icone: str | None = None
    ativo: bool | None = None


class CategoriaResponse(BaseModel):
    """Category response schema."""

    id: UUID
    nome: str
    icone: str | None = None
    ativo: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CategoriaListResponse(BaseModel):
    """Category list wrapper."""

    items: list[CategoriaResponse]


class CategoriaItemResponse(BaseModel):
    """Single category wrapper."""

    item: CategoriaResponse
