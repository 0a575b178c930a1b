"""Authentication schemas."""

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.users import UserResponse


class Token(BaseModel):
    """JWT token pair."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class TokenRefresh(BaseModel):
    """Token refresh request schema."""

    refresh_token: str


class RegisterRequest(BaseModel):
    """Account registration payload."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    full_name: str | None = None
    email: str | None = None
    password: str | None = None
    tipo: str | None = Field(None, description="cliente or prestador")
    telefone: str | None = None
    cep: str | None = None
    rua: str | None = None
    numero: str | None = None
    complemento: str | None = None
    bairro: str | None = None
    cidade: str | None = None
    estado: str | None = None


class LoginRequest(BaseModel):
    """Email/password login payload."""

    email: str | None = None
    password: str | None = None


class AuthResponse(Token):
    """Token pair plus the authenticated user's public view."""

    user: UserResponse


class MeResponse(BaseModel):
    """Current user wrapper."""

    user: UserResponse
