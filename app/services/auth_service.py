"""Authentication service for password login and JWT."""

from datetime import timedelta

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import (
    BadRequestException,
    ForbiddenException,
    UnauthorizedException,
)
from app.core.normalization import is_valid_email, normalize_email, only_digits
from app.core.redis_client import CacheManager
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    verify_password,
)
from app.schemas.auth import LoginRequest, RegisterRequest, Token
from app.services.user_service import UserService, normalize_tipo

logger = structlog.get_logger(__name__)


def _clean(value: str | None) -> str | None:
    return (value or "").strip() or None


class AuthService:
    """Authentication service for handling registration, login and JWT operations."""

    def __init__(self, cache_manager: CacheManager | None = None):
        """Initialize auth service with cache manager."""
        self.cache = cache_manager
        self.users = UserService(cache_manager)

    async def register(self, db: AsyncSession, data: RegisterRequest) -> tuple[dict, Token]:
        """
        Create an account and sign it in.

        Raises:
            BadRequestException: Missing or malformed fields
            ConflictException: Email already registered
        """
        full_name = _clean(data.full_name)
        email = normalize_email(data.email)
        password = data.password or ""

        if not full_name or not email or not password:
            raise BadRequestException("Name, email and password are required")
        if not is_valid_email(email):
            raise BadRequestException("Invalid email")

        tipo = "cliente"
        if data.tipo is not None:
            tipo = normalize_tipo(data.tipo)
            if tipo not in ("cliente", "prestador"):
                raise BadRequestException("Invalid account type")

        if len(password) < settings.password_min_length:
            raise BadRequestException(
                f"Password must be at least {settings.password_min_length} characters"
            )

        telefone = _clean(data.telefone)
        if not telefone:
            raise BadRequestException("Phone is required")

        cep = only_digits(data.cep)
        if len(cep) < 8:
            raise BadRequestException("CEP is required")

        estado = _clean(data.estado)
        user = await self.users.create_user(
            db,
            full_name=full_name,
            email=email,
            password=password,
            tipo=tipo,
            telefone=telefone,
            cep=cep,
            rua=_clean(data.rua),
            numero=_clean(data.numero),
            complemento=_clean(data.complemento),
            bairro=_clean(data.bairro),
            cidade=_clean(data.cidade),
            estado=estado.upper() if estado else None,
        )

        return user, self.create_tokens(str(user["id"]))

    async def login(self, db: AsyncSession, data: LoginRequest) -> tuple[dict, Token]:
        """
        Authenticate with email and password.

        Raises:
            BadRequestException: Missing email or password
            UnauthorizedException: Unknown email or wrong password
            ForbiddenException: Deactivated provider account
        """
        if not data.email or not data.password:
            raise BadRequestException("Email and password are required")

        user = await self.users.get_user_by_email(db, data.email)
        if not user or not verify_password(data.password, user["password_hash"]):
            logger.info("login_failed", email=normalize_email(data.email))
            raise UnauthorizedException("Invalid credentials")

        if user["tipo"] == "prestador" and not user["ativo"]:
            raise ForbiddenException("Your provider account is inactive. Contact an administrator.")

        logger.info("login_succeeded", user_id=str(user["id"]))
        return user, self.create_tokens(str(user["id"]))

    def create_tokens(self, user_id: str) -> Token:
        """
        Create access and refresh tokens for a user.

        Args:
            user_id: User identifier (internal UUID)

        Returns:
            Token pair (access and refresh)
        """
        access_token = create_access_token(
            data={"sub": user_id},
            expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
        )

        refresh_token = create_refresh_token(
            data={"sub": user_id},
            expires_delta=timedelta(days=settings.refresh_token_expire_days),
        )

        return Token(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="bearer",
        )

    def refresh_access_token(self, refresh_token: str) -> Token:
        """
        Create new token pair from a refresh token.

        Raises:
            UnauthorizedException: If refresh token is invalid or revoked
        """
        payload = decode_refresh_token(refresh_token)

        if payload is None:
            raise UnauthorizedException("Invalid refresh token")

        user_id = payload.get("sub")
        if user_id is None:
            raise UnauthorizedException("Invalid refresh token")

        # Check if token is blacklisted
        if self.cache and self.cache.exists(f"blacklist:{refresh_token}"):
            raise UnauthorizedException("Token has been revoked")

        return self.create_tokens(user_id)

    def revoke_token(self, token: str, ttl: int | None = None) -> None:
        """
        Revoke a refresh token by adding it to blacklist.

        Args:
            token: Token to revoke
            ttl: Time to live for blacklist entry (default: refresh token lifetime)
        """
        if not self.cache:
            return
        ttl = ttl or settings.refresh_token_expire_days * 86400
        self.cache.set(f"blacklist:{token}", "1", ttl=ttl)
