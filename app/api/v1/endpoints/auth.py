"""Authentication endpoints."""

from fastapi import APIRouter, Response, status

from app.dependencies import Cache, CurrentUser, DatabaseSession
from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    Token,
    TokenRefresh,
)
from app.schemas.users import UserPatch, UserResponse
from app.services.auth_service import AuthService
from app.services.profile_service import ProfileService

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _auth_response(user: dict, tokens: Token) -> AuthResponse:
    return AuthResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        token_type=tokens.token_type,
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
)
async def register(
    request: RegisterRequest,
    db: DatabaseSession,
    cache_manager: Cache,
) -> AuthResponse:
    """
    Register a client or provider account and return a token pair.

    Raises 409 when the email is already registered.
    """
    user, tokens = await AuthService(cache_manager).register(db, request)
    return _auth_response(user, tokens)


@router.post("/login", response_model=AuthResponse, summary="Email and password login")
async def login(
    request: LoginRequest,
    db: DatabaseSession,
    cache_manager: Cache,
) -> AuthResponse:
    """Authenticate and return a token pair."""
    user, tokens = await AuthService(cache_manager).login(db, request)
    return _auth_response(user, tokens)


@router.post("/refresh", response_model=Token, summary="Refresh access token")
async def refresh_token(request: TokenRefresh, cache_manager: Cache) -> Token:
    """Exchange a valid, unrevoked refresh token for a new token pair."""
    return AuthService(cache_manager).refresh_access_token(request.refresh_token)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Logout and revoke tokens",
)
async def logout(request: TokenRefresh, cache_manager: Cache) -> Response:
    """Logout user by revoking refresh token."""
    AuthService(cache_manager).revoke_token(request.refresh_token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=MeResponse, summary="Current user")
async def get_me(current_user: CurrentUser) -> MeResponse:
    """Return the authenticated user."""
    return MeResponse(user=UserResponse.model_validate(current_user))


@router.patch("/me", response_model=MeResponse, summary="Update current user")
async def update_me(
    user_data: UserPatch,
    current_user: CurrentUser,
    db: DatabaseSession,
    cache_manager: Cache,
) -> MeResponse:
    """
    Update the caller's identity fields.

    Email and name changes are copied onto provider profiles and service
    requests that snapshot them.
    """
    user = await ProfileService(cache_manager).update_identity(db, current_user["id"], user_data)
    return MeResponse(user=UserResponse.model_validate(user))
