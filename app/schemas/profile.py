"""Combined identity + provider profile schemas."""

from pydantic import AliasChoices, BaseModel, Field

from app.schemas.providers import ProviderPatch, ProviderResponse
from app.schemas.users import UserPatch, UserResponse


class ProviderProfilePatch(BaseModel):
    """Single payload carrying identity edits and provider edits."""

    user: UserPatch = Field(default_factory=UserPatch)
    provider: ProviderPatch = Field(
        default_factory=ProviderPatch,
        validation_alias=AliasChoices("provider", "prestador"),
    )


class ProviderProfileResponse(BaseModel):
    """The caller's identity and their reconciled provider profile, if any."""

    user: UserResponse
    provider: ProviderResponse | None = None
