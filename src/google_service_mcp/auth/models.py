"""Data models for credential sources and persisted tokens."""

from enum import Enum

from pydantic import BaseModel, Field


class CredentialKind(str, Enum):
    """Shape of the credential-source file."""

    SERVICE_ACCOUNT = "service_account"
    OAUTH = "oauth"


class TokenStatus(str, Enum):
    """Status of the persisted OAuth token file."""

    VALID = "valid"
    MISSING = "missing"
    INVALID = "invalid"


class AuthState(str, Enum):
    """Per-process authentication state."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


class SavedToken(BaseModel):
    """Persisted OAuth token in Google's ``authorized_user`` format.

    The same JSON is accepted by
    ``google.oauth2.credentials.Credentials.from_authorized_user_info``.

    Attributes:
        type: Always "authorized_user".
        client_id: OAuth client ID the token was issued to.
        client_secret: OAuth client secret.
        refresh_token: Long-lived refresh token.
    """

    type: str = Field(default="authorized_user", description="Token type")
    client_id: str = Field(..., description="OAuth client ID")
    client_secret: str = Field(..., description="OAuth client secret")
    refresh_token: str = Field(..., description="OAuth refresh token")
