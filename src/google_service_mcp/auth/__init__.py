"""Authentication for google-service-mcp.

Credential-source detection, OAuth token persistence and the process-wide
credential cache.
"""

from google_service_mcp.auth.models import AuthState, CredentialKind, SavedToken, TokenStatus
from google_service_mcp.auth.oauth_manager import OAuthManager
from google_service_mcp.auth.session import AuthSession
from google_service_mcp.auth.token_storage import TokenStorage

__all__ = [
    "AuthSession",
    "AuthState",
    "CredentialKind",
    "OAuthManager",
    "SavedToken",
    "TokenStatus",
    "TokenStorage",
]
