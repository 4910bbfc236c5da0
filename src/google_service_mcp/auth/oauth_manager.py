"""Credential loading for Google service access.

Two credential-source shapes are supported, detected from the file at
GOOGLE_CREDENTIALS_PATH:

- Service account key (``"type": "service_account"``): credentials are built
  directly from the embedded key; no user interaction is ever needed.
- OAuth client (``"installed"`` or ``"web"``): a previously saved refresh token
  is reused when present; otherwise an interactive authorization-code flow is
  run against a local callback listener on OAUTH_PORT and the resulting token
  is persisted to GOOGLE_TOKEN_PATH.
"""

import asyncio
import json
import logging
import secrets
import sys
import webbrowser
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any
from urllib.parse import parse_qs, urlparse

from google.auth.credentials import Credentials as BaseCredentials
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow

from google_service_mcp.auth.models import CredentialKind, SavedToken, TokenStatus
from google_service_mcp.auth.token_storage import TokenStorage
from google_service_mcp.config import Settings
from google_service_mcp.errors import CredentialsError, NotAuthenticatedError

logger = logging.getLogger(__name__)

DEFAULT_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"  # nosec B105
CALLBACK_HOST = "127.0.0.1"

SUCCESS_PAGE = (
    b"<!DOCTYPE html><html><head><title>Authentication Successful</title></head>"
    b'<body style="font-family: system-ui; text-align: center; padding: 50px;">'
    b"<h1>Authentication Successful!</h1>"
    b"<p>You can close this window and return to your application.</p>"
    b"</body></html>"
)

SETUP_INSTRUCTIONS = (
    "To get credentials:\n"
    "1. Go to https://console.cloud.google.com/\n"
    "2. Create a project and enable the Meet, Calendar, Gmail, Docs and Drive APIs\n"
    "3. Go to APIs & Services -> Credentials\n"
    "4. Create either:\n"
    "   - Service Account (recommended) - download JSON key\n"
    "   - OAuth client ID (Desktop app) - download JSON\n"
    "5. Save the file as 'credentials.json' or point GOOGLE_CREDENTIALS_PATH at it"
)


class OAuthManager:
    """Loads Google credentials from the configured credential source.

    Attributes:
        settings: Paths, port and scopes.
        storage: Token storage for the interactive OAuth mode.

    Example:
        ```python
        manager = OAuthManager(Settings.from_env())

        if manager.has_credential_source():
            credentials = await manager.load_credentials()
        else:
            credentials = await manager.load_credentials(interactive=True)
        ```
    """

    def __init__(self, settings: Settings, storage: TokenStorage | None = None) -> None:
        """Initialize the manager.

        Args:
            settings: Runtime configuration.
            storage: Token storage. Created from ``settings.token_path`` if not provided.
        """
        self.settings = settings
        self.storage = storage or TokenStorage(settings.token_path)

    @property
    def credentials_path(self):
        return self.settings.credentials_path

    def load_client_secrets(self) -> dict[str, Any]:
        """Read the credential-source file.

        Returns:
            Parsed JSON content.

        Raises:
            CredentialsError: If the file is missing or not valid JSON.
        """
        if not self.credentials_path.exists():
            raise CredentialsError(
                f"credentials.json not found at {self.credentials_path}\n\n{SETUP_INSTRUCTIONS}"
            )

        try:
            with open(self.credentials_path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CredentialsError(f"Error reading credentials file: {e}") from e

        if not isinstance(data, dict):
            raise CredentialsError("Error reading credentials file: expected a JSON object")
        return data

    @staticmethod
    def credential_kind(client_secrets: dict[str, Any]) -> CredentialKind:
        """Classify a credential-source document."""
        if client_secrets.get("type") == "service_account":
            return CredentialKind.SERVICE_ACCOUNT
        return CredentialKind.OAUTH

    def has_credential_source(self) -> bool:
        """Check whether credentials can be loaded without user interaction.

        Returns:
            True for a service account key, or an OAuth client with a saved token.
        """
        try:
            client_secrets = self.load_client_secrets()
        except CredentialsError:
            return False

        if self.credential_kind(client_secrets) == CredentialKind.SERVICE_ACCOUNT:
            # Service accounts are always "authenticated" if credentials exist
            return True
        return self.storage.get_status() == TokenStatus.VALID

    def get_status_message(self) -> str:
        """Describe the current authentication status for display."""
        if not self.credentials_path.exists():
            return (
                "❌ No credentials found. Please add credentials.json to the project root "
                "or set GOOGLE_CREDENTIALS_PATH."
            )

        try:
            client_secrets = self.load_client_secrets()
        except CredentialsError:
            return "❌ Error reading credentials file."

        if self.credential_kind(client_secrets) == CredentialKind.SERVICE_ACCOUNT:
            email = client_secrets.get("client_email", "unknown")
            return f"✅ Service Account configured: {email}"

        if self.storage.get_status() == TokenStatus.VALID:
            return "✅ Authenticated with Google (OAuth)"

        return (
            "⚠️ OAuth credentials found but not authenticated. "
            "Use the 'authenticate' tool to sign in."
        )

    async def load_credentials(
        self, interactive: bool = False, force: bool = False
    ) -> BaseCredentials:
        """Create a credential from the configured source.

        Runs in an executor since file access and the interactive flow block.

        Args:
            interactive: Allow the browser-based OAuth flow when no token is saved.
            force: Ignore a saved OAuth token and run the browser flow again.
                Implies ``interactive``. Has no effect for service accounts.

        Returns:
            Google credentials usable for API calls.

        Raises:
            CredentialsError: If the credential-source file is missing or malformed.
            NotAuthenticatedError: If no token is saved and ``interactive`` is False.
        """
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(
            None, self._load_credentials_sync, interactive or force, force
        )

    def _load_credentials_sync(self, interactive: bool, force: bool = False) -> BaseCredentials:
        client_secrets = self.load_client_secrets()

        if self.credential_kind(client_secrets) == CredentialKind.SERVICE_ACCOUNT:
            logger.info("Using Service Account authentication")
            return self._service_account_credentials(client_secrets)

        logger.info("Using OAuth2 authentication")
        saved = None if force else self._saved_token_credentials()
        if saved is not None:
            logger.debug("Using saved OAuth token")
            return saved

        if not interactive:
            raise NotAuthenticatedError()

        return self._run_oauth_flow(client_secrets)

    def _service_account_credentials(
        self, client_secrets: dict[str, Any]
    ) -> service_account.Credentials:
        return service_account.Credentials.from_service_account_info(
            client_secrets, scopes=self.settings.scopes
        )

    def _saved_token_credentials(self) -> Credentials | None:
        token = self.storage.retrieve()
        if token is None:
            return None
        return Credentials.from_authorized_user_info(token.model_dump(), scopes=self.settings.scopes)

    def _client_config(self, client_secrets: dict[str, Any]) -> dict[str, Any]:
        """Normalize an OAuth client file into a Flow client config.

        Raises:
            CredentialsError: If neither an "installed" nor a "web" client is present.
        """
        client_type = "installed" if "installed" in client_secrets else "web"
        key = client_secrets.get(client_type)
        if not isinstance(key, dict) or not key.get("client_id") or not key.get("client_secret"):
            raise CredentialsError("Invalid OAuth credentials format")

        return {
            client_type: {
                "client_id": key["client_id"],
                "client_secret": key["client_secret"],
                "auth_uri": key.get("auth_uri", DEFAULT_AUTH_URI),
                "token_uri": key.get("token_uri", DEFAULT_TOKEN_URI),
                "redirect_uris": [self.settings.oauth_redirect_uri],
            }
        }

    def _run_oauth_flow(self, client_secrets: dict[str, Any]) -> Credentials:
        """Run the OAuth flow (blocking operation).

        Prints the authorization URL, opens the browser, and serves the local
        callback until a request carrying an authorization code (or an error)
        arrives. There is no timeout: the call blocks until the operator
        completes the consent screen or the process is terminated.

        Args:
            client_secrets: Parsed OAuth client file.

        Returns:
            Google OAuth2 credentials.
        """
        client_config = self._client_config(client_secrets)
        redirect_uri = self.settings.oauth_redirect_uri

        flow = Flow.from_client_config(
            client_config,
            scopes=self.settings.scopes,
            redirect_uri=redirect_uri,
        )

        # Generate state for CSRF protection
        state = secrets.token_urlsafe(32)

        auth_url, _ = flow.authorization_url(
            access_type="offline",
            prompt="consent",
            state=state,
        )

        auth_code: list[str | None] = [None]
        error_message: list[str | None] = [None]

        class OAuthCallbackHandler(BaseHTTPRequestHandler):
            """HTTP handler for OAuth callback."""

            def log_message(self, format: str, *args) -> None:
                """Suppress HTTP server logs."""
                pass

            def _reply(self, status: int, body: bytes, content_type: str = "text/plain") -> None:
                self.send_response(status)
                self.send_header("Content-type", content_type)
                self.end_headers()
                self.wfile.write(body)

            def do_GET(self) -> None:
                """Handle GET request from OAuth redirect."""
                query_params = parse_qs(urlparse(self.path).query)

                if "error" in query_params:
                    error_message[0] = query_params["error"][0]
                    self._reply(400, b"Authentication failed")
                    return

                if "code" not in query_params:
                    self._reply(400, b"No authorization code received")
                    return

                if query_params.get("state", [None])[0] != state:
                    self._reply(400, b"State mismatch")
                    return

                auth_code[0] = query_params["code"][0]
                self._reply(200, SUCCESS_PAGE, "text/html")

        server = HTTPServer((CALLBACK_HOST, self.settings.oauth_port), OAuthCallbackHandler)
        try:
            logger.info("Authorization required - please visit the URL to authorize")
            print("\n🔐 Authorization required!", file=sys.stderr)
            print("Please visit this URL to authorize:\n", file=sys.stderr)
            print(auth_url, file=sys.stderr)
            print("", file=sys.stderr)
            webbrowser.open(auth_url)

            logger.info(f"OAuth callback server listening on port {self.settings.oauth_port}")
            while auth_code[0] is None and error_message[0] is None:
                server.handle_request()
        finally:
            server.server_close()

        if error_message[0]:
            raise CredentialsError(f"OAuth authentication failed: {error_message[0]}")

        # Exchange code for tokens
        flow.fetch_token(code=auth_code[0])
        credentials = flow.credentials

        key = client_config.get("installed") or client_config["web"]
        self.storage.store(
            SavedToken(
                client_id=key["client_id"],
                client_secret=key["client_secret"],
                refresh_token=credentials.refresh_token or "",
            )
        )

        return credentials
