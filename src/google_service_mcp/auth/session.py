"""Process-wide credential cache.

``AuthSession`` holds at most one live credential and at most one instance of
each service client. The credential and its clients live together in a
``_SessionState`` object; re-authentication builds a fresh state and swaps it
in with a single assignment, so a running operation keeps the state it
started with and never observes a half-updated set.
"""

import asyncio
import logging

import httpx
from google.auth.credentials import Credentials

from google_service_mcp.auth.models import AuthState
from google_service_mcp.auth.oauth_manager import OAuthManager
from google_service_mcp.clients import DocsClient, GmailClient, MeetClient
from google_service_mcp.config import Settings
from google_service_mcp.errors import NotAuthenticatedError

logger = logging.getLogger(__name__)


class _SessionState:
    """A credential plus the service clients bound to it."""

    def __init__(
        self, credentials: Credentials, http_client: httpx.AsyncClient, settings: Settings
    ) -> None:
        self.credentials = credentials
        self._http_client = http_client
        self._settings = settings
        self._meet: MeetClient | None = None
        self._gmail: GmailClient | None = None
        self._docs: DocsClient | None = None

    def meet(self) -> MeetClient:
        if self._meet is None:
            self._meet = MeetClient(self.credentials, self._http_client, self._settings)
        return self._meet

    def gmail(self) -> GmailClient:
        if self._gmail is None:
            self._gmail = GmailClient(self.credentials, self._http_client, self._settings)
        return self._gmail

    def docs(self) -> DocsClient:
        if self._docs is None:
            self._docs = DocsClient(self.credentials, self._http_client, self._settings)
        return self._docs


class AuthSession:
    """Owns the credential and the three service clients for one process.

    Only one authentication attempt is ever in flight: callers arriving while
    one is running await the same outcome instead of starting a second
    callback listener on the fixed OAuth port.

    Attributes:
        settings: Runtime configuration.
        manager: Credential loader.

    Example:
        ```python
        session = AuthSession(Settings.from_env())
        meet = await session.meet()
        records = await meet.list_conference_records(page_size=5)
        await session.close()
        ```
    """

    def __init__(
        self,
        settings: Settings,
        manager: OAuthManager | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            settings: Runtime configuration.
            manager: Credential loader. Created from ``settings`` if not provided.
            http_client: Shared HTTP client. Created lazily if not provided.
        """
        self.settings = settings
        self.manager = manager or OAuthManager(settings)
        self._http_client = http_client
        self._state: _SessionState | None = None
        self._pending: asyncio.Future[_SessionState] | None = None
        self._pending_interactive = False

    @property
    def state(self) -> AuthState:
        if self._pending is not None:
            return AuthState.AUTHENTICATING
        if self._state is not None:
            return AuthState.AUTHENTICATED
        return AuthState.UNAUTHENTICATED

    @property
    def credential(self) -> Credentials | None:
        return self._state.credentials if self._state else None

    def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create shared HTTP client with connection pooling."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                http2=True,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
                timeout=httpx.Timeout(30.0, connect=10.0),
            )
        return self._http_client

    async def ensure_authenticated(self) -> _SessionState:
        """Return the live session state, loading a credential if needed.

        Only non-interactive sources are tried here (service account key or a
        saved token). The browser flow runs exclusively through
        :meth:`authenticate`.

        Raises:
            NotAuthenticatedError: If no credential can be loaded without the
                interactive flow.
        """
        if self._state is not None:
            return self._state

        if self._pending is None and not self.manager.has_credential_source():
            raise NotAuthenticatedError()

        return await self._load(interactive=False)

    async def authenticate(self) -> _SessionState:
        """Replace the credential and all clients unconditionally.

        Runs the interactive OAuth flow when no saved token is available.
        Joins an interactive authentication already in progress. A
        non-interactive attempt in flight is waited out first, since it may
        end without a credential.
        """
        return await self._load(interactive=True)

    async def _load(self, interactive: bool) -> _SessionState:
        while self._pending is not None and interactive and not self._pending_interactive:
            try:
                await asyncio.shield(self._pending)
            except Exception as e:
                logger.debug(f"Starting sign-in after background load failed: {e}")

        if self._pending is None:
            task = asyncio.ensure_future(self._build_state(interactive))
            task.add_done_callback(self._clear_pending)
            self._pending = task
            self._pending_interactive = interactive
        return await asyncio.shield(self._pending)

    def _clear_pending(self, task: asyncio.Future) -> None:
        if self._pending is task:
            self._pending = None
        if not task.cancelled() and task.exception() is not None:
            logger.debug(f"Authentication attempt failed: {task.exception()}")

    async def _build_state(self, interactive: bool) -> _SessionState:
        credentials = await self.manager.load_credentials(interactive=interactive)
        state = _SessionState(credentials, self._get_http_client(), self.settings)
        self._state = state
        logger.info("Google credentials loaded")
        return state

    async def meet(self) -> MeetClient:
        return (await self.ensure_authenticated()).meet()

    async def gmail(self) -> GmailClient:
        return (await self.ensure_authenticated()).gmail()

    async def docs(self) -> DocsClient:
        return (await self.ensure_authenticated()).docs()

    def invalidate(self) -> None:
        """Drop cached service clients; they are rebuilt on next use.

        The credential itself is kept. Use :meth:`authenticate` to replace it.
        """
        if self._state is not None:
            self._state = _SessionState(
                self._state.credentials, self._get_http_client(), self.settings
            )

    async def close(self) -> None:
        """Close the shared HTTP client and release resources."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None
