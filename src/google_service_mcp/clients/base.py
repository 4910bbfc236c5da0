"""Shared HTTP plumbing for the Google REST API clients."""

import asyncio
import functools
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import httpx
from google.auth.credentials import Credentials
from google.auth.transport.requests import Request

from google_service_mcp.config import Settings
from google_service_mcp.errors import GoogleApiError, ServiceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def api_operation(
    operation: str,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Wrap any failure of a client coroutine in a ``ServiceError``.

    Args:
        operation: Phrase completing "Failed to ...", e.g. "list participants".

    Returns:
        Decorator for async client methods.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                raise ServiceError(operation, str(e)) from e

        return wrapper

    return decorator


class GoogleApiClient:
    """Base for clients bound to one credential.

    Subclasses set ``service_name``, used in upstream error messages.

    Attributes:
        credentials: Google credential used for every request.
        settings: Runtime configuration (page sizes, defaults).
    """

    service_name = "Google"

    def __init__(
        self,
        credentials: Credentials,
        http_client: httpx.AsyncClient,
        settings: Settings | None = None,
    ) -> None:
        self.credentials = credentials
        self.settings = settings or Settings()
        self._http_client = http_client
        self._refresh_lock = asyncio.Lock()

    async def _get_access_token(self) -> str:
        """Get a valid access token, refreshing if necessary.

        Returns:
            Valid access token string.
        """
        if not self.credentials.valid:
            async with self._refresh_lock:
                if not self.credentials.valid:
                    logger.debug("Refreshing Google access token")
                    loop = asyncio.get_event_loop()
                    await loop.run_in_executor(None, self.credentials.refresh, Request())
        token: str = self.credentials.token
        return token

    async def _make_request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
        service: str | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated HTTP request to Google APIs.

        Args:
            method: HTTP method (GET, POST, etc.).
            url: Full URL to request.
            params: Optional query parameters.
            json_data: Optional JSON body data.
            service: API name for error messages. Defaults to ``service_name``.

        Returns:
            JSON response as a dictionary; empty for an empty body.

        Raises:
            GoogleApiError: If the API returns a non-success status.
        """
        access_token = await self._get_access_token()

        logger.debug(f"{method} {url}")
        response = await self._http_client.request(
            method=method,
            url=url,
            params=params,
            json=json_data,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
        )
        if response.is_error:
            raise GoogleApiError(service or self.service_name, response.status_code, response.text)

        if not response.content:
            return {}
        result: dict[str, Any] = response.json()
        return result
