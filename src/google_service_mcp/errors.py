"""Exception types shared by the auth, client and tool layers."""

from typing import Any


class NotAuthenticatedError(Exception):
    """No credential is loaded and none can be loaded without user interaction."""

    def __init__(self, message: str = "NOT_AUTHENTICATED") -> None:
        super().__init__(message)


class CredentialsError(Exception):
    """The credential-source file is missing, unreadable or malformed."""


class ToolValidationError(ValueError):
    """Tool arguments failed schema validation.

    Attributes:
        errors: One ``(location, message)`` pair per violated field.
    """

    def __init__(self, errors: list[tuple[str, str]]) -> None:
        self.errors = errors
        details = ", ".join(f"{loc}: {msg}" for loc, msg in errors)
        super().__init__(f"Invalid input: {details}")


class GoogleApiError(Exception):
    """A Google REST API returned a non-success HTTP status.

    Attributes:
        service: Human-readable API name (e.g. "Meet").
        status_code: HTTP status code.
        detail: Response body text.
    """

    def __init__(self, service: str, status_code: int, detail: Any) -> None:
        self.service = service
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{service} API error ({status_code}): {detail}")


class ServiceError(Exception):
    """A service-client operation failed.

    The message names the failed operation and carries the upstream detail,
    e.g. ``Failed to list participants: Meet API error (404): ...``.
    """

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"Failed to {operation}: {detail}")
