"""Runtime configuration for google-service-mcp.

Environment Variables:
    GOOGLE_CREDENTIALS_PATH: Service account key or OAuth client file
        (default: ./credentials.json)
    GOOGLE_TOKEN_PATH: Where the OAuth refresh token is persisted
        (default: ./token.json)
    OAUTH_PORT: Local port for the OAuth callback listener (default: 3000)
    LOG_LEVEL: Logging level name (default: INFO)
"""

import os
from pathlib import Path

from pydantic import BaseModel, Field

# Google API base URLs
MEET_API_BASE = "https://meet.googleapis.com/v2"
CALENDAR_API_BASE = "https://www.googleapis.com/calendar/v3"
GMAIL_API_BASE = "https://gmail.googleapis.com/gmail/v1"
DOCS_API_BASE = "https://docs.googleapis.com/v1"
DRIVE_API_BASE = "https://www.googleapis.com/drive/v3"

# OAuth2 scopes requested for both service accounts and interactive users
GOOGLE_SERVICE_SCOPES = [
    # Google Meet
    "https://www.googleapis.com/auth/meetings.space.readonly",
    "https://www.googleapis.com/auth/meetings.space.created",
    # Google Calendar
    "https://www.googleapis.com/auth/calendar.readonly",
    "https://www.googleapis.com/auth/calendar.events",
    # Google Drive
    "https://www.googleapis.com/auth/drive.readonly",
    # Gmail
    "https://www.googleapis.com/auth/gmail.readonly",
    "https://www.googleapis.com/auth/gmail.send",
    "https://www.googleapis.com/auth/gmail.compose",
    "https://www.googleapis.com/auth/gmail.modify",
    # Google Docs
    "https://www.googleapis.com/auth/documents",
    "https://www.googleapis.com/auth/documents.readonly",
]

DEFAULT_OAUTH_PORT = 3000
DEFAULT_TIMEZONE = "Asia/Kolkata"


class Settings(BaseModel):
    """Configuration consumed by the authentication layer and service clients.

    Attributes:
        credentials_path: Credential-source file (service account or OAuth client).
        token_path: Persisted OAuth token file (interactive mode only).
        oauth_port: Port of the short-lived OAuth callback listener.
        log_level: Logging level name.
    """

    credentials_path: Path = Field(default_factory=lambda: Path.cwd() / "credentials.json")
    token_path: Path = Field(default_factory=lambda: Path.cwd() / "token.json")
    oauth_port: int = DEFAULT_OAUTH_PORT
    log_level: str = "INFO"
    scopes: list[str] = Field(default_factory=lambda: list(GOOGLE_SERVICE_SCOPES))

    # Default page sizes
    conference_page_size: int = 10
    participant_page_size: int = 50
    transcript_page_size: int = 100
    calendar_max_results: int = 10
    past_meetings_days: int = 30

    # Gmail defaults
    gmail_max_results: int = 10
    gmail_default_labels: list[str] = Field(default_factory=lambda: ["INBOX"])

    default_timezone: str = DEFAULT_TIMEZONE

    @property
    def oauth_redirect_uri(self) -> str:
        """OAuth callback URL served by the local listener."""
        return f"http://localhost:{self.oauth_port}"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables.

        Raises:
            ValueError: If OAUTH_PORT is not an integer.
        """
        values: dict[str, object] = {}

        credentials_path = os.environ.get("GOOGLE_CREDENTIALS_PATH")
        if credentials_path:
            values["credentials_path"] = Path(credentials_path).expanduser()

        token_path = os.environ.get("GOOGLE_TOKEN_PATH")
        if token_path:
            values["token_path"] = Path(token_path).expanduser()

        oauth_port = os.environ.get("OAUTH_PORT")
        if oauth_port:
            try:
                values["oauth_port"] = int(oauth_port)
            except ValueError:
                raise ValueError(f"OAUTH_PORT must be an integer, got {oauth_port!r}") from None

        log_level = os.environ.get("LOG_LEVEL")
        if log_level:
            values["log_level"] = log_level.upper()

        return cls(**values)
