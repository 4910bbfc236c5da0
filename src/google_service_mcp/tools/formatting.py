"""Text rendering helpers and the response envelope."""

import re
from datetime import datetime

from pydantic import BaseModel, Field

from google_service_mcp.models import CalendarEvent, Participant

NOT_AVAILABLE = "N/A"

# Meet timestamps carry nanoseconds; datetime accepts at most microseconds
_FRACTION = re.compile(r"\.(\d{6})\d+")


class ToolResponse(BaseModel):
    """Uniform result of a tool call.

    Error responses carry exactly one text segment; success responses carry
    one or more and never set ``is_error``.
    """

    content: list[str] = Field(default_factory=list)
    is_error: bool = False


def success(*segments: str) -> ToolResponse:
    return ToolResponse(content=list(segments))


def error(message: str) -> ToolResponse:
    return ToolResponse(content=[message], is_error=True)


NOT_AUTHENTICATED_MESSAGE = "❌ Not authenticated. Please use the 'authenticate' tool first."
NOT_AUTHENTICATED_RESPONSE = error(NOT_AUTHENTICATED_MESSAGE)


def parse_timestamp(value: str) -> datetime | None:
    """Parse an RFC 3339 timestamp as returned by Google APIs."""
    normalized = _FRACTION.sub(r".\1", value.replace("Z", "+00:00"))
    try:
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def format_date(value: str | None) -> str:
    """Render a timestamp for display, or "N/A" when absent.

    Unparseable input is returned unchanged.
    """
    if not value:
        return NOT_AVAILABLE
    parsed = parse_timestamp(value)
    if parsed is None:
        return value
    rendered = parsed.strftime("%Y-%m-%d %H:%M:%S")
    if parsed.tzinfo is not None:
        rendered += f" {parsed.tzname()}"
    return rendered


def format_duration(start: str | None, end: str | None) -> str:
    """Elapsed time between two timestamps as "1h 5m" or "45m"."""
    if not start or not end:
        return NOT_AVAILABLE
    start_at, end_at = parse_timestamp(start), parse_timestamp(end)
    if start_at is None or end_at is None:
        return NOT_AVAILABLE

    minutes = int((end_at - start_at).total_seconds() // 60)
    hours, remaining = divmod(minutes, 60)
    if hours > 0:
        return f"{hours}h {remaining}m"
    return f"{minutes}m"


def participant_display_name(participant: Participant) -> str:
    for identity in (participant.signedin_user, participant.anonymous_user, participant.phone_user):
        if identity is not None and identity.display_name:
            return identity.display_name
    return "Unknown"


def meeting_link(event: CalendarEvent) -> str:
    """Join link: ``hangoutLink``, else the first conference entry point."""
    if event.hangout_link:
        return event.hangout_link
    if event.conference_data and event.conference_data.entry_points:
        uri = event.conference_data.entry_points[0].uri
        if uri:
            return uri
    return NOT_AVAILABLE


def truncate(text: str | None, length: int = 100) -> str:
    if not text:
        return ""
    return text[:length]
