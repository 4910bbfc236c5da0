"""Argument models for every tool and the generic validation routine.

Each tool's raw JSON arguments are parsed into one of these models before a
handler sees them. Values must already have their JSON type (no "5" for a
number, no "yes" for a boolean), unknown keys are ignored and every violated
field is reported in a single ``ToolValidationError``.
"""

from typing import Annotated, Any, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError

from google_service_mcp.config import DEFAULT_TIMEZONE
from google_service_mcp.errors import ToolValidationError

NonEmptyStr = Annotated[str, Field(min_length=1)]
# Header values: a line break would start a new header
HeaderStr = Annotated[str, Field(pattern=r"^[^\r\n]*$")]
MeetLimit = Annotated[int, Field(ge=1, le=100)]
PageLimit = Annotated[int, Field(ge=1, le=50)]


class ToolArguments(BaseModel):
    """Base for validated tool arguments."""

    model_config = ConfigDict(extra="ignore", frozen=True, strict=True)


class NoArgs(ToolArguments):
    pass


# =============================================================================
# Google Meet / Calendar
# =============================================================================


class ListConferencesArgs(ToolArguments):
    limit: MeetLimit = 10


class GetConferenceArgs(ToolArguments):
    name: NonEmptyStr


class ConferenceNameArgs(ToolArguments):
    conference_name: NonEmptyStr


class TranscriptNameArgs(ToolArguments):
    transcript_name: NonEmptyStr


class ListMeetingsArgs(ToolArguments):
    limit: MeetLimit = 10


class CreateCalendarEventArgs(ToolArguments):
    summary: NonEmptyStr
    start_time: NonEmptyStr
    description: str | None = None
    end_time: str | None = None
    duration_minutes: Annotated[int, Field(ge=5, le=480)] = 60
    attendees: list[EmailStr] | None = None
    location: str | None = None
    timezone: str = DEFAULT_TIMEZONE
    add_meet_link: bool = True


# =============================================================================
# Gmail
# =============================================================================


class ListEmailsArgs(ToolArguments):
    limit: PageLimit = 10


class SearchEmailsArgs(ToolArguments):
    query: NonEmptyStr
    limit: PageLimit = 10


class MessageIdArgs(ToolArguments):
    message_id: NonEmptyStr


class GetThreadArgs(ToolArguments):
    thread_id: NonEmptyStr


class SendEmailArgs(ToolArguments):
    """Used by both ``send_email`` and ``create_draft``."""

    to: EmailStr
    subject: Annotated[HeaderStr, Field(min_length=1)]
    body: NonEmptyStr
    cc: HeaderStr | None = None
    bcc: HeaderStr | None = None


# =============================================================================
# Google Docs
# =============================================================================


class ListDocsArgs(ToolArguments):
    limit: PageLimit = 10


class SearchDocsArgs(ToolArguments):
    query: NonEmptyStr
    limit: PageLimit = 10


class DocumentIdArgs(ToolArguments):
    document_id: NonEmptyStr


class CreateDocArgs(ToolArguments):
    title: NonEmptyStr
    content: str | None = None


class AppendToDocArgs(ToolArguments):
    document_id: NonEmptyStr
    text: NonEmptyStr


class ReplaceInDocArgs(ToolArguments):
    document_id: NonEmptyStr
    search_text: NonEmptyStr
    # May be empty: replacing with "" deletes the matches
    replace_text: str
    match_case: bool = False


TOOL_ARGUMENTS: dict[str, type[ToolArguments]] = {
    "auth_status": NoArgs,
    "authenticate": NoArgs,
    "list_conferences": ListConferencesArgs,
    "get_conference": GetConferenceArgs,
    "list_participants": ConferenceNameArgs,
    "list_recordings": ConferenceNameArgs,
    "list_transcripts": ConferenceNameArgs,
    "get_transcript_text": TranscriptNameArgs,
    "summarize_transcript": TranscriptNameArgs,
    "create_meeting": NoArgs,
    "list_upcoming_meetings": ListMeetingsArgs,
    "list_past_meetings": ListMeetingsArgs,
    "create_calendar_event": CreateCalendarEventArgs,
    "gmail_profile": NoArgs,
    "list_labels": NoArgs,
    "list_emails": ListEmailsArgs,
    "search_emails": SearchEmailsArgs,
    "get_email": MessageIdArgs,
    "trash_email": MessageIdArgs,
    "mark_as_read": MessageIdArgs,
    "mark_as_unread": MessageIdArgs,
    "get_thread": GetThreadArgs,
    "send_email": SendEmailArgs,
    "create_draft": SendEmailArgs,
    "list_docs": ListDocsArgs,
    "search_docs": SearchDocsArgs,
    "get_doc": DocumentIdArgs,
    "create_doc": CreateDocArgs,
    "append_to_doc": AppendToDocArgs,
    "replace_in_doc": ReplaceInDocArgs,
}

ArgsT = TypeVar("ArgsT", bound=ToolArguments)


def _location(loc: tuple[int | str, ...]) -> str:
    return ".".join(str(part) for part in loc) or "arguments"


def validate_input(model: type[ArgsT], raw: Any) -> ArgsT:
    """Parse raw tool arguments into ``model``.

    Args:
        model: Argument model for the tool.
        raw: Untyped arguments as received; ``None`` counts as no arguments.

    Returns:
        Validated arguments with defaults applied.

    Raises:
        ToolValidationError: With every violated field's path and reason.
    """
    try:
        return model.model_validate({} if raw is None else raw)
    except ValidationError as e:
        raise ToolValidationError([(_location(err["loc"]), err["msg"]) for err in e.errors()]) from e
