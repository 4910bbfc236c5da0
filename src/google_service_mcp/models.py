"""Read-only projections of Google API responses.

Every record is parsed from the camelCase JSON returned by the REST APIs
(``Conference.model_validate(payload)``). Missing optional fields fall back
to ``None`` or empty lists; unknown fields are ignored.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiRecord(BaseModel):
    """Base for immutable API records keyed by camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


# =============================================================================
# Google Meet
# =============================================================================


class MeetingSpace(ApiRecord):
    name: str = ""
    meeting_uri: str | None = None
    meeting_code: str | None = None
    config: dict[str, Any] | None = None


class Conference(ApiRecord):
    """A conference record: one past session held in a meeting space."""

    name: str = ""
    start_time: str | None = None
    end_time: str | None = None
    expire_time: str | None = None
    space: str | None = None


class UserIdentity(ApiRecord):
    user: str | None = None
    display_name: str | None = None


class Participant(ApiRecord):
    name: str = ""
    earliest_start_time: str | None = None
    latest_end_time: str | None = None
    signedin_user: UserIdentity | None = None
    anonymous_user: UserIdentity | None = None
    phone_user: UserIdentity | None = None


class ArtifactDestination(ApiRecord):
    file: str | None = None
    document: str | None = None
    export_uri: str | None = None


class Recording(ApiRecord):
    name: str = ""
    state: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    drive_destination: ArtifactDestination | None = None


class Transcript(ApiRecord):
    name: str = ""
    state: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    docs_destination: ArtifactDestination | None = None


class TranscriptEntry(ApiRecord):
    name: str = ""
    participant: str | None = None
    text: str | None = None
    language_code: str | None = None
    start_time: str | None = None
    end_time: str | None = None


# =============================================================================
# Google Calendar
# =============================================================================


class EventTime(ApiRecord):
    date_time: str | None = None
    date: str | None = None
    time_zone: str | None = None


class ConferenceSolution(ApiRecord):
    name: str | None = None


class EntryPoint(ApiRecord):
    uri: str | None = None
    entry_point_type: str | None = None


class ConferenceData(ApiRecord):
    conference_solution: ConferenceSolution | None = None
    entry_points: list[EntryPoint] = Field(default_factory=list)


class Attendee(ApiRecord):
    email: str = ""
    response_status: str | None = None


class CalendarEvent(ApiRecord):
    id: str = ""
    summary: str | None = None
    description: str | None = None
    location: str | None = None
    start: EventTime = Field(default_factory=EventTime)
    end: EventTime = Field(default_factory=EventTime)
    hangout_link: str | None = None
    html_link: str | None = None
    conference_data: ConferenceData | None = None
    attendees: list[Attendee] = Field(default_factory=list)

    @property
    def is_meet_event(self) -> bool:
        """True when the event is backed by Google Meet.

        Matches a conference solution named "Google Meet" or a direct
        ``hangoutLink``; other conferencing providers are not recognized.
        """
        if self.hangout_link:
            return True
        solution = self.conference_data.conference_solution if self.conference_data else None
        return solution is not None and solution.name == "Google Meet"

    @property
    def start_value(self) -> str | None:
        """Start as a dateTime, or a date for all-day events."""
        return self.start.date_time or self.start.date


# =============================================================================
# Gmail
# =============================================================================


class MessageHeader(ApiRecord):
    name: str = ""
    value: str = ""


class MessageBody(ApiRecord):
    data: str | None = None
    size: int | None = None


class MessagePart(ApiRecord):
    mime_type: str | None = None
    headers: list[MessageHeader] = Field(default_factory=list)
    body: MessageBody | None = None
    parts: list["MessagePart"] = Field(default_factory=list)


class Message(ApiRecord):
    id: str = ""
    thread_id: str | None = None
    label_ids: list[str] = Field(default_factory=list)
    snippet: str | None = None
    payload: MessagePart | None = None
    internal_date: str | None = None

    @property
    def is_unread(self) -> bool:
        return "UNREAD" in self.label_ids


class Thread(ApiRecord):
    id: str = ""
    snippet: str | None = None
    history_id: str | None = None
    messages: list[Message] = Field(default_factory=list)


class Label(ApiRecord):
    id: str = ""
    name: str = ""
    type: str | None = None
    messages_total: int | None = None
    messages_unread: int | None = None
    threads_total: int | None = None
    threads_unread: int | None = None


class Draft(ApiRecord):
    id: str = ""
    message: Message | None = None


class GmailProfile(ApiRecord):
    email_address: str = ""
    messages_total: int = 0
    threads_total: int = 0


# =============================================================================
# Google Docs / Drive
# =============================================================================


class TextRun(ApiRecord):
    content: str | None = None


class ParagraphElement(ApiRecord):
    start_index: int | None = None
    end_index: int | None = None
    text_run: TextRun | None = None


class Paragraph(ApiRecord):
    elements: list[ParagraphElement] = Field(default_factory=list)


class StructuralElement(ApiRecord):
    start_index: int | None = None
    end_index: int | None = None
    paragraph: Paragraph | None = None
    table: dict[str, Any] | None = None
    section_break: dict[str, Any] | None = None


class DocumentBody(ApiRecord):
    content: list[StructuralElement] = Field(default_factory=list)


class Document(ApiRecord):
    document_id: str = ""
    title: str = ""
    revision_id: str | None = None
    body: DocumentBody | None = None


class DocumentSummary(ApiRecord):
    """A Google Doc as listed by Drive."""

    id: str = ""
    name: str = "Untitled"
    modified_time: str = ""
