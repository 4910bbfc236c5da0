"""Tool routing: authentication, argument validation and result formatting.

``ToolDispatcher.dispatch`` handles one call in a fixed order:

1. Unknown tool name -> error response naming it.
2. Authentication (skipped for ``auth_status`` and ``authenticate``). When no
   credential can be loaded the fixed not-authenticated response is returned
   and the arguments are never looked at.
3. Argument validation -> error response listing every violated field.
4. The handler, which calls one service client and renders the result.

Anything a handler raises (typically ``ServiceError``) propagates to the
caller, which is the server's top-level backstop.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from google_service_mcp.auth.session import AuthSession
from google_service_mcp.clients.docs import document_url, extract_text
from google_service_mcp.clients.gmail import get_header, get_message_body
from google_service_mcp.errors import NotAuthenticatedError, ToolValidationError
from google_service_mcp.models import CalendarEvent, Message
from google_service_mcp.tools import schemas
from google_service_mcp.tools.formatting import (
    NOT_AUTHENTICATED_RESPONSE,
    NOT_AVAILABLE,
    ToolResponse,
    error,
    format_date,
    format_duration,
    meeting_link,
    participant_display_name,
    success,
    truncate,
)

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[ToolResponse]]

# Tools usable before any credential exists
UNAUTHENTICATED_TOOLS = frozenset({"auth_status", "authenticate"})

SUMMARY_INSTRUCTIONS = (
    "Please provide a comprehensive meeting summary including:\n\n"
    "1. **Meeting Overview**: Brief description of what the meeting was about\n\n"
    "2. **Key Discussion Points**: Main topics that were discussed\n\n"
    "3. **Decisions Made**: Any decisions or conclusions reached\n\n"
    "4. **Action Items**: Tasks or follow-ups mentioned (with assignees if mentioned)\n\n"
    "5. **Important Quotes**: Any notable statements or commitments\n\n"
    "6. **Next Steps**: What should happen after this meeting"
)


def _format_meetings(meetings: list[CalendarEvent]) -> str:
    return "\n\n".join(
        f"**{i}. {event.summary or 'Untitled'}**\n"
        f"- When: {format_date(event.start_value)}\n"
        f"- Meet Link: {meeting_link(event)}"
        for i, event in enumerate(meetings, 1)
    )


def _subject(message: Message) -> str:
    return get_header(message, "Subject") or "(No Subject)"


class ToolDispatcher:
    """Routes tool calls to handlers bound to an ``AuthSession``.

    Attributes:
        session: Credential cache providing the service clients.
    """

    def __init__(self, session: AuthSession) -> None:
        self.session = session

        handlers: dict[str, Handler] = {
            # Auth
            "auth_status": self._auth_status,
            "authenticate": self._authenticate,
            # Meet / Calendar
            "list_conferences": self._list_conferences,
            "get_conference": self._get_conference,
            "list_participants": self._list_participants,
            "list_recordings": self._list_recordings,
            "list_transcripts": self._list_transcripts,
            "get_transcript_text": self._get_transcript_text,
            "summarize_transcript": self._summarize_transcript,
            "create_meeting": self._create_meeting,
            "list_upcoming_meetings": self._list_upcoming_meetings,
            "list_past_meetings": self._list_past_meetings,
            "create_calendar_event": self._create_calendar_event,
            # Gmail
            "gmail_profile": self._gmail_profile,
            "list_labels": self._list_labels,
            "list_emails": self._list_emails,
            "search_emails": self._search_emails,
            "get_email": self._get_email,
            "trash_email": self._trash_email,
            "mark_as_read": self._mark_as_read,
            "mark_as_unread": self._mark_as_unread,
            "get_thread": self._get_thread,
            "send_email": self._send_email,
            "create_draft": self._create_draft,
            # Docs
            "list_docs": self._list_docs,
            "search_docs": self._search_docs,
            "get_doc": self._get_doc,
            "create_doc": self._create_doc,
            "append_to_doc": self._append_to_doc,
            "replace_in_doc": self._replace_in_doc,
        }

        # name -> (handler, argument model, requires authentication)
        self._routes: dict[str, tuple[Handler, type[schemas.ToolArguments], bool]] = {
            name: (handler, schemas.TOOL_ARGUMENTS[name], name not in UNAUTHENTICATED_TOOLS)
            for name, handler in handlers.items()
        }

    @property
    def tool_names(self) -> list[str]:
        return list(self._routes)

    async def dispatch(self, name: str, arguments: Any) -> ToolResponse:
        """Handle one tool call.

        Args:
            name: Tool name.
            arguments: Raw, unvalidated arguments.

        Returns:
            Success or error response.
        """
        route = self._routes.get(name)
        if route is None:
            return error(f"Unknown tool: {name}")

        handler, model, requires_auth = route
        logger.debug(f"Handling tool call: {name}")

        try:
            if requires_auth:
                await self.session.ensure_authenticated()

            try:
                args = schemas.validate_input(model, arguments)
            except ToolValidationError as e:
                return error(str(e))

            return await handler(args)
        except NotAuthenticatedError:
            return NOT_AUTHENTICATED_RESPONSE

    # =========================================================================
    # Auth
    # =========================================================================

    async def _auth_status(self, args: schemas.NoArgs) -> ToolResponse:
        return success(self.session.manager.get_status_message())

    async def _authenticate(self, args: schemas.NoArgs) -> ToolResponse:
        try:
            await self.session.authenticate()
        except Exception as e:
            logger.error(f"Authentication failed: {e}")
            return error(f"❌ Authentication failed: {e}")

        return success(
            "✅ Successfully authenticated with Google!\n\n"
            "You can now use Google Meet, Calendar, Gmail, and Docs tools."
        )

    # =========================================================================
    # Meet / Calendar
    # =========================================================================

    async def _list_conferences(self, args: schemas.ListConferencesArgs) -> ToolResponse:
        meet = await self.session.meet()
        conferences = await meet.list_conference_records(args.limit)

        if not conferences:
            return success(
                "No conference records found.\n\n"
                "Note: Conference records are only available for meetings where:\n"
                "- Recording or transcription was enabled\n"
                "- The meeting occurred recently (records expire after some time)"
            )

        formatted = "\n\n".join(
            f"**{i}. Conference**\n"
            f"- Name: `{conf.name}`\n"
            f"- Start: {format_date(conf.start_time)}\n"
            f"- End: {format_date(conf.end_time)}\n"
            f"- Duration: {format_duration(conf.start_time, conf.end_time)}"
            for i, conf in enumerate(conferences, 1)
        )
        return success(
            f"**Recent Conference Records:**\n\n{formatted}\n\n---\n"
            "Use `list_recordings` or `list_transcripts` with a conference name to get artifacts."
        )

    async def _get_conference(self, args: schemas.GetConferenceArgs) -> ToolResponse:
        meet = await self.session.meet()
        conf = await meet.get_conference_record(args.name)

        return success(
            "**Conference Details:**\n\n"
            f"- Name: `{conf.name}`\n"
            f"- Start: {format_date(conf.start_time)}\n"
            f"- End: {format_date(conf.end_time)}\n"
            f"- Duration: {format_duration(conf.start_time, conf.end_time)}\n"
            f"- Space: {conf.space or NOT_AVAILABLE}"
        )

    async def _list_participants(self, args: schemas.ConferenceNameArgs) -> ToolResponse:
        meet = await self.session.meet()
        participants = await meet.list_participants(args.conference_name)

        if not participants:
            return success("No participants found for this conference.")

        formatted = "\n\n".join(
            f"{i}. **{participant_display_name(p)}**\n"
            f"   - Joined: {format_date(p.earliest_start_time)}\n"
            f"   - Left: {format_date(p.latest_end_time)}"
            for i, p in enumerate(participants, 1)
        )
        return success(f"**Participants ({len(participants)}):**\n\n{formatted}")

    async def _list_recordings(self, args: schemas.ConferenceNameArgs) -> ToolResponse:
        meet = await self.session.meet()
        recordings = await meet.list_recordings(args.conference_name)

        if not recordings:
            return success(
                "No recordings found for this conference.\n\n"
                "Note: Recordings must be enabled in the meeting for them to be available."
            )

        formatted = "\n\n".join(
            f"**{i}. Recording**\n"
            f"- Name: `{rec.name}`\n"
            f"- State: {rec.state or NOT_AVAILABLE}\n"
            f"- Start: {format_date(rec.start_time)}\n"
            f"- End: {format_date(rec.end_time)}\n"
            f"- Drive Link: {(rec.drive_destination and rec.drive_destination.export_uri) or NOT_AVAILABLE}"
            for i, rec in enumerate(recordings, 1)
        )
        return success(f"**Recordings:**\n\n{formatted}")

    async def _list_transcripts(self, args: schemas.ConferenceNameArgs) -> ToolResponse:
        meet = await self.session.meet()
        transcripts = await meet.list_transcripts(args.conference_name)

        if not transcripts:
            return success(
                "No transcripts found for this conference.\n\n"
                "Note: Transcription must be enabled in the meeting for transcripts to be available."
            )

        formatted = "\n\n".join(
            f"**{i}. Transcript**\n"
            f"- Name: `{t.name}`\n"
            f"- State: {t.state or NOT_AVAILABLE}\n"
            f"- Start: {format_date(t.start_time)}\n"
            f"- End: {format_date(t.end_time)}\n"
            f"- Docs Link: {(t.docs_destination and t.docs_destination.export_uri) or NOT_AVAILABLE}"
            for i, t in enumerate(transcripts, 1)
        )
        return success(
            f"**Transcripts:**\n\n{formatted}\n\n---\n"
            "Use `get_transcript_text` with a transcript name to get the actual text."
        )

    async def _get_transcript_text(self, args: schemas.TranscriptNameArgs) -> ToolResponse:
        meet = await self.session.meet()
        entries = await meet.list_transcript_entries(args.transcript_name)

        if not entries:
            return success("No transcript entries found.")

        formatted = "\n".join(
            f"[{format_date(entry.start_time)}] {entry.participant or 'Unknown'}: {entry.text or ''}"
            for entry in entries
        )
        return success(f"**Transcript:**\n\n{formatted}")

    async def _summarize_transcript(self, args: schemas.TranscriptNameArgs) -> ToolResponse:
        meet = await self.session.meet()
        entries = await meet.list_transcript_entries(args.transcript_name)

        if not entries:
            return success("No transcript entries found to summarize.")

        transcript_text = "\n".join(
            f"{entry.participant or 'Speaker'}: {entry.text or ''}" for entry in entries
        )
        total_duration = format_duration(entries[0].start_time, entries[-1].end_time)

        return success(
            "Here is the meeting transcript to summarize:\n\n"
            f"---\n**TRANSCRIPT** (Duration: {total_duration}, Entries: {len(entries)})\n---\n\n"
            f"{transcript_text}\n\n---\n\n{SUMMARY_INSTRUCTIONS}"
        )

    async def _create_meeting(self, args: schemas.NoArgs) -> ToolResponse:
        meet = await self.session.meet()
        space = await meet.create_space()

        return success(
            "✅ **Meeting Created!**\n\n"
            f"- Meeting URI: {space.meeting_uri or NOT_AVAILABLE}\n"
            f"- Meeting Code: {space.meeting_code or NOT_AVAILABLE}\n"
            f"- Resource Name: `{space.name}`"
        )

    async def _list_upcoming_meetings(self, args: schemas.ListMeetingsArgs) -> ToolResponse:
        meet = await self.session.meet()
        meetings = await meet.list_upcoming_meetings(args.limit)

        if not meetings:
            return success("No upcoming Google Meet meetings found in your calendar.")

        return success(f"**Upcoming Google Meet Meetings:**\n\n{_format_meetings(meetings)}")

    async def _list_past_meetings(self, args: schemas.ListMeetingsArgs) -> ToolResponse:
        meet = await self.session.meet()
        meetings = await meet.list_past_meetings(args.limit)
        days = self.session.settings.past_meetings_days

        if not meetings:
            return success(
                f"No past Google Meet meetings found in your calendar (last {days} days)."
            )

        return success(
            f"**Past Google Meet Meetings (Last {days} Days):**\n\n{_format_meetings(meetings)}"
        )

    async def _create_calendar_event(self, args: schemas.CreateCalendarEventArgs) -> ToolResponse:
        meet = await self.session.meet()
        event = await meet.create_calendar_event(
            summary=args.summary,
            start_time=args.start_time,
            end_time=args.end_time,
            duration_minutes=args.duration_minutes,
            description=args.description,
            attendees=list(args.attendees) if args.attendees else None,
            location=args.location,
            time_zone=args.timezone,
            add_meet_link=args.add_meet_link,
        )

        if event.attendees:
            attendees = "\n".join(f"  - {a.email}" for a in event.attendees)
        else:
            attendees = "None"

        lines = [
            "✅ **Calendar Event Created!**\n",
            f"- **Title:** {event.summary}",
            f"- **When:** {format_date(event.start_value)}",
            f"- **Calendar Link:** {event.html_link or NOT_AVAILABLE}",
        ]
        if event.hangout_link:
            lines.append(f"- **Google Meet:** {event.hangout_link}")
        lines.append(f"\n**Attendees:**\n{attendees}")
        return success("\n".join(lines))

    # =========================================================================
    # Gmail
    # =========================================================================

    async def _gmail_profile(self, args: schemas.NoArgs) -> ToolResponse:
        gmail = await self.session.gmail()
        profile = await gmail.get_profile()

        return success(
            "**Gmail Profile:**\n\n"
            f"- Email: {profile.email_address}\n"
            f"- Total Messages: {profile.messages_total:,}\n"
            f"- Total Threads: {profile.threads_total:,}"
        )

    async def _list_labels(self, args: schemas.NoArgs) -> ToolResponse:
        gmail = await self.session.gmail()
        labels = await gmail.list_labels()

        formatted = "\n".join(f"- **{label.name}** (`{label.id}`)" for label in labels)
        return success(f"**Gmail Labels:**\n\n{formatted}")

    async def _list_emails(self, args: schemas.ListEmailsArgs) -> ToolResponse:
        gmail = await self.session.gmail()
        messages = await gmail.list_messages(max_results=args.limit)

        if not messages:
            return success("No emails found in your inbox.")

        formatted = "\n\n".join(
            f"**{i}. {'🔵 ' if msg.is_unread else ''}{_subject(msg)}**\n"
            f"- From: {get_header(msg, 'From')}\n"
            f"- Date: {get_header(msg, 'Date')}\n"
            f"- ID: `{msg.id}`\n"
            f"- Snippet: {truncate(msg.snippet)}..."
            for i, msg in enumerate(messages, 1)
        )
        return success(f"**Inbox ({len(messages)} emails):**\n\n{formatted}")

    async def _search_emails(self, args: schemas.SearchEmailsArgs) -> ToolResponse:
        gmail = await self.session.gmail()
        messages = await gmail.search_messages(args.query, args.limit)

        if not messages:
            return success(f'No emails found matching: "{args.query}"')

        formatted = "\n\n".join(
            f"**{i}. {_subject(msg)}**\n"
            f"- From: {get_header(msg, 'From')}\n"
            f"- Date: {get_header(msg, 'Date')}\n"
            f"- ID: `{msg.id}`"
            for i, msg in enumerate(messages, 1)
        )
        return success(
            f'**Search Results for "{args.query}" ({len(messages)} emails):**\n\n{formatted}'
        )

    async def _get_email(self, args: schemas.MessageIdArgs) -> ToolResponse:
        gmail = await self.session.gmail()
        message = await gmail.get_message(args.message_id)

        return success(
            "**Email Details:**\n\n"
            f"- **Subject:** {_subject(message)}\n"
            f"- **From:** {get_header(message, 'From')}\n"
            f"- **To:** {get_header(message, 'To')}\n"
            f"- **Date:** {get_header(message, 'Date')}\n"
            f"- **Thread ID:** `{message.thread_id}`\n\n"
            f"---\n\n**Body:**\n\n{get_message_body(message)}"
        )

    async def _trash_email(self, args: schemas.MessageIdArgs) -> ToolResponse:
        gmail = await self.session.gmail()
        await gmail.trash_message(args.message_id)
        return success(f"✅ Email moved to trash: `{args.message_id}`")

    async def _mark_as_read(self, args: schemas.MessageIdArgs) -> ToolResponse:
        gmail = await self.session.gmail()
        await gmail.mark_as_read(args.message_id)
        return success(f"✅ Email marked as read: `{args.message_id}`")

    async def _mark_as_unread(self, args: schemas.MessageIdArgs) -> ToolResponse:
        gmail = await self.session.gmail()
        await gmail.mark_as_unread(args.message_id)
        return success(f"✅ Email marked as unread: `{args.message_id}`")

    async def _get_thread(self, args: schemas.GetThreadArgs) -> ToolResponse:
        gmail = await self.session.gmail()
        thread = await gmail.get_thread(args.thread_id)

        if not thread.messages:
            return success("No messages found in this thread.")

        formatted = "\n\n---\n\n".join(
            f"**Message {i}**\n"
            f"- From: {get_header(msg, 'From')}\n"
            f"- Date: {get_header(msg, 'Date')}\n\n"
            f"{get_message_body(msg)}"
            for i, msg in enumerate(thread.messages, 1)
        )
        subject = _subject(thread.messages[0])
        return success(
            f"**Thread: {subject}** ({len(thread.messages)} messages)\n\n---\n\n{formatted}"
        )

    async def _send_email(self, args: schemas.SendEmailArgs) -> ToolResponse:
        gmail = await self.session.gmail()
        message = await gmail.send_email(args.to, args.subject, args.body, args.cc, args.bcc)

        return success(
            "✅ **Email Sent Successfully!**\n\n"
            f"- To: {args.to}\n"
            f"- Subject: {args.subject}\n"
            f"- Message ID: `{message.id}`"
        )

    async def _create_draft(self, args: schemas.SendEmailArgs) -> ToolResponse:
        gmail = await self.session.gmail()
        draft = await gmail.create_draft(args.to, args.subject, args.body, args.cc, args.bcc)

        return success(
            "✅ **Draft Created Successfully!**\n\n"
            f"- To: {args.to}\n"
            f"- Subject: {args.subject}\n"
            f"- Draft ID: `{draft.id}`"
        )

    # =========================================================================
    # Docs
    # =========================================================================

    @staticmethod
    def _format_documents(docs) -> str:
        return "\n\n".join(
            f"**{i}. {doc.name}**\n"
            f"- ID: `{doc.id}`\n"
            f"- Modified: {format_date(doc.modified_time)}\n"
            f"- URL: {document_url(doc.id)}"
            for i, doc in enumerate(docs, 1)
        )

    async def _list_docs(self, args: schemas.ListDocsArgs) -> ToolResponse:
        docs_client = await self.session.docs()
        docs = await docs_client.list_documents(args.limit)

        if not docs:
            return success("No Google Docs found in your Drive.")

        return success(f"**Recent Google Docs ({len(docs)}):**\n\n{self._format_documents(docs)}")

    async def _search_docs(self, args: schemas.SearchDocsArgs) -> ToolResponse:
        docs_client = await self.session.docs()
        docs = await docs_client.search_documents(args.query, args.limit)

        if not docs:
            return success(f'No documents found matching: "{args.query}"')

        return success(
            f'**Search Results for "{args.query}" ({len(docs)} documents):**\n\n'
            f"{self._format_documents(docs)}"
        )

    async def _get_doc(self, args: schemas.DocumentIdArgs) -> ToolResponse:
        docs_client = await self.session.docs()
        doc = await docs_client.get_document(args.document_id)
        text = extract_text(doc)

        return success(
            f"**Document: {doc.title}**\n\n"
            f"- ID: `{doc.document_id}`\n"
            f"- URL: {document_url(doc.document_id)}\n\n"
            f"---\n\n**Content:**\n\n{text or '(Empty document)'}"
        )

    async def _create_doc(self, args: schemas.CreateDocArgs) -> ToolResponse:
        docs_client = await self.session.docs()
        doc = await docs_client.create_document(args.title, args.content)

        return success(
            "✅ **Document Created!**\n\n"
            f"- Title: {doc.title}\n"
            f"- ID: `{doc.document_id}`\n"
            f"- URL: {document_url(doc.document_id)}"
        )

    async def _append_to_doc(self, args: schemas.AppendToDocArgs) -> ToolResponse:
        docs_client = await self.session.docs()
        await docs_client.append_text(args.document_id, args.text)

        return success(
            "✅ Text appended to document!\n\n"
            f"- Document ID: `{args.document_id}`\n"
            f"- URL: {document_url(args.document_id)}"
        )

    async def _replace_in_doc(self, args: schemas.ReplaceInDocArgs) -> ToolResponse:
        docs_client = await self.session.docs()
        count = await docs_client.replace_text(
            args.document_id, args.search_text, args.replace_text, args.match_case
        )

        return success(
            "✅ Text replaced in document!\n\n"
            f"- Occurrences replaced: {count}\n"
            f'- Search: "{args.search_text}"\n'
            f'- Replace: "{args.replace_text}"\n'
            f"- Document: {document_url(args.document_id)}"
        )
