"""Static catalog of the tools exposed over MCP.

Order matters: ``list_tools`` returns ``TOOLS`` verbatim.
"""

from typing import Any

from mcp.types import Tool

NO_ARGUMENTS: dict[str, Any] = {"type": "object", "properties": {}, "required": []}


def _limit(noun: str, maximum: int) -> dict[str, Any]:
    return {
        "type": "integer",
        "description": f"Maximum number of {noun} to return (default: 10, max: {maximum})",
    }


def _string(description: str) -> dict[str, Any]:
    return {"type": "string", "description": description}


CONFERENCE_NAME = _string("The conference record resource name (e.g., conferenceRecords/abc123)")
TRANSCRIPT_NAME = _string(
    "The transcript resource name (e.g., conferenceRecords/abc123/transcripts/xyz789)"
)
MESSAGE_ID = _string("The Gmail message ID")
DOCUMENT_ID = _string("The Google Doc document ID")

EMAIL_PROPERTIES: dict[str, Any] = {
    "to": _string("Recipient email address"),
    "subject": _string("Email subject line"),
    "body": _string("Email body (plain text)"),
    "cc": _string("CC recipients (comma-separated)"),
    "bcc": _string("BCC recipients (comma-separated)"),
}

TOOLS: tuple[Tool, ...] = (
    # =========================================================================
    # Authentication
    # =========================================================================
    Tool(
        name="auth_status",
        description=(
            "Check the current authentication status with Google. "
            "Returns whether you are authenticated or need to sign in."
        ),
        inputSchema=NO_ARGUMENTS,
    ),
    Tool(
        name="authenticate",
        description=(
            "Authenticate with Google to access Meet, Calendar, Gmail and Docs. "
            "This will open a browser window for OAuth sign-in. Required before using other tools."
        ),
        inputSchema=NO_ARGUMENTS,
    ),
    # =========================================================================
    # Google Meet / Calendar
    # =========================================================================
    Tool(
        name="list_conferences",
        description=(
            "List recent conference records (past Google Meet meetings). "
            "Returns meeting details including start/end times."
        ),
        inputSchema={
            "type": "object",
            "properties": {"limit": _limit("conferences", 100)},
            "required": [],
        },
    ),
    Tool(
        name="get_conference",
        description="Get details about a specific conference record by its resource name.",
        inputSchema={
            "type": "object",
            "properties": {"name": CONFERENCE_NAME},
            "required": ["name"],
        },
    ),
    Tool(
        name="list_participants",
        description="List all participants who joined a specific conference/meeting.",
        inputSchema={
            "type": "object",
            "properties": {"conference_name": CONFERENCE_NAME},
            "required": ["conference_name"],
        },
    ),
    Tool(
        name="list_recordings",
        description=(
            "List all recordings for a specific conference. "
            "Returns recording status and Google Drive links."
        ),
        inputSchema={
            "type": "object",
            "properties": {"conference_name": CONFERENCE_NAME},
            "required": ["conference_name"],
        },
    ),
    Tool(
        name="list_transcripts",
        description=(
            "List all transcripts for a specific conference. "
            "Returns transcript status and Google Docs links."
        ),
        inputSchema={
            "type": "object",
            "properties": {"conference_name": CONFERENCE_NAME},
            "required": ["conference_name"],
        },
    ),
    Tool(
        name="get_transcript_text",
        description=(
            "Get the actual transcript text/entries for a specific transcript. "
            "Returns speaker-attributed text with timestamps."
        ),
        inputSchema={
            "type": "object",
            "properties": {"transcript_name": TRANSCRIPT_NAME},
            "required": ["transcript_name"],
        },
    ),
    Tool(
        name="summarize_transcript",
        description=(
            "Get a transcript and format it for summarization. "
            "Returns the full transcript text that can be summarized by the AI."
        ),
        inputSchema={
            "type": "object",
            "properties": {"transcript_name": TRANSCRIPT_NAME},
            "required": ["transcript_name"],
        },
    ),
    Tool(
        name="create_meeting",
        description="Create a new Google Meet meeting space. Returns the meeting link and code.",
        inputSchema=NO_ARGUMENTS,
    ),
    Tool(
        name="list_upcoming_meetings",
        description="List upcoming Google Meet meetings from your Google Calendar.",
        inputSchema={
            "type": "object",
            "properties": {"limit": _limit("meetings", 100)},
            "required": [],
        },
    ),
    Tool(
        name="list_past_meetings",
        description="List past Google Meet meetings from your Google Calendar (last 30 days).",
        inputSchema={
            "type": "object",
            "properties": {"limit": _limit("meetings", 100)},
            "required": [],
        },
    ),
    Tool(
        name="create_calendar_event",
        description=(
            "Create a new calendar event with optional Google Meet link. "
            "Can add attendees who will receive invitations."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "summary": _string("Event title/name"),
                "description": _string("Event description (optional)"),
                "start_time": _string(
                    "Start time in format 'YYYY-MM-DD HH:mm' (e.g., '2024-01-30 14:00') or ISO 8601"
                ),
                "end_time": _string("End time (optional, defaults to start + duration)"),
                "duration_minutes": {
                    "type": "integer",
                    "description": "Duration in minutes (default: 60, used if end_time not provided)",
                },
                "attendees": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "List of attendee email addresses",
                },
                "location": _string("Event location (optional)"),
                "timezone": _string("Timezone (default: Asia/Kolkata)"),
                "add_meet_link": {
                    "type": "boolean",
                    "description": "Add Google Meet link (default: true)",
                },
            },
            "required": ["summary", "start_time"],
        },
    ),
    # =========================================================================
    # Gmail
    # =========================================================================
    Tool(
        name="gmail_profile",
        description="Get your Gmail profile information including email address and message counts.",
        inputSchema=NO_ARGUMENTS,
    ),
    Tool(
        name="list_labels",
        description="List all Gmail labels (folders) in your account.",
        inputSchema=NO_ARGUMENTS,
    ),
    Tool(
        name="list_emails",
        description="List recent emails from your inbox. Returns subject, sender, and snippet.",
        inputSchema={
            "type": "object",
            "properties": {"limit": _limit("emails", 50)},
            "required": [],
        },
    ),
    Tool(
        name="search_emails",
        description=(
            "Search emails using Gmail search syntax. Examples: 'from:user@example.com', "
            "'subject:meeting', 'is:unread', 'has:attachment'."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "query": _string("Gmail search query (e.g., 'from:boss@company.com is:unread')"),
                "limit": _limit("emails", 50),
            },
            "required": ["query"],
        },
    ),
    Tool(
        name="get_email",
        description="Get the full content of a specific email by its message ID.",
        inputSchema={
            "type": "object",
            "properties": {"message_id": MESSAGE_ID},
            "required": ["message_id"],
        },
    ),
    Tool(
        name="trash_email",
        description="Move an email to trash.",
        inputSchema={
            "type": "object",
            "properties": {"message_id": _string("The Gmail message ID to trash")},
            "required": ["message_id"],
        },
    ),
    Tool(
        name="mark_as_read",
        description="Mark an email as read.",
        inputSchema={
            "type": "object",
            "properties": {"message_id": MESSAGE_ID},
            "required": ["message_id"],
        },
    ),
    Tool(
        name="mark_as_unread",
        description="Mark an email as unread.",
        inputSchema={
            "type": "object",
            "properties": {"message_id": MESSAGE_ID},
            "required": ["message_id"],
        },
    ),
    Tool(
        name="get_thread",
        description="Get all messages in an email thread/conversation.",
        inputSchema={
            "type": "object",
            "properties": {"thread_id": _string("The Gmail thread ID")},
            "required": ["thread_id"],
        },
    ),
    Tool(
        name="send_email",
        description="Send a new email. Requires recipient, subject, and body.",
        inputSchema={
            "type": "object",
            "properties": EMAIL_PROPERTIES,
            "required": ["to", "subject", "body"],
        },
    ),
    Tool(
        name="create_draft",
        description="Create a draft email without sending it.",
        inputSchema={
            "type": "object",
            "properties": EMAIL_PROPERTIES,
            "required": ["to", "subject", "body"],
        },
    ),
    # =========================================================================
    # Google Docs
    # =========================================================================
    Tool(
        name="list_docs",
        description="List recent Google Docs documents from your Drive, sorted by last modified.",
        inputSchema={
            "type": "object",
            "properties": {"limit": _limit("documents", 50)},
            "required": [],
        },
    ),
    Tool(
        name="search_docs",
        description="Search for Google Docs documents by name.",
        inputSchema={
            "type": "object",
            "properties": {
                "query": _string("Search query to find documents by name"),
                "limit": _limit("documents", 50),
            },
            "required": ["query"],
        },
    ),
    Tool(
        name="get_doc",
        description="Get the content of a Google Doc as plain text.",
        inputSchema={
            "type": "object",
            "properties": {"document_id": DOCUMENT_ID},
            "required": ["document_id"],
        },
    ),
    Tool(
        name="create_doc",
        description="Create a new Google Doc with optional initial content.",
        inputSchema={
            "type": "object",
            "properties": {
                "title": _string("Title of the new document"),
                "content": _string("Optional initial content for the document"),
            },
            "required": ["title"],
        },
    ),
    Tool(
        name="append_to_doc",
        description="Append text to the end of an existing Google Doc.",
        inputSchema={
            "type": "object",
            "properties": {
                "document_id": DOCUMENT_ID,
                "text": _string("Text to append to the document"),
            },
            "required": ["document_id", "text"],
        },
    ),
    Tool(
        name="replace_in_doc",
        description="Find and replace text in a Google Doc.",
        inputSchema={
            "type": "object",
            "properties": {
                "document_id": DOCUMENT_ID,
                "search_text": _string("Text to search for"),
                "replace_text": _string("Text to replace with"),
                "match_case": {
                    "type": "boolean",
                    "description": "Whether to match case (default: false)",
                },
            },
            "required": ["document_id", "search_text", "replace_text"],
        },
    ),
)

TOOL_NAMES: tuple[str, ...] = tuple(tool.name for tool in TOOLS)
