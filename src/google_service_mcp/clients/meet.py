"""Google Meet and Calendar client.

Meet REST v2 serves conference records and their artifacts; Calendar v3
serves scheduled meetings, which are calendar events backed by Meet.
"""

import logging
import re
import secrets
import time
from datetime import datetime, timedelta, timezone
from typing import Any

from google_service_mcp.clients.base import GoogleApiClient, api_operation
from google_service_mcp.config import CALENDAR_API_BASE, MEET_API_BASE
from google_service_mcp.models import (
    CalendarEvent,
    Conference,
    MeetingSpace,
    Participant,
    Recording,
    Transcript,
    TranscriptEntry,
)

logger = logging.getLogger(__name__)

EVENT_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"

_DATE_AND_TIME = re.compile(r"^(\d{4}-\d{2}-\d{2})\s+(.+)$")
_TIME_24H = re.compile(r"^(\d{1,2}):(\d{2})$")
_TIME_12H = re.compile(r"^(\d{1,2}):(\d{2})\s*(am|pm)$", re.IGNORECASE)
_HOUR_ONLY = re.compile(r"^(\d{1,2})\s*(am|pm)?$", re.IGNORECASE)


def _to_24_hour(hours: int, meridiem: str | None) -> int:
    if not meridiem:
        return hours
    is_pm = meridiem.lower() == "pm"
    if is_pm and hours != 12:
        return hours + 12
    if not is_pm and hours == 12:
        return 0
    return hours


def parse_date_time(value: str) -> str:
    """Normalize a user-supplied start or end time.

    ISO-8601 input (anything containing "T" or "Z") is returned unchanged.
    ``YYYY-MM-DD`` followed by ``HH:mm``, ``h:mm am/pm``, ``h am/pm`` or a
    bare hour becomes ``YYYY-MM-DDTHH:MM:00``. Anything else is returned as-is.

    Args:
        value: Date/time string.

    Returns:
        Local date-time string understood by the Calendar API.
    """
    if "T" in value or "Z" in value:
        return value

    match = _DATE_AND_TIME.match(value)
    if not match:
        return value

    date_part, time_part = match.groups()
    hours, minutes = 0, 0

    if m := _TIME_24H.match(time_part):
        hours, minutes = int(m.group(1)), int(m.group(2))
    elif m := _TIME_12H.match(time_part):
        hours, minutes = _to_24_hour(int(m.group(1)), m.group(3)), int(m.group(2))
    elif m := _HOUR_ONLY.match(time_part):
        hours = _to_24_hour(int(m.group(1)), m.group(2))

    return f"{date_part}T{hours:02d}:{minutes:02d}:00"


def add_minutes(start: str, minutes: int) -> str:
    """Add a duration to a normalized start time.

    Naive inputs yield naive ``YYYY-MM-DDTHH:MM:SS`` output, rolling over into
    the next day when needed. Inputs with an offset keep their offset.

    Raises:
        ValueError: If ``start`` is not an ISO-8601 date-time.
    """
    parsed = datetime.fromisoformat(start.replace("Z", "+00:00"))
    end = parsed + timedelta(minutes=minutes)
    if end.tzinfo is None:
        return end.strftime(EVENT_DATETIME_FORMAT)
    return end.isoformat()


def conference_request_id() -> str:
    """Idempotency key for a new Meet conference: time plus random suffix."""
    return f"meet-{int(time.time() * 1000)}-{secrets.token_hex(4)}"


class MeetClient(GoogleApiClient):
    """Conference records, meeting spaces and Meet-backed calendar events."""

    service_name = "Meet"

    async def _meet_request(
        self, method: str, path: str, params: dict[str, Any] | None = None, json_data=None
    ) -> dict[str, Any]:
        return await self._make_request(method, f"{MEET_API_BASE}/{path}", params, json_data)

    @api_operation("list conference records")
    async def list_conference_records(self, page_size: int | None = None) -> list[Conference]:
        page_size = page_size or self.settings.conference_page_size
        data = await self._meet_request("GET", "conferenceRecords", {"pageSize": page_size})
        return [Conference.model_validate(r) for r in data.get("conferenceRecords", [])]

    @api_operation("get conference record")
    async def get_conference_record(self, name: str) -> Conference:
        return Conference.model_validate(await self._meet_request("GET", name))

    @api_operation("list participants")
    async def list_participants(
        self, conference_name: str, page_size: int | None = None
    ) -> list[Participant]:
        page_size = page_size or self.settings.participant_page_size
        data = await self._meet_request(
            "GET", f"{conference_name}/participants", {"pageSize": page_size}
        )
        return [Participant.model_validate(p) for p in data.get("participants", [])]

    @api_operation("list recordings")
    async def list_recordings(self, conference_name: str) -> list[Recording]:
        data = await self._meet_request("GET", f"{conference_name}/recordings")
        return [Recording.model_validate(r) for r in data.get("recordings", [])]

    @api_operation("get recording")
    async def get_recording(self, name: str) -> Recording:
        return Recording.model_validate(await self._meet_request("GET", name))

    @api_operation("list transcripts")
    async def list_transcripts(self, conference_name: str) -> list[Transcript]:
        data = await self._meet_request("GET", f"{conference_name}/transcripts")
        return [Transcript.model_validate(t) for t in data.get("transcripts", [])]

    @api_operation("list transcript entries")
    async def list_transcript_entries(
        self, transcript_name: str, page_size: int | None = None
    ) -> list[TranscriptEntry]:
        page_size = page_size or self.settings.transcript_page_size
        data = await self._meet_request(
            "GET", f"{transcript_name}/entries", {"pageSize": page_size}
        )
        return [TranscriptEntry.model_validate(e) for e in data.get("transcriptEntries", [])]

    @api_operation("create meeting space")
    async def create_space(self) -> MeetingSpace:
        space = MeetingSpace.model_validate(await self._meet_request("POST", "spaces", json_data={}))
        logger.info(f"Created meeting space {space.name}")
        return space

    @api_operation("get meeting space")
    async def get_space(self, name: str) -> MeetingSpace:
        return MeetingSpace.model_validate(await self._meet_request("GET", name))

    # -------------------------------------------------------------------------
    # Calendar
    # -------------------------------------------------------------------------

    async def _list_meet_events(
        self, max_results: int, time_min: datetime, time_max: datetime | None = None
    ) -> list[CalendarEvent]:
        # Over-fetch since non-Meet events are filtered out afterwards
        params: dict[str, Any] = {
            "timeMin": time_min.isoformat(),
            "maxResults": max_results * 2,
            "singleEvents": "true",
            "orderBy": "startTime",
        }
        if time_max is not None:
            params["timeMax"] = time_max.isoformat()

        data = await self._make_request(
            "GET",
            f"{CALENDAR_API_BASE}/calendars/primary/events",
            params=params,
            service="Calendar",
        )
        events = [CalendarEvent.model_validate(e) for e in data.get("items", [])]
        return [e for e in events if e.is_meet_event][:max_results]

    @api_operation("list upcoming meetings")
    async def list_upcoming_meetings(self, max_results: int | None = None) -> list[CalendarEvent]:
        max_results = max_results or self.settings.calendar_max_results
        return await self._list_meet_events(max_results, datetime.now(timezone.utc))

    @api_operation("list past meetings")
    async def list_past_meetings(self, max_results: int | None = None) -> list[CalendarEvent]:
        max_results = max_results or self.settings.calendar_max_results
        now = datetime.now(timezone.utc)
        time_min = now - timedelta(days=self.settings.past_meetings_days)
        return await self._list_meet_events(max_results, time_min, now)

    @api_operation("create calendar event")
    async def create_calendar_event(
        self,
        summary: str,
        start_time: str,
        end_time: str | None = None,
        duration_minutes: int = 60,
        description: str | None = None,
        attendees: list[str] | None = None,
        location: str | None = None,
        time_zone: str | None = None,
        add_meet_link: bool = True,
    ) -> CalendarEvent:
        """Create an event on the primary calendar.

        Args:
            summary: Event title.
            start_time: ISO-8601 or "YYYY-MM-DD HH:mm" style start.
            end_time: Explicit end; takes precedence over ``duration_minutes``.
            duration_minutes: Length used when ``end_time`` is not given.
            description: Optional event description.
            attendees: Email addresses to invite.
            location: Optional location.
            time_zone: IANA time zone name; defaults to the configured one.
            add_meet_link: Attach a new Google Meet conference.

        Returns:
            The created event as returned by Calendar.
        """
        time_zone = time_zone or self.settings.default_timezone
        start = parse_date_time(start_time)
        end = parse_date_time(end_time) if end_time else add_minutes(start, duration_minutes)

        event: dict[str, Any] = {
            "summary": summary,
            "start": {"dateTime": start, "timeZone": time_zone},
            "end": {"dateTime": end, "timeZone": time_zone},
        }
        if description:
            event["description"] = description
        if location:
            event["location"] = location
        if attendees:
            event["attendees"] = [{"email": email} for email in attendees]
        if add_meet_link:
            event["conferenceData"] = {
                "createRequest": {
                    "requestId": conference_request_id(),
                    "conferenceSolutionKey": {"type": "hangoutsMeet"},
                }
            }

        params = {
            "conferenceDataVersion": 1 if add_meet_link else 0,
            "sendUpdates": "all" if attendees else "none",
        }

        logger.info(f"Creating calendar event: {summary}")
        data = await self._make_request(
            "POST",
            f"{CALENDAR_API_BASE}/calendars/primary/events",
            params=params,
            json_data=event,
            service="Calendar",
        )
        created = CalendarEvent.model_validate(data)
        if created.summary is None:
            created = created.model_copy(update={"summary": summary})
        return created
