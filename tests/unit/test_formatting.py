"""Unit tests for tool output formatting."""

import pytest

from google_service_mcp.models import CalendarEvent, Participant
from google_service_mcp.tools.formatting import (
    NOT_AUTHENTICATED_RESPONSE,
    error,
    format_date,
    format_duration,
    meeting_link,
    parse_timestamp,
    participant_display_name,
    success,
    truncate,
)


@pytest.mark.unit
class TestResponseEnvelope:
    """Tests for success() and error()."""

    def test_should_build_success_with_segments(self) -> None:
        """Verify success keeps every text segment."""
        response = success("one", "two")
        assert response.content == ["one", "two"]
        assert response.is_error is False

    def test_should_build_single_segment_error(self) -> None:
        """Verify error wraps one message and sets the flag."""
        response = error("boom")
        assert response.content == ["boom"]
        assert response.is_error is True

    def test_should_use_fixed_not_authenticated_text(self) -> None:
        """Verify the sign-in prompt text is fixed."""
        assert NOT_AUTHENTICATED_RESPONSE.is_error is True
        assert NOT_AUTHENTICATED_RESPONSE.content == [
            "❌ Not authenticated. Please use the 'authenticate' tool first."
        ]


@pytest.mark.unit
class TestDates:
    """Tests for timestamp parsing and rendering."""

    def test_should_trim_nanoseconds(self) -> None:
        """Verify nanosecond fractions are cut to microseconds."""
        parsed = parse_timestamp("2026-01-30T10:00:00.123456789Z")
        assert parsed is not None
        assert parsed.microsecond == 123456

    def test_should_render_utc_timestamp(self) -> None:
        """Verify UTC timestamps are rendered with a zone suffix."""
        assert format_date("2026-01-30T10:00:00Z") == "2026-01-30 10:00:00 UTC"

    def test_should_render_naive_timestamp_without_zone(self) -> None:
        """Verify naive timestamps carry no zone suffix."""
        assert format_date("2026-01-30T10:00:00") == "2026-01-30 10:00:00"

    def test_should_render_all_day_date(self) -> None:
        """Verify bare dates render at midnight."""
        assert format_date("2026-01-30") == "2026-01-30 00:00:00"

    @pytest.mark.parametrize("value", [None, ""])
    def test_should_render_missing_as_not_available(self, value) -> None:
        """Verify empty values render as N/A."""
        assert format_date(value) == "N/A"

    def test_should_pass_through_unparseable_input(self) -> None:
        """Verify unparseable text is returned unchanged."""
        assert format_date("next tuesday") == "next tuesday"

    @pytest.mark.parametrize(
        "start,end,expected",
        [
            ("2026-01-30T10:00:00Z", "2026-01-30T11:05:00Z", "1h 5m"),
            ("2026-01-30T10:00:00Z", "2026-01-30T10:45:30Z", "45m"),
            ("2026-01-30T10:00:00Z", "2026-01-30T12:00:00Z", "2h 0m"),
            ("2026-01-30T10:00:00.000000001Z", "2026-01-30T10:00:59Z", "0m"),
        ],
    )
    def test_should_format_duration(self, start: str, end: str, expected: str) -> None:
        """Verify durations render as hours and minutes."""
        assert format_duration(start, end) == expected

    @pytest.mark.parametrize(
        "start,end", [(None, "2026-01-30T10:00:00Z"), ("2026-01-30T10:00:00Z", None), ("x", "y")]
    )
    def test_should_report_unknown_duration(self, start, end) -> None:
        """Verify missing or bad endpoints give N/A."""
        assert format_duration(start, end) == "N/A"


@pytest.mark.unit
class TestDisplayHelpers:
    """Tests for participant names and meeting links."""

    def test_should_prefer_signed_in_name(self) -> None:
        """Verify the signed-in name wins over other identities."""
        participant = Participant.model_validate(
            {"signedinUser": {"displayName": "Ada"}, "anonymousUser": {"displayName": "Guest"}}
        )
        assert participant_display_name(participant) == "Ada"

    def test_should_fall_back_to_phone_user(self) -> None:
        """Verify phone participants use their display name."""
        participant = Participant.model_validate({"phoneUser": {"displayName": "+1 555"}})
        assert participant_display_name(participant) == "+1 555"

    def test_should_name_unknown_participant(self) -> None:
        """Verify participants without identity are Unknown."""
        assert participant_display_name(Participant(name="p")) == "Unknown"

    def test_should_prefer_hangout_link(self) -> None:
        """Verify hangoutLink wins over conference entry points."""
        event = CalendarEvent.model_validate(
            {
                "hangoutLink": "https://meet.google.com/aaa",
                "conferenceData": {"entryPoints": [{"uri": "https://meet.google.com/bbb"}]},
            }
        )
        assert meeting_link(event) == "https://meet.google.com/aaa"

    def test_should_use_first_entry_point(self) -> None:
        """Verify the first entry point is used without hangoutLink."""
        event = CalendarEvent.model_validate(
            {"conferenceData": {"entryPoints": [{"uri": "https://meet.google.com/bbb"}]}}
        )
        assert meeting_link(event) == "https://meet.google.com/bbb"

    def test_should_report_missing_link(self) -> None:
        """Verify events without a link report N/A."""
        assert meeting_link(CalendarEvent(id="e")) == "N/A"

    def test_should_truncate_text(self) -> None:
        """Verify text is cut to 100 characters and None becomes empty."""
        assert truncate("a" * 150) == "a" * 100
        assert truncate(None) == ""
