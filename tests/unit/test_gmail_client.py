"""Unit tests for the Gmail client and message helpers."""

import base64
import json
from email import message_from_bytes, policy
from email.message import EmailMessage
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from google_service_mcp.clients.gmail import (
    USER_BASE,
    GmailClient,
    build_raw_message,
    decode_body,
    get_header,
    get_message_body,
)
from google_service_mcp.config import Settings
from google_service_mcp.errors import ServiceError
from google_service_mcp.models import Message


def b64url(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode()).decode().rstrip("=")


def full_message(message_id: str, subject: str = "Hello", unread: bool = False) -> dict[str, Any]:
    return {
        "id": message_id,
        "threadId": f"t-{message_id}",
        "labelIds": ["INBOX", "UNREAD"] if unread else ["INBOX"],
        "snippet": "Preview text",
        "payload": {
            "mimeType": "text/plain",
            "headers": [
                {"name": "From", "value": "ada@acme.com"},
                {"name": "Subject", "value": subject},
            ],
            "body": {"data": b64url(f"Body of {message_id}")},
        },
    }


@pytest.fixture
def gmail_client(
    mock_google_credentials: MagicMock, http_client: httpx.AsyncClient, settings: Settings
) -> GmailClient:
    return GmailClient(mock_google_credentials, http_client, settings)


@pytest.mark.unit
class TestMessageHelpers:
    """Tests for header lookup and body extraction."""

    def test_should_find_header_case_insensitively(self) -> None:
        """Verify header lookup ignores case and misses return an empty string."""
        message = Message.model_validate(full_message("m1", subject="Quarterly"))

        assert get_header(message, "subject") == "Quarterly"
        assert get_header(message, "Cc") == ""

    def test_should_return_empty_header_without_payload(self) -> None:
        """Verify a message without payload has no headers."""
        assert get_header(Message(id="m1"), "From") == ""

    def test_should_decode_unpadded_body(self) -> None:
        """Verify body data decodes without base64 padding."""
        assert decode_body(b64url("hi!")) == "hi!"
        assert decode_body(None) == ""

    def test_should_prefer_top_level_body(self) -> None:
        """Verify the payload body is used when present."""
        message = Message.model_validate(full_message("m1"))
        assert get_message_body(message) == "Body of m1"

    def test_should_prefer_plain_text_part(self) -> None:
        """Verify the text/plain part wins over HTML in multipart messages."""
        message = Message.model_validate(
            {
                "id": "m2",
                "payload": {
                    "mimeType": "multipart/alternative",
                    "parts": [
                        {"mimeType": "text/html", "body": {"data": b64url("<p>html</p>")}},
                        {"mimeType": "text/plain", "body": {"data": b64url("plain")}},
                    ],
                },
            }
        )
        assert get_message_body(message) == "plain"

    def test_should_fall_back_to_first_part_with_data(self) -> None:
        """Verify the first part carrying data is used when no plain part exists."""
        message = Message.model_validate(
            {
                "id": "m3",
                "payload": {
                    "parts": [
                        {"mimeType": "text/html", "body": {"size": 0}},
                        {"mimeType": "text/html", "body": {"data": b64url("<b>only html</b>")}},
                    ]
                },
            }
        )
        assert get_message_body(message) == "<b>only html</b>"

    def test_should_return_empty_body_when_missing(self) -> None:
        """Verify a message without payload has an empty body."""
        assert get_message_body(Message(id="m4")) == ""


@pytest.mark.unit
class TestBuildRawMessage:
    """Tests for build_raw_message()."""

    def _decode(self, raw: str) -> bytes:
        return base64.urlsafe_b64decode(raw + "=" * (-len(raw) % 4))

    def _parse(self, raw: str) -> EmailMessage:
        return message_from_bytes(self._decode(raw), policy=policy.default)

    def test_should_build_plain_text_message_without_padding(self) -> None:
        """Verify the message is unpadded base64url with the expected headers."""
        raw = build_raw_message("ada@acme.com", "Hi", "Line one")

        assert "=" not in raw
        message = self._parse(raw)
        assert message["To"] == "ada@acme.com"
        assert message["Subject"] == "Hi"
        assert message["MIME-Version"] == "1.0"
        assert message.get_content_type() == "text/plain"
        assert message.get_content_charset() == "utf-8"
        assert message.get_content() == "Line one"
        assert "Cc" not in message
        assert "Bcc" not in message

    def test_should_use_crlf_line_endings(self) -> None:
        """Verify every line of the encoded message ends with CRLF."""
        decoded = self._decode(build_raw_message("ada@acme.com", "Hi", "Line one\nLine two"))

        assert b"\r\nSubject: Hi\r\n" in decoded
        assert b"\n" not in decoded.replace(b"\r\n", b"")

    def test_should_include_cc_and_bcc(self) -> None:
        """Verify optional recipients become Cc and Bcc headers."""
        message = self._parse(
            build_raw_message("ada@acme.com", "Hi", "x", cc="bob@acme.com", bcc="eve@acme.com")
        )

        assert message["Cc"] == "bob@acme.com"
        assert message["Bcc"] == "eve@acme.com"

    def test_should_encode_unicode_subject_and_body(self) -> None:
        """Verify non-ASCII text survives encoding in both header and body."""
        raw = build_raw_message("ada@acme.com", "Café", "naïve ✓")

        assert "Café".encode() not in self._decode(raw)
        message = self._parse(raw)
        assert message["Subject"] == "Café"
        assert message.get_content() == "naïve ✓"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"subject": "Hi\r\nBcc: spy@evil.com"},
            {"subject": "Hi\nBcc: spy@evil.com"},
            {"cc": "bob@acme.com\r\nBcc: spy@evil.com"},
            {"bcc": "eve@acme.com\r\nX-Extra: 1"},
        ],
    )
    def test_should_refuse_line_breaks_in_headers(self, overrides: dict[str, str]) -> None:
        """Verify a header value with a line break cannot add headers."""
        arguments = {"to": "ada@acme.com", "subject": "Hi", "body": "Body", **overrides}

        with pytest.raises(ValueError):
            build_raw_message(**arguments)


@pytest.mark.unit
class TestListMessages:
    """Tests for list_messages() and search_messages()."""

    @pytest.mark.asyncio
    async def test_should_fetch_each_message_in_full(
        self, gmail_client: GmailClient, google_api
    ) -> None:
        """Verify listed ids are fetched in full with inbox filtering."""
        google_api.add("GET", f"{USER_BASE}/messages", {"messages": [{"id": "m1"}, {"id": "m2"}]})
        google_api.add("GET", f"{USER_BASE}/messages/m1", full_message("m1", unread=True))
        google_api.add("GET", f"{USER_BASE}/messages/m2", full_message("m2"))

        messages = await gmail_client.list_messages(max_results=5)

        assert [m.id for m in messages] == ["m1", "m2"]
        assert messages[0].is_unread is True
        assert messages[1].is_unread is False

        params = google_api.requests_to("GET", f"{USER_BASE}/messages")[0].url.params
        assert params["maxResults"] == "5"
        assert params.get_list("labelIds") == ["INBOX"]
        assert "q" not in params
        detail = google_api.requests_to("GET", f"{USER_BASE}/messages/m1")[0]
        assert detail.url.params["format"] == "full"

    @pytest.mark.asyncio
    async def test_should_return_empty_list_without_messages(
        self, gmail_client: GmailClient, google_api
    ) -> None:
        """Verify a response without messages yields an empty list."""
        google_api.add("GET", f"{USER_BASE}/messages", {"resultSizeEstimate": 0})
        assert await gmail_client.list_messages() == []

    @pytest.mark.asyncio
    async def test_should_search_all_mail(self, gmail_client: GmailClient, google_api) -> None:
        """Verify search sends the query and no label filter."""
        google_api.add("GET", f"{USER_BASE}/messages", {"messages": []})

        await gmail_client.search_messages("from:ada@acme.com", max_results=3)

        params = google_api.requests_to("GET", f"{USER_BASE}/messages")[0].url.params
        assert params["q"] == "from:ada@acme.com"
        assert "labelIds" not in params

    @pytest.mark.asyncio
    async def test_should_fail_whole_listing_when_one_fetch_fails(
        self, gmail_client: GmailClient, google_api
    ) -> None:
        """Verify one failed full fetch fails the listing."""
        google_api.add("GET", f"{USER_BASE}/messages", {"messages": [{"id": "m1"}, {"id": "gone"}]})
        google_api.add("GET", f"{USER_BASE}/messages/m1", full_message("m1"))

        with pytest.raises(ServiceError) as exc_info:
            await gmail_client.list_messages()

        assert str(exc_info.value).startswith("Failed to list messages: Failed to get message:")


@pytest.mark.unit
class TestMailboxOperations:
    """Tests for send, draft and label-modifying calls."""

    @pytest.mark.asyncio
    async def test_should_send_raw_message(self, gmail_client: GmailClient, google_api) -> None:
        """Verify send posts the encoded message as raw."""
        google_api.add("POST", f"{USER_BASE}/messages/send", {"id": "sent1", "threadId": "t1"})

        sent = await gmail_client.send_email("ada@acme.com", "Hi", "Body")

        assert sent.id == "sent1"
        body = json.loads(google_api.requests_to("POST", f"{USER_BASE}/messages/send")[0].content)
        assert body == {"raw": build_raw_message("ada@acme.com", "Hi", "Body")}

    @pytest.mark.asyncio
    async def test_should_wrap_draft_message(self, gmail_client: GmailClient, google_api) -> None:
        """Verify drafts nest the raw message under message."""
        google_api.add("POST", f"{USER_BASE}/drafts", {"id": "d1", "message": {"id": "m9"}})

        draft = await gmail_client.create_draft("ada@acme.com", "Hi", "Body")

        assert draft.id == "d1"
        body = json.loads(google_api.requests_to("POST", f"{USER_BASE}/drafts")[0].content)
        assert set(body) == {"message"}
        assert "raw" in body["message"]

    @pytest.mark.asyncio
    async def test_should_modify_unread_label(self, gmail_client: GmailClient, google_api) -> None:
        """Verify read state toggles the UNREAD label."""
        google_api.add("POST", f"{USER_BASE}/messages/m1/modify", {"id": "m1"})

        await gmail_client.mark_as_read("m1")
        await gmail_client.mark_as_unread("m1")

        requests = google_api.requests_to("POST", f"{USER_BASE}/messages/m1/modify")
        assert json.loads(requests[0].content) == {"removeLabelIds": ["UNREAD"]}
        assert json.loads(requests[1].content) == {"addLabelIds": ["UNREAD"]}

    @pytest.mark.asyncio
    async def test_should_trash_message(self, gmail_client: GmailClient, google_api) -> None:
        """Verify trash posts to the message trash endpoint."""
        google_api.add("POST", f"{USER_BASE}/messages/m1/trash", {"id": "m1"})

        await gmail_client.trash_message("m1")

        assert len(google_api.requests_to("POST", f"{USER_BASE}/messages/m1/trash")) == 1

    @pytest.mark.asyncio
    async def test_should_parse_labels(self, gmail_client: GmailClient, google_api) -> None:
        """Verify labels are parsed from the labels response."""
        google_api.add(
            "GET",
            f"{USER_BASE}/labels",
            {"labels": [{"id": "INBOX", "name": "INBOX", "type": "system"}]},
        )

        labels = await gmail_client.list_labels()

        assert labels[0].name == "INBOX"
        assert labels[0].type == "system"

    @pytest.mark.asyncio
    async def test_should_not_send_message_with_injected_header(
        self, gmail_client: GmailClient, google_api
    ) -> None:
        """Verify a subject carrying a second header fails before any request."""
        with pytest.raises(ServiceError, match="Failed to send email"):
            await gmail_client.send_email("ada@acme.com", "Hi\r\nBcc: spy@evil.com", "Body")

        assert google_api.requests == []


@pytest.mark.unit
class TestListDrafts:
    """Tests for list_drafts()."""

    @pytest.mark.asyncio
    async def test_should_list_drafts_with_default_page_size(
        self, gmail_client: GmailClient, google_api
    ) -> None:
        """Verify drafts are listed with the configured default page size."""
        google_api.add(
            "GET",
            f"{USER_BASE}/drafts",
            {"drafts": [{"id": "d1", "message": {"id": "m1", "threadId": "t1"}}, {"id": "d2"}]},
        )

        drafts = await gmail_client.list_drafts()

        assert [d.id for d in drafts] == ["d1", "d2"]
        assert drafts[0].message is not None
        assert drafts[0].message.id == "m1"
        assert drafts[1].message is None
        params = google_api.requests_to("GET", f"{USER_BASE}/drafts")[0].url.params
        assert params["maxResults"] == "10"

    @pytest.mark.asyncio
    async def test_should_pass_explicit_page_size(
        self, gmail_client: GmailClient, google_api
    ) -> None:
        """Verify an explicit max_results is sent as maxResults."""
        google_api.add("GET", f"{USER_BASE}/drafts", {"resultSizeEstimate": 0})

        assert await gmail_client.list_drafts(max_results=3) == []

        params = google_api.requests_to("GET", f"{USER_BASE}/drafts")[0].url.params
        assert params["maxResults"] == "3"

    @pytest.mark.asyncio
    async def test_should_wrap_draft_listing_failure(
        self, gmail_client: GmailClient, google_api
    ) -> None:
        """Verify upstream errors name the draft listing operation."""
        google_api.add(
            "GET", f"{USER_BASE}/drafts", {"error": {"message": "Forbidden"}}, status_code=403
        )

        with pytest.raises(ServiceError, match="Failed to list drafts: Gmail API error \\(403\\)"):
            await gmail_client.list_drafts()
