"""Gmail client and message helpers."""

import asyncio
import base64
import logging
from email import policy
from email.mime.text import MIMEText
from typing import Any

from google_service_mcp.clients.base import GoogleApiClient, api_operation
from google_service_mcp.config import GMAIL_API_BASE
from google_service_mcp.models import Draft, GmailProfile, Label, Message, Thread

logger = logging.getLogger(__name__)

USER_BASE = f"{GMAIL_API_BASE}/users/me"


def get_header(message: Message, name: str) -> str:
    """Return a header value by case-insensitive name, or "" when absent."""
    if message.payload is None:
        return ""
    for header in message.payload.headers:
        if header.name.lower() == name.lower():
            return header.value
    return ""


def decode_body(data: str | None) -> str:
    """Decode base64url body data (padding optional)."""
    if not data:
        return ""
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded).decode("utf-8", errors="replace")


def get_message_body(message: Message) -> str:
    """Extract message body text.

    Prefers the top-level body. For multipart messages, the first
    ``text/plain`` part wins, then the first part carrying any data.

    Args:
        message: Message fetched with ``format=full``.

    Returns:
        Decoded message body text, or "" if none is present.
    """
    payload = message.payload
    if payload is None:
        return ""

    # Simple message with body data
    if payload.body and payload.body.data:
        return decode_body(payload.body.data)

    for part in payload.parts:
        if part.mime_type == "text/plain" and part.body and part.body.data:
            return decode_body(part.body.data)

    for part in payload.parts:
        if part.body and part.body.data:
            return decode_body(part.body.data)

    return ""


def build_raw_message(
    to: str,
    subject: str,
    body: str,
    cc: str | None = None,
    bcc: str | None = None,
) -> str:
    """Build a plain-text RFC 822 message and return it base64url encoded.

    Args:
        to: Recipient email.
        subject: Email subject.
        body: Email body text.
        cc: Optional CC recipients.
        bcc: Optional BCC recipients.

    Returns:
        Base64url encoded message without padding.

    Raises:
        ValueError: If a header value contains a line break.
    """
    message = MIMEText(body, "plain", "utf-8", policy=policy.SMTP)
    message["To"] = to
    message["Subject"] = subject
    if cc:
        message["Cc"] = cc
    if bcc:
        message["Bcc"] = bcc

    return base64.urlsafe_b64encode(message.as_bytes()).decode().rstrip("=")


class GmailClient(GoogleApiClient):
    """Messages, threads, labels and drafts of the authenticated mailbox."""

    service_name = "Gmail"

    @api_operation("get Gmail profile")
    async def get_profile(self) -> GmailProfile:
        return GmailProfile.model_validate(await self._make_request("GET", f"{USER_BASE}/profile"))

    @api_operation("list messages")
    async def list_messages(
        self,
        query: str | None = None,
        max_results: int | None = None,
        label_ids: list[str] | None = None,
    ) -> list[Message]:
        """List messages, then fetch each one in full.

        The full fetches run concurrently; if any of them fails the whole
        listing fails.

        Args:
            query: Gmail search query.
            max_results: Maximum number of messages.
            label_ids: Label filter. Defaults to the configured labels (INBOX);
                pass an empty list to search all mail.
        """
        if label_ids is None:
            label_ids = self.settings.gmail_default_labels

        params: dict[str, Any] = {"maxResults": max_results or self.settings.gmail_max_results}
        if query:
            params["q"] = query
        if label_ids:
            params["labelIds"] = label_ids

        logger.debug(f"Listing messages with query: {query or 'none'}")
        data = await self._make_request("GET", f"{USER_BASE}/messages", params=params)

        refs = data.get("messages", [])
        return list(await asyncio.gather(*(self.get_message(ref["id"]) for ref in refs)))

    async def search_messages(self, query: str, max_results: int | None = None) -> list[Message]:
        return await self.list_messages(query, max_results, label_ids=[])

    @api_operation("get message")
    async def get_message(self, message_id: str) -> Message:
        data = await self._make_request(
            "GET", f"{USER_BASE}/messages/{message_id}", params={"format": "full"}
        )
        return Message.model_validate(data)

    @api_operation("get thread")
    async def get_thread(self, thread_id: str) -> Thread:
        data = await self._make_request(
            "GET", f"{USER_BASE}/threads/{thread_id}", params={"format": "full"}
        )
        return Thread.model_validate(data)

    @api_operation("list labels")
    async def list_labels(self) -> list[Label]:
        data = await self._make_request("GET", f"{USER_BASE}/labels")
        return [Label.model_validate(label) for label in data.get("labels", [])]

    @api_operation("send email")
    async def send_email(
        self,
        to: str,
        subject: str,
        body: str,
        cc: str | None = None,
        bcc: str | None = None,
    ) -> Message:
        raw = build_raw_message(to, subject, body, cc, bcc)
        data = await self._make_request("POST", f"{USER_BASE}/messages/send", json_data={"raw": raw})
        sent = Message.model_validate(data)
        logger.info(f"Email sent successfully: {sent.id}")
        return sent

    @api_operation("create draft")
    async def create_draft(
        self,
        to: str,
        subject: str,
        body: str,
        cc: str | None = None,
        bcc: str | None = None,
    ) -> Draft:
        raw = build_raw_message(to, subject, body, cc, bcc)
        data = await self._make_request(
            "POST", f"{USER_BASE}/drafts", json_data={"message": {"raw": raw}}
        )
        draft = Draft.model_validate(data)
        logger.info(f"Draft created successfully: {draft.id}")
        return draft

    @api_operation("list drafts")
    async def list_drafts(self, max_results: int | None = None) -> list[Draft]:
        params = {"maxResults": max_results or self.settings.gmail_max_results}
        data = await self._make_request("GET", f"{USER_BASE}/drafts", params=params)
        return [Draft.model_validate(d) for d in data.get("drafts", [])]

    @api_operation("trash message")
    async def trash_message(self, message_id: str) -> None:
        await self._make_request("POST", f"{USER_BASE}/messages/{message_id}/trash")
        logger.info(f"Message trashed: {message_id}")

    @api_operation("mark message as read")
    async def mark_as_read(self, message_id: str) -> None:
        await self._make_request(
            "POST",
            f"{USER_BASE}/messages/{message_id}/modify",
            json_data={"removeLabelIds": ["UNREAD"]},
        )
        logger.info(f"Message marked as read: {message_id}")

    @api_operation("mark message as unread")
    async def mark_as_unread(self, message_id: str) -> None:
        await self._make_request(
            "POST",
            f"{USER_BASE}/messages/{message_id}/modify",
            json_data={"addLabelIds": ["UNREAD"]},
        )
        logger.info(f"Message marked as unread: {message_id}")
