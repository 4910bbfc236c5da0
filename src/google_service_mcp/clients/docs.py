"""Google Docs client, with Drive used for listing and search."""

import logging
from typing import Any

from google_service_mcp.clients.base import GoogleApiClient, api_operation
from google_service_mcp.config import DOCS_API_BASE, DRIVE_API_BASE
from google_service_mcp.models import Document, DocumentSummary

logger = logging.getLogger(__name__)

DOCUMENT_MIME_TYPE = "application/vnd.google-apps.document"


def document_url(document_id: str) -> str:
    return f"https://docs.google.com/document/d/{document_id}/edit"


def extract_text(document: Document) -> str:
    """Concatenate the text runs of every paragraph.

    Tables and section breaks contribute nothing.
    """
    if document.body is None:
        return ""

    text = ""
    for element in document.body.content:
        if element.paragraph is None:
            continue
        for paragraph_element in element.paragraph.elements:
            if paragraph_element.text_run and paragraph_element.text_run.content:
                text += paragraph_element.text_run.content
    return text


def document_end_index(document: Document) -> int:
    """Index just before the body's trailing newline, where appends go."""
    if document.body is None or not document.body.content:
        return 1
    last_element = document.body.content[-1]
    return max(1, (last_element.end_index or 2) - 1)


def _escape_query_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


class DocsClient(GoogleApiClient):
    """Read, create and edit Google Docs."""

    service_name = "Docs"

    async def _batch_update(self, document_id: str, requests: list[dict[str, Any]]) -> dict[str, Any]:
        return await self._make_request(
            "POST",
            f"{DOCS_API_BASE}/documents/{document_id}:batchUpdate",
            json_data={"requests": requests},
        )

    @api_operation("get document")
    async def get_document(self, document_id: str) -> Document:
        logger.debug(f"Getting document: {document_id}")
        data = await self._make_request("GET", f"{DOCS_API_BASE}/documents/{document_id}")
        return Document.model_validate(data)

    @api_operation("create document")
    async def create_document(self, title: str, content: str | None = None) -> Document:
        """Create a document, then append the initial content if any.

        Args:
            title: Document title.
            content: Optional initial text.

        Returns:
            The document as returned by the create call.
        """
        data = await self._make_request("POST", f"{DOCS_API_BASE}/documents", json_data={"title": title})
        document = Document.model_validate(data)

        if content and document.document_id:
            await self.append_text(document.document_id, content)

        logger.info(f"Document created: {document.document_id}")
        return document

    @api_operation("append text")
    async def append_text(self, document_id: str, text: str) -> None:
        document = await self.get_document(document_id)
        await self._batch_update(
            document_id,
            [{"insertText": {"location": {"index": document_end_index(document)}, "text": text}}],
        )
        logger.info(f"Text appended to document: {document_id}")

    @api_operation("insert text")
    async def insert_text(self, document_id: str, text: str, index: int) -> None:
        await self._batch_update(
            document_id, [{"insertText": {"location": {"index": index}, "text": text}}]
        )
        logger.info(f"Text inserted in document: {document_id}")

    @api_operation("replace text")
    async def replace_text(
        self,
        document_id: str,
        search_text: str,
        replace_text: str,
        match_case: bool = False,
    ) -> int:
        """Replace every occurrence of ``search_text``.

        Returns:
            Number of occurrences changed (0 when nothing matched).
        """
        data = await self._batch_update(
            document_id,
            [
                {
                    "replaceAllText": {
                        "containsText": {"text": search_text, "matchCase": match_case},
                        "replaceText": replace_text,
                    }
                }
            ],
        )
        replies = data.get("replies") or [{}]
        occurrences = int((replies[0].get("replaceAllText") or {}).get("occurrencesChanged", 0))
        logger.info(f"Replaced {occurrences} occurrences in document: {document_id}")
        return occurrences

    @api_operation("delete text")
    async def delete_text(self, document_id: str, start_index: int, end_index: int) -> None:
        await self._batch_update(
            document_id,
            [{"deleteContentRange": {"range": {"startIndex": start_index, "endIndex": end_index}}}],
        )
        logger.info(f"Text deleted from document: {document_id}")

    async def _list_files(self, query: str, max_results: int) -> list[DocumentSummary]:
        data = await self._make_request(
            "GET",
            f"{DRIVE_API_BASE}/files",
            params={
                "q": query,
                "pageSize": max_results,
                "fields": "files(id, name, modifiedTime)",
                "orderBy": "modifiedTime desc",
            },
            service="Drive",
        )
        return [DocumentSummary.model_validate(f) for f in data.get("files", [])]

    @api_operation("list documents")
    async def list_documents(self, max_results: int = 10) -> list[DocumentSummary]:
        return await self._list_files(f"mimeType='{DOCUMENT_MIME_TYPE}'", max_results)

    @api_operation("search documents")
    async def search_documents(self, query: str, max_results: int = 10) -> list[DocumentSummary]:
        q = f"mimeType='{DOCUMENT_MIME_TYPE}' and name contains '{_escape_query_value(query)}'"
        return await self._list_files(q, max_results)

    @api_operation("get document text")
    async def get_document_text(self, document_id: str) -> str:
        return extract_text(await self.get_document(document_id))
