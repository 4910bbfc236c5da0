"""Clients for the Google REST APIs backing the tools."""

from google_service_mcp.clients.base import GoogleApiClient, api_operation
from google_service_mcp.clients.docs import DocsClient
from google_service_mcp.clients.gmail import GmailClient
from google_service_mcp.clients.meet import MeetClient

__all__ = ["DocsClient", "GmailClient", "GoogleApiClient", "MeetClient", "api_operation"]
