"""MCP server for Google Meet, Calendar, Gmail and Docs.

Provides 30 tools:

Auth Tools (2):
- Check authentication status
- Sign in with Google (browser OAuth flow)

Meet / Calendar Tools (11):
- Conference records, participants, recordings and transcripts
- Transcript text and summarization prompt
- Meeting spaces
- Upcoming and past Meet meetings, calendar events with Meet links

Gmail Tools (11):
- Profile and labels
- List, search and read messages and threads
- Send, draft, trash, mark read/unread

Docs Tools (6):
- List and search documents
- Read, create, append and find/replace

Transport: Stdio
Authentication: Service account key or OAuth 2.0 with a saved refresh token
"""

from google_service_mcp.server.google_service_server import (
    GoogleServiceServer,
    list_tool_definitions,
    main,
)


def create_server() -> GoogleServiceServer:
    """Create and configure a Google Service MCP server.

    Returns:
        GoogleServiceServer: Configured server instance ready to run.

    Example:
        >>> server = create_server()
        >>> asyncio.run(server.run())
    """
    return GoogleServiceServer()


__all__ = ["create_server", "GoogleServiceServer", "list_tool_definitions", "main"]
