"""Google Service MCP server.

Serves the Meet/Calendar, Gmail and Docs tools over stdio. Credentials are
loaded lazily on the first tool call that needs them (service account key or
saved OAuth token); the ``authenticate`` tool runs the browser sign-in flow.
"""

import asyncio
import logging
import sys
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, TextContent, Tool

from google_service_mcp.auth import AuthSession
from google_service_mcp.config import Settings
from google_service_mcp.tools import TOOLS, ToolDispatcher

logger = logging.getLogger(__name__)

SERVER_NAME = "google-service"


def configure_logging(level: str) -> None:
    """Send logs to stderr; stdout carries the MCP protocol."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


class GoogleServiceServer:
    """MCP server exposing Google Meet, Calendar, Gmail and Docs tools.

    Attributes:
        server: MCP Server instance.
        settings: Runtime configuration.
        session: Credential cache shared by all tool calls.
        dispatcher: Tool router.
    """

    def __init__(self, settings: Settings | None = None, session: AuthSession | None = None) -> None:
        """Initialize the Google Service MCP server."""
        self.settings = settings or Settings.from_env()
        self.session = session or AuthSession(self.settings)
        self.dispatcher = ToolDispatcher(self.session)
        self.server = Server(SERVER_NAME)
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Register MCP tool handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            """Return list of available tools."""
            return list_tool_definitions()

        # Arguments are validated by the dispatcher, after the auth check
        @self.server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict[str, Any]) -> CallToolResult:
            """Handle tool calls."""
            return await self.handle_call(name, arguments)

    async def handle_call(self, name: str, arguments: Any) -> CallToolResult:
        """Run one tool call and convert the outcome into an MCP result.

        This is the last line of defense: any exception that escapes the
        dispatcher becomes an error result carrying its message.

        Args:
            name: Tool name.
            arguments: Raw tool arguments.

        Returns:
            MCP tool result with ``isError`` set on failure.
        """
        try:
            response = await self.dispatcher.dispatch(name, arguments)
        except Exception as e:
            logger.exception(f"Error calling tool {name}")
            return CallToolResult(
                content=[TextContent(type="text", text=f"Error: {e}")],
                isError=True,
            )

        return CallToolResult(
            content=[TextContent(type="text", text=text) for text in response.content],
            isError=response.is_error,
        )

    async def close(self) -> None:
        await self.session.close()

    async def run(self) -> None:
        """Run the MCP server using stdio transport."""
        try:
            async with stdio_server() as (read_stream, write_stream):
                logger.info("Google Service MCP server running on stdio")
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        finally:
            await self.close()


def list_tool_definitions() -> list[Tool]:
    """Return the static tool catalog in declaration order."""
    return list(TOOLS)


def main() -> None:
    """Entry point for the Google Service MCP server."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    server = GoogleServiceServer(settings)
    asyncio.run(server.run())


if __name__ == "__main__":
    main()
