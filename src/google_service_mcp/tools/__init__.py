"""MCP tools: catalog, argument validation and dispatch."""

from google_service_mcp.tools.definitions import TOOL_NAMES, TOOLS
from google_service_mcp.tools.dispatcher import ToolDispatcher
from google_service_mcp.tools.formatting import NOT_AUTHENTICATED_RESPONSE, ToolResponse
from google_service_mcp.tools.schemas import TOOL_ARGUMENTS, validate_input

__all__ = [
    "NOT_AUTHENTICATED_RESPONSE",
    "TOOLS",
    "TOOL_ARGUMENTS",
    "TOOL_NAMES",
    "ToolDispatcher",
    "ToolResponse",
    "validate_input",
]
