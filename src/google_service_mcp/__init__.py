"""Google Service MCP Server.

Exposes Google Meet, Calendar, Gmail and Docs operations as MCP tools
so that an AI agent can call them by name with structured arguments.
"""

from google_service_mcp.__version__ import __version__

__all__ = ["__version__"]
