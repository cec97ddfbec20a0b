"""MCP server for grey-so."""

from .stdio import StdioMCPServer
from .tools import TOOL_REGISTRY

__all__ = ["StdioMCPServer", "TOOL_REGISTRY"]
