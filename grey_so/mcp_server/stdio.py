"""Stdio MCP server for grey-so.

CRITICAL: NO stdout output allowed - breaks JSON-RPC protocol. Logging goes
to the session log file configured before the server starts.
"""

from __future__ import annotations

from typing import Any

import mcp.server.stdio
import mcp.types as types
from loguru import logger
from mcp.server import Server
from mcp.server.lowlevel import NotificationOptions
from mcp.server.models import InitializationOptions

from grey_so.core.config import Config
from grey_so.llm_manager import LLMManager
from grey_so.services.advice_service import AdviceService
from grey_so.version import __version__

from .common import handle_tool_call
from .tools import available_tools

SERVER_NAME = "grey_so"


class StdioMCPServer:
    """MCP server over stdin/stdout.

    Holds one ``AdviceService`` (and through it one executor cache) for the
    lifetime of the process.
    """

    def __init__(self, config: Config, service: AdviceService | None = None):
        self.config = config
        self.service = service or AdviceService(config, LLMManager(config))
        self.server: Server = Server(SERVER_NAME)
        self._register_tools()

    def _register_tools(self) -> None:
        """Register list_tools and call_tool handlers."""

        @self.server.list_tools()  # type: ignore[misc]
        async def list_tools() -> list[types.Tool]:
            return self.list_tool_definitions()

        # The SDK's call_tool decorator expects a SINGLE handler for ALL tools
        @self.server.call_tool()  # type: ignore[misc]
        async def handle_all_tools(
            tool_name: str, arguments: dict[str, Any]
        ) -> list[types.TextContent]:
            return await handle_tool_call(tool_name, arguments, self.service)

    def list_tool_definitions(self) -> list[types.Tool]:
        return [
            types.Tool(
                name=tool.name,
                description=tool.description,
                inputSchema=tool.parameters(self.config),
            )
            for tool in available_tools(self.config)
        ]

    async def run(self) -> None:
        """Serve requests until stdin closes."""
        init_options = InitializationOptions(
            server_name=SERVER_NAME,
            server_version=__version__,
            capabilities=self.server.get_capabilities(
                notification_options=NotificationOptions(),
                experimental_capabilities={},
            ),
        )

        async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
            logger.debug("Stdio server started, awaiting requests")
            await self.server.run(read_stream, write_stream, init_options)
