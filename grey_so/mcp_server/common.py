"""Protocol-independent tool-call handling."""

from __future__ import annotations

from typing import Any

import mcp.types as types
from loguru import logger

from grey_so.services.advice_service import AdviceService

from .tools import TOOL_REGISTRY, execute_tool


class ToolCallError(Exception):
    """Tool call failed; the message is returned to the MCP client."""


def format_tool_error(error: BaseException) -> str:
    return f"LLM query failed ({type(error).__name__}): {error}"


async def handle_tool_call(
    tool_name: str,
    arguments: dict[str, Any] | None,
    service: AdviceService,
) -> list[types.TextContent]:
    """Run a tool and convert its result to MCP text content.

    Raises:
        ToolCallError: For any failure; one bad request never stops the server
    """
    if tool_name not in TOOL_REGISTRY:
        raise ToolCallError(f"Unknown tool: {tool_name}")

    try:
        result = await execute_tool(tool_name, service, arguments or {})
    except Exception as e:
        logger.error(format_tool_error(e))
        raise ToolCallError(format_tool_error(e)) from e

    return [types.TextContent(type="text", text=item["text"]) for item in result["content"]]
