"""Declarative tool registry for the grey-so MCP server.

Both tools share one input schema; only the selectable models differ.
``consult`` takes model aliases and always runs a local CLI, ``get_advice``
also accepts full model names and honours the per-provider API/CLI mode.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from grey_so.core.config import Config
from grey_so.services.advice_service import AdviceService, ToolResponse

TOOL_DESCRIPTION = """Ask a second, different AI for help with the problem at hand. It might have an original idea or approach that you did not think about so far. Provide your question in the prompt field and always include relevant code files as context.

Be specific about what you want: architecture advice, code implementation, document review, bug research, or anything else.

IMPORTANT: Ask neutral, open-ended questions. Avoid suggesting specific solutions or alternatives in your prompt as this can bias the analysis. Instead of "Should I use X or Y approach?", ask "What's the best approach for this problem?" Let the consultant LLM provide unbiased recommendations."""


def build_input_schema(model_choices: list[str], default_model: str | None) -> dict[str, Any]:
    """JSON Schema for the tool payload."""
    quoted = ", ".join(f'"{m}"' for m in model_choices)
    model_schema: dict[str, Any] = {
        "type": "string",
        "enum": list(model_choices),
        "description": f"LLM model to use. Use one of {quoted} as per user preference.",
    }
    if default_model is not None:
        model_schema["default"] = default_model

    return {
        "type": "object",
        "properties": {
            "prompt": {
                "type": "string",
                "minLength": 1,
                "description": (
                    "Your question or request for the consultant LLM. Ask neutral, "
                    "open-ended questions without suggesting specific solutions to "
                    "avoid biasing the analysis."
                ),
            },
            "files": {
                "type": "array",
                "items": {"type": "string"},
                "description": (
                    "Array of file paths to include as context. All files are added "
                    "as context with file paths and code blocks."
                ),
            },
            "model": model_schema,
            "git_diff": {
                "type": "object",
                "description": (
                    "Generate git diff output to include as context. Shows "
                    "uncommitted changes by default."
                ),
                "properties": {
                    "repo_path": {
                        "type": "string",
                        "description": "Path to git repository (defaults to current working directory)",
                    },
                    "files": {
                        "type": "array",
                        "items": {"type": "string"},
                        "minItems": 1,
                        "description": "Specific files to include in diff",
                    },
                    "base_ref": {
                        "type": "string",
                        "default": "HEAD",
                        "description": (
                            'Git reference to compare against (e.g., "HEAD", "main", commit hash)'
                        ),
                    },
                },
                "required": ["files"],
            },
        },
        "required": ["prompt"],
    }


@dataclass
class Tool:
    """Tool definition with metadata and implementation."""

    name: str
    description: str
    implementation: Callable[[AdviceService, Any], Awaitable[ToolResponse]]
    model_choices: Callable[[Config], list[str]]
    default_model: Callable[[Config], str | None]

    def parameters(self, config: Config) -> dict[str, Any]:
        return build_input_schema(self.model_choices(config), self.default_model(config))

    def is_available(self, config: Config) -> bool:
        return bool(self.model_choices(config))


async def consult_impl(service: AdviceService, arguments: Any) -> ToolResponse:
    return await service.consult(arguments)


async def get_advice_impl(service: AdviceService, arguments: Any) -> ToolResponse:
    return await service.get_advice(arguments)


TOOL_DEFINITIONS = [
    Tool(
        name="consult",
        description=TOOL_DESCRIPTION,
        implementation=consult_impl,
        model_choices=lambda config: config.enabled_aliases,
        default_model=lambda config: config.consult_default_alias,
    ),
    Tool(
        name="get_advice",
        description=TOOL_DESCRIPTION,
        implementation=get_advice_impl,
        model_choices=lambda config: list(config.allowed_models),
        default_model=lambda config: config.default_model or config.fallback_model,
    ),
]

TOOL_REGISTRY: dict[str, Tool] = {tool.name: tool for tool in TOOL_DEFINITIONS}


def available_tools(config: Config) -> list[Tool]:
    return [tool for tool in TOOL_DEFINITIONS if tool.is_available(config)]


async def execute_tool(
    tool_name: str, service: AdviceService, arguments: Any
) -> ToolResponse:
    """Execute a tool from the registry.

    Raises:
        ValueError: If the tool is not registered
    """
    if tool_name not in TOOL_REGISTRY:
        raise ValueError(f"Unknown tool: {tool_name}")
    return await TOOL_REGISTRY[tool_name].implementation(service, arguments)
