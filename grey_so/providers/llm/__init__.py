"""LLM executors for grey-so."""

from .cli_executor import CLIExecutor, CliInvocationSpec
from .openai_api_executor import OpenAICompatibleExecutor

__all__ = ["CLIExecutor", "CliInvocationSpec", "OpenAICompatibleExecutor"]
