"""Executor interface shared by the CLI and API backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class TokenUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class ExecutionResult:
    """Backend response text plus usage counters when the backend reports them."""

    response: str
    usage: TokenUsage | None = None


class LLMExecutor(ABC):
    """Runs one prompt against one backend."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Executor name used in logs."""

    @abstractmethod
    async def execute(
        self,
        prompt: str,
        model: str,
        system_prompt: str,
        file_paths: list[str] | None = None,
    ) -> ExecutionResult:
        """Run ``prompt`` against ``model``.

        Args:
            prompt: User prompt (already assembled with diff/file context)
            model: Concrete model name
            system_prompt: Instruction text placed before the prompt
            file_paths: Absolute paths of context files, when the backend
                reads files itself

        Returns:
            ExecutionResult with the response text
        """
