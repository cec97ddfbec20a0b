"""OpenAI-compatible chat-completion executor.

Used for OpenAI models and, through Google's OpenAI-compatible endpoint,
for Gemini models in API mode. Each call sends exactly one system message
and one user message.
"""

from __future__ import annotations

from typing import Any

from loguru import logger
from openai import AsyncOpenAI

from grey_so.core.exceptions import EmptyModelResponse
from grey_so.interfaces.llm_executor import ExecutionResult, LLMExecutor, TokenUsage

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


class OpenAICompatibleExecutor(LLMExecutor):
    """Executor backed by an ``AsyncOpenAI`` client."""

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        provider_name: str = "openai",
        client: Any | None = None,
    ):
        """Initialize the API executor.

        Args:
            api_key: Provider API key
            base_url: Override for OpenAI-compatible endpoints (Gemini)
            provider_name: Name used in logs
            client: Pre-built client (tests inject fakes here)
        """
        self._provider_name = provider_name
        self._base_url = base_url
        if client is not None:
            self._client = client
        elif base_url:
            self._client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        else:
            self._client = AsyncOpenAI(api_key=api_key)

    @property
    def name(self) -> str:
        return f"{self._provider_name}-api"

    async def execute(
        self,
        prompt: str,
        model: str,
        system_prompt: str,
        file_paths: list[str] | None = None,
    ) -> ExecutionResult:
        if file_paths:
            logger.warning(
                "File paths were provided but are not supported by the API executor "
                f"for model {model}. They will be ignored."
            )

        completion = await self._client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
        )

        content = None
        if completion.choices:
            message = completion.choices[0].message
            content = message.content if message else None
        if not content:
            raise EmptyModelResponse("No response from the model via API")

        usage = None
        if completion.usage is not None:
            usage = TokenUsage(
                prompt_tokens=completion.usage.prompt_tokens or 0,
                completion_tokens=completion.usage.completion_tokens or 0,
                total_tokens=completion.usage.total_tokens or 0,
            )

        return ExecutionResult(response=content, usage=usage)
