"""Executor factory and cache for grey-so.

One executor is built per (provider, model name, execution mode) and reused
for the lifetime of the process. Configuration is immutable after load, so
cached executors never need invalidating. Two concurrent requests racing on
the same key may both build an executor; the later one simply replaces the
earlier, equivalent instance.
"""

from __future__ import annotations

from loguru import logger

from grey_so.core.config import Config
from grey_so.core.exceptions import MissingCredential, UnknownProvider, UnsupportedExecutionMode
from grey_so.core.models import ExecutionMode, ProviderId
from grey_so.interfaces.llm_executor import LLMExecutor
from grey_so.providers.llm.cli_executor import CLIExecutor
from grey_so.providers.llm.cli_specs import cli_spec_for
from grey_so.providers.llm.openai_api_executor import (
    GEMINI_OPENAI_BASE_URL,
    OpenAICompatibleExecutor,
)
from grey_so.providers.resolver import ResolvedModel

ExecutorKey = tuple[ProviderId, str, ExecutionMode]


class LLMManager:
    """Builds and memoizes executors for resolved models."""

    def __init__(self, config: Config):
        self._config = config
        self._executors: dict[ExecutorKey, LLMExecutor] = {}

    def get_executor(self, resolved: ResolvedModel) -> LLMExecutor:
        key: ExecutorKey = (resolved.provider, resolved.model_name, resolved.mode)
        executor = self._executors.get(key)
        if executor is None:
            executor = self._create_executor(resolved.provider, resolved.mode)
            self._executors[key] = executor
            logger.debug(
                f"Created {executor.name} executor for {resolved.model_name} ({resolved.mode.value})"
            )
        return executor

    def cached_keys(self) -> list[ExecutorKey]:
        return list(self._executors)

    def _create_executor(self, provider: ProviderId, mode: ExecutionMode) -> LLMExecutor:
        if mode == ExecutionMode.CLI:
            spec = cli_spec_for(provider, self._config.codex_reasoning_effort)
            return CLIExecutor(spec, provider, self._config)

        if provider == ProviderId.OPENAI:
            if not self._config.openai_api_key:
                raise MissingCredential("OPENAI_API_KEY", "OpenAI")
            return OpenAICompatibleExecutor(
                api_key=self._config.openai_api_key, provider_name="openai"
            )
        if provider == ProviderId.GEMINI:
            if not self._config.gemini_api_key:
                raise MissingCredential("GEMINI_API_KEY", "Gemini")
            return OpenAICompatibleExecutor(
                api_key=self._config.gemini_api_key,
                base_url=GEMINI_OPENAI_BASE_URL,
                provider_name="gemini",
            )
        if provider == ProviderId.CLAUDE:
            raise UnsupportedExecutionMode(
                "Claude API mode is not implemented yet. Use CLAUDE_MODE=cli."
            )
        if provider in (ProviderId.KILOCODE, ProviderId.OPENCODE):
            raise UnsupportedExecutionMode(f"{provider.value} is only available in CLI mode")
        raise UnknownProvider(str(provider))
