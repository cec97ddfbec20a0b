"""Request pipeline behind the consult and get_advice tools.

Each request runs strictly in order and stops at the first failure:
validate payload → resolve model → collect git diff → admit context files →
assemble prompt → execute → format. Context collection always completes
before the backend is invoked.

Collaborators (git diff, file validation/loading, executor manager, clock)
are injected so the pipeline can be exercised without subprocesses.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from grey_so.core.config import Config
from grey_so.core.exceptions import EmptyModelResponse, GitDiffFailed, InvalidParameters
from grey_so.core.schemas import AdviceArgs, GitDiffArgs, parse_advice_args
from grey_so.llm_manager import LLMManager
from grey_so.providers.resolver import ResolvedModel, resolve_model
from grey_so.utils.logging_setup import log_prompt, log_response, log_tool_call

from .context_files import ContextFile, load_context_files, validate_context_files
from .git_diff import GitDiffResult, generate_git_diff
from .pricing import describe_cost
from .prompt_builder import build_cli_prompt, build_prompt
from .system_prompt import get_system_prompt

ToolResponse = dict[str, list[dict[str, str]]]


def text_response(text: str) -> ToolResponse:
    return {"content": [{"type": "text", "text": text}]}


def _fmt_time(moment: datetime) -> str:
    return moment.strftime("%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def timing_banner(start: datetime, end: datetime, model: str) -> str:
    duration = (end - start).total_seconds()
    return (
        f"[start={_fmt_time(start)} end={_fmt_time(end)} "
        f"duration={duration:.1f}s model={model}]"
    )


class AdviceService:
    """Turns raw tool-call payloads into backend responses."""

    def __init__(
        self,
        config: Config,
        llm_manager: LLMManager | None = None,
        git_diff: Callable[[str | None, Sequence[str], str], GitDiffResult] = generate_git_diff,
        validate_files: Callable[[Sequence[str]], list[Path]] = validate_context_files,
        load_files: Callable[[Sequence[str]], list[ContextFile]] = load_context_files,
        clock: Callable[[], datetime] | None = None,
    ):
        self._config = config
        self._llm_manager = llm_manager or LLMManager(config)
        self._git_diff = git_diff
        self._validate_files = validate_files
        self._load_files = load_files
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def config(self) -> Config:
        return self._config

    async def consult(self, arguments: Any) -> ToolResponse:
        """Alias-based request; the response carries a timing banner."""
        allowed = self._config.enabled_aliases
        args = parse_advice_args(arguments, allowed)
        alias = args.model or self._config.consult_default_alias
        if alias is None:
            raise InvalidParameters(["model: No model alias is enabled"])

        log_tool_call("consult", arguments)
        resolved = resolve_model(alias, self._config)
        prompt, file_paths = await self._prepare(args, resolved)

        started = self._clock()
        response = await self._query(prompt, resolved, file_paths)
        finished = self._clock()

        return text_response(f"{timing_banner(started, finished, alias)}\n{response}")

    async def get_advice(self, arguments: Any) -> ToolResponse:
        """Request by alias or model name, in API or CLI mode."""
        args = parse_advice_args(arguments, self._config.allowed_models)
        model = args.model or self._config.default_model or self._config.fallback_model

        log_tool_call("get_advice", arguments)
        resolved = resolve_model(model, self._config)
        prompt, file_paths = await self._prepare(args, resolved)
        response = await self._query(prompt, resolved, file_paths)
        return text_response(response)

    async def _collect_git_diff(self, request: GitDiffArgs | None) -> str | None:
        if request is None:
            return None
        result = await asyncio.to_thread(
            self._git_diff, request.repo_path, request.files, request.base_ref
        )
        if not result.ok:
            raise GitDiffFailed(result.error)
        return result.diff

    async def _prepare(
        self, args: AdviceArgs, resolved: ResolvedModel
    ) -> tuple[str, list[str] | None]:
        """Collect context and build the user prompt.

        Returns:
            (prompt, file_paths) where file_paths is only set in CLI mode
        """
        diff = await self._collect_git_diff(args.git_diff)

        if resolved.is_cli:
            file_paths = None
            if args.files:
                paths = await asyncio.to_thread(self._validate_files, args.files)
                file_paths = [str(p) for p in paths]
            return build_cli_prompt(args.prompt, diff), file_paths

        context_files: list[ContextFile] = []
        if args.files:
            context_files = await asyncio.to_thread(self._load_files, args.files)
        return build_prompt(args.prompt, context_files, diff), None

    async def _query(
        self, prompt: str, resolved: ResolvedModel, file_paths: list[str] | None
    ) -> str:
        label = resolved.alias or resolved.model_name
        log_prompt(label, prompt)

        executor = self._llm_manager.get_executor(resolved)
        system_prompt = await asyncio.to_thread(
            get_system_prompt, resolved.is_cli, self._config.effective_system_prompt_path
        )
        result = await executor.execute(prompt, resolved.model_name, system_prompt, file_paths)
        if not result.response:
            raise EmptyModelResponse()

        log_response(label, result.response, describe_cost(result.usage, resolved.model_name))
        return result.response
