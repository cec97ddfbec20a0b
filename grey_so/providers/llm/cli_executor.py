"""CLI subprocess executor for grey-so.

Wraps a provider's command-line tool (``gemini``, ``codex``, ``claude``,
``kilo``, ``opencode``) so a prompt can be answered with the user's local
CLI installation and its own authentication.

Notes
- Arguments are passed as a list to ``asyncio.create_subprocess_exec``;
  no shell is ever involved, so prompt text cannot inject commands.
- stdin is closed; stdout/stderr are captured until the process exits.
- Never writes to stdout; MCP stdio carries JSON-RPC.
"""

from __future__ import annotations

import asyncio
import os
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from loguru import logger

from grey_so.core.config import Config
from grey_so.core.exceptions import BackendExitedNonZero, SpawnFailed
from grey_so.core.models import ProviderId
from grey_so.interfaces.llm_executor import ExecutionResult, LLMExecutor


@dataclass(frozen=True)
class CliInvocationSpec:
    """How to invoke one provider's CLI.

    Attributes:
        cli_name: Executable looked up on PATH
        build_args: (model_name, full_prompt) -> argument list
        handle_non_zero_exit: (exit_code, stderr) -> error to raise
    """

    cli_name: str
    build_args: Callable[[str, str], list[str]]
    handle_non_zero_exit: Callable[[int, str], Exception]


def build_full_prompt(
    prompt: str,
    system_prompt: str,
    file_paths: list[str] | None = None,
    cwd: str | None = None,
) -> str:
    """Combine system and user prompt, appending ``@path`` file references."""
    full_prompt = f"{system_prompt}\n\n{prompt}"
    if file_paths:
        base = cwd or os.getcwd()
        references = " ".join(f"@{os.path.relpath(path, base)}" for path in file_paths)
        full_prompt = f"{full_prompt}\n\nFiles: {references}"
    return full_prompt


def build_cli_env(
    provider: ProviderId,
    config: Config,
    base_env: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Derive the child process environment for ``provider``.

    Configured API keys are only injected when the environment does not
    already carry one. Claude runs on the local subscription session, so
    ``ANTHROPIC_API_KEY`` is removed to keep it from taking over auth.
    """
    env = dict(os.environ if base_env is None else base_env)

    if provider == ProviderId.GEMINI and config.gemini_api_key and not env.get("GEMINI_API_KEY"):
        env["GEMINI_API_KEY"] = config.gemini_api_key
    if provider == ProviderId.OPENAI and config.openai_api_key and not env.get("OPENAI_API_KEY"):
        env["OPENAI_API_KEY"] = config.openai_api_key
    if provider == ProviderId.CLAUDE:
        env.pop("ANTHROPIC_API_KEY", None)

    return env


class CLIExecutor(LLMExecutor):
    """Executor that shells out to a provider CLI (without a shell)."""

    PROMPT_PREVIEW_CHARS = 300

    def __init__(self, spec: CliInvocationSpec, provider: ProviderId, config: Config):
        self._spec = spec
        self._provider = provider
        self._config = config

    @property
    def name(self) -> str:
        return f"{self._spec.cli_name}-cli"

    @property
    def spec(self) -> CliInvocationSpec:
        return self._spec

    async def _run_cli(self, args: list[str], env: dict[str, str]) -> tuple[int, str, str]:
        cli_name = self._spec.cli_name
        try:
            process = await asyncio.create_subprocess_exec(
                cli_name,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=env,
            )
        except OSError as e:
            logger.debug(f"Failed to spawn {cli_name} CLI: {e}")
            raise SpawnFailed(cli_name, e) from e
        except (ValueError, TypeError) as e:
            logger.debug(f"Synchronous error while spawning {cli_name}: {e}")
            raise SpawnFailed(cli_name, e, synchronous=True) from e

        logger.debug(f"{cli_name} CLI process spawned (pid={process.pid})")
        try:
            stdout, stderr = await process.communicate()
        except BaseException:
            # Kill the subprocess if it's still running (cancellation, shutdown)
            if process.returncode is None:
                logger.debug(f"Killing {cli_name} CLI process (pid={process.pid})")
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
                await process.wait()
            raise
        returncode = process.returncode if process.returncode is not None else -1
        return (
            returncode,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )

    async def execute(
        self,
        prompt: str,
        model: str,
        system_prompt: str,
        file_paths: list[str] | None = None,
    ) -> ExecutionResult:
        full_prompt = build_full_prompt(prompt, system_prompt, file_paths)
        args = self._spec.build_args(model, full_prompt)
        env = build_cli_env(self._provider, self._config)
        cli_name = self._spec.cli_name

        logger.debug(
            f"Spawning {cli_name} CLI: model={model}, prompt_len={len(full_prompt)}, "
            f"file_paths={len(file_paths or [])}, "
            f"preview={full_prompt[: self.PROMPT_PREVIEW_CHARS]!r}"
        )

        start = time.monotonic()
        code, stdout, stderr = await self._run_cli(args, env)
        duration_ms = int((time.monotonic() - start) * 1000)

        logger.debug(
            f"{cli_name} CLI process closed: code={code}, duration={duration_ms}ms, "
            f"stdout_len={len(stdout)}, stderr_len={len(stderr)}"
        )

        if code != 0:
            raise self._spec.handle_non_zero_exit(code, stderr)

        return ExecutionResult(response=stdout.strip(), usage=None)


def generic_non_zero_exit(label: str) -> Callable[[int, str], Exception]:
    def _handle(code: int, stderr: str) -> Exception:
        return BackendExitedNonZero(label, code, stderr.strip())

    return _handle
