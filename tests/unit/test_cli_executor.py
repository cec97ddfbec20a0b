"""CLI executor: argument shapes, child environment and subprocess outcomes."""

import asyncio
import os

import pytest

from grey_so.core.config import Config
from grey_so.core.exceptions import BackendExitedNonZero, GeminiQuotaExhausted, SpawnFailed
from grey_so.core.models import ProviderId
from grey_so.providers.llm.cli_executor import CLIExecutor, build_cli_env, build_full_prompt
from grey_so.providers.llm.cli_specs import (
    claude_cli_spec,
    cli_spec_for,
    codex_cli_spec,
    gemini_cli_spec,
    kilocode_cli_spec,
    opencode_cli_spec,
)


class _DummyProc:
    def __init__(self, rc: int = 0, out: bytes = b"OK", err: bytes = b"") -> None:
        self.returncode = rc
        self.pid = 4242
        self._out = out
        self._err = err

    async def communicate(self):
        return self._out, self._err


def _install_fake_exec(monkeypatch, proc: _DummyProc) -> list[tuple]:
    calls: list[tuple] = []

    async def _fake_create_subprocess_exec(*args, **kwargs):
        calls.append((args, kwargs))
        return proc

    monkeypatch.setattr(asyncio, "create_subprocess_exec", _fake_create_subprocess_exec, raising=True)
    return calls


def test_cli_argument_shapes_end_with_prompt():
    prompt = "SYS\n\nwhy?"

    assert gemini_cli_spec().build_args("gemini-3-pro-preview", prompt) == [
        "-m", "gemini-3-pro-preview", "-p", prompt,
    ]
    assert claude_cli_spec().build_args("claude-opus-4-6", prompt) == [
        "--print", "--model", "claude-opus-4-6", prompt,
    ]
    assert codex_cli_spec().build_args("gpt-5.3-codex", prompt) == [
        "exec", "--skip-git-repo-check", "-m", "gpt-5.3-codex", prompt,
    ]
    assert opencode_cli_spec().build_args("opencode-default", prompt) == ["run", "--print", prompt]


def test_codex_reasoning_effort_is_passed_as_config_override():
    args = codex_cli_spec("high").build_args("gpt-5.3-codex", "p")

    assert args == [
        "exec", "--skip-git-repo-check", "-m", "gpt-5.3-codex",
        "-c", 'model_reasoning_effort="high"', "p",
    ]


def test_kilocode_default_model_lets_cli_choose():
    spec = kilocode_cli_spec()

    assert spec.cli_name == "kilo"
    assert spec.build_args("kilocode-default", "p") == ["run", "p"]
    assert spec.build_args("openrouter/moonshotai/kimi-k2.5", "p") == [
        "run", "-m", "openrouter/moonshotai/kimi-k2.5", "p",
    ]


def test_cli_spec_for_maps_every_provider():
    names = {provider: cli_spec_for(provider).cli_name for provider in ProviderId}

    assert names == {
        ProviderId.GEMINI: "gemini",
        ProviderId.OPENAI: "codex",
        ProviderId.CLAUDE: "claude",
        ProviderId.KILOCODE: "kilo",
        ProviderId.OPENCODE: "opencode",
    }


def test_full_prompt_references_files_relative_to_cwd(tmp_path):
    path = str(tmp_path / "src" / "index.ts")

    full = build_full_prompt("Review this", "SYS", [path], cwd=str(tmp_path))

    assert full == f"SYS\n\nReview this\n\nFiles: @{os.path.join('src', 'index.ts')}"
    assert build_full_prompt("Review this", "SYS") == "SYS\n\nReview this"


def test_claude_env_drops_anthropic_key(tmp_path):
    config = Config(config_dir=tmp_path)
    base = {"ANTHROPIC_API_KEY": "secret", "PATH": "/usr/bin"}

    env = build_cli_env(ProviderId.CLAUDE, config, base)

    assert "ANTHROPIC_API_KEY" not in env
    assert env["PATH"] == "/usr/bin"
    assert base["ANTHROPIC_API_KEY"] == "secret"


def test_api_keys_injected_only_when_absent(tmp_path):
    config = Config(config_dir=tmp_path, gemini_api_key="cfg-gemini", openai_api_key="cfg-openai")

    assert build_cli_env(ProviderId.GEMINI, config, {})["GEMINI_API_KEY"] == "cfg-gemini"
    assert build_cli_env(ProviderId.GEMINI, config, {"GEMINI_API_KEY": "own"})["GEMINI_API_KEY"] == "own"
    assert build_cli_env(ProviderId.OPENAI, config, {})["OPENAI_API_KEY"] == "cfg-openai"
    assert "OPENAI_API_KEY" not in build_cli_env(ProviderId.GEMINI, config, {})


@pytest.mark.asyncio
async def test_execute_returns_trimmed_stdout(monkeypatch, tmp_path):
    calls = _install_fake_exec(monkeypatch, _DummyProc(out=b"  answer\n"))
    executor = CLIExecutor(claude_cli_spec(), ProviderId.CLAUDE, Config(config_dir=tmp_path))

    result = await executor.execute("why?", "claude-opus-4-6", "SYS")

    assert result.response == "answer"
    assert result.usage is None
    args, kwargs = calls[0]
    assert args == ("claude", "--print", "--model", "claude-opus-4-6", "SYS\n\nwhy?")
    assert kwargs["stdin"] == asyncio.subprocess.DEVNULL
    assert "ANTHROPIC_API_KEY" not in kwargs["env"]
    assert executor.name == "claude-cli"


@pytest.mark.asyncio
async def test_non_zero_exit_carries_code_and_stderr(monkeypatch, tmp_path):
    _install_fake_exec(monkeypatch, _DummyProc(rc=2, out=b"", err=b"auth failed\n"))
    executor = CLIExecutor(codex_cli_spec(), ProviderId.OPENAI, Config(config_dir=tmp_path))

    with pytest.raises(BackendExitedNonZero) as exc_info:
        await executor.execute("p", "gpt-5.3-codex", "SYS")

    assert exc_info.value.code == 2
    assert str(exc_info.value) == "Codex CLI exited with code 2. Error: auth failed"


@pytest.mark.asyncio
async def test_gemini_quota_exhaustion_is_distinct(monkeypatch, tmp_path):
    _install_fake_exec(monkeypatch, _DummyProc(rc=1, out=b"", err=b"429 RESOURCE_EXHAUSTED"))
    executor = CLIExecutor(gemini_cli_spec(), ProviderId.GEMINI, Config(config_dir=tmp_path))

    with pytest.raises(GeminiQuotaExhausted, match="Gemini quota exceeded"):
        await executor.execute("p", "gemini-3-pro-preview", "SYS")


@pytest.mark.asyncio
async def test_gemini_other_failures_are_generic(monkeypatch, tmp_path):
    _install_fake_exec(monkeypatch, _DummyProc(rc=1, out=b"", err=b"boom"))
    executor = CLIExecutor(gemini_cli_spec(), ProviderId.GEMINI, Config(config_dir=tmp_path))

    with pytest.raises(BackendExitedNonZero) as exc_info:
        await executor.execute("p", "gemini-3-pro-preview", "SYS")

    assert not isinstance(exc_info.value, GeminiQuotaExhausted)


@pytest.mark.asyncio
async def test_missing_executable_is_spawn_failure(monkeypatch, tmp_path):
    async def _raise(*args, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", "opencode")

    monkeypatch.setattr(asyncio, "create_subprocess_exec", _raise, raising=True)
    executor = CLIExecutor(opencode_cli_spec(), ProviderId.OPENCODE, Config(config_dir=tmp_path))

    with pytest.raises(SpawnFailed, match="Is it installed and in PATH") as exc_info:
        await executor.execute("p", "opencode-default", "SYS")

    assert not exc_info.value.synchronous


@pytest.mark.asyncio
async def test_rejected_invocation_is_synchronous_spawn_failure(monkeypatch, tmp_path):
    async def _raise(*args, **kwargs):
        raise ValueError("embedded null byte")

    monkeypatch.setattr(asyncio, "create_subprocess_exec", _raise, raising=True)
    executor = CLIExecutor(claude_cli_spec(), ProviderId.CLAUDE, Config(config_dir=tmp_path))

    with pytest.raises(SpawnFailed, match="Synchronous error while trying to spawn claude") as exc_info:
        await executor.execute("p", "claude-opus-4-6", "SYS")

    assert exc_info.value.synchronous


class _HangingProc:
    def __init__(self) -> None:
        self.returncode = None
        self.pid = 4343
        self.started = asyncio.Event()
        self.killed = False
        self.waited = False

    async def communicate(self):
        self.started.set()
        await asyncio.Event().wait()

    def kill(self) -> None:
        self.killed = True
        self.returncode = -9

    async def wait(self) -> int:
        self.waited = True
        return self.returncode


@pytest.mark.asyncio
async def test_cancelled_request_kills_backend_process(monkeypatch, tmp_path):
    proc = _HangingProc()
    _install_fake_exec(monkeypatch, proc)
    executor = CLIExecutor(gemini_cli_spec(), ProviderId.GEMINI, Config(config_dir=tmp_path))

    task = asyncio.create_task(executor.execute("p", "gemini-3-pro-preview", "SYS"))
    await asyncio.wait_for(proc.started.wait(), timeout=5)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert proc.killed
    assert proc.waited
