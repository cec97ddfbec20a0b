"""Per-provider CLI invocation specs.

Argument order is fixed per CLI and the full prompt is always the final,
single argument.
"""

from __future__ import annotations

from grey_so.core.exceptions import BackendExitedNonZero, GeminiQuotaExhausted, UnknownProvider
from grey_so.core.models import ProviderId

from .cli_executor import CliInvocationSpec, generic_non_zero_exit

GEMINI_QUOTA_MARKER = "RESOURCE_EXHAUSTED"

# Placeholder model name that lets the kilo CLI use its own configured model
KILOCODE_DEFAULT_MODEL = "kilocode-default"


def _gemini_non_zero_exit(code: int, stderr: str) -> Exception:
    if GEMINI_QUOTA_MARKER in stderr:
        return GeminiQuotaExhausted(code, stderr.strip())
    return BackendExitedNonZero("Gemini", code, stderr.strip())


def gemini_cli_spec() -> CliInvocationSpec:
    return CliInvocationSpec(
        cli_name="gemini",
        build_args=lambda model, prompt: ["-m", model, "-p", prompt],
        handle_non_zero_exit=_gemini_non_zero_exit,
    )


def codex_cli_spec(reasoning_effort: str | None = None) -> CliInvocationSpec:
    def _build_args(model: str, prompt: str) -> list[str]:
        args = ["exec", "--skip-git-repo-check", "-m", model]
        if reasoning_effort:
            args.extend(["-c", f'model_reasoning_effort="{reasoning_effort}"'])
        args.append(prompt)
        return args

    return CliInvocationSpec(
        cli_name="codex",
        build_args=_build_args,
        handle_non_zero_exit=generic_non_zero_exit("Codex"),
    )


def claude_cli_spec() -> CliInvocationSpec:
    return CliInvocationSpec(
        cli_name="claude",
        build_args=lambda model, prompt: ["--print", "--model", model, prompt],
        handle_non_zero_exit=generic_non_zero_exit("Claude"),
    )


def kilocode_cli_spec() -> CliInvocationSpec:
    def _build_args(model: str, prompt: str) -> list[str]:
        if model == KILOCODE_DEFAULT_MODEL:
            return ["run", prompt]
        return ["run", "-m", model, prompt]

    return CliInvocationSpec(
        cli_name="kilo",
        build_args=_build_args,
        handle_non_zero_exit=generic_non_zero_exit("Kilo"),
    )


def opencode_cli_spec() -> CliInvocationSpec:
    return CliInvocationSpec(
        cli_name="opencode",
        build_args=lambda _model, prompt: ["run", "--print", prompt],
        handle_non_zero_exit=generic_non_zero_exit("Opencode"),
    )


def cli_spec_for(provider: ProviderId, reasoning_effort: str | None = None) -> CliInvocationSpec:
    """Return the CLI spec for a provider family."""
    if provider == ProviderId.GEMINI:
        return gemini_cli_spec()
    if provider == ProviderId.OPENAI:
        return codex_cli_spec(reasoning_effort)
    if provider == ProviderId.CLAUDE:
        return claude_cli_spec()
    if provider == ProviderId.KILOCODE:
        return kilocode_cli_spec()
    if provider == ProviderId.OPENCODE:
        return opencode_cli_spec()
    raise UnknownProvider(str(provider))
