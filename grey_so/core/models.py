"""Model identifiers, providers and execution modes."""

from __future__ import annotations

from enum import Enum


class ModelAlias(str, Enum):
    """Short user-facing model selectors."""

    GEMINI = "gemini"
    CLAUDE = "claude"
    CODEX = "codex"
    KILO = "kilo"


class ProviderId(str, Enum):
    OPENAI = "openai"
    GEMINI = "gemini"
    CLAUDE = "claude"
    KILOCODE = "kilocode"
    OPENCODE = "opencode"


class ExecutionMode(str, Enum):
    CLI = "cli"
    API = "api"


MODEL_ALIASES: tuple[str, ...] = tuple(alias.value for alias in ModelAlias)

# Concrete model names used when the config file does not override them
DEFAULT_MODEL_MAPPING: dict[str, str] = {
    ModelAlias.GEMINI.value: "gemini-3-pro-preview",
    ModelAlias.CLAUDE.value: "claude-opus-4-6",
    ModelAlias.CODEX.value: "gpt-5.3-codex",
    ModelAlias.KILO.value: "openrouter/moonshotai/kimi-k2.5",
}

DEFAULT_ALIAS: str = ModelAlias.GEMINI.value

# Each alias is bound to one backend family regardless of its model name
ALIAS_PROVIDERS: dict[str, ProviderId] = {
    ModelAlias.GEMINI.value: ProviderId.GEMINI,
    ModelAlias.CLAUDE.value: ProviderId.CLAUDE,
    ModelAlias.CODEX.value: ProviderId.OPENAI,
    ModelAlias.KILO.value: ProviderId.KILOCODE,
}

# Full model names callers may request directly
MODEL_NAMES: tuple[str, ...] = (
    "gpt-5.3-codex",
    "gemini-3-pro-preview",
    "claude-opus-4-6",
    "opencode-default",
    "kilocode-default",
)

ALL_MODEL_IDENTIFIERS: tuple[str, ...] = MODEL_ALIASES + MODEL_NAMES

REASONING_EFFORTS: tuple[str, ...] = ("none", "minimal", "low", "medium", "high", "xhigh")
