"""Process-wide configuration for grey-so.

Configuration is assembled once at startup from:
- Environment variables (API keys, mode selectors, allow-list, overrides)
- The per-user configuration file (alias mapping, default alias)
- Built-in defaults

The resulting ``Config`` is frozen and passed explicitly to every component
that needs it.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from grey_so.core.exceptions import ConfigurationError
from grey_so.core.models import (
    ALL_MODEL_IDENTIFIERS,
    DEFAULT_ALIAS,
    DEFAULT_MODEL_MAPPING,
    MODEL_ALIASES,
    ExecutionMode,
    ProviderId,
)

from .user_settings import (
    SYSTEM_PROMPT_FILE_NAME,
    UserSettings,
    config_dir,
    load_user_settings,
)


def parse_allowed_models(raw: str | None) -> list[str]:
    """Return enabled identifiers from a comma-separated allow-list.

    An empty or missing allow-list enables everything. Unknown names are
    dropped, so the result may be empty.
    """
    requested = [m.strip() for m in (raw or "").split(",") if m.strip()]
    if not requested:
        return list(ALL_MODEL_IDENTIFIERS)
    return [m for m in ALL_MODEL_IDENTIFIERS if m in requested]


class Config(BaseModel):
    """Immutable runtime configuration."""

    model_config = ConfigDict(frozen=True)

    openai_api_key: str | None = Field(default=None, description="OpenAI API key")
    gemini_api_key: str | None = Field(default=None, description="Gemini API key")

    openai_mode: ExecutionMode = Field(default=ExecutionMode.API)
    gemini_mode: ExecutionMode = Field(default=ExecutionMode.API)
    claude_mode: ExecutionMode = Field(default=ExecutionMode.CLI)

    codex_reasoning_effort: (
        Literal["none", "minimal", "low", "medium", "high", "xhigh"] | None
    ) = Field(default=None, description="Reasoning effort passed to the codex CLI")

    models: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_MODEL_MAPPING),
        description="Alias to concrete model name",
    )
    default_alias: str = Field(default=DEFAULT_ALIAS)
    default_model: str | None = Field(
        default=None, description="Identifier used by get_advice when none is given"
    )
    allowed_models: tuple[str, ...] = Field(default=ALL_MODEL_IDENTIFIERS)

    config_dir: Path = Field(default_factory=config_dir)
    system_prompt_path: Path | None = Field(default=None)

    @field_validator("models")
    def validate_models(cls, v: dict[str, str]) -> dict[str, str]:
        unknown = [alias for alias in v if alias not in MODEL_ALIASES]
        if unknown:
            raise ValueError(f"Unknown model aliases: {unknown}")
        merged = dict(DEFAULT_MODEL_MAPPING)
        merged.update(v)
        return merged

    @field_validator("default_alias")
    def validate_default_alias(cls, v: str) -> str:
        if v not in MODEL_ALIASES:
            raise ValueError(f"Invalid default alias: {v}. Must be one of {list(MODEL_ALIASES)}")
        return v

    @field_validator("allowed_models")
    def validate_allowed_models(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("No valid models enabled.")
        return v

    @model_validator(mode="after")
    def validate_default_model(self) -> Config:
        if self.default_model is not None and self.default_model not in self.allowed_models:
            raise ValueError(
                f"Default model {self.default_model} is not enabled "
                f"(enabled: {', '.join(self.allowed_models)})"
            )
        return self

    @property
    def enabled_aliases(self) -> list[str]:
        return [m for m in self.allowed_models if m in MODEL_ALIASES]

    @property
    def consult_default_alias(self) -> str | None:
        """Configured default alias when enabled, else the first enabled alias."""
        aliases = self.enabled_aliases
        if self.default_alias in aliases:
            return self.default_alias
        return aliases[0] if aliases else None

    @property
    def fallback_model(self) -> str:
        """First enabled identifier, used when no default is configured."""
        return self.allowed_models[0]

    @property
    def effective_system_prompt_path(self) -> Path:
        if self.system_prompt_path is not None:
            return self.system_prompt_path
        return self.config_dir / SYSTEM_PROMPT_FILE_NAME

    def mode_for_provider(self, provider: ProviderId) -> ExecutionMode:
        """Execution mode configured for a provider family."""
        if provider == ProviderId.OPENAI:
            return self.openai_mode
        if provider == ProviderId.GEMINI:
            return self.gemini_mode
        if provider == ProviderId.CLAUDE:
            return self.claude_mode
        return ExecutionMode.CLI

    @classmethod
    def load_from_env(cls, env: Mapping[str, str] | None = None) -> dict[str, Any]:
        """Load config values from environment variables."""
        env = os.environ if env is None else env
        config: dict[str, Any] = {}
        if key := env.get("OPENAI_API_KEY"):
            config["openai_api_key"] = key
        if key := env.get("GEMINI_API_KEY"):
            config["gemini_api_key"] = key
        if mode := env.get("OPENAI_MODE"):
            config["openai_mode"] = mode
        if mode := env.get("GEMINI_MODE"):
            config["gemini_mode"] = mode
        if mode := env.get("CLAUDE_MODE"):
            config["claude_mode"] = mode
        if effort := env.get("CODEX_REASONING_EFFORT"):
            config["codex_reasoning_effort"] = effort
        if model := env.get("GREY_SO_DEFAULT_MODEL"):
            config["default_model"] = model
        if prompt_path := env.get("GREY_SO_SYSTEM_PROMPT_PATH"):
            config["system_prompt_path"] = Path(prompt_path).expanduser()
        config["allowed_models"] = tuple(parse_allowed_models(env.get("GREY_SO_ALLOWED_MODELS")))
        return config

    @classmethod
    def from_settings(cls, settings: UserSettings) -> dict[str, Any]:
        """Extract config values from the per-user settings file."""
        values: dict[str, Any] = {
            "models": settings.model_mapping(),
            "default_alias": settings.default_alias.value,
        }
        if settings.codex_reasoning_effort:
            values["codex_reasoning_effort"] = settings.codex_reasoning_effort
        if settings.system_prompt_path:
            values["system_prompt_path"] = Path(settings.system_prompt_path).expanduser()
        return values

    @classmethod
    def load(
        cls,
        env: Mapping[str, str] | None = None,
        directory: Path | None = None,
    ) -> Config:
        """Build the process configuration.

        Environment values take precedence over the settings file.

        Raises:
            ConfigurationError: If the combined values are invalid
        """
        directory = directory or config_dir()
        values: dict[str, Any] = {"config_dir": directory}
        values.update(cls.from_settings(load_user_settings(directory)))
        values.update(cls.load_from_env(env))
        try:
            return cls(**values)
        except ValidationError as e:
            issues = [
                f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
                for err in e.errors()
            ]
            raise ConfigurationError(
                "Invalid configuration:\n  " + "\n  ".join(issues)
            ) from e

    def __repr__(self) -> str:
        return (
            f"Config(openai_mode={self.openai_mode.value}, gemini_mode={self.gemini_mode.value}, "
            f"claude_mode={self.claude_mode.value}, default_alias={self.default_alias}, "
            f"default_model={self.default_model}, allowed_models={list(self.allowed_models)})"
        )
