"""Per-user configuration file for grey-so.

The file lives at ``<config_dir>/config.json`` and holds the alias to model
mapping plus a few optional overrides. It is created with built-in defaults
on first run and rewritten to defaults whenever it is missing or malformed,
so a broken file never prevents the server from starting.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Literal

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from grey_so.core.models import (
    DEFAULT_ALIAS,
    DEFAULT_MODEL_MAPPING,
    ModelAlias,
)

CONFIG_FILE_NAME = "config.json"
SYSTEM_PROMPT_FILE_NAME = "SYSTEM_PROMPT.md"


def config_dir() -> Path:
    """Return the per-user configuration directory.

    ``GREY_SO_CONFIG_DIR`` overrides the default ``~/.config/grey-so``.
    """
    override = os.getenv("GREY_SO_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "grey-so"


class UserSettings(BaseModel):
    """On-disk settings shape (camelCase keys for readability in JSON)."""

    model_config = ConfigDict(populate_by_name=True)

    models: dict[ModelAlias, str] = Field(
        default_factory=dict,
        validate_default=True,
        description="Alias to concrete model name",
    )
    default_alias: ModelAlias = Field(default=ModelAlias(DEFAULT_ALIAS), alias="defaultAlias")
    codex_reasoning_effort: (
        Literal["none", "minimal", "low", "medium", "high", "xhigh"] | None
    ) = Field(default=None, alias="codexReasoningEffort")
    system_prompt_path: str | None = Field(default=None, alias="systemPromptPath")

    @field_validator("models")
    def backfill_models(cls, v: dict[ModelAlias, str]) -> dict[ModelAlias, str]:
        """Ensure every alias has a model, falling back to built-in defaults."""
        merged = {ModelAlias(alias): name for alias, name in DEFAULT_MODEL_MAPPING.items()}
        for alias, name in v.items():
            if name and name.strip():
                merged[alias] = name.strip()
        return merged

    def model_mapping(self) -> dict[str, str]:
        return {alias.value: name for alias, name in self.models.items()}

    def to_json(self) -> str:
        data = self.model_dump(mode="json", by_alias=True)
        return json.dumps(data, indent=2) + "\n"

    @classmethod
    def defaults(cls) -> UserSettings:
        return cls()


def write_default_settings(path: Path) -> UserSettings:
    settings = UserSettings.defaults()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(settings.to_json(), encoding="utf-8")
    return settings


def load_user_settings(directory: Path | None = None) -> UserSettings:
    """Load settings from disk, healing the file when needed."""
    path = (directory or config_dir()) / CONFIG_FILE_NAME

    if not path.exists():
        logger.info(f"Creating default configuration at {path}")
        try:
            return write_default_settings(path)
        except OSError as e:
            logger.warning(f"Could not write default configuration to {path}: {e}")
            return UserSettings.defaults()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return UserSettings.model_validate(raw)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Configuration at {path} is invalid ({e}); rewriting defaults")
        try:
            return write_default_settings(path)
        except OSError as write_error:
            logger.warning(f"Could not rewrite configuration at {path}: {write_error}")
            return UserSettings.defaults()
