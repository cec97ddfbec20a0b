"""Tool-call payload schemas."""

from __future__ import annotations

from collections.abc import Collection
from typing import Any

from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator

from grey_so.core.exceptions import InvalidParameters


class GitDiffArgs(BaseModel):
    repo_path: str | None = Field(
        default=None,
        description="Path to git repository (defaults to current working directory)",
    )
    files: list[str] = Field(
        min_length=1, description="Specific files to include in diff"
    )
    base_ref: str = Field(
        default="HEAD",
        description='Git reference to compare against (e.g., "HEAD", "main", commit hash)',
    )


class AdviceArgs(BaseModel):
    """Arguments shared by the consult and get_advice tools.

    The set of selectable models depends on runtime configuration and is
    passed through the validation context as ``allowed_models``.
    """

    prompt: str = Field(min_length=1)
    files: list[str] | None = None
    model: str | None = None
    git_diff: GitDiffArgs | None = None

    @field_validator("model")
    def validate_model(cls, v: str | None, info: ValidationInfo) -> str | None:
        allowed = (info.context or {}).get("allowed_models")
        if v is not None and allowed is not None and v not in allowed:
            raise ValueError(f"Invalid model '{v}'. Expected one of: {', '.join(allowed)}")
        return v


def format_validation_errors(error: ValidationError) -> list[str]:
    violations = []
    for err in error.errors():
        path = ".".join(str(p) for p in err["loc"]) or "(root)"
        violations.append(f"{path}: {err['msg']}")
    return violations


def parse_advice_args(arguments: Any, allowed_models: Collection[str]) -> AdviceArgs:
    """Validate a raw payload.

    Raises:
        InvalidParameters: Listing every violation as ``path: message``
    """
    try:
        return AdviceArgs.model_validate(
            arguments, context={"allowed_models": list(allowed_models)}
        )
    except ValidationError as e:
        raise InvalidParameters(format_validation_errors(e)) from e
