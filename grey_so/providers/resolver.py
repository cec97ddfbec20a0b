"""Resolve model identifiers to a provider family and execution mode.

Two identifier shapes are accepted:

- Aliases (``gemini``, ``claude``, ``codex``, ``kilo``) map through the
  configured alias table to a concrete model name. Each alias is bound to one
  provider and always runs through that provider's CLI.
- Model names are classified by provider prefix. Their execution mode comes
  from configuration for the provider family.

The prefix table is checked at import time to be pairwise disjoint, so a
literal model name can never match more than one provider.
"""

from __future__ import annotations

from dataclasses import dataclass

from grey_so.core.config import Config
from grey_so.core.exceptions import UnknownModelAlias, UnknownProvider
from grey_so.core.models import (
    ALIAS_PROVIDERS,
    MODEL_ALIASES,
    ExecutionMode,
    ProviderId,
)

PROVIDER_PREFIXES: tuple[tuple[str, ProviderId], ...] = (
    ("gpt-", ProviderId.OPENAI),
    ("gemini-", ProviderId.GEMINI),
    ("claude-", ProviderId.CLAUDE),
    ("opencode-", ProviderId.OPENCODE),
    ("kilocode-", ProviderId.KILOCODE),
)


def _assert_disjoint_prefixes(table: tuple[tuple[str, ProviderId], ...]) -> None:
    prefixes = [prefix for prefix, _ in table]
    for i, a in enumerate(prefixes):
        for b in prefixes[i + 1 :]:
            if a.startswith(b) or b.startswith(a):
                raise ValueError(f"Overlapping provider prefixes: {a!r} and {b!r}")


_assert_disjoint_prefixes(PROVIDER_PREFIXES)


@dataclass(frozen=True)
class ResolvedModel:
    """Concrete backend selection for one request."""

    identifier: str
    provider: ProviderId
    model_name: str
    mode: ExecutionMode
    alias: str | None = None

    @property
    def is_cli(self) -> bool:
        return self.mode == ExecutionMode.CLI


def is_alias(identifier: str) -> bool:
    return identifier in MODEL_ALIASES


def classify_model_name(model: str) -> ProviderId:
    """Return the provider whose prefix matches ``model``.

    Raises:
        UnknownProvider: If no prefix matches
    """
    matches = [provider for prefix, provider in PROVIDER_PREFIXES if model.startswith(prefix)]
    if len(matches) != 1:
        raise UnknownProvider(model)
    return matches[0]


def resolve_model_alias(alias: str, config: Config) -> str:
    """Translate an alias to its configured model name."""
    if alias not in MODEL_ALIASES:
        raise UnknownModelAlias(alias, MODEL_ALIASES)
    return config.models[alias]


def resolve_provider(identifier: str) -> ProviderId:
    if is_alias(identifier):
        return ALIAS_PROVIDERS[identifier]
    return classify_model_name(identifier)


def resolve_execution_mode(identifier: str, config: Config) -> ExecutionMode:
    """Execution mode for ``identifier`` under ``config``; no side effects."""
    if is_alias(identifier):
        return ExecutionMode.CLI
    return config.mode_for_provider(classify_model_name(identifier))


def is_cli_mode(identifier: str, config: Config) -> bool:
    return resolve_execution_mode(identifier, config) == ExecutionMode.CLI


def resolve_model(identifier: str, config: Config) -> ResolvedModel:
    if is_alias(identifier):
        return ResolvedModel(
            identifier=identifier,
            provider=ALIAS_PROVIDERS[identifier],
            model_name=resolve_model_alias(identifier, config),
            mode=ExecutionMode.CLI,
            alias=identifier,
        )
    provider = classify_model_name(identifier)
    return ResolvedModel(
        identifier=identifier,
        provider=provider,
        model_name=identifier,
        mode=config.mode_for_provider(provider),
    )
