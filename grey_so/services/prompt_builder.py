"""Prompt assembly for API and CLI execution."""

from __future__ import annotations

from collections.abc import Sequence

from .context_files import ContextFile


def format_git_diff(diff: str) -> str:
    return f"## Git Diff\n```diff\n{diff}\n```"


def build_cli_prompt(user_prompt: str, git_diff: str | None = None) -> str:
    """CLI backends read files themselves; only the diff is inlined."""
    if git_diff:
        return f"{format_git_diff(git_diff)}\n\n{user_prompt}"
    return user_prompt


def build_prompt(
    user_prompt: str,
    context_files: Sequence[ContextFile],
    git_diff: str | None = None,
) -> str:
    """Inline file contents and diff ahead of the user prompt (API mode)."""
    sections: list[str] = []
    for file in context_files:
        sections.append(f"### File: {file.original_path}\n```\n{file.content}\n```")
    if git_diff:
        sections.append(format_git_diff(git_diff))
    sections.append(user_prompt)
    return "\n\n".join(sections)
