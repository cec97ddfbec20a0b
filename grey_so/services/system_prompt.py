"""System prompt supplied to every backend.

Users may override the built-in prompt with a file (created by
``grey-so init-prompt``). CLI backends can edit files on their own, so in CLI
mode the prompt gains a suffix keeping them advisory.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from grey_so.core.config.user_settings import SYSTEM_PROMPT_FILE_NAME
from grey_so.core.exceptions import SystemPromptExistsError

DEFAULT_SYSTEM_PROMPT = """You are an expert engineering consultant. You will provide a second opinion and advice in solving a difficult problem.

Communication style:
- Skip pleasantries and praise

Your role is to:
- Identify architectural problems
- Point out edge cases and risks
- Challenge design decisions when suboptimal
- Focus on what needs improvement
- Provide specific solutions with code examples

When reviewing code changes, prioritize:
1. Thinking deeply about overall system, subsystem or solution architecture for cleanness, readability, extensibility
2. Prefer functional style of programming for ease of unit testing, observability and integration
3. Advise of any potential security vulnerabilities
4. Warn of bugs and correctness issues
5. Warn of any obvious performance problems
6. Notice code smells and anti-patterns
7. Notice inconsistencies with codebase conventions

Be critical and thorough. Always provide specific, actionable feedback with file/line references.

Respond in Markdown."""

CLI_MODE_SUFFIX = (
    "\n\nIMPORTANT: Do not edit files yourself, only provide recommendations and code examples"
)


def read_custom_prompt(path: Path | None) -> str | None:
    """Return the trimmed custom prompt, or None to use the default."""
    if path is None or not path.exists():
        return None
    try:
        text = path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to read custom system prompt from {path}: {e}")
        return None
    return text or None


def get_system_prompt(is_cli_mode: bool, custom_path: Path | None = None) -> str:
    prompt = read_custom_prompt(custom_path) or DEFAULT_SYSTEM_PROMPT
    return prompt + CLI_MODE_SUFFIX if is_cli_mode else prompt


def init_system_prompt(config_dir: Path) -> Path:
    """Write the default prompt to ``config_dir`` for the user to edit.

    Raises:
        SystemPromptExistsError: If a prompt file is already present
    """
    prompt_path = config_dir / SYSTEM_PROMPT_FILE_NAME
    if prompt_path.exists():
        raise SystemPromptExistsError(str(prompt_path))

    config_dir.mkdir(parents=True, exist_ok=True)
    prompt_path.write_text(DEFAULT_SYSTEM_PROMPT, encoding="utf-8")
    return prompt_path
