"""Loguru configuration and session log helpers.

Stdout carries MCP JSON-RPC, so loguru's default stderr sink is replaced by
a file sink under the state directory. ``GREY_SO_DEBUG`` adds a DEBUG-level
stderr sink for local troubleshooting.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any

from loguru import logger

LOG_FILE_NAME = "mcp.log"
SEPARATOR = "=" * 80


def _env_true(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


def log_dir() -> Path:
    """Directory for the session log.

    Order of precedence: GREY_SO_LOG_DIR, $XDG_STATE_HOME/grey-so,
    ~/.local/state/grey-so.
    """
    if override := os.getenv("GREY_SO_LOG_DIR"):
        return Path(override).expanduser()
    state_home = os.getenv("XDG_STATE_HOME")
    base = Path(state_home) if state_home else Path.home() / ".local" / "state"
    return base / "grey-so"


def configure_logging(directory: Path | None = None, debug: bool | None = None) -> Path:
    """Route loguru output to the session log file.

    Returns:
        Path of the log file
    """
    debug = _env_true("GREY_SO_DEBUG") if debug is None else debug
    path = (directory or log_dir()) / LOG_FILE_NAME

    logger.remove()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            path,
            level="DEBUG" if debug else "INFO",
            format="[{time:YYYY-MM-DDTHH:mm:ss.SSS!UTC}Z] {level}: {message}",
        )
    except OSError as e:
        sys.stderr.write(f"grey-so: cannot open log file {path}: {e}\n")
    if debug:
        logger.add(sys.stderr, level="DEBUG")
    return path


def log_server_start(version: str) -> None:
    logger.info(f"MCP SERVER STARTED - grey-so v{version}\n{SEPARATOR}")


def log_configuration(config: Any) -> None:
    logger.info(f"CONFIGURATION: {config!r}\n{SEPARATOR}")


def log_tool_call(name: str, arguments: Any) -> None:
    try:
        rendered = json.dumps(arguments, indent=2, default=str)
    except (TypeError, ValueError):
        rendered = repr(arguments)
    logger.info(f"TOOL CALL: {name}\nArguments: {rendered}\n{SEPARATOR}")


def log_prompt(model: str, prompt: str) -> None:
    logger.info(f"PROMPT (model: {model}):\n{prompt}\n{SEPARATOR}")


def log_response(model: str, response: str, cost_info: str) -> None:
    logger.info(f"RESPONSE (model: {model}):\n{response}\n{cost_info}\n{SEPARATOR}")
