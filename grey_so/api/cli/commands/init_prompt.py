"""init-prompt command: materialize the default system prompt for editing."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from grey_so.core.config import config_dir
from grey_so.core.exceptions import SystemPromptExistsError
from grey_so.services.system_prompt import init_system_prompt


def init_prompt_command(args: argparse.Namespace, directory: Path | None = None) -> int:
    try:
        path = init_system_prompt(directory or config_dir())
    except SystemPromptExistsError as e:
        sys.stderr.write(f"{e}\n")
        return 1
    except OSError as e:
        sys.stderr.write(f"Failed to write system prompt: {e}\n")
        return 1

    print(f"System prompt written to {path}")
    return 0
