"""init-prompt command argument parser for grey-so CLI."""

import argparse
from typing import Any, cast


def add_init_prompt_subparser(subparsers: Any) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        "init-prompt",
        help="Write the default system prompt to the config directory",
        description=(
            "Create SYSTEM_PROMPT.md in the grey-so config directory so it can "
            "be customized. Fails if the file already exists."
        ),
    )
    return cast(argparse.ArgumentParser, parser)


__all__: list[str] = ["add_init_prompt_subparser"]
