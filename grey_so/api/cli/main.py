"""grey-so entry point.

With no subcommand the MCP server is started on stdio.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from grey_so.version import __version__

from .commands.init_prompt import init_prompt_command
from .commands.serve import serve_command
from .parsers import add_init_prompt_subparser


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grey-so",
        description="MCP server that asks a second LLM for its opinion",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"grey-so {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command")
    add_init_prompt_subparser(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command == "init-prompt":
        return init_prompt_command(args)
    return serve_command(args)


if __name__ == "__main__":
    sys.exit(main())
