"""Argument parsers for grey-so subcommands."""

from .init_prompt_parser import add_init_prompt_subparser

__all__: list[str] = ["add_init_prompt_subparser"]
