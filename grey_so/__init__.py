"""grey-so: second-opinion MCP server dispatching to LLM CLIs and APIs."""

from .version import __version__

__all__ = ["__version__"]
