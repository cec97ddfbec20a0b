"""Default command: run the MCP server on stdio."""

from __future__ import annotations

import argparse
import asyncio
import sys

from grey_so.core.config import Config
from grey_so.core.exceptions import ConfigurationError
from grey_so.mcp_server import StdioMCPServer
from grey_so.utils.logging_setup import (
    configure_logging,
    log_configuration,
    log_server_start,
)
from grey_so.version import __version__


def serve_command(args: argparse.Namespace) -> int:
    try:
        config = Config.load()
    except ConfigurationError as e:
        sys.stderr.write(f"{e}\n")
        return 1

    configure_logging()
    log_server_start(__version__)
    log_configuration(config)

    server = StdioMCPServer(config)
    try:
        asyncio.run(server.run())
    except KeyboardInterrupt:
        pass
    return 0
