"""Logging setup. Everything goes to stderr; stdout belongs to the MCP stdio stream."""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger with a Rich handler on stderr.

    `level` falls back to $LEETCODE_MCP_LOG_LEVEL, then INFO.
    """
    level_name = (level or os.environ.get("LEETCODE_MCP_LOG_LEVEL") or "INFO").upper()

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # httpx logs every request at INFO, including URLs
    logging.getLogger("httpx").setLevel(logging.WARNING)
