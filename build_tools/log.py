"""
Console output channels.

Everything the dispatcher tells the user goes through three channels:
primary messages, primary errors and secondary (progress) messages.
They are plain logging calls on the ``build_tools.output`` logger so
tests can capture them with caplog and callers can reroute them.
"""

import logging
import sys
from typing import Optional

from build_tools.constants import BUILD_TOOLS_LOG_LEVEL

OUTPUT_LOGGER = "build_tools.output"

PRIMARY = "primary"
SECONDARY = "secondary"

logger = logging.getLogger(OUTPUT_LOGGER)


class ChannelFormatter(logging.Formatter):
    """Format output records by channel; diagnostics get a full prefix."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.name != OUTPUT_LOGGER:
            return f"{record.levelname.lower()}: {record.name}: {message}"
        if record.levelno >= logging.ERROR:
            return f"❌ {message}"
        if getattr(record, "channel", PRIMARY) == SECONDARY:
            return f"   {message}"
        return message


def primary(message: str) -> None:
    logger.info(message, extra={"channel": PRIMARY})


def primary_error(message: str) -> None:
    logger.error(message, extra={"channel": PRIMARY})


def secondary(message: str) -> None:
    logger.info(message, extra={"channel": SECONDARY})


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure console logging for the CLI.

    Output channels go to stdout, errors to stderr.

    Args:
        level: Logging level name (defaults to BUILD_TOOLS_LOG_LEVEL)
    """
    level = (level or BUILD_TOOLS_LOG_LEVEL).upper()
    formatter = ChannelFormatter()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    stdout_handler.addFilter(lambda record: record.levelno < logging.ERROR)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    stderr_handler.setLevel(logging.ERROR)

    root = logging.getLogger("build_tools")
    root.handlers = [stdout_handler, stderr_handler]
    root.setLevel(level)
    root.propagate = False

    # Output channels are always shown, even at WARNING
    logger.setLevel(logging.INFO)
