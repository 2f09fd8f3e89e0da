"""Coloured console logging for the launcher."""

import logging
import sys

BLUE = "\033[0;34m"
YELLOW = "\033[0;33m"
RED = "\033[0;31m"
NC = "\033[0m"

LEVEL_COLORS = {
    logging.DEBUG: "",
    logging.INFO: BLUE,
    logging.WARNING: YELLOW,
    logging.ERROR: RED,
    logging.CRITICAL: RED,
}


class ColorFormatter(logging.Formatter):
    """Prefixes each record with its level name and wraps it in the level colour."""

    def __init__(self, use_color: bool = True):
        super().__init__("%(levelname)s: %(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno, "")
        if not self.use_color or not color:
            return message
        return f"{color}{message}{NC}"


def configure_logging(level: str = "INFO", stream=None) -> logging.Handler:
    """
    Install a coloured stderr handler on the package logger.

    Colour is only emitted when the stream is a TTY. Records stop at the
    package logger so a root handler does not print them a second time.

    Returns:
        The installed handler
    """
    stream = stream if stream is not None else sys.stderr
    handler = logging.StreamHandler(stream)
    handler.setFormatter(ColorFormatter(use_color=hasattr(stream, "isatty") and stream.isatty()))

    package_logger = logging.getLogger("minerkit")
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(level.upper())
    package_logger.propagate = False
    return handler
