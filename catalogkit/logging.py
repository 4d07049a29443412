"""
Logging configuration shared by the catalog client and service.
"""

import logging
import sys


class CatalogFormatter(logging.Formatter):
    """Compact ``[time] LEVEL logger: message`` lines, coloured on a TTY."""

    _COLOURS = {
        logging.WARNING: "\033[0;33m",
        logging.ERROR: "\033[0;31m",
        logging.CRITICAL: "\033[0;31m",
    }

    def format(self, record: logging.LogRecord) -> str:
        line = f"[{record.created:.3f}] {record.levelname} {record.name}: {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        colour = self._COLOURS.get(record.levelno)
        if colour and sys.stderr.isatty():
            return f"{colour}{line}\033[0m"
        return line


def setup_logging(level: str | int = "INFO") -> None:
    """Configure the root logger once with the catalog formatter.

    Args:
        level: Level name or number, e.g. ``"DEBUG"``.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(CatalogFormatter())
    root_logger.addHandler(console_handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
