"""
Logging configuration for Idle Tycoon.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union


class ColoredFormatter(logging.Formatter):
    """Colours the level name for terminal output."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
        "RESET": "\033[0m",
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        reset = self.COLORS["RESET"]
        formatted = super().format(record)
        if record.levelname in formatted:
            formatted = formatted.replace(record.levelname, f"{color}{record.levelname}{reset}", 1)
        return formatted


CONSOLE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s;%(levelname)s;%(name)s;%(lineno)d;%(message)s"


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Path] = None,
    use_colors: Optional[bool] = None,
) -> None:
    """
    Configure console logging and an optional log file for the game.

    Args:
        level: Level for the console handler.
        log_file: When given, everything from DEBUG up is also written there.
        use_colors: Force colours on or off; defaults to whether stderr is a tty.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    if use_colors is None:
        use_colors = sys.stderr.isatty()
    console = logging.StreamHandler()
    console.setLevel(level)
    formatter_cls = ColoredFormatter if use_colors else logging.Formatter
    console.setFormatter(formatter_cls(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    root_logger.addHandler(console)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as exc:
            root_logger.warning("File logging disabled, cannot open %s: %s", log_file, exc)
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
            root_logger.addHandler(file_handler)

    logging.getLogger(__name__).debug("Logging configured (console level %s)", logging.getLevelName(level))
