"""Logging configuration for stable-vault."""

import logging
import os
import sys

# Below DEBUG; used for raw RPC chatter
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

NOISY_LOGGERS = ("web3", "urllib3", "asyncio")


class ColoredFormatter(logging.Formatter):
    """Log formatter that colours the level name with ANSI escape codes."""

    COLORS = {
        "TRACE": "\033[90m",  # Dark gray
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"
    BOLD = "\033[1m"

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = (
                f"{self.COLORS[levelname]}{self.BOLD}{levelname}{self.RESET}"
            )

        result = super().format(record)

        record.levelname = levelname

        return result


def setup_logging(log_level: str | None = None) -> None:
    """Configure console logging for the CLI.

    The level comes from ``log_level`` when given, otherwise from the
    LOG_LEVEL environment variable (defaults to INFO).

    At DEBUG the web3/urllib3 loggers stay at WARNING so that vault
    decisions are readable; TRACE lets everything through.
    """
    level_name = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if level_name == "TRACE":
        level = TRACE
    else:
        level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        ColoredFormatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    logging.basicConfig(level=level, handlers=[handler], force=True)

    if level_name == "DEBUG":
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
    elif level_name == "TRACE":
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(TRACE)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module (pass ``__name__``)."""
    return logging.getLogger(name)
