"""
Logging setup for the chrome-tools CLI.

Library modules only create loggers with ``logging.getLogger(__name__)``
and never install handlers, so a host framework embedding the tools keeps
control of its own logging. The CLI calls configure_logging() once before
running a tool.

Environment variables:
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL (default: INFO)
"""

import logging
import os
import sys
from typing import Optional

DEFAULT_LOG_LEVEL = "INFO"

# --verbose adds timestamps and logger names
VERBOSE_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"
PLAIN_FORMAT = "%(levelname)s: %(message)s"

# Driver and event loop chatter, only shown at DEBUG
NOISY_LOGGERS = ("playwright", "asyncio")

LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_log_level(name: Optional[str] = None) -> int:
    """
    Resolve a level name to a logging constant.

    ``name`` defaults to the LOG_LEVEL variable. Unknown names fall back to
    INFO with a warning on stderr; logging is not configured yet at that
    point, so the warning cannot go through it.
    """
    name = (name or os.getenv("LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()

    if name not in LEVEL_NAMES:
        print(
            f"Warning: unknown log level {name!r} (expected one of {', '.join(LEVEL_NAMES)}), "
            f"using {DEFAULT_LOG_LEVEL}",
            file=sys.stderr,
        )
        name = DEFAULT_LOG_LEVEL

    return getattr(logging, name)


def configure_logging(level: Optional[int] = None, verbose: bool = False) -> None:
    """
    Send log records to stderr.

    Args:
        level: Level for the root and ``chrome_tools`` loggers (default: LOG_LEVEL)
        verbose: Include timestamps and logger names

    Example:
        configure_logging(level=logging.DEBUG, verbose=True)  # chrome-tools -v
    """
    if level is None:
        level = get_log_level()

    logging.basicConfig(
        level=level,
        format=VERBOSE_FORMAT if verbose else PLAIN_FORMAT,
        stream=sys.stderr,
        force=True,
    )
    logging.getLogger("chrome_tools").setLevel(level)

    noisy_level = level if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)
