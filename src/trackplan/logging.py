"""Log configuration for the trackplan server.

Every record written by the handlers installed here is passed through
redact_tokens, so YouTrack access tokens from the OAuth redirect never reach
the console or the log file, including in tracebacks and uvicorn access logs.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE = "trackplan.log"
MAX_BYTES = 10 * 1024 * 1024  # 10MB
BACKUP_COUNT = 5
LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

APP_LOGGER = "trackplan"
SERVER_LOGGER = "uvicorn"

# Token values end at a delimiter of the redirect fragment, a query string,
# a header or a JSON string.
_TOKEN_PATTERNS = [
    (re.compile(r"perm:[^\s&#\"',]+"), "[YOUTRACK_TOKEN]"),
    (re.compile(r"Bearer [^\s&#\"',]+"), "Bearer [REDACTED]"),
    (re.compile(r"(access_token=)[^\s&#\"',]+"), r"\1[REDACTED]"),
    (re.compile(r"(\"access_token\"\s*:\s*\")[^\"]*"), r"\1[REDACTED]"),
]


def redact_tokens(text: str) -> str:
    """Replace YouTrack permanent tokens and OAuth access tokens in text."""
    for pattern, replacement in _TOKEN_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class RedactingFormatter(logging.Formatter):
    """Formatter that redacts tokens from the fully formatted record."""

    def format(self, record: logging.LogRecord) -> str:
        return redact_tokens(super().format(record))


def configure_logging(
    log_dir: str | Path | None = None,
    level: str | None = None,
    *,
    console: bool = True,
    include_server: bool = False,
) -> list[logging.Handler]:
    """Install redacting handlers on the trackplan logger.

    Handlers installed by an earlier call are removed and closed first, so
    the function can be called again to reconfigure.

    Args:
        log_dir: Directory for a rotating trackplan.log. Falls back to the
            TRACKPLAN_LOG_DIR environment variable. Without either, nothing
            is written to disk.
        level: Level name, case-insensitive. Falls back to the
            TRACKPLAN_LOG_LEVEL environment variable, then INFO.
        console: Whether to log to stderr.
        include_server: Whether the uvicorn loggers share the handlers.

    Returns:
        The installed handlers.

    Raises:
        ValueError: If the level name is unknown.
    """
    level_name = (level or os.environ.get("TRACKPLAN_LOG_LEVEL") or "INFO").upper()
    if level_name not in LEVELS:
        raise ValueError(f"Unknown log level {level_name!r}, expected one of {', '.join(LEVELS)}")

    if log_dir is None:
        log_dir = os.environ.get("TRACKPLAN_LOG_DIR") or None

    for name in (APP_LOGGER, SERVER_LOGGER):
        _remove_installed_handlers(logging.getLogger(name))

    handlers: list[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler())
    log_path = None
    if log_dir is not None:
        log_path = Path(log_dir) / LOG_FILE
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8"
            )
        )

    formatter = RedactingFormatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)

    names = (APP_LOGGER, SERVER_LOGGER) if include_server else (APP_LOGGER,)
    for name in names:
        logger = logging.getLogger(name)
        logger.setLevel(level_name)
        for handler in handlers:
            logger.addHandler(handler)

    logging.getLogger(__name__).info(
        "Logging configured (level=%s, file=%s)", level_name, log_path or "none"
    )
    return handlers


def _remove_installed_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        if isinstance(handler.formatter, RedactingFormatter):
            logger.removeHandler(handler)
            handler.close()
