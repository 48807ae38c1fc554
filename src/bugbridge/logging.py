"""Logging setup for bugbridge.

Every component logs under the ``bugbridge`` logger (``bugbridge.jira``,
``bugbridge.pipeline``, ...). ``setup_logging`` sends those records to a
rotating file and optionally the console. Upstream error bodies end up in log
messages, so each handler scrubs credentials before writing.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

ROOT_LOGGER = "bugbridge"

DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_FILE = "bugbridge.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_SECRET_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"gh[pos]_[a-zA-Z0-9]{36}"), "[GITHUB_TOKEN]"),
    (re.compile(r"github_pat_[a-zA-Z0-9_]{82}"), "[GITHUB_TOKEN]"),
    (re.compile(r"ATATT[a-zA-Z0-9_\-=]+"), "[ATLASSIAN_TOKEN]"),
    (re.compile(r"Bearer [a-zA-Z0-9._-]+"), "Bearer [REDACTED]"),
    (re.compile(r"Basic [a-zA-Z0-9+/=]+"), "Basic [REDACTED]"),
    (re.compile(r"token=[a-zA-Z0-9._-]+"), "token=[REDACTED]"),
]


def sanitize_for_log(text: str) -> str:
    """Replace GitHub/Atlassian tokens and auth header values with placeholders."""
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def truncate_output(output: str, max_length: int = 5000) -> str:
    """Truncate long text (e.g. an upstream response body) for logging."""
    if len(output) <= max_length:
        return output
    return output[:max_length] + f"\n... [truncated, {len(output) - max_length} more chars]"


class RedactingFilter(logging.Filter):
    """Scrub credentials from the fully formatted message of each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = sanitize_for_log(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(
    log_dir: str | Path | None = None,
    level: str | None = None,
    console: bool = True,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
) -> logging.Logger:
    """Configure the ``bugbridge`` logger.

    Safe to call more than once; previous handlers are closed and replaced.

    Args:
        log_dir: Directory for the log file. Falls back to ``BUGBRIDGE_LOG_DIR``,
                 then ``./logs``.
        level: Level name (DEBUG, INFO, WARNING, ERROR). Falls back to
               ``BUGBRIDGE_LOG_LEVEL``, then INFO.
        console: Also log to stderr.
        log_file: Log file name inside ``log_dir``.
        max_bytes: Size at which the file is rotated.
        backup_count: Number of rotated files to keep.

    Returns:
        The ``bugbridge`` logger.
    """
    log_dir = Path(log_dir or os.environ.get("BUGBRIDGE_LOG_DIR") or DEFAULT_LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    level = (level or os.environ.get("BUGBRIDGE_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
    log_level = getattr(logging, level, logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(log_level)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            log_dir / log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        handler.addFilter(RedactingFilter())
        logger.addHandler(handler)

    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))

    logger.info("Logging to %s (level=%s)", log_dir / log_file, level)
    return logger
