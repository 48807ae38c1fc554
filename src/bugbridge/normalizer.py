"""Collapse free-text issue bodies into a single line."""

from __future__ import annotations

import re
import unicodedata

# Unicode \s also covers \u2028, \u2029 and \x85 line breaks
_WHITESPACE_RUN = re.compile(r"\s+")


def _is_dropped_control(char: str) -> bool:
    return unicodedata.category(char) == "Cc" and not char.isspace()


def normalize_body(text: str | None) -> str:
    """Normalize an issue body to one line.

    Line breaks become spaces, runs of whitespace collapse to a single space
    and the result is stripped. Non-whitespace control characters are
    dropped.

    Args:
        text: Raw issue body. May be None or empty.

    Returns:
        The single-line body, "" for empty input.
    """
    if not text:
        return ""

    cleaned = "".join(char for char in text if not _is_dropped_control(char))
    return _WHITESPACE_RUN.sub(" ", cleaned).strip()
