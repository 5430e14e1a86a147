"""Free-text helpers applied to imported question content."""

from __future__ import annotations

import html
import re

# Entities left encoded by the Canvas exporter inside already-unescaped text.
HTML_CODE_LIST = {
    "&#039;": "'",
    "&quot;": '"',
    "&lt;": "<",
    "&gt;": ">",
    "&amp;": "&",
}
HTML_CODE_PATTERN = re.compile("|".join(re.escape(code) for code in HTML_CODE_LIST))
TAG_PATTERN = re.compile(r"<[^>]+>")
BLOCK_BREAK_PATTERN = re.compile(r"<\s*(?:br|/p|/div|/li|/h[1-6])\s*/?>", flags=re.IGNORECASE)
CLOZE_CONTROL_PATTERN = re.compile(r'([}#~/"\\])')


def clean_input(value: str | None) -> str:
    """Decode the handful of entities that survive export, in a single pass."""

    if not value:
        return ""
    return HTML_CODE_PATTERN.sub(lambda match: HTML_CODE_LIST[match.group(0)], value)


def html_to_text(value: str | None) -> str:
    """Render an HTML fragment as plain text on one line."""

    if not value:
        return ""
    text = BLOCK_BREAK_PATTERN.sub(" ", value)
    text = TAG_PATTERN.sub(" ", text)
    text = html.unescape(text)
    return re.sub(r"\s+", " ", text).strip()


def escape_cloze_text(value: str) -> str:
    """Escape characters that act as control characters in embedded answers."""

    return CLOZE_CONTROL_PATTERN.sub(r"\\\1", value)


def unescape_cloze_text(value: str) -> str:
    return re.sub(r'\\([}#~/"\\])', r"\1", value)


def to_float(value: object, default: float = 0.0) -> float:
    """Lenient numeric conversion; unparseable values become ``default``."""

    try:
        return float(str(value).strip())
    except ValueError:
        return default
