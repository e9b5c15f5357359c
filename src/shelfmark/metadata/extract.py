# ABOUTME: Field extraction from decoded XML trees into normalized strings, ints, and lists.
# ABOUTME: Absent keys and malformed values degrade to None or [] and never raise.

import logging
import math
import re
from datetime import date

from shelfmark.metadata.normalizer import normalize_text
from shelfmark.metadata.xmltree import Node, XmlTree, get_text_content

logger = logging.getLogger(__name__)

LIST_SEPARATOR = ","

_LEADING_INT_RE = re.compile(r"^[+-]?\d+")


def parse_int(text: str | None) -> int | None:
    """Parse the leading integer of a string ("12" -> 12, "3.5" -> 3, "x" -> None)."""
    if not text:
        return None
    match = _LEADING_INT_RE.match(text.strip())
    return int(match.group()) if match else None


def parse_float(text: str | None) -> float | None:
    """Parse a finite decimal number, or None."""
    if not text:
        return None
    try:
        value = float(text.strip())
    except ValueError:
        logger.debug("Ignoring non-numeric value %r", text)
        return None
    return value if math.isfinite(value) else None


def split_list(text: str | None) -> list[str]:
    """Split comma-separated text into normalized, non-empty items, in order."""
    if not text:
        return []
    items = (normalize_text(item) for item in text.split(LIST_SEPARATOR))
    return [item for item in items if item]


def extract_string(tree: XmlTree, key: str) -> str | None:
    """Return the normalized text of the first element matching key."""
    value = tree.find(key)
    if value is None:
        return None
    if isinstance(value, Node):
        logger.debug("Unwrapping nested element for %s", key)
    return normalize_text(get_text_content(value))


def extract_int(tree: XmlTree, key: str) -> int | None:
    return parse_int(extract_string(tree, key))


def extract_float(tree: XmlTree, key: str) -> float | None:
    return parse_float(extract_string(tree, key))


def extract_list(tree: XmlTree, key: str) -> list[str]:
    return split_list(extract_string(tree, key))


def compose_date(year: int | None, month: int | None, day: int | None) -> date | None:
    """Build a date from separate tokens; month and day default to 1.

    Returns None when the year is missing or the tokens name an impossible
    calendar day.
    """
    if not year:
        return None
    try:
        return date(year, month if month is not None else 1, day if day is not None else 1)
    except (ValueError, OverflowError):
        logger.debug("Ignoring invalid date %s-%s-%s", year, month, day)
        return None
