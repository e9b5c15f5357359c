# ABOUTME: Text normalization for metadata fields: whitespace collapsing and HTML cleanup.
# ABOUTME: Plain-text, sanitized rich-text, and tag-stripping variants, all idempotent.

import re

from bs4 import BeautifulSoup, Comment

# Tags that survive sanitize_html(). Everything else is unwrapped to its text.
ALLOWED_TAGS: frozenset[str] = frozenset({"div", "p", "br", "b", "i", "u", "strong", "em"})

# Tags whose content is dropped entirely rather than unwrapped.
_DROPPED_TAGS = ["script", "style"]

_WHITESPACE_RE = re.compile(r"\s+")
# "<" and "&" that html.parser would read back as a tag or a character reference.
_MARKUP_LT_RE = re.compile(r"<(?=[A-Za-z/!?])")
_REFERENCE_AMP_RE = re.compile(r"&(?=[#A-Za-z0-9])")
# C0 control characters other than whitespace, plus DEL.
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def normalize_text(text: str | None) -> str | None:
    """Collapse whitespace runs to a single space and trim.

    Tabs, newlines and carriage returns count as whitespace; other control
    characters are removed. Returns None when nothing is left.
    """
    if not text:
        return None

    text = _CONTROL_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text).strip()
    return text or None


def _soup(html: str) -> BeautifulSoup:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(_DROPPED_TAGS):
        tag.decompose()
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()
    return soup


def sanitize_html(html: str | None) -> str | None:
    """Keep only the allow-listed formatting tags, then normalize whitespace.

    Attributes on kept tags are dropped. Tags outside ALLOWED_TAGS are
    unwrapped so their text survives; script and style blocks are removed
    with their content.
    """
    if not html:
        return None

    soup = _soup(html)
    for tag in soup.find_all(True):
        if tag.name in ALLOWED_TAGS:
            tag.attrs = {}
        else:
            tag.unwrap()

    return normalize_text(str(soup))


def html_to_text(html: str | None) -> str | None:
    """Strip every tag and return normalized plain text.

    Entities are decoded, except where the decoded character would start a
    tag or a reference again (escaped markup such as "&lt;b&gt;" stays
    escaped), so the output is stable under a second pass.
    """
    if not html:
        return None

    text = normalize_text(_soup(html).get_text(separator=" "))
    if text is None:
        return None
    text = _REFERENCE_AMP_RE.sub("&amp;", text)
    return _MARKUP_LT_RE.sub("&lt;", text)
