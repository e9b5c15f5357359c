# ABOUTME: Metadata package: canonical entity, vocabularies, XML decoding and field extraction.
# ABOUTME: Exports the BookEntity dataclass and normalization helpers used throughout Shelfmark.

from shelfmark.metadata.normalizer import html_to_text, normalize_text, sanitize_html
from shelfmark.metadata.types import BookEntity, CoverRequest
from shelfmark.metadata.vocab import AgeRating, MangaStatus

__all__ = [
    "AgeRating",
    "BookEntity",
    "CoverRequest",
    "MangaStatus",
    "html_to_text",
    "normalize_text",
    "sanitize_html",
]
