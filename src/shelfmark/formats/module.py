# ABOUTME: Abstract EbookModule: the uniform contract every container format implements.
# ABOUTME: make() locates metadata, then to_entity/to_cover/to_counts map it to a BookEntity.

import json
import mimetypes
from abc import ABC, abstractmethod
from typing import Any

from shelfmark.formats.archive import Container
from shelfmark.metadata.normalizer import html_to_text, sanitize_html
from shelfmark.metadata.types import BookEntity, CoverRequest

IMAGE_EXTENSIONS: frozenset[str] = frozenset(
    {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".avif", ".jxl"}
)


def is_image_entry(name: str) -> bool:
    """Whether an entry name looks like an image, ignoring macOS resource forks."""
    lowered = name.lower()
    if lowered.startswith("__macosx/") or lowered.rsplit("/", 1)[-1].startswith("._"):
        return False
    return any(lowered.endswith(ext) for ext in IMAGE_EXTENSIONS)


def cover_request(entry: str, media_type: str | None = None) -> CoverRequest:
    """Build a CoverRequest, guessing the media type from the entry name if not given."""
    if media_type is None:
        media_type, _ = mimetypes.guess_type(entry)
    return CoverRequest(entry=entry, media_type=media_type)


class EbookModule(ABC):
    """Base class for per-format metadata modules.

    Subclasses are built with make(), which reads the format's metadata
    source out of an already-open container. The remaining operations are
    pure mappings of what make() parsed; none of them reads cover bytes.
    """

    label: str = ""

    def __init__(self, container: Container) -> None:
        self.container = container

    @classmethod
    @abstractmethod
    def make(cls, container: Container) -> "EbookModule":
        """Locate and parse the metadata source inside the container."""

    @abstractmethod
    def to_entity(self) -> BookEntity:
        """Map parsed metadata onto a BookEntity."""

    @abstractmethod
    def to_cover(self) -> CoverRequest | None:
        """Name the entry holding the cover image, or None if there is none."""

    @abstractmethod
    def to_counts(self) -> BookEntity:
        """Return a BookEntity with only derived counts (pages, words) populated."""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Raw parsed metadata as a plain mapping."""

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, default=str, ensure_ascii=False)

    def __str__(self) -> str:
        return self.to_json()

    @staticmethod
    def html_to_string(html: str | None) -> str | None:
        """Convert HTML to plain text, removing all tags."""
        return html_to_text(html)

    @staticmethod
    def sanitize_html(html: str | None) -> str | None:
        """Sanitize HTML, keeping only div, p, br, b, i, u, strong and em."""
        return sanitize_html(html)
