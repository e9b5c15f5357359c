# ABOUTME: Core data structures: the canonical BookEntity and the CoverRequest descriptor.
# ABOUTME: BookEntity is the single format-agnostic output every format module produces.

import datetime
import json
import math
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any

from shelfmark.metadata.vocab import AgeRating, MangaStatus


@dataclass
class BookEntity:
    """Normalized bibliographic metadata for one ebook or comic container.

    Every string field is either None or a non-empty normalized string, and
    every list field defaults to an empty list. age_rating defaults to
    AgeRating.UNKNOWN while manga defaults to None.

    community_rating is stored as the source gives it. ComicInfo documents a
    0-5 scale with two decimals, Calibre uses 0-10; neither is clamped here.
    """

    title: str | None = None
    series: str | None = None
    summary: str | None = None
    summary_html: str | None = None
    publisher: str | None = None
    imprint: str | None = None
    language: str | None = None
    format: str | None = None
    web: str | None = None
    notes: str | None = None
    review: str | None = None
    story_arc: str | None = None
    alternate_series: str | None = None
    series_group: str | None = None
    main_character_or_team: str | None = None
    scan_information: str | None = None
    rights: str | None = None
    number: int | None = None
    count: int | None = None
    volume: int | None = None
    story_arc_number: int | None = None
    page_count: int | None = None
    word_count: int | None = None
    community_rating: float | None = None
    alternate_number: int | None = None
    alternate_count: int | None = None
    is_black_and_white: bool = False
    manga: MangaStatus | None = None
    age_rating: AgeRating = AgeRating.UNKNOWN
    writers: list[str] = field(default_factory=list)
    pencillers: list[str] = field(default_factory=list)
    inkers: list[str] = field(default_factory=list)
    colorists: list[str] = field(default_factory=list)
    letterers: list[str] = field(default_factory=list)
    cover_artists: list[str] = field(default_factory=list)
    translators: list[str] = field(default_factory=list)
    editors: list[str] = field(default_factory=list)
    genres: list[str] = field(default_factory=list)
    characters: list[str] = field(default_factory=list)
    teams: list[str] = field(default_factory=list)
    locations: list[str] = field(default_factory=list)
    identifiers: list[str] = field(default_factory=list)
    date: datetime.date | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.community_rating is not None and not math.isfinite(self.community_rating):
            msg = f"community_rating must be finite, got {self.community_rating}"
            raise ValueError(msg)

    @property
    def author(self) -> str:
        """Convenience property: joined writer string for display."""
        return ", ".join(self.writers) if self.writers else ""

    def with_counts(self, counts: "BookEntity") -> "BookEntity":
        """Return a copy with page and word counts taken from counts where present."""
        return replace(
            self,
            page_count=counts.page_count if counts.page_count is not None else self.page_count,
            word_count=counts.word_count if counts.word_count is not None else self.word_count,
        )

    def to_dict(self) -> dict[str, Any]:
        """All fields in declaration order. Lists and extras are shallow copies."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, (list, dict)):
                value = value.copy()
            result[f.name] = value
        return result

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=_json_default, ensure_ascii=False)

    def __str__(self) -> str:
        return f"{self.title} ({self.series} #{self.number})"


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime.date):
        return value.isoformat()
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


@dataclass(frozen=True)
class CoverRequest:
    """Names the container entry that holds the cover image. Never carries bytes."""

    entry: str
    media_type: str | None = None
