# ABOUTME: Parser for ComicInfo.xml sidecars found in CBZ/CBR comic archives.
# ABOUTME: Extracts every ComicInfo v2 field once, at construction, into typed read-only values.

import copy
import datetime
import logging
from typing import Any

from shelfmark.metadata.extract import (
    compose_date,
    extract_float,
    extract_int,
    extract_list,
    extract_string,
)
from shelfmark.metadata.vocab import AgeRating, MangaStatus, resolve
from shelfmark.metadata.xmltree import Node, XmlTree

logger = logging.getLogger(__name__)

COMIC_INFO_FILENAME = "ComicInfo.xml"

# ComicInfo element -> attribute name, grouped by extractor.
_STRING_FIELDS: dict[str, str] = {
    "Title": "title",
    "Series": "series",
    "Summary": "summary",
    "Notes": "notes",
    "Publisher": "publisher",
    "Imprint": "imprint",
    "Web": "web",
    "LanguageISO": "language",
    "Format": "format",
    "ScanInformation": "scan_information",
    "StoryArc": "story_arc",
    "SeriesGroup": "series_group",
    "MainCharacterOrTeam": "main_character_or_team",
    "Review": "review",
    "AlternateSeries": "alternate_series",
}

_INT_FIELDS: dict[str, str] = {
    "Number": "number",
    "Count": "count",
    "Volume": "volume",
    "AlternateNumber": "alternate_number",
    "AlternateCount": "alternate_count",
    "PageCount": "page_count",
    "StoryArcNumber": "story_arc_number",
}

_LIST_FIELDS: dict[str, str] = {
    "Writer": "writers",
    "Penciller": "pencillers",
    "Inker": "inkers",
    "Colorist": "colorists",
    "Letterer": "letterers",
    "CoverArtist": "cover_artists",
    "Translator": "translators",
    "Editor": "editors",
    "Genre": "genres",
    "Characters": "characters",
    "Teams": "teams",
    "Locations": "locations",
    "GTIN": "gtin",
}


class ComicInfoMetadata:
    """Typed view of one ComicInfo.xml document.

    See https://anansi-project.github.io/docs/comicinfo/schemas/v2.0

    Build with make(); every attribute is populated eagerly and the instance
    is not modified afterwards. Missing or malformed fields are None (or an
    empty list), except age_rating which falls back to AgeRating.UNKNOWN.
    """

    def __init__(self) -> None:
        self.title: str | None = None
        self.series: str | None = None
        self.summary: str | None = None
        self.notes: str | None = None
        self.publisher: str | None = None
        self.imprint: str | None = None
        self.web: str | None = None
        self.language: str | None = None
        self.format: str | None = None
        self.scan_information: str | None = None
        self.story_arc: str | None = None
        self.series_group: str | None = None
        self.main_character_or_team: str | None = None
        self.review: str | None = None
        self.alternate_series: str | None = None

        self.number: int | None = None
        self.count: int | None = None
        self.volume: int | None = None
        self.alternate_number: int | None = None
        self.alternate_count: int | None = None
        self.page_count: int | None = None
        self.story_arc_number: int | None = None

        self.writers: list[str] = []
        self.pencillers: list[str] = []
        self.inkers: list[str] = []
        self.colorists: list[str] = []
        self.letterers: list[str] = []
        self.cover_artists: list[str] = []
        self.translators: list[str] = []
        self.editors: list[str] = []
        self.genres: list[str] = []
        self.characters: list[str] = []
        self.teams: list[str] = []
        self.locations: list[str] = []
        self.gtin: list[str] = []

        self.date: datetime.date | None = None
        self.community_rating: float | None = None
        self.is_black_and_white: bool = False
        self.manga: MangaStatus | None = None
        self.age_rating: AgeRating = AgeRating.UNKNOWN
        self.extras: dict[str, Any] = {}

    @classmethod
    def make(cls, tree: XmlTree | None) -> "ComicInfoMetadata":
        """Parse a decoded ComicInfo tree. None yields an all-default instance."""
        metadata = cls()
        if tree is not None:
            metadata._parse(tree)
        return metadata

    def _parse(self, xml: XmlTree) -> None:
        for key, attr in _STRING_FIELDS.items():
            setattr(self, attr, extract_string(xml, key))
        for key, attr in _INT_FIELDS.items():
            setattr(self, attr, extract_int(xml, key))
        for key, attr in _LIST_FIELDS.items():
            setattr(self, attr, extract_list(xml, key))

        self.extras["year"] = extract_int(xml, "Year")
        self.extras["month"] = extract_int(xml, "Month")
        self.extras["day"] = extract_int(xml, "Day")
        self.date = compose_date(self.extras["year"], self.extras["month"], self.extras["day"])

        self.is_black_and_white = extract_string(xml, "BlackAndWhite") == "Yes"
        self.manga = resolve(MangaStatus, extract_string(xml, "Manga"))
        self.age_rating = resolve(AgeRating, extract_string(xml, "AgeRating")) or AgeRating.UNKNOWN
        self.community_rating = extract_float(xml, "CommunityRating")

        pages = _parse_pages(xml)
        if pages is not None:
            self.extras["pages"] = pages

    def to_dict(self) -> dict[str, Any]:
        """Every parsed field as a detached copy of the parser state."""
        data = {
            "title": self.title,
            "series": self.series,
            "number": self.number,
            "summary": self.summary,
            "date": self.date,
            "page_count": self.page_count,
            "language": self.language,
            "editors": self.editors,
            "publisher": self.publisher,
            "imprint": self.imprint,
            "community_rating": self.community_rating,
            "is_black_and_white": self.is_black_and_white,
            "manga": self.manga,
            "age_rating": self.age_rating,
            "review": self.review,
            "main_character_or_team": self.main_character_or_team,
            "alternate_series": self.alternate_series,
            "alternate_number": self.alternate_number,
            "alternate_count": self.alternate_count,
            "count": self.count,
            "volume": self.volume,
            "story_arc": self.story_arc,
            "story_arc_number": self.story_arc_number,
            "series_group": self.series_group,
            "notes": self.notes,
            "scan_information": self.scan_information,
            "web": self.web,
            "format": self.format,
            "writers": self.writers,
            "pencillers": self.pencillers,
            "inkers": self.inkers,
            "colorists": self.colorists,
            "letterers": self.letterers,
            "cover_artists": self.cover_artists,
            "translators": self.translators,
            "genres": self.genres,
            "characters": self.characters,
            "teams": self.teams,
            "locations": self.locations,
            "gtin": self.gtin,
            "extras": self.extras,
        }
        return copy.deepcopy(data)

    def __str__(self) -> str:
        return f"{self.title} ({self.series} #{self.number})"


def _parse_pages(xml: XmlTree) -> list[dict[str, str]] | None:
    """Collect the attributes of each <Pages><Page .../></Pages> entry, in order.

    Returns None when there is no Pages element or it has no Page children.
    """
    pages = xml.find("Pages")
    if not isinstance(pages, Node):
        return None

    entries = pages.children("Page")
    if not entries:
        return None

    items = [entry.attributes for entry in entries if isinstance(entry, Node) and entry.attributes]
    logger.debug("Collected %d page entries", len(items))
    return items
