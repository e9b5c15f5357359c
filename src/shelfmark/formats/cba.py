# ABOUTME: Format module for comic book archives (CBZ/CBR) described by ComicInfo.xml.
# ABOUTME: Maps ComicInfoMetadata onto BookEntity and picks the cover from the page images.

import copy
import logging
import re
from pathlib import PurePosixPath
from typing import Any

from shelfmark.formats.archive import Container
from shelfmark.formats.comicinfo import COMIC_INFO_FILENAME, ComicInfoMetadata
from shelfmark.formats.module import EbookModule, cover_request, is_image_entry
from shelfmark.metadata.extract import parse_int
from shelfmark.metadata.types import BookEntity, CoverRequest
from shelfmark.metadata.xmltree import parse_xml

logger = logging.getLogger(__name__)

_DIGITS_RE = re.compile(r"(\d+)")


def _natural_key(name: str) -> list[Any]:
    """Sort key so that 'page2.jpg' comes before 'page10.jpg'."""
    return [int(part) if part.isdigit() else part.lower() for part in _DIGITS_RE.split(name)]


def _find_comic_info(entries: list[str]) -> str | None:
    """Find the ComicInfo.xml entry anywhere in the archive, ignoring case."""
    target = COMIC_INFO_FILENAME.lower()
    for name in entries:
        if PurePosixPath(name).name.lower() == target:
            return name
    return None


class ComicArchiveModule(EbookModule):
    """Comic archive module backed by a single ComicInfo.xml sidecar."""

    label = "cba"

    def __init__(
        self, container: Container, metadata: ComicInfoMetadata, images: list[str]
    ) -> None:
        super().__init__(container)
        self.metadata = metadata
        self.images = images

    @classmethod
    def make(cls, container: Container) -> "ComicArchiveModule":
        """Locate ComicInfo.xml and parse it.

        An archive without ComicInfo.xml still yields a module whose fields
        are all at their defaults.

        Raises:
            ContainerReadError: If the sidecar entry cannot be read.
            XmlDecodeError: If the sidecar is not well-formed XML.
        """
        entries = container.list_entries()
        images = sorted((name for name in entries if is_image_entry(name)), key=_natural_key)

        entry = _find_comic_info(entries)
        if entry is None:
            logger.debug("No %s in %s", COMIC_INFO_FILENAME, container.path)
            return cls(container, ComicInfoMetadata.make(None), images)

        tree = parse_xml(container.open_entry(entry))
        return cls(container, ComicInfoMetadata.make(tree), images)

    def to_entity(self) -> BookEntity:
        meta = self.metadata
        return BookEntity(
            title=meta.title or self.container.path.stem,
            series=meta.series,
            summary=self.html_to_string(meta.summary),
            summary_html=self.sanitize_html(meta.summary),
            publisher=meta.publisher,
            imprint=meta.imprint,
            language=meta.language,
            format=meta.format,
            web=meta.web,
            notes=meta.notes,
            review=meta.review,
            story_arc=meta.story_arc,
            alternate_series=meta.alternate_series,
            series_group=meta.series_group,
            main_character_or_team=meta.main_character_or_team,
            scan_information=meta.scan_information,
            number=meta.number,
            count=meta.count,
            volume=meta.volume,
            story_arc_number=meta.story_arc_number,
            page_count=meta.page_count,
            community_rating=meta.community_rating,
            alternate_number=meta.alternate_number,
            alternate_count=meta.alternate_count,
            is_black_and_white=meta.is_black_and_white,
            manga=meta.manga,
            age_rating=meta.age_rating,
            writers=list(meta.writers),
            pencillers=list(meta.pencillers),
            inkers=list(meta.inkers),
            colorists=list(meta.colorists),
            letterers=list(meta.letterers),
            cover_artists=list(meta.cover_artists),
            translators=list(meta.translators),
            editors=list(meta.editors),
            genres=list(meta.genres),
            characters=list(meta.characters),
            teams=list(meta.teams),
            locations=list(meta.locations),
            identifiers=list(meta.gtin),
            date=meta.date,
            extras=copy.deepcopy(meta.extras),
        )

    def to_cover(self) -> CoverRequest | None:
        """Use the page flagged FrontCover in ComicInfo, else the first image."""
        if not self.images:
            return None

        for page in self.metadata.extras.get("pages") or []:
            if page.get("Type") != "FrontCover":
                continue
            index = parse_int(page.get("Image"))
            if index is not None and 0 <= index < len(self.images):
                return cover_request(self.images[index])
            logger.warning(
                "FrontCover page index %r out of range in %s",
                page.get("Image"),
                self.container.path,
            )
            break

        return cover_request(self.images[0])

    def to_counts(self) -> BookEntity:
        return BookEntity(page_count=len(self.images))

    def to_dict(self) -> dict[str, Any]:
        return self.metadata.to_dict()
