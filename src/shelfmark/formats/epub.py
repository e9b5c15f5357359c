# ABOUTME: Format module for EPUB packages: locates the OPF via META-INF/container.xml.
# ABOUTME: Maps OpfMetadata onto BookEntity, resolves the cover item, and counts words.

import logging
import math
import posixpath
from typing import Any
from urllib.parse import unquote

from bs4 import BeautifulSoup

from shelfmark.formats.archive import Container, ContainerReadError
from shelfmark.formats.module import EbookModule, cover_request
from shelfmark.formats.opf import Creator, ManifestItem, OpfMetadata
from shelfmark.metadata.types import BookEntity, CoverRequest
from shelfmark.metadata.xmltree import Node, parse_xml

logger = logging.getLogger(__name__)

CONTAINER_XML = "META-INF/container.xml"
WORDS_PER_PAGE = 250

_DOCUMENT_MEDIA_TYPES = frozenset({"application/xhtml+xml", "text/html"})

# MARC relator code -> BookEntity list field. Creators without a role are writers.
_ROLE_FIELDS: dict[str | None, str] = {
    None: "writers",
    "aut": "writers",
    "ill": "pencillers",
    "art": "pencillers",
    "clr": "colorists",
    "cov": "cover_artists",
    "edt": "editors",
    "trl": "translators",
}


def _find_opf_path(container: Container) -> str | None:
    """Follow META-INF/container.xml to the package document, else the first .opf entry."""
    entries = container.list_entries()
    if CONTAINER_XML in entries:
        tree = parse_xml(container.open_entry(CONTAINER_XML))
        rootfile = tree.find("rootfile")
        if isinstance(rootfile, Node) and rootfile.attributes.get("full-path"):
            return rootfile.attributes["full-path"]

    return next((name for name in entries if name.lower().endswith(".opf")), None)


def _detect_isbn(identifiers: dict[str, str]) -> str | None:
    """Try to find an ISBN among the identifiers."""
    for key in ("isbn", "isbn13", "isbn-13", "isbn10", "isbn-10"):
        if key in identifiers:
            return identifiers[key]
    # Check if any identifier value looks like an ISBN
    for value in identifiers.values():
        cleaned = value.replace("-", "").replace(" ", "")
        if len(cleaned) in (10, 13) and cleaned.replace("X", "").isdigit():
            return value
    return None


def _split_creators(creators: list[Creator]) -> dict[str, list[str]]:
    roles: dict[str, list[str]] = {}
    for creator in creators:
        target = _ROLE_FIELDS.get(creator.role)
        if target is not None:
            roles.setdefault(target, []).append(creator.name)
    return roles


def _count_words(html: bytes) -> int:
    return len(BeautifulSoup(html, "html.parser").get_text(separator=" ").split())


class EpubModule(EbookModule):
    """EPUB module backed by the package document (OPF)."""

    label = "epub"

    def __init__(self, container: Container, metadata: OpfMetadata, opf_path: str | None) -> None:
        super().__init__(container)
        self.metadata = metadata
        self.opf_path = opf_path

    @classmethod
    def make(cls, container: Container) -> "EpubModule":
        """Locate and parse the package document.

        Raises:
            ContainerReadError: If container.xml or the OPF cannot be read.
            XmlDecodeError: If either is not well-formed XML.
        """
        opf_path = _find_opf_path(container)
        if opf_path is None:
            logger.debug("No package document in %s", container.path)
            return cls(container, OpfMetadata(), None)

        tree = parse_xml(container.open_entry(opf_path))
        return cls(container, OpfMetadata.make(tree), opf_path)

    def _resolve(self, href: str) -> str:
        """Resolve a manifest href relative to the OPF directory."""
        base = posixpath.dirname(self.opf_path or "")
        return posixpath.normpath(posixpath.join(base, unquote(href)))

    def to_entity(self) -> BookEntity:
        meta = self.metadata
        roles = _split_creators(meta.creators)
        contributor_roles = _split_creators([c for c in meta.contributors if c.role])

        extras: dict[str, Any] = {}
        if meta.identifiers:
            extras["identifier_schemes"] = dict(meta.identifiers)
        isbn = _detect_isbn(meta.identifiers)
        if isbn:
            extras["isbn"] = isbn
        if meta.contributors:
            extras["contributors"] = [c.name for c in meta.contributors]

        def people(field_name: str) -> list[str]:
            return roles.get(field_name, []) + contributor_roles.get(field_name, [])

        return BookEntity(
            title=meta.title or self.container.path.stem,
            series=meta.series,
            summary=self.html_to_string(meta.description),
            summary_html=self.sanitize_html(meta.description),
            publisher=meta.publisher,
            language=meta.language,
            rights=meta.rights,
            number=meta.series_index,
            community_rating=meta.rating,
            writers=people("writers"),
            pencillers=people("pencillers"),
            colorists=people("colorists"),
            cover_artists=people("cover_artists"),
            translators=people("translators"),
            editors=people("editors"),
            genres=list(meta.subjects),
            identifiers=list(meta.identifiers.values()),
            date=meta.date,
            extras=extras,
        )

    def _cover_item(self) -> ManifestItem | None:
        manifest = self.metadata.manifest
        if self.metadata.cover_id and self.metadata.cover_id in manifest:
            return manifest[self.metadata.cover_id]

        # Fallback: look for images with "cover" in the id or href
        for item in manifest.values():
            is_image = (item.media_type or "").startswith("image/")
            if is_image and ("cover" in item.id.lower() or "cover" in item.href.lower()):
                return item
        return None

    def to_cover(self) -> CoverRequest | None:
        item = self._cover_item()
        if item is None:
            return None
        return cover_request(self._resolve(item.href), item.media_type)

    def to_counts(self) -> BookEntity:
        """Count words across spine documents and derive a page count from them."""
        if self.opf_path is None:
            return BookEntity()

        words = 0
        for idref in self.metadata.spine:
            item = self.metadata.manifest.get(idref)
            if item is None or item.media_type not in _DOCUMENT_MEDIA_TYPES:
                continue
            try:
                words += _count_words(self.container.open_entry(self._resolve(item.href)))
            except ContainerReadError as exc:
                logger.warning("Skipping unreadable spine document %s: %s", item.href, exc)

        return BookEntity(word_count=words, page_count=math.ceil(words / WORDS_PER_PAGE))

    def to_dict(self) -> dict[str, Any]:
        return self.metadata.to_dict()
