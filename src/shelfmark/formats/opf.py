# ABOUTME: Parser for EPUB package documents (content.opf): Dublin Core, Calibre and EPUB3 metadata.
# ABOUTME: Also reads the manifest, spine and cover reference needed by the EPUB module.

import datetime
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from shelfmark.metadata.extract import compose_date, extract_string, parse_float, parse_int
from shelfmark.metadata.normalizer import normalize_text
from shelfmark.metadata.xmltree import Node, Scalar, XmlTree, get_text_content

logger = logging.getLogger(__name__)

# YYYY, YYYY-MM or YYYY-MM-DD, optionally followed by a time part.
_DATE_RE = re.compile(r"^(\d{4})(?:-(\d{1,2})(?:-(\d{1,2}))?)?")
_URN_RE = re.compile(r"^urn:(?P<scheme>[a-z0-9]+):(?P<value>.+)$", re.IGNORECASE)


@dataclass(frozen=True)
class Creator:
    """A dc:creator or dc:contributor with its MARC relator role, if any."""

    name: str
    role: str | None = None


@dataclass(frozen=True)
class ManifestItem:
    id: str
    href: str
    media_type: str | None = None
    properties: frozenset[str] = field(default_factory=frozenset)


def parse_opf_date(text: str | None) -> datetime.date | None:
    """Parse the leading date of a dc:date value; missing month/day default to 1."""
    if not text:
        return None
    match = _DATE_RE.match(text.strip())
    if not match:
        logger.debug("Unrecognized date format %r", text)
        return None
    year, month, day = (parse_int(group) for group in match.groups())
    return compose_date(year, month, day)


def _text(node: Scalar | Node) -> str | None:
    return normalize_text(get_text_content(node))


def _attributes(node: Scalar | Node) -> dict[str, str]:
    return node.attributes if isinstance(node, Node) else {}


class OpfMetadata:
    """Typed view of one EPUB package document.

    Elements are matched by local name, so Dublin Core fields are found
    whether or not the document binds them to the usual dc: prefix.
    """

    def __init__(self) -> None:
        self.title: str | None = None
        self.creators: list[Creator] = []
        self.contributors: list[Creator] = []
        self.description: str | None = None
        self.publisher: str | None = None
        self.language: str | None = None
        self.rights: str | None = None
        self.date: datetime.date | None = None
        self.subjects: list[str] = []
        self.identifiers: dict[str, str] = {}
        self.series: str | None = None
        self.series_index: int | None = None
        self.rating: float | None = None
        self.cover_id: str | None = None
        self.manifest: dict[str, ManifestItem] = {}
        self.spine: list[str] = []

    @classmethod
    def make(cls, tree: XmlTree) -> "OpfMetadata":
        metadata = cls()
        metadata._parse(tree)
        return metadata

    def _parse(self, xml: XmlTree) -> None:
        self.title = extract_string(xml, "title")
        self.description = extract_string(xml, "description")
        self.publisher = extract_string(xml, "publisher")
        self.language = extract_string(xml, "language")
        self.rights = extract_string(xml, "rights")
        self.date = parse_opf_date(extract_string(xml, "date"))
        self.subjects = [text for text in map(_text, xml.find_all("subject")) if text]

        refines = self._parse_meta(xml)
        self.creators = _parse_creators(xml.find_all("creator"), refines)
        self.contributors = _parse_creators(xml.find_all("contributor"), refines)
        self.identifiers = _parse_identifiers(xml.find_all("identifier"))

        for node in xml.find_all("item"):
            attrs = _attributes(node)
            if "id" not in attrs or "href" not in attrs:
                continue
            self.manifest[attrs["id"]] = ManifestItem(
                id=attrs["id"],
                href=attrs["href"],
                media_type=attrs.get("media-type"),
                properties=frozenset(attrs.get("properties", "").split()),
            )

        self.spine = [
            _attributes(node)["idref"]
            for node in xml.find_all("itemref")
            if "idref" in _attributes(node)
        ]

        if self.cover_id is None:
            self.cover_id = next(
                (item.id for item in self.manifest.values() if "cover-image" in item.properties),
                None,
            )

    def _parse_meta(self, xml: XmlTree) -> dict[str, dict[str, str]]:
        """Read <meta> elements; returns EPUB3 refinements keyed by target id."""
        refines: dict[str, dict[str, str]] = {}
        collections: dict[str, str] = {}

        for node in xml.find_all("meta"):
            attrs = _attributes(node)
            name = attrs.get("name")
            content = normalize_text(attrs.get("content"))

            # EPUB2 / Calibre style: <meta name="..." content="..."/>
            if name == "calibre:series":
                self.series = content
            elif name == "calibre:series_index":
                self.series_index = parse_int(content)
            elif name == "calibre:rating":
                self.rating = parse_float(content)
            elif name == "cover":
                self.cover_id = content

            # EPUB3 style: <meta property="..." [refines="#id"]>text</meta>
            prop = attrs.get("property")
            if prop is None:
                continue
            text = _text(node)
            target = attrs.get("refines", "").lstrip("#")
            if target:
                refines.setdefault(target, {})[prop] = text or ""
            elif prop == "belongs-to-collection" and text:
                collections[attrs.get("id", "")] = text

        if self.series is None and collections:
            collection_id, self.series = next(iter(collections.items()))
            position = refines.get(collection_id, {}).get("group-position")
            self.series_index = parse_int(position)

        return refines

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "creators": [(c.name, c.role) for c in self.creators],
            "contributors": [(c.name, c.role) for c in self.contributors],
            "description": self.description,
            "publisher": self.publisher,
            "language": self.language,
            "rights": self.rights,
            "date": self.date,
            "subjects": list(self.subjects),
            "identifiers": dict(self.identifiers),
            "series": self.series,
            "series_index": self.series_index,
            "rating": self.rating,
            "cover_id": self.cover_id,
        }


def _parse_creators(
    nodes: list[Scalar | Node], refines: dict[str, dict[str, str]]
) -> list[Creator]:
    creators: list[Creator] = []
    for node in nodes:
        name = _text(node)
        if not name:
            continue
        attrs = _attributes(node)
        role = attrs.get("role") or refines.get(attrs.get("id", ""), {}).get("role")
        creators.append(Creator(name=name, role=role.lower() if role else None))
    return creators


def _parse_identifiers(nodes: list[Scalar | Node]) -> dict[str, str]:
    """Map lower-cased scheme to identifier value ("id" when no scheme is given)."""
    identifiers: dict[str, str] = {}
    for node in nodes:
        value = _text(node)
        if not value:
            continue
        scheme = _attributes(node).get("scheme")
        urn = _URN_RE.match(value)
        if scheme is None and urn:
            scheme, value = urn.group("scheme"), urn.group("value")
        identifiers[(scheme or "id").lower()] = value
    return identifiers
