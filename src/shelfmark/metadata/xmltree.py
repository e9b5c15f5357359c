# ABOUTME: Minimal XML tree decoder over lxml, exposing lookups as Scalar/Node variants.
# ABOUTME: The field extractor depends only on find(), find_all() and get_text_content().

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from lxml import etree


class XmlDecodeError(Exception):
    """Raised when metadata bytes cannot be decoded as XML."""


@dataclass(frozen=True)
class Scalar:
    """A leaf element with no attributes and no child elements."""

    text: str


@dataclass(frozen=True)
class Node:
    """An element carrying attributes and/or child elements."""

    element: etree._Element

    @property
    def tag(self) -> str:
        return etree.QName(self.element).localname

    @property
    def attributes(self) -> dict[str, str]:
        """Attributes keyed by local name (namespace prefixes dropped)."""
        return {etree.QName(key).localname: value for key, value in self.element.attrib.items()}

    def children(self, key: str) -> list[Scalar | Node]:
        """Direct child elements matching key, wrapped as variants."""
        return [_wrap(child) for child in _child_elements(self.element) if _matches(child, key)]


def _child_elements(element: etree._Element) -> Iterator[etree._Element]:
    # Skip processing instructions and other non-element nodes.
    return (child for child in element if isinstance(child.tag, str))


def _matches(element: etree._Element, key: str) -> bool:
    """Match an element by local name, or by 'prefix:local' when key has a prefix."""
    if not isinstance(element.tag, str):
        return False
    localname = etree.QName(element).localname
    if ":" not in key:
        return localname == key
    prefix, _, name = key.partition(":")
    return element.prefix == prefix and localname == name


def _wrap(element: etree._Element) -> Scalar | Node:
    if element.attrib or any(True for _ in _child_elements(element)):
        return Node(element)
    return Scalar(element.text or "")


def get_text_content(node: Scalar | Node) -> str | None:
    """Return the textual content of a variant, or None if it has none."""
    if isinstance(node, Scalar):
        return node.text or None
    text = "".join(node.element.itertext())
    return text if text.strip() else None


class XmlTree:
    """A decoded XML document queried by element key."""

    def __init__(self, root: etree._Element) -> None:
        self._root = root

    def find(self, key: str) -> Scalar | Node | None:
        """First element in document order matching key, or None."""
        for element in self._root.iter():
            if _matches(element, key):
                return _wrap(element)
        return None

    def find_all(self, key: str) -> list[Scalar | Node]:
        """Every element in document order matching key."""
        return [_wrap(element) for element in self._root.iter() if _matches(element, key)]


def parse_xml(data: bytes) -> XmlTree:
    """Decode XML bytes into an XmlTree.

    Raises:
        XmlDecodeError: If the bytes are not well-formed XML.
    """
    # No DTD entity expansion and no network fetches while decoding sidecar XML.
    # lxml parsers are not thread-safe, so each call gets its own.
    parser = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)
    try:
        root = etree.fromstring(data, parser=parser)
    except etree.XMLSyntaxError as exc:
        raise XmlDecodeError(f"Malformed XML: {exc}") from exc
    if root is None:
        raise XmlDecodeError("XML document has no root element")
    return XmlTree(root)
