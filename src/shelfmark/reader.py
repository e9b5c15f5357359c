# ABOUTME: Calling layer that opens a book file, picks its format module, and assembles results.
# ABOUTME: Surfaces container and XML failures as BookReadError before any mapping happens.

import logging
from dataclasses import dataclass
from pathlib import Path

from shelfmark.formats.archive import ContainerReadError, open_container
from shelfmark.formats.cba import ComicArchiveModule
from shelfmark.formats.epub import EpubModule
from shelfmark.formats.module import EbookModule
from shelfmark.metadata.types import BookEntity, CoverRequest
from shelfmark.metadata.xmltree import XmlDecodeError

logger = logging.getLogger(__name__)

MODULES: dict[str, type[EbookModule]] = {
    ".epub": EpubModule,
    ".cbz": ComicArchiveModule,
    ".cbr": ComicArchiveModule,
}


class BookReadError(Exception):
    """Raised when a book file cannot be opened or its metadata cannot be decoded."""


@dataclass
class BookFile:
    """Everything read from one book file: entity, cover reference and cover bytes."""

    path: Path
    module: str
    entity: BookEntity
    cover: CoverRequest | None = None
    cover_image: bytes | None = None

    @property
    def has_cover(self) -> bool:
        """Whether cover image data is present."""
        return self.cover_image is not None and len(self.cover_image) > 0


def module_for(path: Path) -> type[EbookModule]:
    """Select the format module for a path by its suffix.

    Raises:
        BookReadError: If the suffix is not a supported format.
    """
    try:
        return MODULES[path.suffix.lower()]
    except KeyError:
        raise BookReadError(f"Unsupported format: {path}") from None


def read_book(path: Path, *, with_cover: bool = True) -> BookFile:
    """Read metadata (and optionally cover bytes) from an EPUB or comic archive.

    Args:
        path: Path to the book file.
        with_cover: Whether to read the cover image bytes.

    Returns:
        BookFile with the canonical entity, counts merged in.

    Raises:
        BookReadError: If the file cannot be opened or its metadata is undecodable.
    """
    module_cls = module_for(path)

    try:
        container = open_container(path)
    except ContainerReadError as exc:
        raise BookReadError(str(exc)) from exc

    with container:
        try:
            module = module_cls.make(container)
        except (ContainerReadError, XmlDecodeError) as exc:
            raise BookReadError(f"Failed to read metadata: {path}: {exc}") from exc

        entity = module.to_entity().with_counts(module.to_counts())
        cover = module.to_cover()

        cover_image = None
        if with_cover and cover is not None:
            try:
                cover_image = container.open_entry(cover.entry)
            except ContainerReadError as exc:
                logger.warning("Cover entry unreadable: %s", exc)

    return BookFile(
        path=path,
        module=module.label,
        entity=entity,
        cover=cover,
        cover_image=cover_image,
    )
