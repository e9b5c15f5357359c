# ABOUTME: Format modules: one EbookModule implementation per supported container type.
# ABOUTME: Exports the module classes and the container helpers they read through.

from shelfmark.formats.archive import Container, ContainerReadError, open_container
from shelfmark.formats.cba import ComicArchiveModule
from shelfmark.formats.epub import EpubModule
from shelfmark.formats.module import EbookModule

__all__ = [
    "ComicArchiveModule",
    "Container",
    "ContainerReadError",
    "EbookModule",
    "EpubModule",
    "open_container",
]
