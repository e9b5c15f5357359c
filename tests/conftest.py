# ABOUTME: Shared pytest fixtures for Shelfmark tests.
# ABOUTME: Provides sample EPUB and comic archive files (valid, minimal, and corrupt).

import zipfile
from pathlib import Path

import pytest
from ebooklib import epub

from tests.fixtures.comicinfo import FULL_COMIC_INFO, MINIMAL_COMIC_INFO

# Smallest valid JPEG-looking payload; content is never decoded.
FAKE_JPEG = b"\xff\xd8\xff\xe0fake-jpeg\xff\xd9"


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_epub(tmp_path: Path) -> Path:
    """Create a valid EPUB with known metadata, series info, and a cover."""
    book = epub.EpubBook()

    book.set_identifier("test-isbn-978-0-123456-47-2")
    book.set_title("The Name of the Rose")
    book.set_language("en")
    book.add_author("Umberto Eco")
    book.add_author("William Weaver", uid="translator", role="trl")

    book.add_metadata("DC", "publisher", "Harcourt")
    book.add_metadata(
        "DC", "description", "<p>A mystery set in a <b>medieval</b> monastery.</p>"
    )
    book.add_metadata("DC", "date", "1980-01-13T21:00:00+00:00")
    book.add_metadata("DC", "subject", "Mystery")
    book.add_metadata("DC", "subject", "Historical")
    book.add_metadata("DC", "identifier", "urn:isbn:9780151446476", {"id": "isbn"})
    book.add_metadata(None, "meta", "", {"name": "calibre:series", "content": "Monastery"})
    book.add_metadata(None, "meta", "", {"name": "calibre:series_index", "content": "1.0"})
    book.add_metadata(None, "meta", "", {"name": "calibre:rating", "content": "10.0"})

    book.set_cover("cover.jpg", FAKE_JPEG)

    # Add a minimal chapter so the EPUB is structurally valid
    chapter = epub.EpubHtml(title="Chapter 1", file_name="chap01.xhtml", lang="en")
    chapter.content = (
        b"<html><body><h1>Chapter 1</h1>"
        b"<p>In the beginning was the Word and the Word was with God.</p></body></html>"
    )
    book.add_item(chapter)

    # Add navigation
    book.toc = [epub.Link("chap01.xhtml", "Chapter 1", "chap01")]
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())
    book.spine = ["nav", chapter]

    filepath = tmp_path / "name_of_the_rose.epub"
    epub.write_epub(str(filepath), book)
    return filepath


@pytest.fixture
def minimal_epub(tmp_path: Path) -> Path:
    """Create an EPUB with minimal metadata (only title)."""
    book = epub.EpubBook()
    book.set_identifier("minimal-id")
    book.set_title("Untitled Book")
    book.set_language("en")

    chapter = epub.EpubHtml(title="Content", file_name="content.xhtml", lang="en")
    chapter.content = b"<html><body><p>Minimal content.</p></body></html>"
    book.add_item(chapter)

    book.toc = [epub.Link("content.xhtml", "Content", "content")]
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())
    book.spine = ["nav", chapter]

    filepath = tmp_path / "minimal.epub"
    epub.write_epub(str(filepath), book)
    return filepath


@pytest.fixture
def corrupt_epub(tmp_path: Path) -> Path:
    """Create a corrupt file that is not a valid EPUB."""
    filepath = tmp_path / "corrupt.epub"
    filepath.write_text("this is not a valid epub file")
    return filepath


def _write_cbz(path: Path, entries: dict[str, bytes]) -> Path:
    with zipfile.ZipFile(path, "w") as archive:
        for name, data in entries.items():
            archive.writestr(name, data)
    return path


@pytest.fixture
def sample_cbz(tmp_path: Path) -> Path:
    """Create a CBZ with a full ComicInfo.xml and three page images."""
    return _write_cbz(
        tmp_path / "long_halloween_01.cbz",
        {
            "ComicInfo.xml": FULL_COMIC_INFO,
            "page10.jpg": FAKE_JPEG + b"10",
            "page2.jpg": FAKE_JPEG + b"2",
            "page1.jpg": FAKE_JPEG + b"1",
        },
    )


@pytest.fixture
def minimal_cbz(tmp_path: Path) -> Path:
    """Create a CBZ with a minimal ComicInfo.xml inside a subdirectory."""
    return _write_cbz(
        tmp_path / "sample.cbz",
        {
            "Sample/comicinfo.xml": MINIMAL_COMIC_INFO,
            "Sample/001.png": b"\x89PNG-1",
            "Sample/002.png": b"\x89PNG-2",
        },
    )


@pytest.fixture
def bare_cbz(tmp_path: Path) -> Path:
    """Create a CBZ with images but no ComicInfo.xml."""
    return _write_cbz(
        tmp_path / "Untagged Comic 05.cbz",
        {
            "__MACOSX/._01.jpg": b"resource fork",
            "01.jpg": FAKE_JPEG,
            "02.jpg": FAKE_JPEG,
            "notes.txt": b"not an image",
        },
    )


@pytest.fixture
def broken_cbz(tmp_path: Path) -> Path:
    """Create a CBZ whose ComicInfo.xml is not well-formed."""
    return _write_cbz(
        tmp_path / "broken.cbz",
        {"ComicInfo.xml": b"<ComicInfo><Title>Oops</ComicInfo>", "01.jpg": FAKE_JPEG},
    )
