# ABOUTME: Unit tests for container access to zip and rar archives.
# ABOUTME: Validates entry listing, entry reads, protocol conformance, and error reporting.

from pathlib import Path

import pytest

from shelfmark.formats.archive import (
    Container,
    ContainerReadError,
    ZipContainer,
    open_container,
)


class TestOpenContainer:
    """Tests for open_container."""

    def test_opens_zip(self, sample_cbz: Path) -> None:
        with open_container(sample_cbz) as container:
            assert isinstance(container, ZipContainer)
            assert container.path == sample_cbz

    def test_zip_with_cbr_suffix(self, sample_cbz: Path, tmp_path: Path) -> None:
        """A zip mislabelled as .cbr is still opened as a zip."""
        renamed = tmp_path / "mislabelled.cbr"
        renamed.write_bytes(sample_cbz.read_bytes())
        with open_container(renamed) as container:
            assert isinstance(container, ZipContainer)

    def test_nonexistent_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ContainerReadError, match="File not found"):
            open_container(tmp_path / "does_not_exist.cbz")

    def test_not_an_archive_raises(self, corrupt_epub: Path) -> None:
        with pytest.raises(ContainerReadError, match="Not a zip or rar archive"):
            open_container(corrupt_epub)


class TestZipContainer:
    """Tests for ZipContainer."""

    def test_satisfies_protocol(self, sample_cbz: Path) -> None:
        with ZipContainer(sample_cbz) as container:
            assert isinstance(container, Container)

    def test_lists_entries_in_archive_order(self, minimal_cbz: Path) -> None:
        with ZipContainer(minimal_cbz) as container:
            assert container.list_entries() == [
                "Sample/comicinfo.xml",
                "Sample/001.png",
                "Sample/002.png",
            ]

    def test_reads_entry(self, minimal_cbz: Path) -> None:
        with ZipContainer(minimal_cbz) as container:
            assert container.open_entry("Sample/001.png") == b"\x89PNG-1"

    def test_missing_entry_raises(self, minimal_cbz: Path) -> None:
        with ZipContainer(minimal_cbz) as container, pytest.raises(ContainerReadError):
            container.open_entry("nope.jpg")

    def test_bad_zip_raises(self, corrupt_epub: Path) -> None:
        with pytest.raises(ContainerReadError):
            ZipContainer(corrupt_epub)
