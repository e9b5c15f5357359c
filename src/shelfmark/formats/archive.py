# ABOUTME: Container access for zip- and rar-based ebook archives (EPUB, CBZ, CBR).
# ABOUTME: Format modules read entry bytes through the Container protocol only.

import logging
import zipfile
from pathlib import Path
from typing import Protocol, runtime_checkable

import rarfile

logger = logging.getLogger(__name__)


class ContainerReadError(Exception):
    """Raised when a container or one of its entries cannot be read."""


@runtime_checkable
class Container(Protocol):
    """Protocol for an opened archive holding book content and metadata."""

    @property
    def path(self) -> Path: ...

    def list_entries(self) -> list[str]: ...

    def open_entry(self, name: str) -> bytes: ...

    def close(self) -> None: ...


class ZipContainer:
    """Container backed by a zip archive (EPUB, CBZ)."""

    def __init__(self, path: Path) -> None:
        self._path = path
        try:
            self._archive = zipfile.ZipFile(path)
        except (OSError, zipfile.BadZipFile) as exc:
            raise ContainerReadError(f"Failed to open zip archive: {path}: {exc}") from exc

    @property
    def path(self) -> Path:
        return self._path

    def list_entries(self) -> list[str]:
        """Entry names in archive order, directories excluded."""
        return [info.filename for info in self._archive.infolist() if not info.is_dir()]

    def open_entry(self, name: str) -> bytes:
        try:
            return self._archive.read(name)
        except (KeyError, OSError, zipfile.BadZipFile) as exc:
            raise ContainerReadError(f"Failed to read {name!r} from {self._path}: {exc}") from exc

    def close(self) -> None:
        self._archive.close()

    def __enter__(self) -> "ZipContainer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class RarContainer:
    """Container backed by a rar archive (CBR). Requires an unrar backend."""

    def __init__(self, path: Path) -> None:
        self._path = path
        try:
            self._archive = rarfile.RarFile(path)
        except (OSError, rarfile.Error) as exc:
            raise ContainerReadError(f"Failed to open rar archive: {path}: {exc}") from exc

    @property
    def path(self) -> Path:
        return self._path

    def list_entries(self) -> list[str]:
        """Entry names in archive order, directories excluded."""
        return [info.filename for info in self._archive.infolist() if not info.is_dir()]

    def open_entry(self, name: str) -> bytes:
        try:
            return self._archive.read(name)
        except (KeyError, OSError, rarfile.Error) as exc:
            raise ContainerReadError(f"Failed to read {name!r} from {self._path}: {exc}") from exc

    def close(self) -> None:
        self._archive.close()

    def __enter__(self) -> "RarContainer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def open_container(path: Path) -> ZipContainer | RarContainer:
    """Open an archive by sniffing its content rather than trusting the suffix.

    Many .cbr files are really zip archives and vice versa.

    Raises:
        ContainerReadError: If the file is missing or is neither zip nor rar.
    """
    if not path.exists():
        raise ContainerReadError(f"File not found: {path}")

    if zipfile.is_zipfile(path):
        return ZipContainer(path)
    if rarfile.is_rarfile(path):
        logger.debug("Opening %s as rar archive", path)
        return RarContainer(path)

    raise ContainerReadError(f"Not a zip or rar archive: {path}")
