"""Archive access for artifacts that bundle third-party license payloads."""

from __future__ import annotations

import zipfile
import zlib
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import ContextManager, Dict, Iterator, Mapping, Optional

from .errors import ArchiveError
from .logging import get_logger

logger = get_logger("archive")


class ArchiveHandle(ABC):
    """An opened archive exposing raw entry contents."""

    @abstractmethod
    def read_entry(self, name: str) -> Optional[bytes]:
        """Return the bytes stored under ``name`` or None when absent."""


class ArchiveOpener(ABC):
    """Opens artifact files as archives."""

    @abstractmethod
    def open(self, path: Path) -> ContextManager[ArchiveHandle]:
        """Return a context manager yielding an :class:`ArchiveHandle`."""


class _ZipHandle(ArchiveHandle):
    def __init__(self, archive: zipfile.ZipFile, path: Path) -> None:
        self._archive = archive
        self._path = path

    def read_entry(self, name: str) -> Optional[bytes]:
        try:
            info = self._archive.getinfo(name)
        except KeyError:
            return None
        try:
            return self._archive.read(info)
        except (zipfile.BadZipFile, zlib.error, EOFError, OSError, RuntimeError) as exc:
            raise ArchiveError(f"Failed to read {name} from {self._path}: {exc}") from exc


class ZipArchiveOpener(ArchiveOpener):
    """Opens aar/jar artifacts with :mod:`zipfile`."""

    @contextmanager
    def open(self, path: Path) -> Iterator[ArchiveHandle]:
        try:
            archive = zipfile.ZipFile(path)
        except (zipfile.BadZipFile, OSError) as exc:
            raise ArchiveError(f"Unable to open {path} as an archive: {exc}") from exc
        with archive:
            yield _ZipHandle(archive, path)


class _MappingHandle(ArchiveHandle):
    def __init__(self, entries: Mapping[str, bytes]) -> None:
        self._entries = entries

    def read_entry(self, name: str) -> Optional[bytes]:
        return self._entries.get(name)


class InMemoryArchiveOpener(ArchiveOpener):
    """Serves archive entries from memory, keyed by artifact path."""

    def __init__(self, archives: Mapping[Path | str, Mapping[str, bytes]] | None = None) -> None:
        self._archives: Dict[str, Mapping[str, bytes]] = {}
        for path, entries in (archives or {}).items():
            self.add(path, entries)

    def add(self, path: Path | str, entries: Mapping[str, bytes]) -> None:
        self._archives[str(path)] = dict(entries)

    @contextmanager
    def open(self, path: Path) -> Iterator[ArchiveHandle]:
        entries = self._archives.get(str(path))
        if entries is None:
            raise ArchiveError(f"No in-memory archive registered for {path}")
        yield _MappingHandle(entries)


@dataclass
class LicensePayload:
    """Raw index document and text blob read from one artifact."""

    index: bytes
    text: bytes


def read_license_payload(
    opener: ArchiveOpener,
    path: Path,
    *,
    index_entry: str,
    text_entry: str,
) -> Optional[LicensePayload]:
    """Read the license index and text blob, or None when either is missing.

    Raises :class:`ArchiveError` when the artifact is corrupt or unreadable.
    """
    with opener.open(path) as handle:
        index = handle.read_entry(index_entry)
        if index is None:
            logger.debug("%s has no %s entry", path, index_entry)
            return None
        text = handle.read_entry(text_entry)
        if text is None:
            logger.debug("%s has no %s entry", path, text_entry)
            return None
    return LicensePayload(index=index, text=text)


__all__ = [
    "ArchiveHandle",
    "ArchiveOpener",
    "InMemoryArchiveOpener",
    "LicensePayload",
    "ZipArchiveOpener",
    "read_license_payload",
]
