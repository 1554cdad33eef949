"""Content canonicalization, hashing and the per-run license catalog."""

from __future__ import annotations

import hashlib
from types import MappingProxyType
from typing import Dict, Mapping

from .logging import get_logger
from .models import LibraryModel, LicenseModel

logger = get_logger("dedup")


def canonicalize(text: str) -> str:
    """Drop blank lines, strip the rest and join them with single spaces."""
    return " ".join(line.strip() for line in text.splitlines() if line.strip())


def content_hash(text: str) -> str:
    """Return the SHA-256 hex digest of the canonical form of ``text``."""
    return hashlib.sha256(canonicalize(text).encode("utf-8")).hexdigest()


def build_license(name: str, content: str) -> LicenseModel:
    return LicenseModel(name=name, content=content, hash=content_hash(content))


class LicenseCatalog:
    """Libraries and licenses accumulated during one run.

    Both mappings are first-write-wins: once a unique id or content hash has
    been stored, later records for the same key are discarded.
    """

    def __init__(self) -> None:
        self._libraries: Dict[str, LibraryModel] = {}
        self._licenses: Dict[str, LicenseModel] = {}

    @property
    def libraries(self) -> Mapping[str, LibraryModel]:
        return MappingProxyType(self._libraries)

    @property
    def licenses(self) -> Mapping[str, LicenseModel]:
        return MappingProxyType(self._licenses)

    def has_library(self, unique_id: str) -> bool:
        return unique_id in self._libraries

    def add_library(self, library: LibraryModel) -> bool:
        """Store ``library`` unless its unique id is already taken."""
        if library.unique_id in self._libraries:
            logger.debug("Keeping first definition of %s", library.unique_id)
            return False
        self._libraries[library.unique_id] = library
        return True

    def add_license(self, license_model: LicenseModel) -> str:
        """Store ``license_model`` unless its hash exists; return the stored hash."""
        existing = self._licenses.get(license_model.hash)
        if existing is None:
            self._licenses[license_model.hash] = license_model
        elif existing.name != license_model.name:
            logger.debug(
                "License %r has the same content as %r (%s)",
                license_model.name,
                existing.name,
                license_model.hash,
            )
        return license_model.hash

    def __len__(self) -> int:
        return len(self._libraries)


__all__ = ["LicenseCatalog", "build_license", "canonicalize", "content_hash"]
