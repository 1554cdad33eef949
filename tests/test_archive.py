"""Tests for archive access."""

from __future__ import annotations

from pathlib import Path

import pytest

from tplicenses.archive import (
    InMemoryArchiveOpener,
    ZipArchiveOpener,
    read_license_payload,
)
from tplicenses.errors import ArchiveError

from tests._fixtures.archive_builder import (
    INDEX_ENTRY,
    TEXT_ENTRY,
    LicenseArchiveBuilder,
    build_payload,
)


def _read(opener, path: Path):
    return read_license_payload(opener, path, index_entry=INDEX_ENTRY, text_entry=TEXT_ENTRY)


def test_zip_payload_returns_both_entries(archive_builder: LicenseArchiveBuilder) -> None:
    path = archive_builder.build("lib.aar", {"Okio": "Okio text"})

    payload = _read(ZipArchiveOpener(), path)

    index, text = build_payload({"Okio": "Okio text"})
    assert payload is not None
    assert payload.index == index
    assert payload.text == text


@pytest.mark.parametrize(
    "flags",
    [{"include_index": False}, {"include_text": False}],
)
def test_zip_payload_missing_entry_is_not_an_error(
    archive_builder: LicenseArchiveBuilder, flags
) -> None:
    path = archive_builder.build("lib.aar", {"Okio": "text"}, **flags)

    assert _read(ZipArchiveOpener(), path) is None


def test_zip_payload_raises_for_corrupt_archive(tmp_path: Path) -> None:
    path = tmp_path / "broken.aar"
    path.write_bytes(b"definitely not a zip file")

    with pytest.raises(ArchiveError):
        _read(ZipArchiveOpener(), path)


def test_zip_payload_raises_for_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ArchiveError):
        _read(ZipArchiveOpener(), tmp_path / "missing.aar")


def test_in_memory_opener_serves_registered_entries() -> None:
    opener = InMemoryArchiveOpener(
        {"lib.aar": {INDEX_ENTRY: b"{}", TEXT_ENTRY: b""}}
    )

    payload = _read(opener, Path("lib.aar"))

    assert payload is not None
    assert payload.index == b"{}"
    with pytest.raises(ArchiveError):
        _read(opener, Path("other.aar"))
