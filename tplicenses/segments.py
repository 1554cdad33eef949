"""Index parsing and per-library section slicing of the license text blob."""

from __future__ import annotations

import json
from typing import Iterator, List, Sequence, Tuple

from .errors import IndexFormatError, SegmentRangeError
from .logging import get_logger
from .models import LicenseIndexEntry

logger = get_logger("segments")


def parse_index(raw: bytes | str) -> List[LicenseIndexEntry]:
    """Decode the JSON index document, preserving its entry order.

    Entries whose ``start``/``length`` are missing or not integers are logged
    and skipped.
    """
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise IndexFormatError(f"License index is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise IndexFormatError("License index must be a JSON object")

    entries: List[LicenseIndexEntry] = []
    for name, metadata in data.items():
        if not isinstance(metadata, dict):
            logger.warning("Skipping index entry %r: expected an object", name)
            continue
        start = metadata.get("start")
        length = metadata.get("length")
        if not _is_int(start) or not _is_int(length):
            logger.warning("Skipping index entry %r: start/length must be integers", name)
            continue
        entries.append(LicenseIndexEntry(library_name=name, start=start, length=length))
    return entries


def decode_blob(raw: bytes) -> str:
    """Decode the license text blob; offsets address characters of the result."""
    return raw.decode("utf-8")


def extract_section(blob: str, entry: LicenseIndexEntry) -> str:
    """Return ``blob[start:start + length]`` for a single index entry."""
    if entry.start < 0 or entry.length < 0 or entry.end > len(blob):
        raise SegmentRangeError(
            f"Section for {entry.library_name!r} spans {entry.start}..{entry.end} "
            f"but the text blob has {len(blob)} characters"
        )
    return blob[entry.start : entry.end]


def split_sections(
    blob: str, entries: Sequence[LicenseIndexEntry]
) -> Iterator[Tuple[LicenseIndexEntry, str]]:
    """Yield ``(entry, section)`` pairs in index order, skipping bad offsets."""
    for entry in entries:
        try:
            section = extract_section(blob, entry)
        except SegmentRangeError as exc:
            logger.warning("Skipping index entry: %s", exc)
            continue
        yield entry, section


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


__all__ = ["decode_blob", "extract_section", "parse_index", "split_sections"]
