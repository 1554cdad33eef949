"""Dependency list parsing and license container selection."""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence

from .config import FilterConfig
from .errors import CoordinateError
from .logging import get_logger
from .models import ArtifactInfo

logger = get_logger("coordinates")

_TREE_PREFIX = re.compile(r"^[ |+\\-]*[+\\]---\s+")
_TRAILING_MARKER = re.compile(r"\s+\((?:\*|c|n)\)$")
_RESOLVED_ARROW = " -> "
_MAJOR_VERSION = re.compile(r"\d+")


def parse_coordinate(line: str) -> ArtifactInfo:
    """Parse a single ``group:name:version`` coordinate."""
    parts = line.strip().split(":")
    if len(parts) != 3 or not all(parts):
        raise CoordinateError(f"Expected group:name:version, got {line.strip()!r}")
    if any(char.isspace() for part in parts for char in part):
        raise CoordinateError(f"Coordinate contains whitespace: {line.strip()!r}")
    group, name, version = parts
    return ArtifactInfo(group=group, name=name, version=version)


def parse_dependencies(text: str) -> List[ArtifactInfo]:
    """Parse a dependency list, one coordinate per line.

    Plain ``group:name:version`` lines are accepted as well as the tree
    notation printed by ``gradle dependencies`` (``+--- g:n:1.0 -> 1.2 (*)``),
    in which case the resolved version after ``->`` is used. Duplicates keep
    their first position; unparseable lines are logged and skipped.
    """
    artifacts: List[ArtifactInfo] = []
    seen: set[ArtifactInfo] = set()
    for number, raw in enumerate(text.splitlines(), start=1):
        stripped = raw.strip()
        if not stripped or stripped.startswith("#"):
            continue
        tree_match = _TREE_PREFIX.match(raw)
        if tree_match:
            candidate = _normalise_tree_line(raw[tree_match.end():])
        elif any(char.isspace() for char in stripped):
            logger.debug("Ignoring non-coordinate line %d: %s", number, stripped)
            continue
        else:
            candidate = stripped
        if candidate is None:
            logger.debug("Ignoring non-coordinate line %d: %s", number, stripped)
            continue
        try:
            artifact = parse_coordinate(candidate)
        except CoordinateError as exc:
            logger.warning("Skipping line %d: %s", number, exc)
            continue
        if artifact in seen:
            continue
        seen.add(artifact)
        artifacts.append(artifact)
    return artifacts


def _normalise_tree_line(body: str) -> str | None:
    body = _TRAILING_MARKER.sub("", body.strip())
    if body.startswith("project "):
        return None
    resolved: str | None = None
    if _RESOLVED_ARROW in body:
        body, resolved = (part.strip() for part in body.split(_RESOLVED_ARROW, 1))
    parts = body.split(":")
    if resolved:
        if len(parts) == 3:
            parts[2] = resolved
        elif len(parts) == 2:
            parts.append(resolved)
    return ":".join(parts)


def is_license_group(group: str, groups: Iterable[str]) -> bool:
    """Return True when ``group`` matches an allow-listed group, ignoring case."""
    lowered = group.lower()
    return any(lowered == candidate.lower() for candidate in groups)


def is_granular_version(version: str, threshold: int) -> bool:
    """Return True when the leading version component is at least ``threshold``.

    Versions without a parseable leading integer are not granular.
    """
    major = version.split(".", 1)[0]
    if not _MAJOR_VERSION.fullmatch(major):
        return False
    return int(major) >= threshold


def select_license_containers(
    artifacts: Sequence[ArtifactInfo], settings: FilterConfig
) -> List[ArtifactInfo]:
    """Return the coordinates worth opening as aggregated license containers.

    Post-granular releases carry their license payload in the artifact itself;
    older releases ship it in a companion ``-license`` artifact.
    """
    selected: List[ArtifactInfo] = []
    for artifact in artifacts:
        if not is_license_group(artifact.group, settings.groups):
            continue
        granular = is_granular_version(artifact.version, settings.granular_base_version)
        if granular or artifact.name.endswith(settings.license_artifact_suffix):
            selected.append(artifact)
        else:
            logger.debug("Skipping pre-granular artifact %s", artifact)
    return selected


__all__ = [
    "is_granular_version",
    "is_license_group",
    "parse_coordinate",
    "parse_dependencies",
    "select_license_containers",
]
