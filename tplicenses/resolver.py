"""Locating the artifact file behind a dependency coordinate."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .errors import AmbiguousArtifactError
from .logging import get_logger
from .models import ArtifactInfo

logger = get_logger("resolver")

ARTIFACT_EXTENSIONS = (".aar", ".jar")


class ArtifactResolver(ABC):
    """Maps a coordinate to the file backing it."""

    @abstractmethod
    def resolve(self, artifact: ArtifactInfo) -> Optional[Path]:
        """Return the artifact file, or None when the coordinate is unknown.

        May raise :class:`~tplicenses.errors.ResolutionError`.
        """


def default_repositories() -> List[Path]:
    """Return the local Gradle module cache and Maven repository locations."""
    gradle_home = Path(os.environ.get("GRADLE_USER_HOME", "~/.gradle")).expanduser()
    return [
        gradle_home / "caches" / "modules-2" / "files-2.1",
        Path("~/.m2/repository").expanduser(),
    ]


class RepositoryArtifactResolver(ArtifactResolver):
    """Searches local repositories in order, preferring ``.aar`` over ``.jar``.

    Both the Maven layout (``org/example/name/1.0/name-1.0.aar``) and the Gradle
    module cache layout (``org.example/name/1.0/<sha1>/name-1.0.aar``) are
    understood.
    """

    def __init__(self, repositories: Sequence[Path] | None = None) -> None:
        self.repositories = list(repositories) if repositories else default_repositories()

    def resolve(self, artifact: ArtifactInfo) -> Optional[Path]:
        ambiguous: List[str] = []
        for repository in self.repositories:
            if not repository.is_dir():
                continue
            for extension in ARTIFACT_EXTENSIONS:
                matches = sorted(set(self._candidates(repository, artifact, extension)))
                if len(matches) > 1:
                    listing = ", ".join(str(path) for path in matches)
                    logger.info(
                        "%s matches several files in %s, trying the next repository: %s",
                        artifact,
                        repository,
                        listing,
                    )
                    ambiguous.append(f"{repository}: {listing}")
                    break
                if matches:
                    logger.debug("Resolved %s to %s", artifact, matches[0])
                    return matches[0]
        if ambiguous:
            raise AmbiguousArtifactError(
                f"{artifact} has no unambiguous file in any repository "
                f"({'; '.join(ambiguous)})"
            )
        return None

    @staticmethod
    def _candidates(
        repository: Path, artifact: ArtifactInfo, extension: str
    ) -> Iterable[Path]:
        filename = f"{artifact.name}-{artifact.version}{extension}"

        maven_path = (
            repository.joinpath(*artifact.group.split("."))
            / artifact.name
            / artifact.version
            / filename
        )
        if maven_path.is_file():
            yield maven_path

        gradle_dir = repository / artifact.group / artifact.name / artifact.version
        if gradle_dir.is_dir():
            for path in gradle_dir.glob(f"*/{filename}"):
                if path.is_file():
                    yield path


__all__ = ["ArtifactResolver", "RepositoryArtifactResolver", "default_repositories"]
