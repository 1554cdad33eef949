"""Core data models shared across tplicenses components."""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class ArtifactInfo:
    """One resolved dependency coordinate."""

    group: str
    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.group}:{self.name}:{self.version}"


@dataclass(frozen=True)
class LicenseIndexEntry:
    """Position of one library's raw license section inside the text blob."""

    library_name: str
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass
class LicenseModel:
    """A single canonical license body, identified by its content hash."""

    name: str
    content: str
    hash: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "content": self.content, "hash": self.hash}


@dataclass
class LibraryModel:
    """One logical library entry referencing licenses by hash."""

    unique_id: str
    name: str
    licenses: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uniqueId": self.unique_id,
            "name": self.name,
            "licenses": list(self.licenses),
        }
