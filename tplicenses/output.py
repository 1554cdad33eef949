"""Reconciliation of generated library/license files with an output directory."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from .config import OutputConfig
from .dedup import LicenseCatalog
from .logging import get_logger
from .models import LibraryModel, LicenseModel

logger = get_logger("output")

_UNSAFE_CHARS = re.compile(r"[^a-z0-9._-]")


def slugify(value: str) -> str:
    """Lowercase ``value`` and keep it safe for use inside a filename."""
    return _UNSAFE_CHARS.sub("_", value.lower().replace(" ", "_"))


@dataclass
class OutputLayout:
    """Naming contract for the two output directories.

    Files starting with ``lib_generated_`` (libraries directory) or
    ``lic_generated_`` (licenses directory) are machine-generated and are
    replaced on every run. Anything else is hand-authored and never touched.

    * ``lib_generated_<unique id>.json`` holds one library record.
    * ``lic_generated_<license name>_<hash>.json`` holds one license record.
    * ``lic_generated_txt_<license name>_<hash>.txt`` holds the plain license
      text when text copies are enabled.
    """

    libraries_dir: Path
    licenses_dir: Path
    write_text_copies: bool = True

    LIBRARY_PREFIX = "lib_generated_"
    LICENSE_PREFIX = "lic_generated_"
    LICENSE_TEXT_PREFIX = "lic_generated_txt_"

    @classmethod
    def from_config(cls, config: OutputConfig) -> "OutputLayout":
        return cls(
            libraries_dir=config.libraries_dir,
            licenses_dir=config.licenses_dir,
            write_text_copies=config.write_text_copies,
        )

    def library_path(self, library: LibraryModel) -> Path:
        return self.libraries_dir / f"{self.LIBRARY_PREFIX}{slugify(library.unique_id)}.json"

    def license_path(self, license_model: LicenseModel) -> Path:
        stem = f"{slugify(license_model.name)}_{license_model.hash}"
        return self.licenses_dir / f"{self.LICENSE_PREFIX}{stem}.json"

    def license_text_path(self, license_model: LicenseModel) -> Path:
        stem = f"{slugify(license_model.name)}_{license_model.hash}"
        return self.licenses_dir / f"{self.LICENSE_TEXT_PREFIX}{stem}.txt"

    def generated_files(self) -> List[Path]:
        """Return existing generated files in both directories, sorted by path."""
        return self._list_files(generated=True)

    def manual_files(self) -> List[Path]:
        """Return hand-authored files living next to the generated ones."""
        return self._list_files(generated=False)

    def _list_files(self, *, generated: bool) -> List[Path]:
        prefixes = (self.LIBRARY_PREFIX, self.LICENSE_PREFIX)
        found: List[Path] = []
        # A single directory may hold both record kinds.
        for directory in dict.fromkeys((self.libraries_dir, self.licenses_dir)):
            if not directory.is_dir():
                continue
            found.extend(
                path
                for path in directory.iterdir()
                if path.is_file() and path.name.startswith(prefixes) == generated
            )
        return sorted(found)


@dataclass
class ReconcilePlan:
    """Files a reconciliation would delete and write."""

    existing: List[Path] = field(default_factory=list)
    writes: Dict[Path, str] = field(default_factory=dict)

    @property
    def stale(self) -> List[Path]:
        """Generated files that the new catalog no longer produces."""
        return [path for path in self.existing if path not in self.writes]

    @property
    def added(self) -> List[Path]:
        existing = set(self.existing)
        return [path for path in self.writes if path not in existing]


@dataclass
class ReconcileResult:
    """Outcome of applying a :class:`ReconcilePlan`."""

    removed: List[Path]
    written: List[Path]
    stale: List[Path]
    dry_run: bool = False


class OutputReconciler:
    """Replaces generated files with the records of the current run."""

    def __init__(self, layout: OutputLayout) -> None:
        self.layout = layout

    def plan(self, catalog: LicenseCatalog) -> ReconcilePlan:
        """Compute deletions and writes without touching the filesystem."""
        plan = ReconcilePlan(existing=self.layout.generated_files())
        for library in catalog.libraries.values():
            self._add_write(plan, self.layout.library_path(library), _render_json(library.to_dict()))
        for license_model in catalog.licenses.values():
            self._add_write(
                plan,
                self.layout.license_path(license_model),
                _render_json(license_model.to_dict()),
            )
            if self.layout.write_text_copies:
                self._add_write(
                    plan, self.layout.license_text_path(license_model), license_model.content
                )
        return plan

    def apply(self, plan: ReconcilePlan) -> ReconcileResult:
        """Delete every existing generated file, then write the planned set."""
        self.layout.libraries_dir.mkdir(parents=True, exist_ok=True)
        self.layout.licenses_dir.mkdir(parents=True, exist_ok=True)

        removed: List[Path] = []
        for path in plan.existing:
            path.unlink(missing_ok=True)
            removed.append(path)
        logger.debug("Removed %d generated files", len(removed))

        written: List[Path] = []
        for path, content in plan.writes.items():
            path.write_text(content, encoding="utf-8")
            written.append(path)
        logger.info(
            "Wrote %d generated files (%d stale removed)", len(written), len(plan.stale)
        )
        return ReconcileResult(removed=removed, written=written, stale=plan.stale)

    def reconcile(self, catalog: LicenseCatalog, *, dry_run: bool = False) -> ReconcileResult:
        plan = self.plan(catalog)
        if dry_run:
            return ReconcileResult(
                removed=list(plan.existing),
                written=list(plan.writes),
                stale=plan.stale,
                dry_run=True,
            )
        return self.apply(plan)

    @staticmethod
    def _add_write(plan: ReconcilePlan, path: Path, content: str) -> None:
        if path in plan.writes:
            logger.warning("Two records map to %s; keeping the first", path.name)
            return
        plan.writes[path] = content


def _render_json(payload: Dict[str, object]) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


__all__ = [
    "OutputLayout",
    "OutputReconciler",
    "ReconcilePlan",
    "ReconcileResult",
    "slugify",
]
