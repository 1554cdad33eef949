"""Run orchestration: from a dependency list to reconciled output files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .archive import ArchiveOpener, LicensePayload, ZipArchiveOpener, read_license_payload
from .classifier import LicensePattern, classify_section, compile_patterns
from .config import TPLicensesConfig
from .coordinates import parse_dependencies, select_license_containers
from .dedup import LicenseCatalog, build_license
from .errors import ArchiveError, ResolutionError
from .logging import coordinate_context, get_logger
from .models import ArtifactInfo, LibraryModel
from .output import OutputLayout, OutputReconciler, ReconcileResult
from .resolver import ArtifactResolver, RepositoryArtifactResolver
from .segments import decode_blob, parse_index, split_sections


def library_unique_id(prefix: str, library_name: str) -> str:
    """Derive the namespaced identifier of a library from its display name."""
    return f"{prefix}{library_name.lower().replace(' ', '.')}"


@dataclass
class RunReport:
    """Counters and skip reasons collected during one run."""

    candidates: int = 0
    processed: List[ArtifactInfo] = field(default_factory=list)
    skipped: Dict[str, str] = field(default_factory=dict)
    skipped_entries: int = 0
    duplicate_libraries: int = 0

    def skip(self, artifact: ArtifactInfo, reason: str) -> None:
        self.skipped[str(artifact)] = reason


@dataclass
class RunOutcome:
    """Everything a completed run produced."""

    catalog: LicenseCatalog
    report: RunReport
    result: ReconcileResult


class LicenseGenerator:
    """Coordinates filtering, extraction, classification and deduplication."""

    def __init__(
        self,
        config: TPLicensesConfig,
        *,
        resolver: ArtifactResolver | None = None,
        opener: ArchiveOpener | None = None,
        patterns: Optional[Sequence[LicensePattern]] = None,
    ) -> None:
        self.config = config
        self.resolver = resolver or RepositoryArtifactResolver(config.repositories or None)
        self.opener = opener or ZipArchiveOpener()
        self.patterns = (
            tuple(patterns) if patterns is not None else compile_patterns(config.extra_patterns)
        )
        self.logger = get_logger("pipeline")

    def run(self, dependencies_file: Path, *, dry_run: bool = False) -> RunOutcome:
        """Read the dependency list, build the catalog and reconcile the output."""
        text = dependencies_file.read_text(encoding="utf-8")
        artifacts = parse_dependencies(text)
        self.logger.info("Read %d coordinates from %s", len(artifacts), dependencies_file)

        catalog, report = self.collect(artifacts)

        reconciler = OutputReconciler(OutputLayout.from_config(self.config.output))
        result = reconciler.reconcile(catalog, dry_run=dry_run)
        return RunOutcome(catalog=catalog, report=report, result=result)

    def collect(
        self, artifacts: Sequence[ArtifactInfo]
    ) -> tuple[LicenseCatalog, RunReport]:
        """Build a fresh catalog from the license containers among ``artifacts``."""
        catalog = LicenseCatalog()
        report = RunReport()
        candidates = select_license_containers(artifacts, self.config.filter)
        report.candidates = len(candidates)

        for artifact in candidates:
            with coordinate_context(artifact):
                reason = self._process_artifact(catalog, report, artifact)
            if reason is None:
                report.processed.append(artifact)
            else:
                report.skip(artifact, reason)

        self.logger.info(
            "Collected %d libraries and %d licenses from %d of %d candidates",
            len(catalog.libraries),
            len(catalog.licenses),
            len(report.processed),
            report.candidates,
        )
        return catalog, report

    def _process_artifact(
        self, catalog: LicenseCatalog, report: RunReport, artifact: ArtifactInfo
    ) -> Optional[str]:
        try:
            artifact_file = self.resolver.resolve(artifact)
        except ResolutionError as exc:
            self.logger.warning("Failed to resolve %s: %s", artifact, exc)
            return "unresolved"
        if artifact_file is None:
            self.logger.warning("Unable to find artifact file for %s", artifact)
            return "not found"

        try:
            payload = read_license_payload(
                self.opener,
                artifact_file,
                index_entry=self.config.archive.index_entry,
                text_entry=self.config.archive.text_entry,
            )
            if payload is None:
                self.logger.info("%s carries no license payload", artifact)
                return "no payload"
            self.add_payload(catalog, payload, report=report)
        except ArchiveError as exc:
            self.logger.warning("Skipping %s: %s", artifact, exc)
            return "unreadable archive"
        return None

    def add_payload(
        self,
        catalog: LicenseCatalog,
        payload: LicensePayload,
        *,
        report: RunReport | None = None,
    ) -> None:
        """Split, classify and deduplicate every library section in ``payload``."""
        entries = parse_index(payload.index)
        try:
            blob = decode_blob(payload.text)
        except UnicodeDecodeError as exc:
            raise ArchiveError(f"License text is not valid UTF-8: {exc}") from exc

        extracted_count = 0
        for entry, section in split_sections(blob, entries):
            extracted_count += 1
            unique_id = library_unique_id(self.config.unique_id_prefix, entry.library_name)
            if catalog.has_library(unique_id):
                self.logger.debug("Already collected %s", unique_id)
                if report is not None:
                    report.duplicate_libraries += 1
                continue

            hashes: List[str] = []
            for extracted in classify_section(entry.library_name, section, self.patterns):
                license_hash = catalog.add_license(build_license(extracted.name, extracted.content))
                if license_hash not in hashes:
                    hashes.append(license_hash)
            catalog.add_library(
                LibraryModel(unique_id=unique_id, name=entry.library_name, licenses=hashes)
            )

        if report is not None:
            report.skipped_entries += len(entries) - extracted_count


__all__ = ["LicenseGenerator", "RunOutcome", "RunReport", "library_unique_id"]
