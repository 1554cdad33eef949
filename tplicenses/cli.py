"""CLI entrypoints for tplicenses commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List

from .archive import read_license_payload
from .config import TPLicensesConfig, load_config
from .dedup import LicenseCatalog
from .errors import ArchiveError, ConfigError
from .logging import configure_logging
from .output import ReconcileResult
from .pipeline import LicenseGenerator, RunReport


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_project_root_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--project-root",
        default=".",
        help="Directory holding .tplicenses.yml and the output directories.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tplicenses",
        description="Generate license records from bundled third-party license archives.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log output to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    update_parser = subparsers.add_parser(
        "update",
        help="Regenerate library and license records from a dependency list.",
    )
    _add_verbose_option(update_parser, suppress_default=True)
    _add_project_root_option(update_parser)
    update_parser.add_argument(
        "dependencies",
        type=Path,
        help="File listing group:name:version coordinates, one per line.",
    )
    update_parser.add_argument(
        "--repository",
        dest="repositories",
        action="append",
        type=Path,
        default=None,
        help="Local artifact repository to search (repeatable).",
    )
    update_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report file changes without deleting or writing anything.",
    )

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Print the libraries and licenses found in a single artifact.",
    )
    _add_verbose_option(inspect_parser, suppress_default=True)
    _add_project_root_option(inspect_parser)
    inspect_parser.add_argument("artifact", type=Path, help="Path to an aar or jar file.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for tplicenses commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(Path(args.project_root))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "update":
        if args.repositories:
            config.repositories = [path.expanduser() for path in args.repositories]
        try:
            outcome = LicenseGenerator(config).run(
                args.dependencies, dry_run=bool(args.dry_run)
            )
        except ConfigError as exc:
            parser.exit(1, f"{exc}\n")
        except (OSError, UnicodeDecodeError) as exc:
            parser.exit(1, f"tplicenses update failed: {exc}\n")
        for line in _summarise(outcome.report, outcome.result, config):
            print(line)
    elif args.command == "inspect":
        try:
            lines = _inspect(config, args.artifact)
        except (ArchiveError, ConfigError) as exc:
            parser.exit(1, f"tplicenses inspect failed: {exc}\n")
        for line in lines:
            print(line)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _summarise(
    report: RunReport, result: ReconcileResult, config: TPLicensesConfig
) -> List[str]:
    lines = [
        f"Processed {len(report.processed)} of {report.candidates} license containers",
    ]
    for coordinate, reason in report.skipped.items():
        lines.append(f"  skipped {coordinate}: {reason}")
    if report.skipped_entries:
        lines.append(f"  skipped {report.skipped_entries} index entries with bad offsets")
    if result.dry_run:
        lines.append("Planned changes (dry-run):")
        for path in result.stale:
            lines.append(f"  - {_relativize(path, config.root)}")
        existing = set(result.removed)
        for path in result.written:
            marker = "~" if path in existing else "+"
            lines.append(f"  {marker} {_relativize(path, config.root)}")
    else:
        lines.append(
            f"Wrote {len(result.written)} files, removed {len(result.stale)} stale files"
        )
    return lines


def _inspect(config: TPLicensesConfig, artifact: Path) -> List[str]:
    generator = LicenseGenerator(config)
    payload = read_license_payload(
        generator.opener,
        artifact,
        index_entry=config.archive.index_entry,
        text_entry=config.archive.text_entry,
    )
    if payload is None:
        return [f"{artifact} carries no license payload"]
    catalog = LicenseCatalog()
    generator.add_payload(catalog, payload)
    lines: List[str] = []
    for library in catalog.libraries.values():
        lines.append(library.name)
        for license_hash in library.licenses:
            license_model = catalog.licenses[license_hash]
            lines.append(f"  {license_model.name} ({license_hash[:12]})")
    return lines


def _relativize(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
