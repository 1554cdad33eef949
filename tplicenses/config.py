"""Configuration loading for tplicenses (.tplicenses.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".tplicenses.yml"

DEFAULT_LIBRARIES_DIR = "config/aboutlibraries/libraries"
DEFAULT_LICENSES_DIR = "config/aboutlibraries/licenses"
DEFAULT_GROUPS = ("com.google.android.gms", "com.google.firebase")
DEFAULT_GRANULAR_BASE_VERSION = 14
DEFAULT_LICENSE_ARTIFACT_SUFFIX = "-license"
DEFAULT_INDEX_ENTRY = "third_party_licenses.json"
DEFAULT_TEXT_ENTRY = "third_party_licenses.txt"
DEFAULT_UNIQUE_ID_PREFIX = "com.example.generated.google."


@dataclass
class OutputConfig:
    """Where generated library and license records are written."""

    libraries_dir: Path
    licenses_dir: Path
    write_text_copies: bool = True


@dataclass
class FilterConfig:
    """Rules deciding which coordinates are opened as license containers."""

    groups: List[str] = field(default_factory=lambda: list(DEFAULT_GROUPS))
    granular_base_version: int = DEFAULT_GRANULAR_BASE_VERSION
    license_artifact_suffix: str = DEFAULT_LICENSE_ARTIFACT_SUFFIX


@dataclass
class ArchiveConfig:
    """Names of the entries carrying the license payload inside an artifact."""

    index_entry: str = DEFAULT_INDEX_ENTRY
    text_entry: str = DEFAULT_TEXT_ENTRY


@dataclass
class TPLicensesConfig:
    """Represents the high-level settings defined in .tplicenses.yml."""

    root: Path
    output: OutputConfig
    filter: FilterConfig = field(default_factory=FilterConfig)
    archive: ArchiveConfig = field(default_factory=ArchiveConfig)
    unique_id_prefix: str = DEFAULT_UNIQUE_ID_PREFIX
    repositories: List[Path] = field(default_factory=list)
    extra_patterns: List[Tuple[str, str]] = field(default_factory=list)


def default_config(root: Path) -> TPLicensesConfig:
    """Return the configuration used when no .tplicenses.yml exists."""
    root = root.resolve()
    return TPLicensesConfig(
        root=root,
        output=OutputConfig(
            libraries_dir=root / DEFAULT_LIBRARIES_DIR,
            licenses_dir=root / DEFAULT_LICENSES_DIR,
        ),
    )


def load_config(config_path: Path) -> TPLicensesConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()
    config = default_config(root)

    if not config_file.exists():
        return config

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    output_data = _as_dict(data.get("output"))
    if output_data:
        libraries_dir = _as_str(output_data.get("libraries_dir"))
        licenses_dir = _as_str(output_data.get("licenses_dir"))
        if libraries_dir:
            config.output.libraries_dir = _resolve_dir(root, libraries_dir)
        if licenses_dir:
            config.output.licenses_dir = _resolve_dir(root, licenses_dir)
        write_text = _as_bool(output_data.get("write_text_copies"))
        if write_text is not None:
            config.output.write_text_copies = write_text

    filter_data = _as_dict(data.get("filter"))
    if filter_data:
        groups = _as_str_list(filter_data.get("groups"))
        if groups:
            config.filter.groups = groups
        threshold = _as_int(filter_data.get("granular_base_version"))
        if threshold is not None:
            config.filter.granular_base_version = threshold
        suffix = _as_str(filter_data.get("license_artifact_suffix"))
        if suffix:
            config.filter.license_artifact_suffix = suffix

    archive_data = _as_dict(data.get("archive"))
    if archive_data:
        config.archive.index_entry = (
            _as_str(archive_data.get("index_entry")) or config.archive.index_entry
        )
        config.archive.text_entry = (
            _as_str(archive_data.get("text_entry")) or config.archive.text_entry
        )

    prefix = _as_str(data.get("unique_id_prefix"))
    if prefix:
        config.unique_id_prefix = prefix

    config.repositories = [
        _resolve_dir(root, entry) for entry in _as_str_list(data.get("repositories"))
    ]
    config.extra_patterns = _as_pattern_list(data.get("patterns"))
    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _resolve_dir(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = root / path
    return path


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_pattern_list(value: Any) -> List[Tuple[str, str]]:
    if not isinstance(value, list):
        return []
    patterns: List[Tuple[str, str]] = []
    for item in value:
        mapping = _as_dict(item)
        name = _as_str(mapping.get("name"))
        regex = _as_str(mapping.get("regex"))
        if not name or not regex:
            raise ConfigError("Each entry under 'patterns' needs a name and a regex")
        patterns.append((name, regex))
    return patterns


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "ArchiveConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "FilterConfig",
    "OutputConfig",
    "TPLicensesConfig",
    "default_config",
    "load_config",
]
