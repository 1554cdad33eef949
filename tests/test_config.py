"""Tests for tplicenses.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from tplicenses.config import (
    DEFAULT_GROUPS,
    ConfigError,
    TPLicensesConfig,
    load_config,
)


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, TPLicensesConfig)
    assert config.root == tmp_path.resolve()
    assert config.output.libraries_dir == tmp_path.resolve() / "config/aboutlibraries/libraries"
    assert config.output.licenses_dir == tmp_path.resolve() / "config/aboutlibraries/licenses"
    assert config.output.write_text_copies is True
    assert config.filter.groups == list(DEFAULT_GROUPS)
    assert config.filter.granular_base_version == 14
    assert config.filter.license_artifact_suffix == "-license"
    assert config.archive.index_entry == "third_party_licenses.json"
    assert config.archive.text_entry == "third_party_licenses.txt"
    assert config.unique_id_prefix == "com.example.generated.google."
    assert config.repositories == []
    assert config.extra_patterns == []


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".tplicenses.yml"
    config_file.write_text(
        """
output:
  libraries_dir: "out/libs"
  licenses_dir: "out/lics"
  write_text_copies: false
filter:
  groups: [com.example.sdk]
  granular_base_version: 20
  license_artifact_suffix: "-notices"
archive:
  index_entry: "licenses.json"
  text_entry: "licenses.txt"
unique_id_prefix: "org.acme.generated."
repositories:
  - "repo"
patterns:
  - name: ISC
    regex: "ISC License.*PERFORMANCE OF THIS SOFTWARE\\\\."
""",
        encoding="utf-8",
    )

    config = load_config(config_file)
    root = tmp_path.resolve()

    assert config.output.libraries_dir == root / "out" / "libs"
    assert config.output.licenses_dir == root / "out" / "lics"
    assert config.output.write_text_copies is False
    assert config.filter.groups == ["com.example.sdk"]
    assert config.filter.granular_base_version == 20
    assert config.filter.license_artifact_suffix == "-notices"
    assert config.archive.index_entry == "licenses.json"
    assert config.archive.text_entry == "licenses.txt"
    assert config.unique_id_prefix == "org.acme.generated."
    assert config.repositories == [root / "repo"]
    assert config.extra_patterns == [("ISC", r"ISC License.*PERFORMANCE OF THIS SOFTWARE\.")]


def test_load_config_ignores_wrongly_typed_values(tmp_path: Path) -> None:
    (tmp_path / ".tplicenses.yml").write_text(
        """
filter:
  granular_base_version: "not-a-number"
  groups: {}
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.filter.granular_base_version == 14
    assert config.filter.groups == list(DEFAULT_GROUPS)


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".tplicenses.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_reports_yaml_errors(tmp_path: Path) -> None:
    (tmp_path / ".tplicenses.yml").write_text("output: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)


def test_load_config_requires_pattern_name_and_regex(tmp_path: Path) -> None:
    (tmp_path / ".tplicenses.yml").write_text(
        "patterns:\n  - name: Orphan\n", encoding="utf-8"
    )

    with pytest.raises(ConfigError, match="patterns"):
        load_config(tmp_path)
