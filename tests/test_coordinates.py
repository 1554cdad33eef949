"""Tests for dependency parsing and license container selection."""

from __future__ import annotations

import pytest

from tplicenses.config import FilterConfig
from tplicenses.coordinates import (
    is_granular_version,
    is_license_group,
    parse_coordinate,
    parse_dependencies,
    select_license_containers,
)
from tplicenses.errors import CoordinateError
from tplicenses.models import ArtifactInfo


def test_parse_coordinate_splits_three_fields() -> None:
    artifact = parse_coordinate("com.google.firebase:firebase-common:20.3.1\n")

    assert artifact == ArtifactInfo("com.google.firebase", "firebase-common", "20.3.1")
    assert str(artifact) == "com.google.firebase:firebase-common:20.3.1"


@pytest.mark.parametrize(
    "line",
    ["com.example:lib", "a:b:c:d", "a::1.0", "a:b c:1.0"],
)
def test_parse_coordinate_rejects_malformed_lines(line: str) -> None:
    with pytest.raises(CoordinateError):
        parse_coordinate(line)


def test_parse_dependencies_skips_comments_blanks_and_duplicates(caplog) -> None:
    text = """
# runtime classpath
com.google.android.gms:play-services-base:18.0.1

com.squareup.okio:okio:3.2.0
com.google.android.gms:play-services-base:18.0.1
not-a-coordinate
"""
    artifacts = parse_dependencies(text)

    assert [str(a) for a in artifacts] == [
        "com.google.android.gms:play-services-base:18.0.1",
        "com.squareup.okio:okio:3.2.0",
    ]
    assert "not-a-coordinate" in caplog.text


def test_parse_dependencies_understands_gradle_report_tree() -> None:
    text = """
releaseRuntimeClasspath - Resolved configuration for runtime for variant: release
+--- project :core
|    \\--- com.google.firebase:firebase-common:20.0.0 -> 20.3.1 (*)
+--- androidx.core:core -> 1.9.0 (c)
\\--- com.google.android.gms:play-services-base:18.0.1
"""
    artifacts = parse_dependencies(text)

    assert [str(a) for a in artifacts] == [
        "com.google.firebase:firebase-common:20.3.1",
        "androidx.core:core:1.9.0",
        "com.google.android.gms:play-services-base:18.0.1",
    ]


def test_is_license_group_ignores_case() -> None:
    groups = ["com.google.android.gms", "com.google.firebase"]

    assert is_license_group("COM.Google.Firebase", groups)
    assert not is_license_group("com.google.firebase.extra", groups)


@pytest.mark.parametrize(
    ("version", "expected"),
    [
        ("14.0.0", True),
        ("18.0.1", True),
        ("11.8.0", False),
        ("", False),
        ("beta-1", False),
        ("14rc1", False),
    ],
)
def test_is_granular_version(version: str, expected: bool) -> None:
    assert is_granular_version(version, 14) is expected


def test_select_license_containers_applies_group_and_version_rules() -> None:
    artifacts = [
        ArtifactInfo("com.google.android.gms", "play-services-base", "18.0.1"),
        ArtifactInfo("com.google.android.gms", "play-services-basement", "11.8.0"),
        ArtifactInfo("com.google.android.gms", "play-services-basement-license", "11.8.0"),
        ArtifactInfo("com.google.firebase", "firebase-common", "unknown"),
        ArtifactInfo("com.squareup.okio", "okio", "99.0.0"),
    ]

    selected = select_license_containers(artifacts, FilterConfig())

    assert [a.name for a in selected] == [
        "play-services-base",
        "play-services-basement-license",
    ]
