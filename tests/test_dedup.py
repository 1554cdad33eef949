"""Tests for canonicalization, hashing and the run catalog."""

from __future__ import annotations

import pytest

from tplicenses.dedup import LicenseCatalog, build_license, canonicalize, content_hash
from tplicenses.models import LibraryModel

SAMPLES = [
    "",
    "single line",
    "  Line one  \n\n\tLine two\n",
    "Line one\r\n   \r\nLine two",
    "a\n\n\n b \n c",
]


def test_canonicalize_drops_blank_lines_and_trims() -> None:
    assert canonicalize("  Line one  \n\n\tLine two\n") == "Line one Line two"


@pytest.mark.parametrize("text", SAMPLES)
def test_canonicalize_is_idempotent(text: str) -> None:
    once = canonicalize(text)
    assert canonicalize(once) == once


def test_content_hash_is_sha256_of_canonical_form() -> None:
    expected = "c2f82367a1f05db83bc69b1f63e1a4aea26e4a509bfcc6c70fe4c7e5ec44c58e"

    assert content_hash("Line one\nLine two") == expected
    assert content_hash("\n   Line one   \n\n\n Line two\n\n") == expected
    assert content_hash("") == (
        "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    )


def test_content_hash_differs_for_different_content() -> None:
    assert content_hash("Line one\nLine two") != content_hash("Line one\nLine 2")


def test_catalog_keeps_first_license_for_a_hash() -> None:
    catalog = LicenseCatalog()
    first = build_license("Okio license", "")
    second = build_license("Retrofit license", "\n\n")

    assert catalog.add_license(first) == first.hash
    assert catalog.add_license(second) == first.hash

    assert list(catalog.licenses.values()) == [first]


def test_catalog_keeps_first_library_for_a_unique_id() -> None:
    catalog = LicenseCatalog()
    first = LibraryModel(unique_id="gen.okio", name="Okio", licenses=["a"])
    second = LibraryModel(unique_id="gen.okio", name="okio", licenses=["b"])

    assert catalog.add_library(first) is True
    assert catalog.add_library(second) is False

    assert catalog.libraries["gen.okio"] is first
    assert catalog.has_library("gen.okio")
    assert len(catalog) == 1


def test_catalog_views_are_read_only() -> None:
    catalog = LicenseCatalog()

    with pytest.raises(TypeError):
        catalog.licenses["x"] = build_license("x", "x")  # type: ignore[index]
