from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.archive_builder import LicenseArchiveBuilder


@pytest.fixture
def archive_builder(tmp_path: Path) -> LicenseArchiveBuilder:
    """Provide a license archive builder rooted at the pytest tmp_path."""
    return LicenseArchiveBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _reset_tplicenses_logger() -> Iterator[None]:
    """Undo CLI logging setup so caplog keeps seeing tplicenses records."""
    yield
    logger = logging.getLogger("tplicenses")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
