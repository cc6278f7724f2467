"""Shared fixtures for the uncov test suite."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def _reset_uncov_logger() -> Iterator[None]:
    """Drop handlers the CLI attaches so they do not outlive the test's streams."""
    yield
    package_logger = logging.getLogger("uncov")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
