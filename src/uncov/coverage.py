"""Coverage summary validation, filtering and sorting.

Handles ``coverage-summary.json`` as written by Vitest/Istanbul::

    {
      "total": {"lines": {"total": 400, "covered": 160, "skipped": 0, "pct": 40}, ...},
      "/project/src/a.ts": {"lines": {...}, "statements": {...}, ...}
    }

Only ``lines`` is required for an entry to be valid.  Values are trusted as
reported; ``covered <= total`` and ``pct`` consistency are not checked.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, cast

from uncov.models.coverage import TOTAL_KEY, CoverageSummary, ParsedFileCoverage
from uncov.utils.fs import read_json

if TYPE_CHECKING:
    from collections.abc import Iterable

    from uncov.utils.fs import StrPath

logger = logging.getLogger(__name__)


class CoverageFormatError(ValueError):
    """Base class for coverage summaries that are valid JSON but the wrong shape."""


class InvalidShapeError(CoverageFormatError):
    """The summary is not a JSON object."""

    def __init__(self) -> None:
        super().__init__("Coverage summary must be an object")


class MissingTotalError(CoverageFormatError):
    """The summary has no valid ``total`` entry."""

    def __init__(self) -> None:
        super().__init__(f'Coverage summary missing valid "{TOTAL_KEY}" field')


class InvalidFileEntryError(CoverageFormatError):
    """A per-file entry lacks a valid ``lines`` metric."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Invalid coverage data for file: {key}")
        self.key = key


# ── Shape checks ─────────────────────────────────────────────────


@dataclass(frozen=True)
class ValidSummary:
    """Successful shape check."""

    summary: CoverageSummary


@dataclass(frozen=True)
class InvalidSummary:
    """Failed shape check carrying the reason."""

    error: CoverageFormatError


SummaryCheck = ValidSummary | InvalidSummary


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def is_valid_coverage_metric(value: Any) -> bool:
    """Return True if *value* has numeric ``total``, ``covered`` and ``pct``."""
    if not isinstance(value, dict):
        return False
    return all(_is_number(value.get(key)) for key in ("total", "covered", "pct"))


def is_valid_file_coverage(value: Any) -> bool:
    """Return True if *value* has a valid ``lines`` metric."""
    return isinstance(value, dict) and is_valid_coverage_metric(value.get("lines"))


def check_coverage_summary(data: Any) -> SummaryCheck:
    """Check that *data* has the coverage summary shape.

    Never raises; the outcome is returned as :class:`ValidSummary` or
    :class:`InvalidSummary`.
    """
    # Arrays are rejected as the wrong shape rather than as lacking "total"
    if not isinstance(data, dict):
        return InvalidSummary(InvalidShapeError())

    if not is_valid_file_coverage(data.get(TOTAL_KEY)):
        return InvalidSummary(MissingTotalError())

    for key, entry in data.items():
        if key == TOTAL_KEY:
            continue
        if not is_valid_file_coverage(entry):
            return InvalidSummary(InvalidFileEntryError(key))

    return ValidSummary(cast("CoverageSummary", data))


def validate_coverage_summary(data: Any) -> CoverageSummary:
    """Return *data* typed as a coverage summary.

    The input object itself is returned; nothing is copied or normalised.

    Raises:
        InvalidShapeError: If *data* is not a JSON object.
        MissingTotalError: If the ``total`` entry is missing or invalid.
        InvalidFileEntryError: If any file entry is invalid.
    """
    result = check_coverage_summary(data)
    if isinstance(result, InvalidSummary):
        raise result.error
    return result.summary


def parse_coverage_summary(path: StrPath) -> CoverageSummary:
    """Read and validate a ``coverage-summary.json`` file.

    Raises:
        ReadFailureError: If the file cannot be read.
        ParseFailureError: If the file is not valid JSON.
        CoverageFormatError: If the JSON does not have the summary shape.
    """
    summary = validate_coverage_summary(read_json(path))
    logger.debug("Parsed %d files from coverage summary", len(summary) - 1)
    return summary


# ── Filtering ────────────────────────────────────────────────────


def filter_below_threshold(
    summary: CoverageSummary, threshold: float
) -> list[ParsedFileCoverage]:
    """Return files whose line coverage is at or below *threshold*.

    The ``total`` entry is never included.  Results keep the summary's key
    order.
    """
    return [
        ParsedFileCoverage.from_file_coverage(path, coverage)
        for path, coverage in summary.items()
        if path != TOTAL_KEY and coverage["lines"]["pct"] <= threshold
    ]


def sort_by_percentage(files: Iterable[ParsedFileCoverage]) -> list[ParsedFileCoverage]:
    """Return a new list sorted by ascending line coverage (stable)."""
    return sorted(files, key=lambda f: f.lines_pct)
