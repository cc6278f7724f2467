"""Coverage summary models.

The summary types mirror the ``coverage-summary.json`` file written by the
Istanbul ``json-summary`` reporter (used by Vitest and Jest).  They are
``TypedDict`` views over the decoded JSON so that validated data keeps every
value exactly as the coverage tool reported it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict

TOTAL_KEY = "total"
"""Reserved summary key holding the project-wide aggregate."""


class CoverageMetric(TypedDict):
    """One coverage dimension (lines, statements, ...) for a file."""

    total: int
    covered: int
    skipped: int
    pct: float


class FileCoverage(TypedDict):
    """Coverage metrics for one file or the ``total`` aggregate."""

    lines: CoverageMetric
    statements: NotRequired[CoverageMetric]
    functions: NotRequired[CoverageMetric]
    branches: NotRequired[CoverageMetric]


CoverageSummary = dict[str, FileCoverage]
"""Mapping of file path (or ``"total"``) to its coverage."""


@dataclass(frozen=True)
class ParsedFileCoverage:
    """Line coverage of a single file, as shown in reports."""

    path: str
    """File path as it appears in the coverage summary."""

    lines_pct: float
    """Line coverage percentage (0.0 to 100.0)."""

    lines_covered: int
    """Number of covered lines."""

    lines_total: int
    """Number of lines in scope."""

    @classmethod
    def from_file_coverage(cls, path: str, coverage: FileCoverage) -> ParsedFileCoverage:
        lines = coverage["lines"]
        return cls(
            path=path,
            lines_pct=lines["pct"],
            lines_covered=lines["covered"],
            lines_total=lines["total"],
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the JSON report shape."""
        return {
            "path": self.path,
            "linesPct": self.lines_pct,
            "linesCovered": self.lines_covered,
            "linesTotal": self.lines_total,
        }
