"""Data models for uncov."""

from uncov.models.coverage import (
    TOTAL_KEY,
    CoverageMetric,
    CoverageSummary,
    FileCoverage,
    ParsedFileCoverage,
)

__all__ = [
    "TOTAL_KEY",
    "CoverageMetric",
    "CoverageSummary",
    "FileCoverage",
    "ParsedFileCoverage",
]
