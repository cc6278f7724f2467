"""Plain-text and JSON rendering of low-coverage reports."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

    from uncov.models.coverage import ParsedFileCoverage
    from uncov.utils.colors import Colors


def format_threshold(threshold: float) -> str:
    """Render a threshold without a trailing ``.0`` for whole numbers."""
    if isinstance(threshold, float) and threshold.is_integer():
        return str(int(threshold))
    return str(threshold)


def format_percent(pct: float) -> str:
    """Format a percentage right-aligned in a 6-character field, e.g. ``"  5.26%"``."""
    return f"{pct:6.2f}%"


def format_lines(covered: int, total: int) -> str:
    """Format line counts as ``"LH <covered>/LF <total>"`` with 4-wide numbers."""
    return f"LH {covered:>4}/LF {total:>4}"


def format_file_line(file: ParsedFileCoverage, colors: Colors | None = None) -> str:
    """Format one report row.

    With *colors*, rows with no coverage at all are red and the rest yellow.
    """
    pct = format_percent(file.lines_pct)
    lines = format_lines(file.lines_covered, file.lines_total)
    line = f"{pct}  {lines}   {file.path}"
    if colors is None:
        return line
    if file.lines_pct == 0:
        return colors.red(line)
    return colors.yellow(line)


def format_report(
    files: Sequence[ParsedFileCoverage],
    threshold: float,
    colors: Colors | None = None,
) -> str:
    """Format the text report.

    *files* are printed in the given order; callers sort them first.
    """
    limit = format_threshold(threshold)
    if not files:
        message = f"No files at or below {limit}% line coverage."
        return colors.green(message) if colors is not None else message

    header = f"Files at or below {limit}% line coverage: {len(files)}"
    rows = "\n".join(f"  {format_file_line(f, colors)}" for f in files)
    return f"{header}\n\n{rows}"


def format_report_json(files: Sequence[ParsedFileCoverage], threshold: float) -> str:
    """Format the report as 2-space indented JSON.

    Shape: ``{"threshold": ..., "count": ..., "files": [{path, linesPct,
    linesCovered, linesTotal}, ...]}``.
    """
    report = {
        "threshold": threshold,
        "count": len(files),
        "files": [f.to_dict() for f in files],
    }
    return json.dumps(report, indent=2, ensure_ascii=False, allow_nan=False)


def format_error_json(
    error: str,
    *,
    path: str | None = None,
    details: str | None = None,
) -> str:
    """Format an error object for JSON mode, omitting unset fields."""
    payload: dict[str, Any] = {"error": error}
    if path is not None:
        payload["path"] = path
    if details is not None:
        payload["details"] = details
    return json.dumps(payload, indent=2, ensure_ascii=False, allow_nan=False)
