"""Report rendering and terminal output."""

from uncov.reporters.format import (
    format_error_json,
    format_file_line,
    format_lines,
    format_percent,
    format_report,
    format_report_json,
    format_threshold,
)
from uncov.reporters.terminal import CLIReporter, reporter

__all__ = [
    "CLIReporter",
    "format_error_json",
    "format_file_line",
    "format_lines",
    "format_percent",
    "format_report",
    "format_report_json",
    "format_threshold",
    "reporter",
]
