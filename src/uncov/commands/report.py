"""Report command — list files at or below the coverage threshold.

Exit codes:

- 0: success, including findings when fail-on-low is off
- 1: findings and fail-on-low is on
- 2: coverage file missing, unreadable or malformed
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import click

from uncov.config import PartialConfig, load_config
from uncov.coverage import (
    CoverageFormatError,
    filter_below_threshold,
    parse_coverage_summary,
    sort_by_percentage,
)
from uncov.reporters.format import (
    format_error_json,
    format_report,
    format_report_json,
    format_threshold,
)
from uncov.reporters.terminal import reporter
from uncov.utils.colors import create_colors
from uncov.utils.fs import FileOperationError, file_exists, resolve_path

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_LOW_COVERAGE = 1
EXIT_ERROR = 2

COVERAGE_HINT = "Run your test coverage command first (e.g., 'pnpm test:coverage')"


@dataclass(frozen=True)
class ReportOptions:
    """Options for :func:`run_report`.

    ``None`` values defer to the configuration files.
    """

    threshold: float | None = None
    fail: bool | None = None
    json_output: bool = False
    coverage_path: str | None = None
    no_color: bool = False
    cwd: str | Path | None = None


def run_report(options: ReportOptions) -> int:
    """Load config, parse the coverage summary and print the report.

    Returns:
        The process exit code.
    """
    logger.debug("Loading configuration...")
    config = load_config(
        PartialConfig(
            threshold=options.threshold,
            fail_on_low=options.fail,
            coverage_path=options.coverage_path,
        ),
        options.cwd,
    )

    coverage_path = resolve_path(config.coverage_path, options.cwd)
    logger.debug("Coverage path: %s", coverage_path)

    if not file_exists(coverage_path):
        if options.json_output:
            click.echo(format_error_json("Coverage file not found", path=str(coverage_path)))
        else:
            reporter.print_error(f"Error: Coverage file not found: {coverage_path}")
            reporter.print_error_hint(COVERAGE_HINT)
        return EXIT_ERROR

    try:
        logger.debug("Parsing coverage summary...")
        summary = parse_coverage_summary(coverage_path)
    except (FileOperationError, CoverageFormatError) as exc:
        logger.debug("Coverage summary rejected: %s", exc)
        if options.json_output:
            click.echo(format_error_json("Failed to parse coverage file", details=str(exc)))
        else:
            reporter.print_error(f"Error: Failed to parse coverage file: {exc}")
        return EXIT_ERROR

    logger.debug(
        "Filtering files at or below %s%% threshold...", format_threshold(config.threshold)
    )
    files = sort_by_percentage(filter_below_threshold(summary, config.threshold))
    logger.debug("Found %d files at or below threshold", len(files))

    if options.json_output:
        click.echo(format_report_json(files, config.threshold))
    else:
        colors = create_colors(no_color=options.no_color)
        click.echo(format_report(files, config.threshold, colors))

    if files and config.fail_on_low:
        return EXIT_LOW_COVERAGE
    return EXIT_OK
