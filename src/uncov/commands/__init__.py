"""uncov commands — report, init and check."""

from uncov.commands.check import CheckResult, collect_checks, run_check
from uncov.commands.init import InitOptions, run_init
from uncov.commands.report import (
    EXIT_ERROR,
    EXIT_LOW_COVERAGE,
    EXIT_OK,
    ReportOptions,
    run_report,
)

__all__ = [
    "EXIT_ERROR",
    "EXIT_LOW_COVERAGE",
    "EXIT_OK",
    "CheckResult",
    "InitOptions",
    "ReportOptions",
    "collect_checks",
    "run_check",
    "run_init",
    "run_report",
]
