"""Check command — verify that coverage reporting is set up."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from uncov.commands.report import EXIT_OK
from uncov.config import DEFAULT_COVERAGE_PATH, MANIFEST_FILENAME
from uncov.package_json import has_script
from uncov.reporters.terminal import reporter
from uncov.utils.fs import file_exists, resolve_path
from uncov.vitest_config import find_vitest_config, has_coverage_config

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

COVERAGE_SCRIPT = "test:coverage"

EXIT_CHECK_FAILED = 1


@dataclass(frozen=True)
class CheckResult:
    """Outcome of a single setup check."""

    name: str
    passed: bool
    message: str
    hint: str = ""


def collect_checks(cwd: str | Path | None = None) -> list[CheckResult]:
    """Run every setup check against the project in *cwd*.

    Checks, in order: vitest config exists, it configures coverage, the
    coverage summary exists, and ``package.json`` has a ``test:coverage``
    script.
    """
    root = resolve_path(".", cwd)
    checks: list[CheckResult] = []
    logger.debug("Working directory: %s", root)

    vitest_config = find_vitest_config(root)
    if vitest_config is not None:
        config_path, _ = vitest_config
        logger.debug("Found vitest config: %s", config_path)
        checks.append(
            CheckResult("vitest-config", passed=True, message=f"Vitest config found: {config_path}")
        )
        if has_coverage_config(config_path):
            checks.append(
                CheckResult("coverage-config", passed=True, message="Coverage config detected")
            )
        else:
            checks.append(
                CheckResult(
                    "coverage-config",
                    passed=False,
                    message="Coverage config not found in vitest config",
                    hint="Add coverage configuration to your vitest.config.ts",
                )
            )
    else:
        checks.append(
            CheckResult(
                "vitest-config",
                passed=False,
                message="Vitest config not found",
                hint="Run 'uncov init' to create a vitest.config.ts",
            )
        )
        checks.append(
            CheckResult(
                "coverage-config",
                passed=False,
                message="Coverage config not checked (no vitest config)",
                hint="Create a vitest config first",
            )
        )

    coverage_path = resolve_path(DEFAULT_COVERAGE_PATH, root)
    logger.debug("Checking for coverage summary at: %s", coverage_path)
    if file_exists(coverage_path):
        checks.append(
            CheckResult(
                "coverage-summary",
                passed=True,
                message=f"Coverage summary exists: {DEFAULT_COVERAGE_PATH}",
            )
        )
    else:
        checks.append(
            CheckResult(
                "coverage-summary",
                passed=False,
                message=f"Coverage summary not found: {DEFAULT_COVERAGE_PATH}",
                hint="Run 'pnpm test:coverage' to generate coverage data",
            )
        )

    if has_script(COVERAGE_SCRIPT, root / MANIFEST_FILENAME):
        checks.append(
            CheckResult("scripts", passed=True, message=f"Scripts configured: {COVERAGE_SCRIPT}")
        )
    else:
        checks.append(
            CheckResult(
                "scripts",
                passed=False,
                message=f"Script not found: {COVERAGE_SCRIPT}",
                hint="Run 'uncov init' to add required scripts",
            )
        )

    return checks


def run_check(cwd: str | Path | None = None) -> int:
    """Print the setup checks.

    Returns:
        ``0`` when every check passes, ``1`` otherwise.
    """
    checks = collect_checks(cwd)
    failed = [c for c in checks if not c.passed]

    for check in checks:
        if check.passed:
            reporter.print_success(check.message)
    for check in failed:
        reporter.print_failure(check.message)
        if check.hint:
            reporter.print_hint(check.hint)

    reporter.blank_line()
    if not failed:
        reporter.print_success("All checks passed!")
        return EXIT_OK

    noun = "check" if len(failed) == 1 else "checks"
    reporter.print_failure(f"{len(failed)} {noun} failed")
    return EXIT_CHECK_FAILED
