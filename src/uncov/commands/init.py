"""Init command — bootstrap coverage reporting in a JavaScript project.

Steps:

1. Detect the package manager from lockfiles
2. Add ``test:coverage`` and ``coverage:low`` scripts to ``package.json``
3. Create ``vitest.config.ts`` with coverage settings
4. Add ``coverage/`` to ``.gitignore``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from uncov.commands.report import EXIT_ERROR, EXIT_OK
from uncov.config import MANIFEST_FILENAME
from uncov.detect import (
    COVERAGE_IGNORE_PATTERN,
    GITIGNORE_FILENAME,
    PackageManager,
    detect_gitignore,
    detect_package_manager,
)
from uncov.package_json import add_scripts, read_package_json
from uncov.reporters.terminal import reporter
from uncov.utils.fs import FileOperationError, append_line, file_exists, resolve_path, write_text
from uncov.vitest_config import DEFAULT_VITEST_CONFIG, create_vitest_config, find_vitest_config

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

SCRIPTS_TO_ADD: dict[str, str] = {
    "test:coverage": "vitest run --coverage",
    "coverage:low": "uncov",
}


@dataclass(frozen=True)
class InitOptions:
    """Options for :func:`run_init`."""

    force: bool = False
    dry_run: bool = False
    cwd: str | Path | None = None


def run_init(options: InitOptions) -> int:
    """Bootstrap coverage configuration.

    Returns:
        ``0`` on success, ``2`` when ``package.json`` is missing or invalid.
    """
    root = resolve_path(".", options.cwd)
    logger.debug("Working directory: %s", root)

    if options.dry_run:
        reporter.print_info("Dry run - no files will be modified")
        reporter.blank_line()

    manifest = root / MANIFEST_FILENAME
    logger.debug("Checking for package.json at: %s", manifest)
    if not file_exists(manifest):
        reporter.print_error("Error: No package.json found in current directory.")
        reporter.print_error_hint("Run 'npm init' or 'pnpm init' first to create a package.json.")
        return EXIT_ERROR

    try:
        read_package_json(manifest)
    except FileOperationError as exc:
        reporter.print_error(f"Error: Failed to read package.json: {exc}")
        return EXIT_ERROR

    try:
        package_manager = _detect_package_manager(root, dry_run=options.dry_run)
        _add_scripts(manifest, dry_run=options.dry_run)
        _write_vitest_config(root, force=options.force, dry_run=options.dry_run)
        _update_gitignore(root, dry_run=options.dry_run)
    except FileOperationError as exc:
        reporter.print_error(f"Error: {exc}")
        return EXIT_ERROR

    reporter.blank_line()
    if options.dry_run:
        reporter.print_info("Run without --dry-run to apply these changes.")
    else:
        reporter.print_info(
            f"Run '{package_manager.value} test:coverage' to generate coverage, "
            "then 'uncov' to see low coverage files."
        )
    return EXIT_OK


def _detect_package_manager(root: Path, *, dry_run: bool) -> PackageManager:
    logger.debug("Detecting package manager from lockfiles...")
    package_manager = detect_package_manager(root)
    if dry_run:
        reporter.print_info(f"Would detect package manager: {package_manager.value}")
    else:
        reporter.print_success(f"Detected package manager: {package_manager.value}")
    return package_manager


def _add_scripts(manifest: Path, *, dry_run: bool) -> None:
    logger.debug("Checking package.json scripts...")
    if dry_run:
        for script in SCRIPTS_TO_ADD:
            reporter.print_info(f"Would add script: {script}")
        return

    result = add_scripts(SCRIPTS_TO_ADD, manifest)
    for script in result.added:
        reporter.print_success(f"Added script: {script}")
    for script in result.skipped:
        reporter.print_skip(f"Script already exists: {script}")


def _write_vitest_config(root: Path, *, force: bool, dry_run: bool) -> None:
    logger.debug("Checking for existing vitest config...")
    existing = find_vitest_config(root)
    target = root / DEFAULT_VITEST_CONFIG

    if existing is not None and not force:
        existing_path, _ = existing
        if dry_run:
            reporter.print_info(f"Would skip vitest config (already exists: {existing_path})")
        else:
            reporter.print_skip(f"Vitest config already exists: {existing_path}")
            reporter.print_hint("Use --force to overwrite")
        return

    verb = "Overwrote" if existing is not None else "Created"
    if dry_run:
        action = "overwrite" if existing is not None else "create"
        reporter.print_info(f"Would {action}: {DEFAULT_VITEST_CONFIG}")
        return

    write_text(target, create_vitest_config())
    reporter.print_success(f"{verb} {DEFAULT_VITEST_CONFIG} with coverage settings")


def _update_gitignore(root: Path, *, dry_run: bool) -> None:
    logger.debug("Checking .gitignore...")
    status = detect_gitignore(root)

    if status.has_coverage:
        if dry_run:
            reporter.print_info("Would skip .gitignore (coverage/ already present)")
        else:
            reporter.print_skip("coverage/ already in .gitignore")
        return

    if dry_run:
        if status.exists:
            reporter.print_info(f"Would append to .gitignore: {COVERAGE_IGNORE_PATTERN}")
        else:
            reporter.print_info(f"Would create .gitignore with: {COVERAGE_IGNORE_PATTERN}")
        return

    append_line(GITIGNORE_FILENAME, COVERAGE_IGNORE_PATTERN, base_dir=root)
    if status.exists:
        reporter.print_success("Added coverage/ to .gitignore")
    else:
        reporter.print_success("Created .gitignore with coverage/")
