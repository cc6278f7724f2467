"""Project detection — package manager and ``.gitignore`` state."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from uncov.utils.fs import FileOperationError, file_exists, read_text, resolve_path

if TYPE_CHECKING:
    from uncov.utils.fs import StrPath

logger = logging.getLogger(__name__)

GITIGNORE_FILENAME = ".gitignore"
COVERAGE_IGNORE_PATTERN = "coverage/"

_COVERAGE_PATTERN_RE = re.compile(r"^[/*]*coverage[/*]*$")


class PackageManager(Enum):
    """Supported JavaScript package managers."""

    PNPM = "pnpm"
    BUN = "bun"
    NPM = "npm"
    YARN = "yarn"


# Lockfiles in priority order
_LOCKFILES: tuple[tuple[str, PackageManager], ...] = (
    ("pnpm-lock.yaml", PackageManager.PNPM),
    ("bun.lockb", PackageManager.BUN),
    ("package-lock.json", PackageManager.NPM),
    ("yarn.lock", PackageManager.YARN),
)


@dataclass(frozen=True)
class GitignoreStatus:
    """Whether ``.gitignore`` exists and already ignores coverage output."""

    exists: bool
    has_coverage: bool


def detect_package_manager(cwd: StrPath | None = None) -> PackageManager:
    """Detect the package manager from lockfiles in *cwd*.

    Priority is pnpm > bun > npm > yarn.  Defaults to npm.
    """
    for lockfile, manager in _LOCKFILES:
        if file_exists(resolve_path(lockfile, cwd)):
            logger.debug("Found %s, using %s", lockfile, manager.value)
            return manager
    return PackageManager.NPM


def _is_coverage_pattern(line: str) -> bool:
    if not line or line.startswith("#"):
        return False
    return (
        bool(_COVERAGE_PATTERN_RE.match(line))
        or line.startswith("coverage")
        or line.endswith(("/coverage", "/coverage/"))
    )


def detect_gitignore(cwd: StrPath | None = None) -> GitignoreStatus:
    """Check ``.gitignore`` in *cwd* for a coverage directory pattern.

    Matches ``coverage``, ``coverage/``, ``/coverage``, ``**/coverage`` and
    paths ending in ``/coverage``.  Comments are skipped.
    """
    path = resolve_path(GITIGNORE_FILENAME, cwd)
    if not file_exists(path):
        return GitignoreStatus(exists=False, has_coverage=False)

    try:
        content = read_text(path)
    except FileOperationError as exc:
        logger.debug("Could not read %s: %s", path, exc)
        return GitignoreStatus(exists=True, has_coverage=False)

    has_coverage = any(_is_coverage_pattern(line.strip()) for line in content.split("\n"))
    return GitignoreStatus(exists=True, has_coverage=has_coverage)
