"""Vitest configuration detection and generation."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from uncov.utils.fs import FileOperationError, file_exists, read_text, resolve_path

if TYPE_CHECKING:
    from pathlib import Path

    from uncov.utils.fs import StrPath

logger = logging.getLogger(__name__)

# Vitest config files first, then Vite config files (priority order)
VITEST_CONFIG_FILES: tuple[tuple[str, str], ...] = (
    ("vitest.config.ts", "ts"),
    ("vitest.config.js", "js"),
    ("vitest.config.mts", "mts"),
    ("vitest.config.mjs", "mjs"),
    ("vite.config.ts", "ts"),
    ("vite.config.js", "js"),
    ("vite.config.mts", "mts"),
    ("vite.config.mjs", "mjs"),
)

DEFAULT_VITEST_CONFIG = "vitest.config.ts"

_COVERAGE_KEY_RE = re.compile(r"\bcoverage\s*:")
_IMPORT_LINE_RE = re.compile(r"^\s*(import|export\s+\*\s+from)\b")

_VITEST_CONFIG_TEMPLATE = """\
import { defineConfig } from 'vitest/config';

export default defineConfig({
  test: {
    coverage: {
      provider: 'v8',
      reporter: ['text', 'json-summary'],
      reportsDirectory: './coverage',
    },
  },
});
"""


def find_vitest_config(cwd: StrPath | None = None) -> tuple[Path, str] | None:
    """Return ``(path, type)`` of the first vitest/vite config in *cwd*."""
    for filename, config_type in VITEST_CONFIG_FILES:
        path = resolve_path(filename, cwd)
        if file_exists(path):
            return path, config_type
    return None


def has_vitest_config(cwd: StrPath | None = None) -> bool:
    """Return True if any vitest or vite config file exists in *cwd*."""
    return find_vitest_config(cwd) is not None


def has_coverage_config(config_path: StrPath) -> bool:
    """Return True if the config file declares a ``coverage:`` property.

    Import lines are ignored so that ``import x from './coverage.config'``
    does not count.  Unreadable files count as having no coverage config.
    """
    if not file_exists(config_path):
        return False
    try:
        content = read_text(config_path)
    except FileOperationError as exc:
        logger.debug("Could not read %s: %s", config_path, exc)
        return False

    return any(
        _COVERAGE_KEY_RE.search(line)
        for line in content.splitlines()
        if not _IMPORT_LINE_RE.match(line)
    )


def create_vitest_config() -> str:
    """Return the contents of a ``vitest.config.ts`` with coverage enabled."""
    return _VITEST_CONFIG_TEMPLATE
