"""``package.json`` helpers — read, write and add scripts."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from uncov.config import MANIFEST_FILENAME
from uncov.utils.fs import (
    FileOperationError,
    ReadFailureError,
    file_exists,
    read_json,
    resolve_path,
    write_json,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from uncov.utils.fs import StrPath

logger = logging.getLogger(__name__)


class ManifestError(FileOperationError):
    """Raised when ``package.json`` is not a JSON object."""


@dataclass
class AddScriptsResult:
    """Outcome of :func:`add_scripts`."""

    added: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def _manifest_path(path: StrPath | None) -> StrPath:
    return path if path is not None else resolve_path(MANIFEST_FILENAME)


def read_package_json(path: StrPath | None = None) -> dict[str, Any]:
    """Read ``package.json`` (default: in the current directory).

    Raises:
        ReadFailureError: If the file does not exist or cannot be read.
        ParseFailureError: If the file is not valid JSON.
        ManifestError: If the JSON is not an object.
    """
    manifest = _manifest_path(path)
    if not file_exists(manifest):
        msg = f"package.json not found at: {manifest}"
        raise ReadFailureError(msg, manifest)

    data = read_json(manifest)
    if not isinstance(data, dict):
        msg = f"package.json at {manifest} is not a JSON object"
        raise ManifestError(msg, manifest)
    return data


def write_package_json(pkg: Mapping[str, Any], path: StrPath | None = None) -> None:
    """Write ``package.json`` with 2-space indentation."""
    write_json(_manifest_path(path), dict(pkg))


def add_scripts(scripts: Mapping[str, str], path: StrPath | None = None) -> AddScriptsResult:
    """Add *scripts* to ``package.json``, leaving existing ones untouched.

    The file is only rewritten when at least one script was added.
    """
    manifest = _manifest_path(path)
    pkg = read_package_json(manifest)
    existing = pkg.get("scripts")
    if not isinstance(existing, dict):
        existing = {}
        pkg["scripts"] = existing

    result = AddScriptsResult()
    for name, command in scripts.items():
        if name in existing:
            result.skipped.append(name)
        else:
            existing[name] = command
            result.added.append(name)

    if result.added:
        write_package_json(pkg, manifest)
        logger.info("Added scripts to %s: %s", manifest, ", ".join(result.added))

    return result


def has_script(name: str, path: StrPath | None = None) -> bool:
    """Return True if ``package.json`` defines script *name*."""
    manifest = _manifest_path(path)
    if not file_exists(manifest):
        return False
    try:
        pkg = read_package_json(manifest)
    except FileOperationError as exc:
        logger.debug("Could not read %s: %s", manifest, exc)
        return False

    scripts = pkg.get("scripts")
    return isinstance(scripts, dict) and name in scripts
