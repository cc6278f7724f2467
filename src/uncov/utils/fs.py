"""File system helpers — path resolution and synchronous JSON/text I/O.

Every helper that takes a path also accepts an optional ``base_dir``.  When
it is given, the path is resolved against it and must stay inside it
(:class:`PathEscapeError` otherwise).  Without it the path is used as-is.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

StrPath = str | os.PathLike[str]

_NOOP_DIRS = frozenset({"", ".", "/"})


class FileOperationError(Exception):
    """Base class for file helper failures."""

    def __init__(self, message: str, path: StrPath | None = None) -> None:
        super().__init__(message)
        self.path = str(path) if path is not None else None


class PathEscapeError(FileOperationError):
    """Raised when a path resolves outside its allowed base directory."""


class ReadFailureError(FileOperationError):
    """Raised when a file cannot be opened or read."""


class WriteFailureError(FileOperationError):
    """Raised when a file or directory cannot be written."""


class ParseFailureError(FileOperationError):
    """Raised when file content is not valid JSON."""


# ── Path resolution ──────────────────────────────────────────────


def resolve_path(relative_path: StrPath, base_dir: StrPath | None = None) -> Path:
    """Resolve *relative_path* against *base_dir* (default: the current directory).

    Absolute paths are returned normalised but otherwise unchanged.  Symlinks
    are not followed.
    """
    base = os.path.abspath(base_dir if base_dir is not None else os.getcwd())
    return Path(os.path.normpath(os.path.join(base, relative_path)))


def validate_path(target_path: StrPath, base_dir: StrPath) -> Path:
    """Resolve *target_path* against *base_dir* and ensure it stays inside.

    Raises:
        PathEscapeError: If the resolved path is outside *base_dir*.
    """
    base = os.path.abspath(base_dir)
    resolved = resolve_path(target_path, base)
    try:
        offset = os.path.relpath(resolved, base)
    except ValueError:
        # Different drives on Windows
        offset = str(resolved)

    if offset == os.pardir or offset.startswith(os.pardir + os.sep) or os.path.isabs(offset):
        msg = f'Path "{target_path}" is outside allowed directory'
        raise PathEscapeError(msg, target_path)

    return resolved


def _checked(path: StrPath, base_dir: StrPath | None) -> Path:
    if base_dir is not None:
        return validate_path(path, base_dir)
    return Path(path)


# ── Reading and writing ──────────────────────────────────────────


def file_exists(path: StrPath) -> bool:
    """Return True if *path* exists."""
    return os.path.exists(path)


def read_text(path: StrPath, *, base_dir: StrPath | None = None) -> str:
    """Read a UTF-8 text file.

    Raises:
        PathEscapeError: If *base_dir* is given and *path* escapes it.
        ReadFailureError: If the file cannot be read.
    """
    resolved = _checked(path, base_dir)
    try:
        return resolved.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f'Failed to read file "{path}": {exc}'
        raise ReadFailureError(msg, path) from exc


def _reject_constant(name: str) -> Any:
    # NaN, Infinity and -Infinity are accepted by json.loads but are not JSON
    msg = f"Invalid JSON constant: {name}"
    raise ValueError(msg)


def read_json(path: StrPath, *, base_dir: StrPath | None = None) -> Any:
    """Read and decode a JSON file.

    Raises:
        PathEscapeError: If *base_dir* is given and *path* escapes it.
        ReadFailureError: If the file cannot be read.
        ParseFailureError: If the content is not valid JSON.
    """
    content = read_text(path, base_dir=base_dir)
    try:
        return json.loads(content, parse_constant=_reject_constant)
    except ValueError as exc:
        msg = f'Failed to parse JSON in "{path}": {exc}'
        raise ParseFailureError(msg, path) from exc


def write_text(path: StrPath, content: str, *, base_dir: StrPath | None = None) -> None:
    """Write *content* to *path*, creating parent directories as needed.

    Raises:
        PathEscapeError: If *base_dir* is given and *path* escapes it.
        WriteFailureError: If the file cannot be written.
    """
    resolved = _checked(path, base_dir)
    ensure_dir(resolved.parent)
    try:
        resolved.write_text(content, encoding="utf-8")
    except OSError as exc:
        msg = f'Failed to write to "{path}": {exc}'
        raise WriteFailureError(msg, path) from exc
    logger.debug("Wrote %s", resolved)


def write_json(path: StrPath, data: Any, *, base_dir: StrPath | None = None) -> None:
    """Write *data* as 2-space indented JSON with a trailing newline.

    Raises:
        PathEscapeError: If *base_dir* is given and *path* escapes it.
        WriteFailureError: If *data* is not serialisable as strict JSON or the
            file cannot be written.
    """
    resolved = _checked(path, base_dir)
    try:
        content = json.dumps(data, indent=2, ensure_ascii=False, allow_nan=False) + "\n"
    except (TypeError, ValueError) as exc:
        msg = f'Failed to write JSON to "{path}": {exc}'
        raise WriteFailureError(msg, path) from exc
    ensure_dir(resolved.parent)
    try:
        resolved.write_text(content, encoding="utf-8")
    except OSError as exc:
        msg = f'Failed to write JSON to "{path}": {exc}'
        raise WriteFailureError(msg, path) from exc
    logger.debug("Wrote JSON to %s", resolved)


def ensure_dir(path: StrPath) -> None:
    """Create *path* and any missing ancestors.

    Empty paths, ``"."`` and ``"/"`` are ignored.

    Raises:
        WriteFailureError: If the directory cannot be created.
    """
    if os.fspath(path) in _NOOP_DIRS:
        return
    try:
        Path(path).mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        msg = f'Failed to create directory "{path}": {exc}'
        raise WriteFailureError(msg, path) from exc


def append_line(path: StrPath, line: str, *, base_dir: StrPath | None = None) -> None:
    """Append *line* to *path*, creating the file if it does not exist.

    A newline is inserted first when existing content lacks one, so the
    file always ends with exactly one newline after *line*.
    """
    resolved = _checked(path, base_dir)
    ensure_dir(resolved.parent)
    try:
        if resolved.exists():
            content = resolved.read_text(encoding="utf-8")
            prefix = "\n" if content and not content.endswith("\n") else ""
            with resolved.open("a", encoding="utf-8") as f:
                f.write(f"{prefix}{line}\n")
        else:
            resolved.write_text(f"{line}\n", encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f'Failed to append to "{path}": {exc}'
        raise WriteFailureError(msg, path) from exc
