"""Configuration loading from ``uncov.config.json`` and ``package.json``.

Sources, lowest precedence first:

1. the ``"uncov"`` field of ``package.json``
2. ``uncov.config.json``
3. caller overrides (command-line flags)

Each source is optional.  A missing or corrupt source is skipped, and fields
with the wrong type or range are dropped individually, so loading never
fails.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from uncov.utils.fs import FileOperationError, file_exists, read_json, resolve_path, write_json

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "uncov.config.json"
MANIFEST_FILENAME = "package.json"
MANIFEST_FIELD = "uncov"

DEFAULT_COVERAGE_PATH = "coverage/coverage-summary.json"

_MIN_THRESHOLD = 0
_MAX_THRESHOLD = 100

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


class ConfigValueError(ValueError):
    """Raised when a configuration key or value is rejected."""


@dataclass(frozen=True)
class UncovConfig:
    """Resolved uncov configuration."""

    threshold: float = 10
    """Line coverage percentage at or below which files are reported."""

    exclude: tuple[str, ...] = ()
    """Glob patterns reserved for excluding files (not applied yet)."""

    fail_on_low: bool = False
    """Exit with status 1 when any file is at or below the threshold."""

    coverage_path: str = DEFAULT_COVERAGE_PATH
    """Path to ``coverage-summary.json``, relative to the working directory."""

    def to_dict(self) -> dict[str, Any]:
        """Serialise using the config file's key names."""
        return {
            "threshold": self.threshold,
            "exclude": list(self.exclude),
            "failOnLow": self.fail_on_low,
            "coveragePath": self.coverage_path,
        }


DEFAULT_CONFIG = UncovConfig()


@dataclass(frozen=True)
class PartialConfig:
    """A configuration source in which every field is optional.

    ``None`` means the source does not set the field.
    """

    threshold: float | None = None
    exclude: tuple[str, ...] | None = None
    fail_on_low: bool | None = None
    coverage_path: str | None = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def to_dict(self) -> dict[str, Any]:
        """Serialise the fields that are set, using the config file's key names."""
        data: dict[str, Any] = {}
        if self.threshold is not None:
            data["threshold"] = self.threshold
        if self.exclude is not None:
            data["exclude"] = list(self.exclude)
        if self.fail_on_low is not None:
            data["failOnLow"] = self.fail_on_low
        if self.coverage_path is not None:
            data["coveragePath"] = self.coverage_path
        return data


# ── Field validation ─────────────────────────────────────────────


def _normalize_threshold(value: float) -> float:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _valid_threshold(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    if not _MIN_THRESHOLD <= value <= _MAX_THRESHOLD:
        return None
    return _normalize_threshold(value)


def _valid_exclude(value: Any) -> tuple[str, ...] | None:
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return tuple(value)
    return None


def extract_config_fields(raw: Any) -> PartialConfig:
    """Build a :class:`PartialConfig` from untrusted JSON.

    Each field is checked on its own and dropped when invalid:

    - ``threshold``: a number between 0 and 100 inclusive
    - ``exclude``: a list of strings
    - ``failOnLow``: a boolean
    - ``coveragePath``: a string

    Unknown keys are ignored.  Non-object input gives an empty result.
    """
    if not isinstance(raw, dict):
        return PartialConfig()

    threshold = _valid_threshold(raw.get("threshold"))
    exclude = _valid_exclude(raw.get("exclude"))
    fail_on_low = raw.get("failOnLow") if isinstance(raw.get("failOnLow"), bool) else None
    coverage_path = raw.get("coveragePath") if isinstance(raw.get("coveragePath"), str) else None

    for key, value in (
        ("threshold", threshold),
        ("exclude", exclude),
        ("failOnLow", fail_on_low),
        ("coveragePath", coverage_path),
    ):
        if key in raw and value is None:
            logger.debug("Ignoring invalid config value for %s: %r", key, raw[key])

    return PartialConfig(
        threshold=threshold,
        exclude=exclude,
        fail_on_low=fail_on_low,
        coverage_path=coverage_path,
    )


# ── Sources ──────────────────────────────────────────────────────


def read_manifest_config(cwd: str | Path | None = None) -> PartialConfig | None:
    """Return the ``"uncov"`` field of ``package.json`` in *cwd*.

    Returns ``None`` when the manifest is missing, unreadable, or has no
    ``"uncov"`` object.
    """
    manifest = resolve_path(MANIFEST_FILENAME, cwd)
    if not file_exists(manifest):
        return None
    try:
        data = read_json(manifest)
    except FileOperationError as exc:
        logger.debug("Skipping %s: %s", manifest, exc)
        return None

    if not isinstance(data, dict):
        return None
    section = data.get(MANIFEST_FIELD)
    if not isinstance(section, dict):
        return None
    return extract_config_fields(section)


def find_config_file(cwd: str | Path | None = None) -> Path | None:
    """Return the path to ``uncov.config.json`` in *cwd*, if it exists."""
    path = resolve_path(CONFIG_FILENAME, cwd)
    return path if file_exists(path) else None


def read_config_file(cwd: str | Path | None = None) -> PartialConfig | None:
    """Return the validated contents of ``uncov.config.json``.

    A missing, unreadable or malformed file is treated as absent.
    """
    path = find_config_file(cwd)
    if path is None:
        return None
    try:
        data = read_json(path)
    except FileOperationError as exc:
        logger.debug("Ignoring %s: %s", path, exc)
        return None

    if not isinstance(data, dict):
        logger.debug("Ignoring %s: expected a JSON object", path)
        return None
    return extract_config_fields(data)


# ── Merging ──────────────────────────────────────────────────────


def merge_configs(*partials: PartialConfig | None) -> UncovConfig:
    """Merge *partials* over the defaults, later values winning.

    Fields left as ``None`` keep the value from earlier sources.
    """
    config = DEFAULT_CONFIG
    for partial in partials:
        if partial is None:
            continue
        updates = {
            f.name: getattr(partial, f.name)
            for f in fields(partial)
            if getattr(partial, f.name) is not None
        }
        config = replace(config, **updates)
    return config


ConfigSource = Callable[[Path], PartialConfig | None]

_CONFIG_SOURCES: tuple[ConfigSource, ...] = (read_manifest_config, read_config_file)


def load_config(
    overrides: PartialConfig | None = None,
    cwd: str | Path | None = None,
) -> UncovConfig:
    """Load the complete configuration for the project in *cwd*.

    Args:
        overrides: Values from the caller (e.g. command-line flags); highest
            precedence.
        cwd: Project directory (default: the current directory).

    Returns:
        The merged configuration.  Never raises.
    """
    root = resolve_path(".", cwd)
    partials = [source(root) for source in _CONFIG_SOURCES]
    partials.append(overrides)
    config = merge_configs(*partials)
    logger.debug(
        "Config loaded: threshold=%s, failOnLow=%s, coveragePath=%s",
        config.threshold,
        config.fail_on_low,
        config.coverage_path,
    )
    return config


# ── Persistence ──────────────────────────────────────────────────


def _read_raw_config(root: Path) -> dict[str, Any]:
    path = find_config_file(root)
    if path is None:
        return {}
    try:
        data = read_json(path)
    except FileOperationError as exc:
        logger.debug("Replacing unreadable %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def write_config(config: UncovConfig | PartialConfig, cwd: str | Path | None = None) -> Path:
    """Write *config* to ``uncov.config.json`` in *cwd*.

    Keys already present in the file but not set by *config* are kept as
    written, including keys uncov does not recognise.  An unreadable or
    non-object file is replaced.

    Returns:
        The path of the written file.
    """
    root = resolve_path(".", cwd)
    data = _read_raw_config(root)
    data.update(config.to_dict())

    path = root / CONFIG_FILENAME
    write_json(CONFIG_FILENAME, data, base_dir=root)
    logger.info("Config saved to %s", path)
    return path


def _parse_bool(value: str) -> bool | None:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def coerce_config_value(key: str, value: str) -> PartialConfig:
    """Convert a command-line ``KEY VALUE`` pair into a validated partial config.

    ``exclude`` takes a comma-separated list of patterns.

    Raises:
        ConfigValueError: If *key* is unknown or *value* fails validation.
    """
    raw: Any
    if key == "threshold":
        try:
            raw = float(value)
        except ValueError:
            raw = None
    elif key == "exclude":
        raw = [item.strip() for item in value.split(",") if item.strip()]
    elif key == "failOnLow":
        raw = _parse_bool(value)
    elif key == "coveragePath":
        raw = value
    else:
        msg = (
            f"Unknown configuration key: {key} "
            "(expected threshold, exclude, failOnLow or coveragePath)"
        )
        raise ConfigValueError(msg)

    partial = extract_config_fields({key: raw})
    if partial.is_empty():
        msg = f"Invalid value for {key}: {value!r}"
        raise ConfigValueError(msg)
    return partial
