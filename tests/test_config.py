"""Tests for config.py — layered config loading, validation and persistence."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import pytest

from uncov.config import (
    CONFIG_FILENAME,
    DEFAULT_CONFIG,
    DEFAULT_COVERAGE_PATH,
    ConfigValueError,
    PartialConfig,
    UncovConfig,
    coerce_config_value,
    extract_config_fields,
    find_config_file,
    load_config,
    merge_configs,
    read_config_file,
    read_manifest_config,
    write_config,
)

if TYPE_CHECKING:
    from pathlib import Path


def _write_config_file(root: Path, data: Any) -> None:
    """Write uncov.config.json with given data."""
    (root / CONFIG_FILENAME).write_text(json.dumps(data), encoding="utf-8")


def _write_package_json(root: Path, data: Any) -> None:
    (root / "package.json").write_text(json.dumps(data), encoding="utf-8")


# ── Defaults ──────────────────────────────────────────────────────────


class TestDefaults:
    def test_default_values(self) -> None:
        assert DEFAULT_CONFIG == UncovConfig(
            threshold=10,
            exclude=(),
            fail_on_low=False,
            coverage_path="coverage/coverage-summary.json",
        )

    def test_to_dict_uses_file_keys(self) -> None:
        assert DEFAULT_CONFIG.to_dict() == {
            "threshold": 10,
            "exclude": [],
            "failOnLow": False,
            "coveragePath": DEFAULT_COVERAGE_PATH,
        }

    def test_partial_to_dict_only_set_fields(self) -> None:
        assert PartialConfig(threshold=20).to_dict() == {"threshold": 20}

    def test_partial_is_empty(self) -> None:
        assert PartialConfig().is_empty()
        assert not PartialConfig(fail_on_low=False).is_empty()


# ── extract_config_fields ─────────────────────────────────────────────


class TestExtractConfigFields:
    def test_all_valid(self) -> None:
        partial = extract_config_fields(
            {
                "threshold": 25,
                "exclude": ["**/*.test.ts"],
                "failOnLow": True,
                "coveragePath": "out/summary.json",
            }
        )
        assert partial == PartialConfig(
            threshold=25,
            exclude=("**/*.test.ts",),
            fail_on_low=True,
            coverage_path="out/summary.json",
        )

    @pytest.mark.parametrize("value", [-1, 101, 150, "20", True, None, [10]])
    def test_invalid_threshold_dropped(self, value: object) -> None:
        assert extract_config_fields({"threshold": value}).threshold is None

    @pytest.mark.parametrize("value", [0, 100, 12.5])
    def test_threshold_bounds_inclusive(self, value: float) -> None:
        assert extract_config_fields({"threshold": value}).threshold == value

    def test_integral_float_threshold_normalised(self) -> None:
        threshold = extract_config_fields({"threshold": 20.0}).threshold
        assert threshold == 20
        assert isinstance(threshold, int)

    def test_exclude_must_be_string_list(self) -> None:
        assert extract_config_fields({"exclude": ["a", 1]}).exclude is None
        assert extract_config_fields({"exclude": "a"}).exclude is None
        assert extract_config_fields({"exclude": []}).exclude == ()

    def test_fail_on_low_must_be_bool(self) -> None:
        assert extract_config_fields({"failOnLow": "true"}).fail_on_low is None
        assert extract_config_fields({"failOnLow": 1}).fail_on_low is None
        assert extract_config_fields({"failOnLow": False}).fail_on_low is False

    def test_coverage_path_must_be_string(self) -> None:
        assert extract_config_fields({"coveragePath": 42}).coverage_path is None

    def test_unknown_keys_ignored(self) -> None:
        assert extract_config_fields({"unknown": 1}).is_empty()

    @pytest.mark.parametrize("raw", [None, [], "config", 5])
    def test_non_object(self, raw: object) -> None:
        assert extract_config_fields(raw).is_empty()

    def test_logs_dropped_fields(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="uncov"):
            extract_config_fields({"threshold": 150})
        assert "threshold" in caplog.text


# ── Sources ───────────────────────────────────────────────────────────


class TestReadManifestConfig:
    def test_reads_uncov_field(self, tmp_path: Path) -> None:
        _write_package_json(tmp_path, {"name": "app", "uncov": {"threshold": 30}})
        assert read_manifest_config(tmp_path) == PartialConfig(threshold=30)

    def test_missing_manifest(self, tmp_path: Path) -> None:
        assert read_manifest_config(tmp_path) is None

    def test_no_uncov_field(self, tmp_path: Path) -> None:
        _write_package_json(tmp_path, {"name": "app"})
        assert read_manifest_config(tmp_path) is None

    def test_uncov_field_not_object(self, tmp_path: Path) -> None:
        _write_package_json(tmp_path, {"uncov": 50})
        assert read_manifest_config(tmp_path) is None

    def test_corrupt_manifest(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{oops", encoding="utf-8")
        assert read_manifest_config(tmp_path) is None

    def test_manifest_not_object(self, tmp_path: Path) -> None:
        _write_package_json(tmp_path, ["uncov"])
        assert read_manifest_config(tmp_path) is None


class TestReadConfigFile:
    def test_reads_file(self, tmp_path: Path) -> None:
        _write_config_file(tmp_path, {"failOnLow": True})
        assert read_config_file(tmp_path) == PartialConfig(fail_on_low=True)

    def test_missing(self, tmp_path: Path) -> None:
        assert find_config_file(tmp_path) is None
        assert read_config_file(tmp_path) is None

    def test_find_config_file(self, tmp_path: Path) -> None:
        _write_config_file(tmp_path, {})
        assert find_config_file(tmp_path) == tmp_path / CONFIG_FILENAME

    def test_corrupt_file_treated_as_absent(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("not json", encoding="utf-8")
        assert read_config_file(tmp_path) is None

    def test_non_object_treated_as_absent(self, tmp_path: Path) -> None:
        _write_config_file(tmp_path, [1, 2, 3])
        assert read_config_file(tmp_path) is None


# ── Merging / loading ─────────────────────────────────────────────────


class TestMergeConfigs:
    def test_no_partials(self) -> None:
        assert merge_configs() == DEFAULT_CONFIG

    def test_later_wins(self) -> None:
        merged = merge_configs(PartialConfig(threshold=20), PartialConfig(threshold=30))
        assert merged.threshold == 30

    def test_none_fields_keep_earlier(self) -> None:
        merged = merge_configs(
            PartialConfig(threshold=20, fail_on_low=True), PartialConfig(threshold=None)
        )
        assert merged.threshold == 20
        assert merged.fail_on_low is True

    def test_none_partials_skipped(self) -> None:
        assert merge_configs(None, PartialConfig(coverage_path="x.json"), None).coverage_path == (
            "x.json"
        )

    def test_false_overrides_true(self) -> None:
        merged = merge_configs(PartialConfig(fail_on_low=True), PartialConfig(fail_on_low=False))
        assert merged.fail_on_low is False


class TestLoadConfig:
    def test_defaults_without_sources(self, tmp_path: Path) -> None:
        assert load_config(cwd=tmp_path) == DEFAULT_CONFIG

    def test_precedence(self, tmp_path: Path) -> None:
        _write_package_json(tmp_path, {"uncov": {"threshold": 20, "failOnLow": True}})
        _write_config_file(tmp_path, {"threshold": 30, "coveragePath": "custom.json"})

        config = load_config(PartialConfig(coverage_path="flag.json"), tmp_path)

        assert config.threshold == 30
        assert config.fail_on_low is True
        assert config.coverage_path == "flag.json"

    def test_manifest_only(self, tmp_path: Path) -> None:
        _write_package_json(tmp_path, {"uncov": {"exclude": ["dist/**"]}})
        assert load_config(cwd=tmp_path).exclude == ("dist/**",)

    def test_invalid_file_value_falls_back(self, tmp_path: Path) -> None:
        _write_package_json(tmp_path, {"uncov": {"threshold": 40}})
        _write_config_file(tmp_path, {"threshold": 150})
        assert load_config(cwd=tmp_path).threshold == 40

    def test_uses_cwd_by_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_config_file(tmp_path, {"threshold": 55})
        monkeypatch.chdir(tmp_path)
        assert load_config().threshold == 55

    def test_empty_overrides(self, tmp_path: Path) -> None:
        _write_config_file(tmp_path, {"threshold": 15})
        assert load_config(PartialConfig(), tmp_path).threshold == 15


# ── Persistence ───────────────────────────────────────────────────────


class TestWriteConfig:
    def test_writes_new_file(self, tmp_path: Path) -> None:
        path = write_config(PartialConfig(threshold=25), tmp_path)
        assert path == tmp_path / CONFIG_FILENAME
        content = path.read_text(encoding="utf-8")
        assert content == '{\n  "threshold": 25\n}\n'

    def test_merges_with_existing(self, tmp_path: Path) -> None:
        _write_config_file(tmp_path, {"threshold": 10, "failOnLow": True})
        write_config(PartialConfig(threshold=50), tmp_path)
        data = json.loads((tmp_path / CONFIG_FILENAME).read_text(encoding="utf-8"))
        assert data == {"threshold": 50, "failOnLow": True}

    def test_keeps_unknown_and_invalid_keys(self, tmp_path: Path) -> None:
        _write_config_file(tmp_path, {"$schema": "./schema.json", "threshold": 150})
        write_config(PartialConfig(fail_on_low=True), tmp_path)
        data = json.loads((tmp_path / CONFIG_FILENAME).read_text(encoding="utf-8"))
        assert data == {"$schema": "./schema.json", "threshold": 150, "failOnLow": True}

    def test_replaces_corrupt_file(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("{oops", encoding="utf-8")
        write_config(PartialConfig(threshold=20), tmp_path)
        data = json.loads((tmp_path / CONFIG_FILENAME).read_text(encoding="utf-8"))
        assert data == {"threshold": 20}

    def test_full_config(self, tmp_path: Path) -> None:
        write_config(UncovConfig(threshold=5, exclude=("a/**",)), tmp_path)
        data = json.loads((tmp_path / CONFIG_FILENAME).read_text(encoding="utf-8"))
        assert data == {
            "threshold": 5,
            "exclude": ["a/**"],
            "failOnLow": False,
            "coveragePath": DEFAULT_COVERAGE_PATH,
        }

    def test_written_config_loads_back(self, tmp_path: Path) -> None:
        write_config(PartialConfig(fail_on_low=True), tmp_path)
        assert load_config(cwd=tmp_path).fail_on_low is True


class TestCoerceConfigValue:
    def test_threshold(self) -> None:
        assert coerce_config_value("threshold", "25") == PartialConfig(threshold=25)

    def test_threshold_fraction(self) -> None:
        assert coerce_config_value("threshold", "12.5") == PartialConfig(threshold=12.5)

    @pytest.mark.parametrize("value", ["abc", "-5", "101", "nan"])
    def test_threshold_invalid(self, value: str) -> None:
        with pytest.raises(ConfigValueError, match="Invalid value for threshold"):
            coerce_config_value("threshold", value)

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("true", True), ("YES", True), ("1", True), ("false", False), ("off", False)],
    )
    def test_fail_on_low(self, value: str, expected: bool) -> None:
        assert coerce_config_value("failOnLow", value).fail_on_low is expected

    def test_fail_on_low_invalid(self) -> None:
        with pytest.raises(ConfigValueError):
            coerce_config_value("failOnLow", "maybe")

    def test_exclude_comma_list(self) -> None:
        partial = coerce_config_value("exclude", "src/gen/**, **/*.d.ts ,")
        assert partial.exclude == ("src/gen/**", "**/*.d.ts")

    def test_coverage_path(self) -> None:
        assert coerce_config_value("coveragePath", "out/c.json").coverage_path == "out/c.json"

    def test_unknown_key(self) -> None:
        with pytest.raises(ConfigValueError, match="Unknown configuration key: colour"):
            coerce_config_value("colour", "red")
