"""uncov CLI — top-level command group.

Running ``uncov`` without a subcommand runs the report.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from typing import Any, TypeVar

import click
import yaml

from uncov import __version__
from uncov.commands import InitOptions, ReportOptions, run_check, run_init, run_report
from uncov.commands.report import EXIT_ERROR
from uncov.config import ConfigValueError, coerce_config_value, load_config, write_config
from uncov.reporters.terminal import reporter
from uncov.utils.fs import FileOperationError

logger = logging.getLogger(__name__)

_F = TypeVar("_F", bound=Callable[..., Any])

_VERBOSE_FORMAT = "[verbose] %(message)s"
_DEFAULT_FORMAT = "%(levelname)s: %(message)s"


def _configure_logging(*, verbose: bool) -> None:
    """Route ``uncov`` log records to stderr; DEBUG level when *verbose*."""
    package_logger = logging.getLogger("uncov")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_VERBOSE_FORMAT if verbose else _DEFAULT_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _path_option(func: _F) -> _F:
    return click.option(
        "--path",
        default=None,
        type=click.Path(exists=True, file_okay=False, resolve_path=True),
        help="Project root directory (default: the current directory).",
    )(func)


def _project_root(ctx: click.Context, path: str | None) -> str:
    """Return the subcommand's --path, else the group's, else the current directory."""
    return path or ctx.obj.get("path") or "."


def _report_options(func: _F) -> _F:
    """Attach the report options shared by ``uncov`` and ``uncov report``."""
    options = [
        click.option(
            "-t",
            "--threshold",
            type=click.IntRange(0, 100),
            default=None,
            help="Coverage threshold percentage (default: 10).",
        ),
        click.option(
            "-f",
            "--fail",
            is_flag=True,
            default=None,
            help="Exit with code 1 if files are at or below the threshold.",
        ),
        click.option("-j", "--json", "as_json", is_flag=True, help="Output as JSON."),
        click.option(
            "-c",
            "--coverage-path",
            default=None,
            help="Path to coverage-summary.json (default: coverage/coverage-summary.json).",
        ),
        _path_option,
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _report(
    path: str | None,
    *,
    threshold: int | None,
    fail: bool | None,
    as_json: bool,
    coverage_path: str | None,
    no_color: bool,
) -> int:
    return run_report(
        ReportOptions(
            threshold=threshold,
            fail=fail or None,
            json_output=as_json,
            coverage_path=coverage_path,
            no_color=no_color,
            cwd=path or ".",
        )
    )


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@_report_options
@click.option("--no-color", is_flag=True, help="Disable coloured output.")
@click.option("-V", "--verbose", is_flag=True, help="Print debug information to stderr.")
@click.version_option(__version__, "-v", "--version", prog_name="uncov")
@click.pass_context
def cli(
    ctx: click.Context,
    *,
    threshold: int | None,
    fail: bool | None,
    as_json: bool,
    coverage_path: str | None,
    path: str | None,
    no_color: bool,
    verbose: bool,
) -> None:
    """uncov — report files with low test coverage.

    \b
    Examples:
      uncov                        Show files with <=10% coverage
      uncov --threshold 50         Show files with <=50% coverage
      uncov --fail --threshold 80  Fail CI if files are at or below 80%
      uncov init                   Set up coverage in the current project
    """
    ctx.ensure_object(dict)
    ctx.obj.update(
        no_color=no_color,
        path=path,
        threshold=threshold,
        fail=fail,
        as_json=as_json,
        coverage_path=coverage_path,
    )
    _configure_logging(verbose=verbose)
    if no_color:
        reporter.console.no_color = True
        reporter.err_console.no_color = True

    if ctx.invoked_subcommand is None:
        ctx.exit(
            _report(
                path,
                threshold=threshold,
                fail=fail,
                as_json=as_json,
                coverage_path=coverage_path,
                no_color=no_color,
            )
        )


@cli.command()
@_report_options
@click.pass_context
def report(
    ctx: click.Context,
    *,
    threshold: int | None,
    fail: bool | None,
    as_json: bool,
    coverage_path: str | None,
    path: str | None,
) -> None:
    """Report files at or below the coverage threshold (default command).

    Exit codes: 0 on success, 1 when files are found and --fail is set,
    2 when the coverage file is missing or invalid.

    Options given before ``report`` apply unless repeated after it.
    """
    ctx.exit(
        _report(
            _project_root(ctx, path),
            threshold=threshold if threshold is not None else ctx.obj.get("threshold"),
            fail=fail or ctx.obj.get("fail"),
            as_json=as_json or ctx.obj.get("as_json", False),
            coverage_path=coverage_path or ctx.obj.get("coverage_path"),
            no_color=ctx.obj.get("no_color", False),
        )
    )


@cli.command()
@_path_option
@click.option("--force", is_flag=True, help="Overwrite an existing vitest config.")
@click.option("--dry-run", is_flag=True, help="Show what would change without writing files.")
@click.pass_context
def init(ctx: click.Context, path: str | None, *, force: bool, dry_run: bool) -> None:
    """Bootstrap coverage configuration in the current project.

    Adds coverage scripts to package.json, creates vitest.config.ts with
    coverage settings and ignores the coverage/ directory in .gitignore.
    """
    ctx.exit(run_init(InitOptions(force=force, dry_run=dry_run, cwd=_project_root(ctx, path))))


@cli.command()
@_path_option
@click.pass_context
def check(ctx: click.Context, path: str | None) -> None:
    """Verify the coverage setup.

    Exit codes: 0 when all checks pass, 1 otherwise.
    """
    ctx.exit(run_check(_project_root(ctx, path)))


@cli.group("config")
def config_group() -> None:
    """Show or change uncov configuration."""


@config_group.command("show")
@_path_option
@click.option(
    "--json-output",
    "as_json",
    is_flag=True,
    help="Output as JSON instead of YAML.",
)
@click.pass_context
def config_show(ctx: click.Context, path: str | None, *, as_json: bool) -> None:
    """Display the resolved configuration.

    Merges package.json "uncov" settings and uncov.config.json over the
    defaults.
    """
    config_dict = load_config(cwd=_project_root(ctx, path)).to_dict()
    if as_json:
        click.echo(json.dumps(config_dict, indent=2))
    else:
        click.echo(yaml.safe_dump(config_dict, sort_keys=False, default_flow_style=False), nl=False)


@config_group.command("set")
@click.argument("key")
@click.argument("value")
@_path_option
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str, path: str | None) -> None:
    """Set a configuration key in uncov.config.json.

    KEY is one of threshold, exclude, failOnLow or coveragePath.  exclude
    takes a comma-separated list of glob patterns.

    Example:
      uncov config set threshold 25
    """
    try:
        partial = coerce_config_value(key, value)
        config_file = write_config(partial, _project_root(ctx, path))
    except (ConfigValueError, FileOperationError) as exc:
        reporter.print_error(str(exc))
        ctx.exit(EXIT_ERROR)

    reporter.print_success(f"Updated {key} in {config_file}")


def main() -> None:
    """Console script entry point."""
    cli(obj={})
