"""CLI interface for dirsize."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
from click.core import ParameterSource

from dirsize.core.reporter import DirectoryReporter, InvalidTargetError
from dirsize.core.run_log import LogFormat, LogOpenError, RunLog
from dirsize.settings import Settings, SettingsError, parse_value

log = logging.getLogger(__name__)


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _report_options(func):
    """Options shared by the ``report`` and ``here`` commands."""
    options = [
        click.option("--json", "as_json", is_flag=True, help="Output as JSON"),
        click.option("--jobs", "-j", type=click.IntRange(min=1), default=None,
                     help="Measure this many directories at once"),
        click.option("--timestamps/--no-timestamps", default=None,
                     help="Prefix log lines with the local time"),
        click.option("--levels/--no-levels", default=None,
                     help="Tag log lines with INFO/ERROR"),
        click.option("--truncate-sizes/--rounded-sizes", default=None,
                     help="Use whole units (1 KB) instead of two decimals (1.00 KB)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


_SETTING_BACKED = ("jobs", "timestamps", "levels", "truncate_sizes")


def _given_options(ctx: click.Context, options: dict[str, Any]) -> dict[str, Any]:
    """Blank out setting-backed options the user did not pass on the command line."""
    given = dict(options)
    for name in _SETTING_BACKED:
        if ctx.get_parameter_source(name) is not ParameterSource.COMMANDLINE:
            given[name] = None
    return given


def _pick(value: Any, settings: Settings, key: str) -> Any:
    """Return the CLI value, or the setting when the option was not given."""
    return settings.checked(key) if value is None else value


def _run_report(
    target: Path,
    log_path: Path | None,
    *,
    validate: bool,
    as_json: bool,
    jobs: int | None,
    timestamps: bool | None,
    levels: bool | None,
    truncate_sizes: bool | None,
) -> None:
    settings = Settings()
    try:
        if log_path is None:
            log_path = Path(settings.checked("log.path"))
        log_format = LogFormat(
            timestamps=_pick(timestamps, settings, "log.timestamps"),
            levels=_pick(levels, settings, "log.levels"),
        )
        jobs = _pick(jobs, settings, "report.jobs")
        truncate_sizes = _pick(truncate_sizes, settings, "report.truncate_sizes")
        name_width = settings.checked("report.name_width")
        size_width = settings.checked("report.size_width")
    except SettingsError as e:
        click.echo(f"Invalid setting in {settings.path}: {e}", err=True)
        sys.exit(1)

    run_log = RunLog(log_path, log_format)
    try:
        run_log.open()
    except LogOpenError as e:
        click.echo(str(e), err=True)
        sys.exit(1)

    with run_log:
        reporter = DirectoryReporter(
            run_log,
            jobs=jobs,
            truncate_sizes=truncate_sizes,
            name_width=name_width,
            size_width=size_width,
        )

        def on_report(entry) -> None:
            if not as_json:
                click.echo(reporter.format_line(entry))

        try:
            reports = reporter.run(target, validate=validate, on_report=on_report)
        except InvalidTargetError as e:
            click.echo(str(e), err=True)
            sys.exit(1)

    log.info("Reported %d directories under %s", len(reports), target)
    if as_json:
        click.echo(json.dumps([reporter.to_dict(r) for r in reports], indent=2))


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
def main(verbose: int) -> None:
    """dirsize: report the size of each subdirectory."""
    _setup_logging(verbose)


# ── report ───────────────────────────────────────────────────────────────

@main.command(context_settings={"allow_extra_args": True})
@click.argument("directory", required=False, type=click.Path(path_type=Path))
@click.argument("log_file", required=False, type=click.Path(path_type=Path))
@_report_options
@click.pass_context
def report(ctx: click.Context, directory: Path | None, log_file: Path | None, **options: Any) -> None:
    """Report subdirectory sizes of DIRECTORY, logging to LOG_FILE."""
    if directory is None or log_file is None:
        click.echo(f"Usage: {ctx.command_path} <directory_path> <log_file_path>", err=True)
        sys.exit(1)
    if ctx.args:
        log.debug("Ignoring extra arguments: %s", " ".join(ctx.args))
    _run_report(directory, log_file, validate=True, **_given_options(ctx, options))


# ── here ─────────────────────────────────────────────────────────────────

@main.command()
@click.option("--log-file", "-l", type=click.Path(path_type=Path), default=None,
              help="Log file (default: the log.path setting)")
@_report_options
@click.pass_context
def here(ctx: click.Context, log_file: Path | None, **options: Any) -> None:
    """Report subdirectory sizes of the current working directory."""
    _run_report(Path.cwd(), log_file, validate=False, **_given_options(ctx, options))


# ── config ───────────────────────────────────────────────────────────────

@main.group()
def config() -> None:
    """Settings management commands."""


@config.command("show")
def config_show() -> None:
    """Print the effective settings as JSON."""
    settings = Settings()
    click.echo(json.dumps(settings.effective(), indent=2))


@config.command("set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str) -> None:
    """Store VALUE under the dot-notation KEY (e.g. report.jobs 4)."""
    try:
        parsed = parse_value(key, value)
    except SettingsError as e:
        raise click.BadParameter(str(e), param_hint="VALUE")
    settings = Settings()
    settings.set(key, parsed)
    click.echo(f"{key} = {json.dumps(parsed)}")
