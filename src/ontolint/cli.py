"""Ontolint CLI entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from ontolint import __version__
from ontolint.config import (
    DEFAULT_SETTINGS_FILE,
    FAIL_ON_NONE,
    VALID_FORMATS,
    Settings,
    load_settings,
)
from ontolint.errors import OntolintError


class _ClickEchoHandler(logging.Handler):
    """Send log records to stderr through click, so test runners capture them."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:  # noqa: BLE001
            self.handleError(record)


def _configure_logging(*, verbose: bool, quiet: bool) -> None:
    logger = logging.getLogger("ontolint")
    if not any(isinstance(h, _ClickEchoHandler) for h in logger.handlers):
        handler = _ClickEchoHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    if verbose:
        logger.setLevel(logging.DEBUG)
    elif quiet:
        logger.setLevel(logging.ERROR)
    else:
        logger.setLevel(logging.WARNING)


def _resolve_settings(config: Path | None) -> Settings:
    """Explicit ``--config`` > ``ontolint.yml`` in the working directory > defaults."""
    if config is None:
        candidate = Path.cwd() / DEFAULT_SETTINGS_FILE
        config = candidate if candidate.is_file() else None
    return load_settings(config)


@click.group()
@click.version_option(version=__version__, prog_name="ontolint")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool, quiet: bool) -> None:
    """Ontolint - rule-based quality reports for OWL/RDF ontologies."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    _configure_logging(verbose=verbose, quiet=quiet)


@main.command()
@click.argument(
    "ontology",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--profile",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Profile file of '<LEVEL> - <rule>' lines (default: bundled profile).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the report to this file instead of standard output.",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(sorted(VALID_FORMATS)),
    default=None,
    help="Report format (default: from ontolint.yml, else tsv).",
)
@click.option(
    "--fail-on",
    type=click.Choice(["info", "warn", "error", "none"], case_sensitive=False),
    default=None,
    help="Exit 1 when violations at or above this level exist (default: error).",
)
@click.option("--jobs", "-j", type=click.IntRange(min=1), default=None, help="Rules run in parallel.")
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help=f"Settings file (default: ./{DEFAULT_SETTINGS_FILE} if present).",
)
def report(
    *,
    ontology: Path,
    profile: Path | None,
    output: Path | None,
    fmt: str | None,
    fail_on: str | None,
    jobs: int | None,
    config: Path | None,
) -> None:
    """Report rule violations found in ONTOLOGY.

    Exit codes: 0 = no violations at the --fail-on level,
    1 = violations at or above the --fail-on level,
    2 = configuration or resource error.
    """
    from ontolint.reporter import FORMATTERS, fails, format_summary, run_report

    try:
        settings = _resolve_settings(config)
        result = run_report(
            ontology,
            profile_path=profile,
            settings=settings,
            jobs=jobs,
        )
    except OntolintError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    fmt = fmt or settings.output_format
    rendered = FORMATTERS[fmt](result)
    summary = format_summary(result.report)

    if output is not None:
        try:
            output.write_text(rendered + "\n", encoding="utf-8")
        except OSError as exc:
            click.echo(f"Error: cannot write report to {output}: {exc}", err=True)
            sys.exit(2)
        click.echo(summary)
    elif fmt == "rich":
        # The rich rendering already ends with the summary.
        click.echo(rendered)
    else:
        click.echo(summary)
        click.echo(rendered)

    threshold = (fail_on or settings.fail_on).upper()
    if threshold != FAIL_ON_NONE and fails(result.report, threshold):
        sys.exit(1)


@main.command()
@click.option(
    "--profile",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Show the rules of this profile instead of the bundled one.",
)
def rules(*, profile: Path | None) -> None:
    """List bundled rules and their severity in the active profile.

    Bundled rules absent from the profile are shown as ``off``.
    """
    from ontolint.profile import load_profile
    from ontolint.queries import available_rules

    try:
        active = load_profile(profile)
        bundled = available_rules()
    except OntolintError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    names = sorted(set(bundled) | set(active))
    width = max((len(name) for name in names), default=0)
    for name in names:
        click.echo(f"{name.ljust(width)}  {active.get(name, 'off')}")
