"""CLI entry point: supportwindow.

Subcommands:
    supportwindow audit project.json [more.json ...]   # Evaluate prepared dependency lists
"""

from __future__ import annotations

import json
import sys
from datetime import date, datetime

import click
import structlog

from supportwindow.config import Settings
from supportwindow.core.logging import setup_logging
from supportwindow.engine import PolicyEngine
from supportwindow.exceptions import SupportWindowError
from supportwindow.inputs import load_projects
from supportwindow.models import EvaluationOptions, ReportFilter
from supportwindow.schedule import load_schedule

log = structlog.get_logger("supportwindow.cli")

_DATE_FORMATS = ("%Y-%m-%d", "%B %d, %Y", "%b %d, %Y", "%Y/%m/%d", "%m/%d/%Y")


def parse_current_date(value: str) -> date:
    """Parse a ``--current-date`` value such as ``2021-03-31`` or ``March 31, 2021``."""
    text = value.strip().strip("\"'").strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise click.BadParameter(f"unrecognized date {value!r} (expected e.g. 2021-03-31)")


def _report_filter(supported: bool, unsupported: bool, expiring: bool) -> ReportFilter | None:
    chosen = [
        f
        for f, flag in (
            (ReportFilter.SUPPORTED, supported),
            (ReportFilter.UNSUPPORTED, unsupported),
            (ReportFilter.EXPIRING, expiring),
        )
        if flag
    ]
    if len(chosen) > 1:
        raise click.UsageError("--supported, --unsupported and --expiring are mutually exclusive")
    return chosen[0] if chosen else None


@click.group()
def main() -> None:
    """supportwindow: audit dependencies against support policies."""


@main.command("audit")
@click.argument("inputs", nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.option("-c", "--current-date", default=None, help="Evaluate as of this date (default: today)")
@click.option("--schedule", "schedule_path", default=None, type=click.Path(dir_okay=False),
              help="Runtime release schedule JSON (default: bundled node schedule)")
@click.option("-s", "--supported", is_flag=True,
              help="Only list supported dependencies that are not expiring soon")
@click.option("-u", "--unsupported", is_flag=True, help="Only list unsupported dependencies")
@click.option("-e", "--expiring", is_flag=True, help="Only list dependencies expiring soon")
@click.option("-w", "--workers", default=1, show_default=True, type=click.IntRange(min=1),
              help="Evaluate projects in parallel")
@click.option("-d", "--verbose", is_flag=True, help="Verbose logging")
def audit(
    inputs: tuple[str, ...],
    current_date: str | None,
    schedule_path: str | None,
    supported: bool,
    unsupported: bool,
    expiring: bool,
    workers: int,
    verbose: bool,
) -> None:
    """Evaluate prepared dependency lists and print the JSON report.

    Exits with status 1 when any project is out of its support window.
    """
    report_filter = _report_filter(supported, unsupported, expiring)
    as_of = parse_current_date(current_date) if current_date else date.today()

    try:
        setup_logging("DEBUG" if verbose else "WARNING")
        settings = Settings.from_env()
        schedule = load_schedule(schedule_path or settings.schedule_path)
        projects = []
        for source in inputs:
            projects.extend(load_projects(source, schedule))
        engine = PolicyEngine(
            schedule,
            expiry_horizon=settings.expiry_horizon,
            semver_grace=settings.semver_grace,
            max_workers=workers,
        )
        result = engine.evaluate_projects(projects, as_of, EvaluationOptions(filter=report_filter))
    except SupportWindowError as e:
        log.debug("cli.failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(json.dumps(result.to_dict(), indent=2))
    if not result.is_in_support_window:
        sys.exit(1)


if __name__ == "__main__":
    main()
