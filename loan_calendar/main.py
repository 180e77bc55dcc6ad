"""Command-line interface for the loan repayment calendar.

This module uses the ``click`` library to implement a multi-command
interface. Users can lay out the day-by-day repayment schedule of a loan,
view its collection metrics or measure a whole list of loans at once. Loans
and holidays are read from JSON files; results can be printed to the
terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from .config import AppConfig
from .data_models import ScheduleEntry
from .engine import (
    compute_loan_metrics,
    compute_portfolio_metrics,
    generate_repayment_schedule,
    summarize_portfolio,
    summarize_schedule,
)
from .exceptions import LoanCalendarError
from .formatter import print_metrics, print_portfolio, print_schedule, print_schedule_summary
from .loaders import load_holidays, load_loan, load_loans, serialize_schedule, serialize_value
from .logging import setup_logging
from .utils import parse_iso_date

logger = logging.getLogger(__name__)


def parse_today(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--today")


def export_schedule_to_json(path: Path, schedule: List[ScheduleEntry], summary: Dict[str, Any]) -> None:
    """Export schedule and summary to a JSON file."""
    data = {"summary": serialize_value(summary), "schedule": serialize_schedule(schedule)}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_schedule_to_csv(path: Path, schedule: List[ScheduleEntry]) -> None:
    """Export schedule to a CSV file."""
    header = ["Date", "Status", "Amount_Due", "Amount_Paid", "Holiday_Reason"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for e in schedule:
            writer.writerow(
                [
                    e.date.isoformat(),
                    e.status,
                    f"{e.amount_due:.2f}",
                    f"{e.amount_paid:.2f}",
                    e.holiday_reason or "",
                ]
            )


@click.group()
@click.option("--log-level", "log_level", default=None, help="Log level (defaults to $LOG_LEVEL or INFO)")
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str]) -> None:
    """Repayment schedules and collection metrics for daily-installment loans."""
    try:
        config = AppConfig.from_env()
    except LoanCalendarError as exc:
        raise click.ClickException(str(exc))
    setup_logging(log_level or config.log_level, config.log_format)
    ctx.obj = config


@cli.command()
@click.argument("loan_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--holidays", "holidays_file", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Holiday list (JSON)")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
@click.pass_obj
def schedule(config: AppConfig, loan_file: Path, holidays_file: Optional[Path], output: Optional[str]) -> None:
    """Compute and print the day-by-day repayment schedule."""
    try:
        loan = load_loan(loan_file)
        holidays = load_holidays(holidays_file)
    except LoanCalendarError as exc:
        raise click.ClickException(str(exc))
    entries = generate_repayment_schedule(loan, holidays, config.engine)
    summary = summarize_schedule(entries)
    logger.info("Generated %d schedule entries for %s", len(entries), loan_file)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_schedule_to_json(path, entries, summary)
            click.echo(f"Schedule exported to {path}")
        elif path.suffix.lower() == ".csv":
            export_schedule_to_csv(path, entries)
            click.echo(f"Schedule exported to {path}")
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv", param_hint="--output")
    else:
        if not entries:
            click.echo("No schedule: the loan has no disbursement date or no daily amount.")
            return
        print_schedule_summary(summary, config.currency)
        print_schedule(entries)


@cli.command()
@click.argument("loan_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--holidays", "holidays_file", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Holiday list (JSON)")
@click.option("--today", "today", help="Measure as of this date (YYYY-MM-DD) instead of today")
@click.option("--output", "output", type=str, help="Output file path (.json)")
@click.pass_obj
def metrics(
    config: AppConfig,
    loan_file: Path,
    holidays_file: Optional[Path],
    today: Optional[str],
    output: Optional[str],
) -> None:
    """Compute and print collection metrics for a loan."""
    as_of = parse_today(today)
    try:
        loan = load_loan(loan_file)
        holidays = load_holidays(holidays_file)
    except LoanCalendarError as exc:
        raise click.ClickException(str(exc))
    snapshot = compute_loan_metrics(loan, holidays, as_of, config.engine)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Metrics export must use .json extension", param_hint="--output")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"metrics": serialize_value(snapshot)}, f, indent=2)
        click.echo(f"Metrics exported to {path}")
    else:
        print_metrics(snapshot, config.currency)


@cli.command()
@click.argument("loans_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--holidays", "holidays_file", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Holiday list (JSON)")
@click.option("--today", "today", help="Measure as of this date (YYYY-MM-DD) instead of today")
@click.pass_obj
def portfolio(config: AppConfig, loans_file: Path, holidays_file: Optional[Path], today: Optional[str]) -> None:
    """Compute metrics for every loan in a file and print portfolio totals."""
    as_of = parse_today(today)
    try:
        loans = load_loans(loans_file)
        holidays = load_holidays(holidays_file)
    except LoanCalendarError as exc:
        raise click.ClickException(str(exc))
    results = compute_portfolio_metrics(loans, holidays, as_of, config.engine)
    summary = summarize_portfolio(snapshot for _, snapshot in results)
    logger.info("Measured %d loans from %s", len(results), loans_file)
    print_portfolio(results, summary, config.currency)


if __name__ == "__main__":
    cli()
