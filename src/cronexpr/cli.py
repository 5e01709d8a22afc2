"""Command-line interface for cronexpr.

Commands:
    - validate: Check an expression
    - format: Print the canonical form
    - next: List upcoming fire times
    - last: Print the previous fire time
    - check: Test whether an instant is a fire time
    - explain: Show each compiled field
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import Annotated, Optional

import typer

from cronexpr.config import CronConfig, load_config
from cronexpr.constraints import (
    AnySet,
    FieldConstraint,
    LastOfPeriod,
    LastWeekdayOccurrence,
    LastWeekdayOfPeriod,
    NearestWeekdayTo,
    NoSpecificValue,
    NthWeekdayOfMonth,
)
from cronexpr.errors import ConfigError, MalformedExpressionError
from cronexpr.expression import CronExpression
from cronexpr.fields import FIELD_ORDER, WEEKDAY_NAMES
from cronexpr.formatter import format_datetime, format_field
from cronexpr.log import configure_logging
from cronexpr.walker import Direction

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="cronexpr",
    help="Validate Quartz-style cron expressions and compute their fire times",
    add_completion=False,
    no_args_is_help=True,
)


class ExitCode(IntEnum):
    """Process exit codes."""

    OK = 0
    MALFORMED = 1
    EXHAUSTED = 2
    NOT_SATISFIED = 3
    CONFIG_ERROR = 4


_WEEKDAY_BY_NUMBER = {number: name for name, number in WEEKDAY_NAMES.items()}
_ORDINALS = {1: "first", 2: "second", 3: "third", 4: "fourth", 5: "fifth"}


# =============================================================================
# Helpers
# =============================================================================


def _config(ctx: typer.Context) -> CronConfig:
    if isinstance(ctx.obj, CronConfig):
        return ctx.obj
    return CronConfig()


def _parse_expression(expression: str, config: CronConfig) -> CronExpression:
    try:
        return CronExpression.parse(expression, strict=config.strict_day_pairing)
    except MalformedExpressionError as e:
        typer.echo(f"Error: {e.describe()}", err=True)
        raise typer.Exit(ExitCode.MALFORMED)


def _parse_instant(value: str | None, option: str) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(
            f"expected an ISO 8601 date/time, got {value!r}", param_hint=option
        )


def describe_constraint(constraint: FieldConstraint) -> str:
    """Describe a compiled constraint in words."""
    if isinstance(constraint, AnySet):
        if constraint.wildcard:
            return "every value"
        values = ", ".join(str(v) for v in constraint.sorted_values)
        return f"one of {values}" if len(constraint.values) > 1 else f"only {values}"
    if isinstance(constraint, NoSpecificValue):
        return "no specific value"
    if isinstance(constraint, LastOfPeriod):
        if constraint.offset:
            return f"{constraint.offset} day(s) before the last day of the month"
        return "last day of the month"
    if isinstance(constraint, LastWeekdayOfPeriod):
        return "last weekday (Mon-Fri) of the month"
    if isinstance(constraint, NearestWeekdayTo):
        return f"weekday nearest to day {constraint.day}"
    if isinstance(constraint, NthWeekdayOfMonth):
        weekday = _WEEKDAY_BY_NUMBER[constraint.weekday]
        return f"{_ORDINALS[constraint.occurrence]} {weekday} of the month"
    if isinstance(constraint, LastWeekdayOccurrence):
        return f"last {_WEEKDAY_BY_NUMBER[constraint.weekday]} of the month"
    return repr(constraint)


# =============================================================================
# Commands
# =============================================================================


@app.callback()
def main(
    ctx: typer.Context,
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="YAML or JSON configuration file"),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Log level (DEBUG, INFO, WARNING, ...)"),
    ] = None,
) -> None:
    """Quartz-style cron expression tools."""
    try:
        config = load_config(config_file)
        if log_level is not None:
            config = config.merge({"log_level": log_level})
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(ExitCode.CONFIG_ERROR)

    configure_logging(config.log_level, config.log_format)
    logger.debug("Loaded configuration %s", config.to_dict())
    ctx.obj = config


@app.command(name="validate")
def validate_cmd(
    ctx: typer.Context,
    expression: Annotated[str, typer.Argument(help="Cron expression")],
) -> None:
    """Check that an expression is valid."""
    _parse_expression(expression, _config(ctx))
    typer.echo("valid")


@app.command(name="format")
def format_cmd(
    ctx: typer.Context,
    expression: Annotated[str, typer.Argument(help="Cron expression")],
) -> None:
    """Print the canonical form of an expression."""
    typer.echo(_parse_expression(expression, _config(ctx)).canonical)


@app.command(name="next")
def next_cmd(
    ctx: typer.Context,
    expression: Annotated[str, typer.Argument(help="Cron expression")],
    start: Annotated[
        Optional[str],
        typer.Option("--from", "-f", help="Start instant (ISO 8601, default: now)"),
    ] = None,
    count: Annotated[
        Optional[int],
        typer.Option("--count", "-n", min=1, help="Number of fire times"),
    ] = None,
    pattern: Annotated[
        Optional[str],
        typer.Option("--format", "-F", help="strftime pattern for output"),
    ] = None,
    as_json: Annotated[
        bool, typer.Option("--json", help="Print a JSON array")
    ] = False,
) -> None:
    """List the next fire times of an expression."""
    config = _config(ctx)
    expr = _parse_expression(expression, config)
    after = _parse_instant(start, "--from")
    times = list(expr.iter(after, limit=count or config.default_count))

    pattern = pattern or config.datetime_format
    lines = [format_datetime(t, pattern) for t in times]
    if as_json:
        typer.echo(json.dumps(lines))
    else:
        for line in lines:
            typer.echo(line)

    if not times:
        typer.echo("Error: schedule has no upcoming fire times", err=True)
        raise typer.Exit(ExitCode.EXHAUSTED)


@app.command(name="last")
def last_cmd(
    ctx: typer.Context,
    expression: Annotated[str, typer.Argument(help="Cron expression")],
    start: Annotated[
        Optional[str],
        typer.Option("--from", "-f", help="Reference instant (ISO 8601, default: now)"),
    ] = None,
    pattern: Annotated[
        Optional[str],
        typer.Option("--format", "-F", help="strftime pattern for output"),
    ] = None,
) -> None:
    """Print the latest fire time before the reference instant."""
    config = _config(ctx)
    expr = _parse_expression(expression, config)
    result = expr.search(_parse_instant(start, "--from"), Direction.BACKWARD)
    if result.exhausted:
        typer.echo("Error: schedule has no earlier fire time", err=True)
        raise typer.Exit(ExitCode.EXHAUSTED)
    typer.echo(format_datetime(result.unwrap(), pattern or config.datetime_format))


@app.command(name="check")
def check_cmd(
    ctx: typer.Context,
    expression: Annotated[str, typer.Argument(help="Cron expression")],
    when: Annotated[str, typer.Argument(help="Instant to test (ISO 8601)")],
) -> None:
    """Exit 0 if the instant is a fire time, 3 otherwise."""
    expr = _parse_expression(expression, _config(ctx))
    instant = _parse_instant(when, "WHEN")
    if expr.matches(instant):
        typer.echo("yes")
        return
    typer.echo("no")
    raise typer.Exit(ExitCode.NOT_SATISFIED)


@app.command(name="explain")
def explain_cmd(
    ctx: typer.Context,
    expression: Annotated[str, typer.Argument(help="Cron expression")],
) -> None:
    """Show how each field of an expression was compiled."""
    from rich.console import Console
    from rich.table import Table

    expr = _parse_expression(expression, _config(ctx))

    table = Table(title=f"Cron Expression: {expr.canonical}")
    table.add_column("Field", style="cyan")
    table.add_column("Compiled", style="green")
    table.add_column("Meaning")

    for kind, constraint in zip(FIELD_ORDER, expr.fields):
        table.add_row(
            kind.label, format_field(kind, constraint), describe_constraint(constraint)
        )

    console = Console()
    console.print(table)
    if expr.day_fields_are_ored:
        console.print(
            "[yellow]Both day fields are restricted: "
            "a day matching either one fires.[/yellow]"
        )


if __name__ == "__main__":
    app()
