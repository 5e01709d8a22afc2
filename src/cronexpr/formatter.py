"""Render compiled expressions and fire times as text.

Canonical form rules:
    - A wildcard set renders as ``*``.
    - A progression of three or more values that runs to the field maximum
      renders as ``start/step``.
    - Any other set renders as comma-joined values, with runs of three or more
      consecutive values collapsed to ``a-b``.
    - Day markers render as ``?``, ``L``, ``L-n``, ``LW``, ``nW``, ``d#n``,
      ``dL``.
    - The year field is written only when it is restricted.

Formatting a parsed expression and parsing the result yields an equal
expression.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

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
from cronexpr.fields import FIELD_ORDER, FIELD_SPECS, FieldKind, FieldSpec

if TYPE_CHECKING:
    from cronexpr.expression import CronExpression

DEFAULT_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_datetime(
    instant: datetime, pattern: str = DEFAULT_DATETIME_FORMAT
) -> str:
    """Format an instant with a ``strftime`` pattern."""
    return instant.strftime(pattern)


def format_expression(expression: "CronExpression") -> str:
    """Render an expression in canonical form.

    Args:
        expression: Compiled expression.

    Returns:
        Six fields, or seven when the year is restricted.
    """
    parts = [
        format_field(kind, constraint)
        for kind, constraint in zip(FIELD_ORDER, expression.fields)
    ]
    if parts[-1] == "*":
        parts.pop()
    return " ".join(parts)


def format_field(kind: FieldKind, constraint: FieldConstraint) -> str:
    """Render one compiled field.

    Raises:
        TypeError: For a constraint type this module does not know.
    """
    if isinstance(constraint, AnySet):
        if constraint.wildcard:
            return "*"
        return _format_values(constraint.sorted_values, FIELD_SPECS[kind])
    if isinstance(constraint, NoSpecificValue):
        return "?"
    if isinstance(constraint, LastOfPeriod):
        return f"L-{constraint.offset}" if constraint.offset else "L"
    if isinstance(constraint, LastWeekdayOfPeriod):
        return "LW"
    if isinstance(constraint, NearestWeekdayTo):
        return f"{constraint.day}W"
    if isinstance(constraint, NthWeekdayOfMonth):
        return f"{constraint.weekday}#{constraint.occurrence}"
    if isinstance(constraint, LastWeekdayOccurrence):
        return f"{constraint.weekday}L"
    raise TypeError(f"Cannot format constraint {constraint!r}")


def _format_values(values: tuple[int, ...], spec: FieldSpec) -> str:
    if len(values) >= 3:
        step = values[1] - values[0]
        is_progression = step > 1 and all(
            b - a == step for a, b in zip(values, values[1:])
        )
        if is_progression and values[-1] + step > spec.max_value:
            return f"{values[0]}/{step}"

    parts: list[str] = []
    run_start = prev = values[0]
    for value in values[1:] + (None,):
        if value is not None and value == prev + 1:
            prev = value
            continue
        if prev - run_start >= 2:
            parts.append(f"{run_start}-{prev}")
        else:
            parts.extend(str(v) for v in range(run_start, prev + 1))
        if value is not None:
            run_start = prev = value
    return ",".join(parts)
