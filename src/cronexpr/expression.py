"""Compiled cron expressions.

Design Principles:
    1. Immutable expressions: safe to share between threads
    2. Parse once, evaluate many times
    3. Equality by compiled constraints, not by source text
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterator

from cronexpr.compiler import compile_fields
from cronexpr.constraints import FieldConstraint
from cronexpr.errors import InvalidArgumentError
from cronexpr.fields import FIELD_ORDER, FieldKind
from cronexpr.walker import CalendarWalker, Direction, SearchResult


class CronExpression:
    """Parsed cron expression with next/previous fire-time calculation.

    CronExpression is immutable. It can be used to:
    - Check if a datetime matches the expression
    - Calculate the next or previous matching datetime
    - Iterate over matching datetimes

    Example:
        >>> expr = CronExpression.parse("0 15 10 ? * MON-FRI")
        >>> expr.matches(datetime(2024, 1, 15, 10, 15))  # True (Monday)
        >>> expr.next()  # Next matching datetime
        >>> list(expr.iter(limit=5))  # Next 5 matching datetimes
    """

    __slots__ = (
        "_expression",
        "_fields",
        "_field_map",
        "_day_fields_are_ored",
        "_walker",
    )

    def __init__(self, expression: str, fields: tuple[FieldConstraint, ...]) -> None:
        """Initialize cron expression.

        Args:
            expression: Original expression string.
            fields: Seven compiled constraints in field order.
        """
        if len(fields) != len(FIELD_ORDER):
            raise InvalidArgumentError(
                f"Expected {len(FIELD_ORDER)} field constraints, got {len(fields)}"
            )
        self._expression = expression.strip()
        self._fields = tuple(fields)
        self._field_map: dict[FieldKind, FieldConstraint] = dict(
            zip(FIELD_ORDER, self._fields)
        )
        self._day_fields_are_ored = (
            self._field_map[FieldKind.DAY_OF_MONTH].is_restricted
            and self._field_map[FieldKind.DAY_OF_WEEK].is_restricted
        )
        self._walker = CalendarWalker(self)

    @classmethod
    def parse(cls, expression: str, *, strict: bool = False) -> "CronExpression":
        """Parse a cron expression.

        Args:
            expression: Cron expression string.
            strict: Require exactly one of the day fields to be ``?``.

        Returns:
            Parsed CronExpression.

        Raises:
            MalformedExpressionError: If expression is invalid.
        """
        return cls(expression, compile_fields(expression, strict=strict))

    @property
    def expression(self) -> str:
        """Get original expression string."""
        return self._expression

    @property
    def fields(self) -> tuple[FieldConstraint, ...]:
        """Get compiled constraints, seconds first."""
        return self._fields

    @property
    def day_fields_are_ored(self) -> bool:
        """True when both day fields are restricted and either may match."""
        return self._day_fields_are_ored

    @property
    def canonical(self) -> str:
        """Canonical text form of the expression."""
        from cronexpr.formatter import format_expression

        return format_expression(self)

    def get_field(self, kind: FieldKind) -> FieldConstraint:
        """Get the constraint for a field."""
        return self._field_map[kind]

    def matches(self, dt: datetime) -> bool:
        """Check if a datetime (to the second) matches this expression."""
        return self._walker.is_satisfied_by(dt)

    def search(
        self, start: datetime | None = None, direction: Direction = Direction.FORWARD
    ) -> SearchResult:
        """Search for a fire time, returning a SearchResult."""
        if start is None:
            start = datetime.now()
        return self._walker.search(start, direction)

    def next(self, after: datetime | None = None) -> datetime | None:
        """Get next matching datetime.

        Args:
            after: Start searching after this datetime (default: now).

        Returns:
            Next matching datetime, or None if none exists before the end of
            the supported year range.
        """
        return self.search(after, Direction.FORWARD).instant

    def previous(self, before: datetime | None = None) -> datetime | None:
        """Get the latest matching datetime strictly before ``before``."""
        return self.search(before, Direction.BACKWARD).instant

    def next_n(self, n: int, after: datetime | None = None) -> list[datetime]:
        """Get next n matching datetimes.

        Args:
            n: Number of matches to find.
            after: Start searching after this datetime.

        Returns:
            List of matching datetimes; shorter than n if the schedule runs
            out of fire times.
        """
        if n < 1:
            raise InvalidArgumentError(f"n must be greater than 0, got {n}")
        return list(self.iter(after, limit=n))

    def iter(
        self,
        after: datetime | None = None,
        limit: int | None = None,
        *,
        reverse: bool = False,
    ) -> "CronIterator":
        """Create iterator over matching datetimes.

        Args:
            after: Start after (or before, when reversed) this datetime.
            limit: Maximum number of matches.
            reverse: Walk backwards in time.

        Returns:
            CronIterator.
        """
        return CronIterator(self, after, limit, reverse=reverse)

    def __repr__(self) -> str:
        return f"CronExpression({self._expression!r})"

    def __str__(self) -> str:
        return self._expression

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CronExpression):
            return self._fields == other._fields
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._fields)


class CronIterator(Iterator[datetime]):
    """Iterator over matching datetimes.

    Each step searches from the previous result, so no matches are stored.
    """

    def __init__(
        self,
        expression: CronExpression,
        after: datetime | None = None,
        limit: int | None = None,
        *,
        reverse: bool = False,
    ) -> None:
        self._expression = expression
        self._current = after if after is not None else datetime.now()
        self._limit = limit
        self._count = 0
        self._direction = Direction.BACKWARD if reverse else Direction.FORWARD

    def __iter__(self) -> "CronIterator":
        return self

    def __next__(self) -> datetime:
        if self._limit is not None and self._count >= self._limit:
            raise StopIteration

        next_dt = self._expression.search(self._current, self._direction).instant
        if next_dt is None:
            raise StopIteration

        self._current = next_dt
        self._count += 1

        return next_dt


def compile_expression(expression: str, *, strict: bool = False) -> CronExpression:
    """Compile expression text into a :class:`CronExpression`.

    Raises:
        MalformedExpressionError: If the expression is invalid.
    """
    return CronExpression.parse(expression, strict=strict)
