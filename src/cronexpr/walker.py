"""Calendar walker: find the next or previous fire time of an expression.

The walker tests a candidate instant field by field, from year down to
second. When a field fails it jumps that field to the next allowed value (or
carries into the enclosing field when none is left), resets every finer field
to its first value, and starts over from the year. The backward search is the
mirror image: it jumps to the previous allowed value and resets finer fields
to their last value.

Every jump moves the candidate strictly in the search direction, and the
year is bounded by the supported range, so a search always terminates. A
search that runs past the bound returns an exhausted result instead of an
instant.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING

from cronexpr.constraints import AnySet, FieldConstraint, MatchContext, days_in_month
from cronexpr.errors import ScheduleExhaustedError
from cronexpr.fields import MAX_YEAR, MIN_YEAR, FieldKind, cron_weekday

if TYPE_CHECKING:
    from cronexpr.expression import CronExpression

logger = logging.getLogger(__name__)

_ONE_SECOND = timedelta(seconds=1)


class Direction(Enum):
    """Search direction."""

    FORWARD = "next"
    BACKWARD = "previous"


@dataclass(frozen=True)
class SearchResult:
    """Outcome of a walker search.

    Attributes:
        instant: The fire time found, or None when the search was exhausted.
        expression: Text of the searched expression.
        direction: Direction of the search.
    """

    instant: datetime | None
    expression: str
    direction: Direction

    @property
    def exhausted(self) -> bool:
        return self.instant is None

    def unwrap(self) -> datetime:
        """Return the instant, raising if the search was exhausted.

        Raises:
            ScheduleExhaustedError: If no fire time was found.
        """
        if self.instant is None:
            raise ScheduleExhaustedError(self.expression, self.direction.value)
        return self.instant


@dataclass(slots=True)
class CandidateInstant:
    """Mutable calendar fields used during a single search."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int

    @classmethod
    def from_datetime(cls, dt: datetime) -> "CandidateInstant":
        return cls(dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second)

    def to_datetime(self, tzinfo=None) -> datetime:
        return datetime(
            self.year, self.month, self.day,
            self.hour, self.minute, self.second,
            tzinfo=tzinfo,
        )

    # Forward moves: set a field and reset finer fields to their minimum

    def start_year(self, year: int) -> None:
        self.year = year
        self.start_month(1)

    def start_month(self, month: int) -> None:
        if month > 12:
            self.start_year(self.year + 1)
            return
        self.month = month
        self.start_day(1)

    def start_day(self, day: int) -> None:
        if day > days_in_month(self.year, self.month):
            self.start_month(self.month + 1)
            return
        self.day = day
        self.start_hour(0)

    def start_hour(self, hour: int) -> None:
        if hour > 23:
            self.start_day(self.day + 1)
            return
        self.hour = hour
        self.start_minute(0)

    def start_minute(self, minute: int) -> None:
        if minute > 59:
            self.start_hour(self.hour + 1)
            return
        self.minute = minute
        self.second = 0

    def start_second(self, second: int) -> None:
        if second > 59:
            self.start_minute(self.minute + 1)
            return
        self.second = second

    # Backward moves: set a field and reset finer fields to their maximum

    def end_year(self, year: int) -> None:
        self.year = year
        self.end_month(12)

    def end_month(self, month: int) -> None:
        if month < 1:
            self.end_year(self.year - 1)
            return
        self.month = month
        self.end_day(days_in_month(self.year, month))

    def end_day(self, day: int) -> None:
        if day < 1:
            self.end_month(self.month - 1)
            return
        self.day = day
        self.end_hour(23)

    def end_hour(self, hour: int) -> None:
        if hour < 0:
            self.end_day(self.day - 1)
            return
        self.hour = hour
        self.end_minute(59)

    def end_minute(self, minute: int) -> None:
        if minute < 0:
            self.end_hour(self.hour - 1)
            return
        self.minute = minute
        self.second = 59

    def end_second(self, second: int) -> None:
        if second < 0:
            self.end_minute(self.minute - 1)
            return
        self.second = second


class CalendarWalker:
    """Searches the calendar for instants matching one expression.

    The walker keeps no state between calls and can be shared freely.
    """

    __slots__ = (
        "_expression",
        "_second",
        "_minute",
        "_hour",
        "_day_of_month",
        "_month",
        "_day_of_week",
        "_year",
    )

    def __init__(self, expression: "CronExpression") -> None:
        self._expression = expression
        self._second = _value_set(expression, FieldKind.SECOND)
        self._minute = _value_set(expression, FieldKind.MINUTE)
        self._hour = _value_set(expression, FieldKind.HOUR)
        self._month = _value_set(expression, FieldKind.MONTH)
        self._year = _value_set(expression, FieldKind.YEAR)
        self._day_of_month = expression.get_field(FieldKind.DAY_OF_MONTH)
        self._day_of_week = expression.get_field(FieldKind.DAY_OF_WEEK)

    # -------------------------------------------------------------------------
    # Matching
    # -------------------------------------------------------------------------

    def day_matches(self, year: int, month: int, day: int) -> bool:
        """Check the day-of-month / day-of-week pair for a date.

        A restricted field decides alone; when both are restricted, either
        one matching is enough.
        """
        dom = self._day_of_month
        dow = self._day_of_week
        if not dom.is_restricted and not dow.is_restricted:
            return True

        context = MatchContext(year, month, day)
        if dom.is_restricted and dom.matches(day, context):
            return True
        if dow.is_restricted:
            weekday = cron_weekday(datetime(year, month, day).weekday())
            return dow.matches(weekday, context)
        return False

    def is_satisfied_by(self, instant: datetime) -> bool:
        """Check whether ``instant`` (to the second) is a fire time."""
        return (
            self._year.matches(instant.year)
            and self._month.matches(instant.month)
            and self.day_matches(instant.year, instant.month, instant.day)
            and self._hour.matches(instant.hour)
            and self._minute.matches(instant.minute)
            and self._second.matches(instant.second)
        )

    # -------------------------------------------------------------------------
    # Searching
    # -------------------------------------------------------------------------

    def search(self, start: datetime, direction: Direction) -> SearchResult:
        """Find the first fire time strictly after (or before) ``start``.

        Args:
            start: Reference instant. Sub-second precision is ignored.
            direction: Search forward or backward in time.

        Returns:
            SearchResult holding the instant, or an exhausted result.
        """
        if direction is Direction.FORWARD:
            found = self._search_forward(start)
        else:
            found = self._search_backward(start)

        if found is None:
            logger.debug(
                "No %s fire time for %r from %s",
                direction.value, str(self._expression), start.isoformat(),
            )
            return SearchResult(None, str(self._expression), direction)

        return SearchResult(
            found.to_datetime(start.tzinfo), str(self._expression), direction
        )

    def _search_forward(self, start: datetime) -> CandidateInstant | None:
        if start.year > MAX_YEAR:
            return None
        first = start.replace(microsecond=0, tzinfo=None)
        if first.year >= MIN_YEAR:
            first = first + _ONE_SECOND
        c = CandidateInstant.from_datetime(first)

        while c.year <= MAX_YEAR:
            year = self._year.ceiling(c.year)
            if year is None:
                return None
            if year != c.year:
                c.start_year(year)
                continue

            month = self._month.ceiling(c.month)
            if month is None:
                c.start_year(c.year + 1)
                continue
            if month != c.month:
                c.start_month(month)
                continue

            day = self._find_day(c.year, c.month, c.day, forward=True)
            if day is None:
                c.start_month(c.month + 1)
                continue
            if day != c.day:
                c.start_day(day)
                continue

            hour = self._hour.ceiling(c.hour)
            if hour is None:
                c.start_day(c.day + 1)
                continue
            if hour != c.hour:
                c.start_hour(hour)
                continue

            minute = self._minute.ceiling(c.minute)
            if minute is None:
                c.start_hour(c.hour + 1)
                continue
            if minute != c.minute:
                c.start_minute(minute)
                continue

            second = self._second.ceiling(c.second)
            if second is None:
                c.start_minute(c.minute + 1)
                continue
            if second != c.second:
                c.start_second(second)
                continue

            return c

        return None

    def _search_backward(self, start: datetime) -> CandidateInstant | None:
        if start.year < MIN_YEAR:
            return None
        first = start.replace(tzinfo=None)
        if first.microsecond:
            first = first.replace(microsecond=0)
        elif first.year <= MAX_YEAR:
            first = first - _ONE_SECOND
        c = CandidateInstant.from_datetime(first)

        while c.year >= MIN_YEAR:
            year = self._year.floor(c.year)
            if year is None:
                return None
            if year != c.year:
                c.end_year(year)
                continue

            month = self._month.floor(c.month)
            if month is None:
                c.end_year(c.year - 1)
                continue
            if month != c.month:
                c.end_month(month)
                continue

            day = self._find_day(c.year, c.month, c.day, forward=False)
            if day is None:
                c.end_month(c.month - 1)
                continue
            if day != c.day:
                c.end_day(day)
                continue

            hour = self._hour.floor(c.hour)
            if hour is None:
                c.end_day(c.day - 1)
                continue
            if hour != c.hour:
                c.end_hour(hour)
                continue

            minute = self._minute.floor(c.minute)
            if minute is None:
                c.end_hour(c.hour - 1)
                continue
            if minute != c.minute:
                c.end_minute(minute)
                continue

            second = self._second.floor(c.second)
            if second is None:
                c.end_minute(c.minute - 1)
                continue
            if second != c.second:
                c.end_second(second)
                continue

            return c

        return None

    def _find_day(
        self, year: int, month: int, day: int, *, forward: bool
    ) -> int | None:
        """First matching day at or after (before) ``day`` in the month."""
        if forward:
            days = range(day, days_in_month(year, month) + 1)
        else:
            days = range(day, 0, -1)
        for candidate in days:
            if self.day_matches(year, month, candidate):
                return candidate
        return None


def _value_set(expression: "CronExpression", kind: FieldKind) -> AnySet:
    constraint: FieldConstraint = expression.get_field(kind)
    if not isinstance(constraint, AnySet):
        raise TypeError(
            f"{kind.label} field must compile to a value set, "
            f"got {type(constraint).__name__}"
        )
    return constraint


# =============================================================================
# Module-level API
# =============================================================================


def search(
    expression: "CronExpression", start: datetime, direction: Direction
) -> SearchResult:
    """Search from ``start`` in ``direction``."""
    return CalendarWalker(expression).search(start, direction)


def next_valid_time(
    expression: "CronExpression", after: datetime
) -> datetime | None:
    """Next fire time strictly after ``after``, or None if exhausted."""
    return search(expression, after, Direction.FORWARD).instant


def previous_valid_time(
    expression: "CronExpression", before: datetime
) -> datetime | None:
    """Latest fire time strictly before ``before``, or None if exhausted."""
    return search(expression, before, Direction.BACKWARD).instant


def is_satisfied_by(expression: "CronExpression", instant: datetime) -> bool:
    """Check whether ``instant`` is a fire time, without searching."""
    return CalendarWalker(expression).is_satisfied_by(instant)
