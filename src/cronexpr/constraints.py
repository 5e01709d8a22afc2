"""Compiled field constraints.

Each cron field compiles to exactly one :class:`FieldConstraint`. The family
is closed: a plain set of allowed values (:class:`AnySet`), the ``?`` marker,
and the calendar-relative markers (``L``, ``L-n``, ``LW``, ``nW``, ``d#n``,
``dL``) that can only be resolved once the year and month are known.

Constraints are frozen dataclasses, so compiled expressions compare and hash
by value.
"""

from __future__ import annotations

import calendar
from abc import ABC, abstractmethod
from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from datetime import date

from cronexpr.fields import cron_weekday


@dataclass(frozen=True)
class MatchContext:
    """Calendar context for resolving month-relative constraints."""

    year: int
    month: int
    day: int

    @property
    def last_day(self) -> int:
        return days_in_month(self.year, self.month)


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month (leap years included)."""
    return calendar.monthrange(year, month)[1]


# =============================================================================
# Base
# =============================================================================


class FieldConstraint(ABC):
    """A compiled constraint on one cron field."""

    __slots__ = ()

    @property
    def is_restricted(self) -> bool:
        """True unless the constraint accepts every value (``*`` or ``?``)."""
        return True

    @abstractmethod
    def matches(self, value: int, context: MatchContext | None = None) -> bool:
        """Check whether a field value satisfies this constraint.

        Args:
            value: The field value (day-of-week uses 1=SUN..7=SAT).
            context: Year, month and day, required by month-relative markers.

        Returns:
            True if the value is accepted.
        """


class DayResolvingConstraint(FieldConstraint):
    """Constraint that selects at most one day of each month."""

    __slots__ = ()

    @abstractmethod
    def resolve_day(self, year: int, month: int) -> int | None:
        """Return the matching day of the month, or None if there is none."""

    def matches(self, value: int, context: MatchContext | None = None) -> bool:
        if context is None:
            return False
        return self.resolve_day(context.year, context.month) == context.day


# =============================================================================
# Value Sets
# =============================================================================


@dataclass(frozen=True)
class AnySet(FieldConstraint):
    """Set of allowed integer values.

    ``wildcard`` is True only for a literal ``*``; an explicit full range such
    as ``0-59`` still counts as restricted for day-pairing purposes.
    """

    values: frozenset[int]
    wildcard: bool = False
    _sorted: tuple[int, ...] = field(
        init=False, repr=False, compare=False, hash=False
    )

    def __post_init__(self) -> None:
        if not self.values:
            raise ValueError("AnySet requires at least one value")
        object.__setattr__(self, "_sorted", tuple(sorted(self.values)))

    @property
    def is_restricted(self) -> bool:
        return not self.wildcard

    @property
    def sorted_values(self) -> tuple[int, ...]:
        return self._sorted

    def matches(self, value: int, context: MatchContext | None = None) -> bool:
        return value in self.values

    def ceiling(self, value: int) -> int | None:
        """Smallest allowed value >= ``value``."""
        idx = bisect_left(self._sorted, value)
        return self._sorted[idx] if idx < len(self._sorted) else None

    def floor(self, value: int) -> int | None:
        """Largest allowed value <= ``value``."""
        idx = bisect_right(self._sorted, value)
        return self._sorted[idx - 1] if idx > 0 else None

    @property
    def first(self) -> int:
        return self._sorted[0]

    @property
    def last(self) -> int:
        return self._sorted[-1]


@dataclass(frozen=True)
class NoSpecificValue(FieldConstraint):
    """``?`` on a day field: this field does not constrain the day."""

    @property
    def is_restricted(self) -> bool:
        return False

    def matches(self, value: int, context: MatchContext | None = None) -> bool:
        return True


# =============================================================================
# Day-of-Month Markers
# =============================================================================


@dataclass(frozen=True)
class LastOfPeriod(DayResolvingConstraint):
    """``L`` or ``L-n``: the last day of the month, minus ``offset`` days."""

    offset: int = 0

    def resolve_day(self, year: int, month: int) -> int | None:
        day = days_in_month(year, month) - self.offset
        return day if day >= 1 else None


@dataclass(frozen=True)
class LastWeekdayOfPeriod(DayResolvingConstraint):
    """``LW``: the last Monday-Friday of the month."""

    def resolve_day(self, year: int, month: int) -> int | None:
        last = days_in_month(year, month)
        weekday = date(year, month, last).weekday()
        if weekday == 5:
            return last - 1
        if weekday == 6:
            return last - 2
        return last


@dataclass(frozen=True)
class NearestWeekdayTo(DayResolvingConstraint):
    """``nW``: the Monday-Friday closest to day ``day``.

    The result never leaves the month: a Saturday on the 1st moves forward to
    Monday the 3rd, and a Sunday on the last day moves back to Friday. Months
    shorter than ``day`` have no match.
    """

    day: int

    def resolve_day(self, year: int, month: int) -> int | None:
        last = days_in_month(year, month)
        if self.day > last:
            return None
        weekday = date(year, month, self.day).weekday()
        if weekday == 5:
            return self.day + 2 if self.day == 1 else self.day - 1
        if weekday == 6:
            return self.day - 2 if self.day == last else self.day + 1
        return self.day


# =============================================================================
# Day-of-Week Markers
# =============================================================================


@dataclass(frozen=True)
class NthWeekdayOfMonth(DayResolvingConstraint):
    """``d#n``: the n-th occurrence of weekday ``weekday`` in the month."""

    weekday: int
    occurrence: int

    def resolve_day(self, year: int, month: int) -> int | None:
        first = cron_weekday(date(year, month, 1).weekday())
        day = 1 + (self.weekday - first) % 7 + 7 * (self.occurrence - 1)
        return day if day <= days_in_month(year, month) else None


@dataclass(frozen=True)
class LastWeekdayOccurrence(DayResolvingConstraint):
    """``dL``: the last occurrence of weekday ``weekday`` in the month."""

    weekday: int

    def resolve_day(self, year: int, month: int) -> int | None:
        last = days_in_month(year, month)
        last_weekday = cron_weekday(date(year, month, last).weekday())
        return last - (last_weekday - self.weekday) % 7
