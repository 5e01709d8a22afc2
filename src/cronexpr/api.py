"""Convenience functions over cron expression text.

Each function takes the expression as a string, compiles it through a small
cache, and delegates to the engine:

    1. Validate and format: is_valid_expression, format_expression
    2. Next fire time(s): get_next_time, get_next_time_list
    3. The same as formatted strings: get_next_time_str, get_next_time_str_list
    4. Previous fire time: get_last_time, get_last_time_str
    5. Match check: is_satisfied_by

Example:
    >>> from datetime import datetime
    >>> from cronexpr import api
    >>> api.get_next_time("0 0 2 1 * ? *", datetime(2020, 4, 16))
    datetime.datetime(2020, 5, 1, 2, 0)
    >>> api.get_next_time_str_list("0 15 10 ? * 6#3", datetime(2020, 4, 16), 2)
    ['2020-04-17 10:15:00', '2020-05-15 10:15:00']
"""

from __future__ import annotations

import logging
from datetime import datetime
from functools import lru_cache

from cronexpr.errors import InvalidArgumentError
from cronexpr.expression import CronExpression
from cronexpr.formatter import DEFAULT_DATETIME_FORMAT, format_datetime
from cronexpr.validator import is_valid_expression as _is_valid

logger = logging.getLogger(__name__)

COMPILE_CACHE_SIZE = 256


@lru_cache(maxsize=COMPILE_CACHE_SIZE)
def compile_cached(expression: str) -> CronExpression:
    """Parse an expression, reusing earlier results for the same text."""
    return CronExpression.parse(expression)


def is_valid_expression(expression: str) -> bool:
    """Check if a cron expression is valid."""
    return _is_valid(expression)


def format_expression(expression: str) -> str:
    """Return the canonical form of an expression.

    Raises:
        MalformedExpressionError: If the expression is invalid.
    """
    return compile_cached(expression).canonical


def get_next_time(expression: str, date: datetime | None = None) -> datetime | None:
    """Next fire time after ``date``.

    Args:
        expression: Cron expression.
        date: Start instant (default: now).

    Returns:
        The next fire time, or None if the schedule has no more fire times.
    """
    return compile_cached(expression).next(date)


def get_next_time_str(
    expression: str,
    date: datetime | None = None,
    pattern: str = DEFAULT_DATETIME_FORMAT,
) -> str | None:
    """Next fire time after ``date``, formatted with ``pattern``."""
    next_time = get_next_time(expression, date)
    return format_datetime(next_time, pattern) if next_time is not None else None


def get_next_time_list(
    expression: str, date: datetime | None = None, count: int = 1
) -> list[datetime]:
    """The next ``count`` fire times after ``date``.

    Each result is the start instant of the following search.

    Args:
        expression: Cron expression.
        date: Start instant (default: now).
        count: Number of fire times to produce.

    Returns:
        Fire times in increasing order; fewer than ``count`` when the
        schedule runs out.

    Raises:
        InvalidArgumentError: If ``count`` is less than 1.
    """
    if count < 1:
        raise InvalidArgumentError(f"count must be greater than 0, got {count}")

    times = list(compile_cached(expression).iter(date, limit=count))
    if len(times) < count:
        logger.debug(
            "Schedule %r produced %d of %d requested fire times",
            expression, len(times), count,
        )
    return times


def get_next_time_str_list(
    expression: str,
    date: datetime | None = None,
    count: int = 1,
    pattern: str = DEFAULT_DATETIME_FORMAT,
) -> list[str]:
    """The next ``count`` fire times, formatted with ``pattern``."""
    return [
        format_datetime(t, pattern)
        for t in get_next_time_list(expression, date, count)
    ]


def get_last_time(expression: str, date: datetime | None = None) -> datetime | None:
    """Latest fire time before ``date`` (default: now)."""
    return compile_cached(expression).previous(date)


def get_last_time_str(
    expression: str,
    date: datetime | None = None,
    pattern: str = DEFAULT_DATETIME_FORMAT,
) -> str | None:
    """Latest fire time before ``date``, formatted with ``pattern``."""
    last_time = get_last_time(expression, date)
    return format_datetime(last_time, pattern) if last_time is not None else None


def is_satisfied_by(expression: str, date: datetime) -> bool:
    """Check whether ``date`` is a fire time of the expression."""
    return compile_cached(expression).matches(date)
