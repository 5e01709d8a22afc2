"""Quartz-style cron expressions for Python.

This package parses six- and seven-field cron expressions and computes their
fire times by walking the calendar.

Features:
    - 6-field cron with seconds, optional 7th year field
    - Special characters: * / , - ? L W #
    - Named months and weekdays (JAN-DEC, SUN-SAT)
    - Predefined aliases (@yearly, @monthly, @weekly, @daily, @hourly)
    - Next and previous fire time search
    - Validation with field and position in error messages
    - Canonical formatting

Syntax Reference:
    Field         Values           Special Characters
    ───────────────────────────────────────────────────
    Second        0-59             * / , -
    Minute        0-59             * / , -
    Hour          0-23             * / , -
    Day of Month  1-31             * / , - ? L W
    Month         1-12 or JAN-DEC  * / , -
    Day of Week   1-7 or SUN-SAT   * / , - ? L #
    Year          1970-2099        * / , -

When both day fields are restricted, a day matching either one fires.

Usage:
    >>> from datetime import datetime
    >>> from cronexpr import CronExpression, get_next_time
    >>>
    >>> expr = CronExpression.parse("0 15 10 ? * 6L")
    >>> expr.next(datetime(2024, 3, 1))
    datetime.datetime(2024, 3, 29, 10, 15)
    >>>
    >>> get_next_time("0 0 2 1 * ? *", datetime(2020, 4, 16))
    datetime.datetime(2020, 5, 1, 2, 0)
"""

from cronexpr.api import (
    format_expression,
    get_last_time,
    get_last_time_str,
    get_next_time,
    get_next_time_list,
    get_next_time_str,
    get_next_time_str_list,
    is_satisfied_by,
    is_valid_expression,
)
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
from cronexpr.errors import (
    ConfigError,
    CronError,
    InvalidArgumentError,
    MalformedExpressionError,
    ScheduleExhaustedError,
)
from cronexpr.expression import CronExpression, CronIterator, compile_expression
from cronexpr.fields import FIELD_SPECS, FieldKind
from cronexpr.formatter import format_datetime
from cronexpr.validator import validate, validate_expression
from cronexpr.walker import (
    CalendarWalker,
    Direction,
    SearchResult,
    next_valid_time,
    previous_valid_time,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "CronExpression",
    "CronIterator",
    "compile_expression",
    "FieldKind",
    "FIELD_SPECS",
    # Constraints
    "FieldConstraint",
    "AnySet",
    "NoSpecificValue",
    "LastOfPeriod",
    "LastWeekdayOfPeriod",
    "NearestWeekdayTo",
    "NthWeekdayOfMonth",
    "LastWeekdayOccurrence",
    # Walker
    "CalendarWalker",
    "Direction",
    "SearchResult",
    "next_valid_time",
    "previous_valid_time",
    # Validation
    "validate",
    "validate_expression",
    "is_valid_expression",
    # Formatting
    "format_expression",
    "format_datetime",
    # API helpers
    "get_next_time",
    "get_next_time_str",
    "get_next_time_list",
    "get_next_time_str_list",
    "get_last_time",
    "get_last_time_str",
    "is_satisfied_by",
    # Configuration
    "CronConfig",
    "load_config",
    # Errors
    "CronError",
    "MalformedExpressionError",
    "InvalidArgumentError",
    "ScheduleExhaustedError",
    "ConfigError",
]
