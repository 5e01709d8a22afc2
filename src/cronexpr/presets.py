"""Predefined cron expression presets.

This module provides commonly used schedules as compiled constants.

Usage:
    >>> from cronexpr.presets import DAILY, WEEKDAYS_9AM
    >>>
    >>> next_run = DAILY.next()
    >>> get_preset("last-friday").next()
"""

from __future__ import annotations

from cronexpr.expression import CronExpression


# =============================================================================
# Standard Intervals
# =============================================================================

# Every year on January 1st at midnight
YEARLY = CronExpression.parse("0 0 0 1 1 ?")

# First day of every month at midnight
MONTHLY = CronExpression.parse("0 0 0 1 * ?")

# Every Sunday at midnight
WEEKLY = CronExpression.parse("0 0 0 ? * SUN")

# Every day at midnight
DAILY = CronExpression.parse("0 0 0 * * ?")

# Every hour at minute 0
HOURLY = CronExpression.parse("0 0 * * * ?")

EVERY_MINUTE = CronExpression.parse("0 * * * * ?")

EVERY_SECOND = CronExpression.parse("* * * * * ?")


# =============================================================================
# Business Schedule Presets
# =============================================================================

# Weekdays (Monday-Friday) at 9 AM
WEEKDAYS_9AM = CronExpression.parse("0 0 9 ? * MON-FRI")

# Weekdays at 10:15
WEEKDAYS_1015 = CronExpression.parse("0 15 10 ? * MON-FRI")

# Every 30 minutes, 9 AM to 5 PM
BUSINESS_HOURS_30MIN = CronExpression.parse("0 0/30 9-17 * * ?")


# =============================================================================
# Month Boundary Presets
# =============================================================================

# First day of month at 2 AM
FIRST_OF_MONTH = CronExpression.parse("0 0 2 1 * ?")

# Last day of month at 10:15
LAST_OF_MONTH = CronExpression.parse("0 15 10 L * ?")

# Last weekday of month at 6 PM
LAST_WEEKDAY_OF_MONTH = CronExpression.parse("0 0 18 LW * ?")

# Last Friday of month at 10:15
LAST_FRIDAY = CronExpression.parse("0 15 10 ? * 6L")

# Third Friday of month at 10:15
THIRD_FRIDAY = CronExpression.parse("0 15 10 ? * 6#3")

# Weekday nearest the 15th at 10:15
MID_MONTH_WEEKDAY = CronExpression.parse("0 15 10 15W * ?")


# =============================================================================
# Quarter Presets
# =============================================================================

QUARTERLY = CronExpression.parse("0 0 0 1 1,4,7,10 ?")

END_OF_QUARTER = CronExpression.parse("0 0 0 L 3,6,9,12 ?")


# =============================================================================
# Preset Registry
# =============================================================================

PRESETS: dict[str, CronExpression] = {
    "yearly": YEARLY,
    "monthly": MONTHLY,
    "weekly": WEEKLY,
    "daily": DAILY,
    "hourly": HOURLY,
    "every_minute": EVERY_MINUTE,
    "every_second": EVERY_SECOND,
    "weekdays_9am": WEEKDAYS_9AM,
    "weekdays_1015": WEEKDAYS_1015,
    "business_hours_30min": BUSINESS_HOURS_30MIN,
    "first_of_month": FIRST_OF_MONTH,
    "last_of_month": LAST_OF_MONTH,
    "last_weekday_of_month": LAST_WEEKDAY_OF_MONTH,
    "last_friday": LAST_FRIDAY,
    "third_friday": THIRD_FRIDAY,
    "mid_month_weekday": MID_MONTH_WEEKDAY,
    "quarterly": QUARTERLY,
    "end_of_quarter": END_OF_QUARTER,
}


def get_preset(name: str) -> CronExpression | None:
    """Get a preset cron expression by name.

    Args:
        name: Preset name (case-insensitive, ``-`` or ``_``).

    Returns:
        CronExpression or None if not found.
    """
    return PRESETS.get(name.lower().replace("-", "_"))


def list_presets() -> list[str]:
    """List all available preset names."""
    return list(PRESETS.keys())
