"""Exception hierarchy for cronexpr.

All errors raised by the package derive from :class:`CronError`, so callers
can catch one type. Parse-time and argument errors also subclass
``ValueError`` for compatibility with code that expects it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cronexpr.fields import FieldKind


class CronError(Exception):
    """Base class for all cronexpr errors."""

    pass


class MalformedExpressionError(CronError, ValueError):
    """Raised when a cron expression cannot be compiled.

    Attributes:
        expression: The expression text that failed.
        position: Character offset of the offending token (-1 if unknown).
        field: The field the error occurred in, if known.
    """

    def __init__(
        self,
        message: str,
        expression: str = "",
        position: int = -1,
        field: "FieldKind | None" = None,
    ) -> None:
        self.expression = expression
        self.position = position
        self.field = field
        super().__init__(message)

    def describe(self) -> str:
        """Render the message with a caret under the offending position."""
        if not self.expression or self.position < 0:
            return str(self)
        return f"{self}\n  {self.expression}\n  {' ' * self.position}^"


class InvalidArgumentError(CronError, ValueError):
    """Raised when an API function is called with an invalid argument."""

    pass


class ScheduleExhaustedError(CronError):
    """Raised when a schedule has no fire time within the supported years."""

    def __init__(self, expression: str, direction: str) -> None:
        self.expression = expression
        self.direction = direction
        super().__init__(
            f"No {direction} fire time for {expression!r} "
            "within the supported year range"
        )


class ConfigError(CronError):
    """Raised when configuration cannot be loaded or is invalid."""

    pass
