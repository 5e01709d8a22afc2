"""Validation functions for cron expressions.

Validation compiles the expression and discards the result; no fire time is
searched for.
"""

from __future__ import annotations

from cronexpr.compiler import compile_fields
from cronexpr.errors import MalformedExpressionError


def validate(expression: str, *, strict: bool = False) -> None:
    """Validate a cron expression.

    Args:
        expression: Cron expression to validate.
        strict: Enforce the one-``?`` day-pair convention.

    Raises:
        MalformedExpressionError: The first problem found, naming the field
            and character position.
    """
    compile_fields(expression, strict=strict)


def validate_expression(expression: str, *, strict: bool = False) -> list[str]:
    """Validate a cron expression.

    Args:
        expression: Cron expression to validate.
        strict: Enforce the one-``?`` day-pair convention.

    Returns:
        List of validation errors (empty if valid).
    """
    errors = []

    try:
        validate(expression, strict=strict)
    except MalformedExpressionError as e:
        errors.append(str(e))

    return errors


def is_valid_expression(expression: str, *, strict: bool = False) -> bool:
    """Check if a cron expression is valid.

    Args:
        expression: Cron expression to check.
        strict: Enforce the one-``?`` day-pair convention.

    Returns:
        True if valid.
    """
    try:
        validate(expression, strict=strict)
        return True
    except MalformedExpressionError:
        return False
