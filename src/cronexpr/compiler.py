"""Compile field tokens into field constraints.

Each token is checked for characters its field does not permit, split into
comma-separated terms, and each term is compiled:

    *            every value (wildcard)
    ?            no specific value (day fields only)
    a            single value (number, or JAN-DEC / SUN-SAT name)
    a-b          inclusive range, a <= b
    a/s  */s     every s-th value from a (or the field minimum) to the maximum
    a-b/s        every s-th value from a to b
    L  L-n  LW   last day, n days before last day, last weekday (day-of-month)
    nW           weekday nearest to day n (day-of-month)
    L            Saturday (day-of-week)
    dL           last weekday d of the month (day-of-week)
    d#n          n-th weekday d of the month (day-of-week)

Special markers must stand alone in their field.
"""

from __future__ import annotations

import logging
import re

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
from cronexpr.errors import MalformedExpressionError
from cronexpr.fields import FIELD_SPECS, FieldKind, FieldSpec
from cronexpr.tokenizer import FieldToken, tokenize

logger = logging.getLogger(__name__)

_DIGITS = frozenset("0123456789")
_OPERATORS = frozenset("*,-/")

_LAST_OFFSET_RE = re.compile(r"^L-(\d+)$")
_NEAREST_WEEKDAY_RE = re.compile(r"^(\d+)W$")
_LAST_WEEKDAY_RE = re.compile(r"^([0-9A-Z]+)L$")
_NTH_WEEKDAY_RE = re.compile(r"^([0-9A-Z]+)#(\d+)$")

MAX_LAST_OFFSET = 30
MAX_OCCURRENCE = 5


def _allowed_characters(spec: FieldSpec) -> frozenset[str]:
    allowed = set(_DIGITS | _OPERATORS)
    if spec.supports_question:
        allowed.add("?")
    if spec.supports_hash:
        allowed.add("#")
    if spec.supports_l:
        allowed.add("L")
    if spec.supports_w:
        allowed.add("W")
    for name in spec.names:
        allowed.update(name)
    return frozenset(allowed)


_ALLOWED: dict[FieldKind, frozenset[str]] = {
    kind: _allowed_characters(spec) for kind, spec in FIELD_SPECS.items()
}


class FieldCompiler:
    """Compiles a single field token into a :class:`FieldConstraint`."""

    def __init__(self, token: FieldToken) -> None:
        self._token = token
        self._spec = FIELD_SPECS[token.kind]

    @property
    def kind(self) -> FieldKind:
        return self._token.kind

    def compile(self) -> FieldConstraint:
        """Compile the token.

        Raises:
            MalformedExpressionError: On any syntax or range violation.
        """
        token = self._token
        self._check_characters()

        if token.text == "*":
            return AnySet(self._spec.full_range, wildcard=True)

        if token.text == "?":
            return NoSpecificValue()
        if "?" in token.text:
            raise token.error("'?' cannot be combined with other values")

        terms = token.terms
        values: set[int] = set()
        offset = 0
        for term in terms:
            special = self._compile_special(term, offset)
            if special is not None:
                if len(terms) > 1:
                    raise token.error(
                        f"{term!r} cannot be combined with other values", offset
                    )
                return special
            values.update(self._compile_term(term, offset))
            offset += len(term) + 1

        return AnySet(frozenset(values))

    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------

    def _check_characters(self) -> None:
        allowed = _ALLOWED[self.kind]
        for offset, char in enumerate(self._token.text):
            if char not in allowed:
                raise self._token.error(
                    f"character {char!r} is not allowed in this field", offset
                )

    # -------------------------------------------------------------------------
    # Special markers
    # -------------------------------------------------------------------------

    def _compile_special(self, term: str, offset: int) -> FieldConstraint | None:
        if self.kind == FieldKind.DAY_OF_MONTH:
            return self._compile_day_of_month_special(term, offset)
        if self.kind == FieldKind.DAY_OF_WEEK:
            return self._compile_day_of_week_special(term, offset)
        return None

    def _compile_day_of_month_special(
        self, term: str, offset: int
    ) -> FieldConstraint | None:
        if term == "L":
            return LastOfPeriod()
        if term == "LW":
            return LastWeekdayOfPeriod()

        match = _LAST_OFFSET_RE.match(term)
        if match:
            days_before = int(match.group(1))
            if days_before > MAX_LAST_OFFSET:
                raise self._token.error(
                    f"offset from last day must be 0-{MAX_LAST_OFFSET}, "
                    f"got {days_before}",
                    offset,
                )
            return LastOfPeriod(days_before)

        match = _NEAREST_WEEKDAY_RE.match(term)
        if match:
            day = self._resolve_value(match.group(1), offset)
            return NearestWeekdayTo(day)

        if "L" in term or "W" in term:
            raise self._token.error(f"invalid use of L/W in {term!r}", offset)
        return None

    def _compile_day_of_week_special(
        self, term: str, offset: int
    ) -> FieldConstraint | None:
        if term == "L":
            return AnySet(frozenset([self._spec.max_value]))

        match = _NTH_WEEKDAY_RE.match(term)
        if match:
            weekday = self._resolve_value(match.group(1), offset)
            occurrence = int(match.group(2))
            if not 1 <= occurrence <= MAX_OCCURRENCE:
                raise self._token.error(
                    f"occurrence after '#' must be 1-{MAX_OCCURRENCE}, "
                    f"got {occurrence}",
                    offset + len(match.group(1)) + 1,
                )
            return NthWeekdayOfMonth(weekday, occurrence)
        if "#" in term:
            raise self._token.error(f"invalid '#' expression {term!r}", offset)

        match = _LAST_WEEKDAY_RE.match(term)
        if match:
            weekday = self._resolve_value(match.group(1), offset)
            return LastWeekdayOccurrence(weekday)
        return None

    # -------------------------------------------------------------------------
    # Value terms
    # -------------------------------------------------------------------------

    def _compile_term(self, term: str, offset: int) -> set[int]:
        """Compile a value, range, or step term into a set of values."""
        spec = self._spec

        if "/" in term:
            return self._compile_step(term, offset)

        if term == "*":
            return set(spec.full_range)

        if "-" in term:
            start, end = self._compile_range(term, offset)
            return set(range(start, end + 1))

        return {self._resolve_value(term, offset)}

    def _compile_step(self, term: str, offset: int) -> set[int]:
        base, _, step_text = term.partition("/")
        if "/" in step_text:
            raise self._token.error(f"invalid step {term!r}", offset)
        step_offset = offset + len(base) + 1
        if not step_text or not step_text.isdigit():
            raise self._token.error(
                f"step must be a positive integer, got {step_text!r}", step_offset
            )
        step = int(step_text)
        if step <= 0:
            raise self._token.error(
                f"step must be a positive integer, got {step}", step_offset
            )

        if base == "*":
            start, end = self._spec.min_value, self._spec.max_value
        elif "-" in base:
            start, end = self._compile_range(base, offset)
        elif base:
            start, end = self._resolve_value(base, offset), self._spec.max_value
        else:
            raise self._token.error(f"missing start value in {term!r}", offset)

        return set(range(start, end + 1, step))

    def _compile_range(self, term: str, offset: int) -> tuple[int, int]:
        parts = term.split("-")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise self._token.error(f"invalid range {term!r}", offset)

        start = self._resolve_value(parts[0], offset)
        end = self._resolve_value(parts[1], offset + len(parts[0]) + 1)
        if start > end:
            raise self._token.error(
                f"range start {start} is greater than end {end} "
                "(wrap-around ranges are not supported)",
                offset,
            )
        return start, end

    def _resolve_value(self, text: str, offset: int) -> int:
        """Resolve a number or name to an in-range integer."""
        spec = self._spec

        if text in spec.names:
            return spec.names[text]

        if not text.isdigit():
            if spec.names:
                raise self._token.error(f"unknown name {text!r}", offset)
            raise self._token.error(f"invalid value {text!r}", offset)

        value = int(text)
        if not spec.contains(value):
            raise self._token.error(
                f"value {value} out of range "
                f"[{spec.min_value}-{spec.max_value}]",
                offset,
            )
        return value


# =============================================================================
# Expression-level compilation
# =============================================================================


def compile_field(token: FieldToken) -> FieldConstraint:
    """Compile one field token."""
    return FieldCompiler(token).compile()


def compile_fields(
    expression: str, *, strict: bool = False
) -> tuple[FieldConstraint, ...]:
    """Compile all fields of an expression.

    An omitted year field compiles to a wildcard.

    Args:
        expression: Cron expression text.
        strict: Reject expressions where the day fields are not paired as
            one ``?`` and one value.

    Returns:
        Seven constraints in field order.

    Raises:
        MalformedExpressionError: If the expression is invalid.
    """
    tokens = tokenize(expression)
    constraints = [compile_field(token) for token in tokens]
    if len(constraints) == 6:
        constraints.append(
            AnySet(FIELD_SPECS[FieldKind.YEAR].full_range, wildcard=True)
        )

    _check_day_pairing(expression, tokens, constraints, strict)
    logger.debug("Compiled cron expression %r", expression)
    return tuple(constraints)


def _check_day_pairing(
    expression: str,
    tokens: tuple[FieldToken, ...],
    constraints: list[FieldConstraint],
    strict: bool,
) -> None:
    """Apply the one-``?``-per-day-pair convention.

    Quartz requires exactly one of day-of-month and day-of-week to be ``?``.
    Violations are logged, and only raised when ``strict`` is set.
    """
    day_of_month = isinstance(constraints[3], NoSpecificValue)
    day_of_week = isinstance(constraints[5], NoSpecificValue)
    if day_of_month != day_of_week:
        return

    if day_of_month:
        message = "'?' may not be used for both day-of-month and day-of-week"
        if strict:
            raise tokens[5].error(message)
        logger.warning("%s in %r; every day will match", message, expression)
    else:
        message = "one of day-of-month and day-of-week should be '?'"
        if strict:
            raise tokens[5].error(message)
        logger.debug("%s in %r", message, expression)
