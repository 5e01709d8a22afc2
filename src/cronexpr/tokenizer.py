"""Split cron expression text into positional field tokens."""

from __future__ import annotations

import re
from dataclasses import dataclass

from cronexpr.errors import MalformedExpressionError
from cronexpr.fields import FIELD_ORDER, FieldKind

# Predefined expression aliases, expanded to six-field form
ALIASES: dict[str, str] = {
    "@yearly": "0 0 0 1 1 ?",
    "@annually": "0 0 0 1 1 ?",
    "@monthly": "0 0 0 1 * ?",
    "@weekly": "0 0 0 ? * 1",
    "@daily": "0 0 0 * * ?",
    "@midnight": "0 0 0 * * ?",
    "@hourly": "0 0 * * * ?",
}

_FIELD_RE = re.compile(r"\S+")


@dataclass(frozen=True)
class FieldToken:
    """One whitespace-separated field of an expression.

    Attributes:
        kind: Which field this token fills.
        text: Upper-cased token text.
        index: Zero-based field index.
        position: Character offset of the token in the expression.
        expression: The full expression the token came from.
    """

    kind: FieldKind
    text: str
    index: int
    position: int
    expression: str

    @property
    def terms(self) -> tuple[str, ...]:
        """Comma-separated sub-terms of the token."""
        return tuple(self.text.split(","))

    def error(self, message: str, offset: int = 0) -> MalformedExpressionError:
        """Build a parse error pointing into this token."""
        return MalformedExpressionError(
            f"Invalid {self.kind.label} field {self.text!r} "
            f"(position {self.position + offset}): {message}",
            self.expression,
            self.position + offset,
            self.kind,
        )


def resolve_alias(expression: str) -> str:
    """Expand ``@daily`` style aliases; other text is returned unchanged."""
    return ALIASES.get(expression.strip().lower(), expression)


def tokenize(expression: str) -> tuple[FieldToken, ...]:
    """Split an expression into six or seven field tokens.

    Args:
        expression: Cron expression text.

    Returns:
        Tokens in field order (seconds first).

    Raises:
        MalformedExpressionError: If the field count is wrong or a field
            contains an empty list term.
    """
    if not isinstance(expression, str):
        raise MalformedExpressionError(
            f"Expression must be a string, got {type(expression).__name__}"
        )

    text = resolve_alias(expression)
    matches = list(_FIELD_RE.finditer(text))

    if len(matches) not in (6, 7):
        raise MalformedExpressionError(
            f"Invalid number of fields: {len(matches)}. Expected 6 or 7 fields "
            "(second minute hour day-of-month month day-of-week [year]).",
            expression,
        )

    tokens = []
    for index, match in enumerate(matches):
        token = FieldToken(
            kind=FIELD_ORDER[index],
            text=match.group().upper(),
            index=index,
            position=match.start(),
            expression=text,
        )
        offset = 0
        for term in token.terms:
            if not term:
                raise token.error("empty list element", offset)
            offset += len(term) + 1
        tokens.append(token)

    return tuple(tokens)
