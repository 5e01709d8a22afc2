"""Cron field kinds and their value ranges.

Field order in an expression:

    Field         Values           Special Characters
    ───────────────────────────────────────────────────
    Second        0-59             * / , -
    Minute        0-59             * / , -
    Hour          0-23             * / , -
    Day of Month  1-31             * / , - ? L W
    Month         1-12 or JAN-DEC  * / , -
    Day of Week   1-7 or SUN-SAT   * / , - ? L #
    Year          1970-2099        * / , -

Day of week uses 1=SUN through 7=SAT.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class FieldKind(Enum):
    """Types of cron fields, in expression order."""

    SECOND = auto()
    MINUTE = auto()
    HOUR = auto()
    DAY_OF_MONTH = auto()
    MONTH = auto()
    DAY_OF_WEEK = auto()
    YEAR = auto()

    @property
    def label(self) -> str:
        """Human-readable field name used in error messages."""
        return self.name.lower().replace("_", "-")


# Positional order of fields in an expression
FIELD_ORDER: tuple[FieldKind, ...] = (
    FieldKind.SECOND,
    FieldKind.MINUTE,
    FieldKind.HOUR,
    FieldKind.DAY_OF_MONTH,
    FieldKind.MONTH,
    FieldKind.DAY_OF_WEEK,
    FieldKind.YEAR,
)


@dataclass(frozen=True)
class FieldSpec:
    """Value range, names and permitted special characters for a field."""

    min_value: int
    max_value: int
    names: dict[str, int] = field(default_factory=dict)
    supports_question: bool = False
    supports_l: bool = False
    supports_w: bool = False
    supports_hash: bool = False

    def contains(self, value: int) -> bool:
        return self.min_value <= value <= self.max_value

    @property
    def full_range(self) -> frozenset[int]:
        return frozenset(range(self.min_value, self.max_value + 1))


MONTH_NAMES: dict[str, int] = {
    "JAN": 1, "FEB": 2, "MAR": 3, "APR": 4,
    "MAY": 5, "JUN": 6, "JUL": 7, "AUG": 8,
    "SEP": 9, "OCT": 10, "NOV": 11, "DEC": 12,
}

WEEKDAY_NAMES: dict[str, int] = {
    "SUN": 1, "MON": 2, "TUE": 3, "WED": 4,
    "THU": 5, "FRI": 6, "SAT": 7,
}

MIN_YEAR = 1970
MAX_YEAR = 2099

FIELD_SPECS: dict[FieldKind, FieldSpec] = {
    FieldKind.SECOND: FieldSpec(0, 59),
    FieldKind.MINUTE: FieldSpec(0, 59),
    FieldKind.HOUR: FieldSpec(0, 23),
    FieldKind.DAY_OF_MONTH: FieldSpec(
        1, 31,
        supports_question=True,
        supports_l=True,
        supports_w=True,
    ),
    FieldKind.MONTH: FieldSpec(1, 12, names=MONTH_NAMES),
    FieldKind.DAY_OF_WEEK: FieldSpec(
        1, 7,
        names=WEEKDAY_NAMES,
        supports_question=True,
        supports_l=True,
        supports_hash=True,
    ),
    FieldKind.YEAR: FieldSpec(MIN_YEAR, MAX_YEAR),
}


def cron_weekday(python_weekday: int) -> int:
    """Convert ``date.weekday()`` (Monday=0) to cron numbering (Sunday=1)."""
    return (python_weekday + 1) % 7 + 1
