"""Tests for preset expressions."""

from datetime import datetime

import pytest

from cronexpr.expression import CronExpression
from cronexpr.presets import (
    END_OF_QUARTER,
    LAST_FRIDAY,
    PRESETS,
    QUARTERLY,
    THIRD_FRIDAY,
    WEEKLY,
    get_preset,
    list_presets,
)


class TestPresets:
    """Tests for the preset registry."""

    def test_all_presets_are_expressions(self):
        """Every registered preset is a compiled expression."""
        for name, expr in PRESETS.items():
            assert isinstance(expr, CronExpression), name

    def test_list_presets(self):
        """list_presets() returns the registry names."""
        names = list_presets()
        assert "daily" in names
        assert "third_friday" in names
        assert len(names) == len(PRESETS)

    @pytest.mark.parametrize("name", ["last_friday", "last-friday", "LAST_FRIDAY"])
    def test_get_preset(self, name):
        """Lookup ignores case and accepts dashes."""
        assert get_preset(name) is LAST_FRIDAY

    def test_unknown_preset(self):
        """Unknown names give None."""
        assert get_preset("fortnightly") is None

    def test_weekly_matches_alias(self):
        """WEEKLY is the same schedule as @weekly."""
        assert WEEKLY == CronExpression.parse("@weekly")


class TestPresetSchedules:
    """Spot checks of preset fire times."""

    def test_third_friday(self):
        """Third Friday of May 2024."""
        assert THIRD_FRIDAY.next(datetime(2024, 5, 1)) == datetime(2024, 5, 17, 10, 15)

    def test_quarterly(self):
        """First day of the next quarter."""
        assert QUARTERLY.next(datetime(2024, 1, 1)) == datetime(2024, 4, 1)

    def test_end_of_quarter(self):
        """Last day of the quarter's final month."""
        assert END_OF_QUARTER.next(datetime(2024, 1, 1)) == datetime(2024, 3, 31)
        assert END_OF_QUARTER.next(datetime(2024, 4, 1)) == datetime(2024, 6, 30)
