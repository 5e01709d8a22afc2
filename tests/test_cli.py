"""Tests for the command-line interface."""

import json

import pytest
from typer.testing import CliRunner

from cronexpr.cli import ExitCode, app, describe_constraint
from cronexpr.constraints import (
    AnySet,
    LastOfPeriod,
    LastWeekdayOccurrence,
    NoSpecificValue,
    NthWeekdayOfMonth,
)


@pytest.fixture
def runner(clean_env):
    return CliRunner()


# =============================================================================
# validate / format
# =============================================================================


class TestValidateCommand:
    """Tests for `cronexpr validate`."""

    def test_valid(self, runner):
        """Valid expressions print 'valid'."""
        result = runner.invoke(app, ["validate", "0 0/30 9-17 * * ?"])
        assert result.exit_code == 0
        assert "valid" in result.output

    def test_invalid(self, runner):
        """Malformed expressions exit 1 and point at the problem."""
        result = runner.invoke(app, ["validate", "0 60 * * * ?"])
        assert result.exit_code == ExitCode.MALFORMED
        assert "minute" in result.output
        assert "^" in result.output

    def test_strict_from_env(self, runner, clean_env):
        """CRONEXPR_STRICT_DAY_PAIRING turns on strict mode."""
        clean_env.setenv("CRONEXPR_STRICT_DAY_PAIRING", "true")
        result = runner.invoke(app, ["validate", "0 0 0 * * *"])
        assert result.exit_code == ExitCode.MALFORMED

    def test_debug_logging_shows_pairing_warning(self, runner):
        """The day pairing warning is logged to stderr."""
        result = runner.invoke(app, ["--log-level", "debug", "validate", "0 0 0 ? * ?"])
        assert result.exit_code == 0
        assert "may not be used for both" in result.output


class TestFormatCommand:
    """Tests for `cronexpr format`."""

    def test_canonical(self, runner):
        """The canonical form is printed."""
        result = runner.invoke(app, ["format", "0 0/15 9-17 * JAN-MAR MON-FRI"])
        assert result.exit_code == 0
        assert result.output.strip() == "0 0/15 9-17 * 1-3 2-6"


# =============================================================================
# next / last
# =============================================================================


class TestNextCommand:
    """Tests for `cronexpr next`."""

    def test_next_count(self, runner):
        """--count limits the number of lines."""
        result = runner.invoke(
            app, ["next", "0 0 2 1 * ? *", "--from", "2020-04-16", "-n", "2"]
        )
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "2020-05-01 02:00:00",
            "2020-06-01 02:00:00",
        ]

    def test_default_count_from_config(self, runner, clean_env):
        """The default count comes from configuration."""
        clean_env.setenv("CRONEXPR_DEFAULT_COUNT", "3")
        result = runner.invoke(app, ["next", "0 0 12 * * ?", "--from", "2024-01-01"])
        assert result.exit_code == 0
        assert len(result.output.splitlines()) == 3

    def test_json_output(self, runner):
        """--json prints a JSON array."""
        result = runner.invoke(
            app,
            ["next", "0 15 10 ? * 6#3", "--from", "2020-04-16", "-n", "2", "--json"],
        )
        assert result.exit_code == 0
        assert json.loads(result.output) == ["2020-04-17 10:15:00", "2020-05-15 10:15:00"]

    def test_custom_format(self, runner):
        """--format sets the strftime pattern."""
        result = runner.invoke(
            app, ["next", "0 0 2 1 * ? *", "--from", "2020-04-16", "-n", "1", "-F", "%d.%m.%Y"]
        )
        assert result.output.strip() == "01.05.2020"

    def test_exhausted(self, runner):
        """A schedule with no fire times exits 2."""
        result = runner.invoke(app, ["next", "0 0 0 30 2 ?", "--from", "2024-01-01"])
        assert result.exit_code == ExitCode.EXHAUSTED

    def test_bad_start(self, runner):
        """An unparseable --from is a usage error."""
        result = runner.invoke(app, ["next", "0 0 12 * * ?", "--from", "yesterday"])
        assert result.exit_code == 2


class TestLastCommand:
    """Tests for `cronexpr last`."""

    def test_last(self, runner):
        """The previous fire time is printed."""
        result = runner.invoke(app, ["last", "0 0 2 1 * ? *", "--from", "2020-04-16"])
        assert result.exit_code == 0
        assert result.output.strip() == "2020-04-01 02:00:00"

    def test_exhausted(self, runner):
        """Nothing before 1970 exits 2."""
        result = runner.invoke(app, ["last", "0 0 0 1 1 ?", "--from", "1970-01-01"])
        assert result.exit_code == ExitCode.EXHAUSTED


# =============================================================================
# check / explain
# =============================================================================


class TestCheckCommand:
    """Tests for `cronexpr check`."""

    def test_match(self, runner):
        """A fire time prints 'yes' and exits 0."""
        result = runner.invoke(app, ["check", "0 15 10 ? * MON-FRI", "2024-01-15T10:15:00"])
        assert result.exit_code == 0
        assert result.output.strip() == "yes"

    def test_no_match(self, runner):
        """A non-fire time prints 'no' and exits 3."""
        result = runner.invoke(app, ["check", "0 15 10 ? * MON-FRI", "2024-01-20T10:15:00"])
        assert result.exit_code == ExitCode.NOT_SATISFIED
        assert result.output.strip() == "no"


class TestExplainCommand:
    """Tests for `cronexpr explain`."""

    def test_table(self, runner):
        """Each field is listed with its meaning."""
        result = runner.invoke(app, ["explain", "0 15 10 ? * 6L"])
        assert result.exit_code == 0
        assert "day-of-week" in result.output
        assert "last FRI of the month" in result.output

    def test_ored_note(self, runner):
        """Both day fields restricted adds a note."""
        result = runner.invoke(app, ["explain", "0 0 0 1 * MON"])
        assert result.exit_code == 0
        assert "either one fires" in result.output


class TestGlobalOptions:
    """Tests for options on the command group."""

    def test_config_file(self, runner, tmp_path):
        """--config loads settings from a file."""
        path = tmp_path / "cronexpr.yaml"
        path.write_text("datetime_format: '%Y/%m/%d'\n")
        result = runner.invoke(
            app, ["--config", str(path), "next", "0 0 2 1 * ? *", "--from", "2020-04-16", "-n", "1"]
        )
        assert result.exit_code == 0
        assert result.output.strip() == "2020/05/01"

    def test_missing_config_file(self, runner, tmp_path):
        """A missing config file exits 4."""
        result = runner.invoke(
            app, ["--config", str(tmp_path / "nope.yaml"), "validate", "0 0 12 * * ?"]
        )
        assert result.exit_code == ExitCode.CONFIG_ERROR

    def test_bad_log_level(self, runner):
        """An unknown --log-level exits 4."""
        result = runner.invoke(app, ["--log-level", "LOUD", "validate", "0 0 12 * * ?"])
        assert result.exit_code == ExitCode.CONFIG_ERROR


class TestDescribeConstraint:
    """Tests for describe_constraint()."""

    @pytest.mark.parametrize(
        "constraint,expected",
        [
            (AnySet(frozenset(range(60)), wildcard=True), "every value"),
            (AnySet(frozenset([5])), "only 5"),
            (AnySet(frozenset([1, 15])), "one of 1, 15"),
            (NoSpecificValue(), "no specific value"),
            (LastOfPeriod(), "last day of the month"),
            (LastOfPeriod(3), "3 day(s) before the last day of the month"),
            (NthWeekdayOfMonth(6, 3), "third FRI of the month"),
            (LastWeekdayOccurrence(2), "last MON of the month"),
        ],
    )
    def test_describe(self, constraint, expected):
        """Constraints are described in words."""
        assert describe_constraint(constraint) == expected
