"""Tests for the click command line."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from monthview.cli import main
from monthview.config import Config


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def default_config():
    with patch("monthview.cli.load_config", return_value=Config()) as mock_load:
        yield mock_load


class TestShow:
    def test_prints_grid(self, runner):
        result = runner.invoke(main, ["show", "--month", "2024-03"])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "March 2024"
        assert "31" in lines[-1]

    def test_invalid_month(self, runner):
        result = runner.invoke(main, ["show", "--month", "2024-13"])
        assert result.exit_code == 2
        assert "Invalid month '2024-13'" in result.output

    @pytest.mark.parametrize("value", ["0000-06", "10000-01"])
    def test_year_out_of_range(self, runner, value):
        result = runner.invoke(main, ["show", "--month", value])
        assert result.exit_code == 2
        assert "Year out of range" in result.output


class TestDays:
    def test_year_out_of_range(self, runner):
        result = runner.invoke(main, ["days", "--month", "10000-01"])
        assert result.exit_code == 2
        assert "Year out of range" in result.output

    def test_json(self, runner):
        result = runner.invoke(main, ["days", "--month", "2024-02", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["label"] == "February 2024"
        assert len(data["dates"]) == 29
        assert data["dates"][0] == "2024-02-01"
        assert data["dates"][-1] == "2024-02-29"

    def test_text(self, runner):
        result = runner.invoke(main, ["days", "-m", "2023-02"])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "February 2023"
        assert lines[1].strip() == "2023-02-01 Wed"
        assert len(lines) == 29


class TestShell:
    def test_add_and_list(self, runner):
        result = runner.invoke(
            main,
            ["shell", "--month", "2024-03"],
            input="select 5\nadd Lunch @ 12:00\nlist\nquit\n",
        )
        assert result.exit_code == 0
        assert "12:00 PM  Lunch" in result.output

    def test_errors_do_not_end_session(self, runner):
        result = runner.invoke(
            main,
            ["shell", "--month", "2024-03"],
            input="explode\nnext\nquit\n",
        )
        assert result.exit_code == 0
        assert "Unknown command" in result.output
        assert "April 2024" in result.output

    def test_end_of_input_exits(self, runner):
        result = runner.invoke(main, ["shell", "--month", "2024-03"], input="next\n")
        assert result.exit_code == 0
        assert "April 2024" in result.output

    def test_uses_regroup_setting(self, runner, default_config):
        default_config.return_value = Config(regroup_on_date_change=True)
        result = runner.invoke(
            main,
            ["shell", "--month", "2024-03"],
            input="select 5\nadd Lunch @ 12:00\ndate 1 2024-03-09\nlist\nselect 9\nlist\nquit\n",
        )
        assert result.exit_code == 0
        assert "No events for this date" in result.output
        assert "Mar 9, 2024" in result.output


    def test_navigating_past_last_year_reports_error(self, runner):
        result = runner.invoke(
            main,
            ["shell", "--month", "9999-12"],
            input="next\nlist\nquit\n",
        )
        assert result.exit_code == 0
        assert "Year out of range: 10000" in result.output
        assert "December 9999" in result.output


class TestBot:
    def test_missing_token(self, runner):
        with patch("monthview.telegram_bot.load_config", return_value=Config()):
            result = runner.invoke(main, ["bot"])
        assert result.exit_code == 1
        assert "TELEGRAM_BOT_TOKEN not configured" in result.output
