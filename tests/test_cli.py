from __future__ import annotations

from datetime import datetime

from typer.testing import CliRunner

from conftest import app_event, encode_events
from play_activity.cli import app
from play_activity.models import EventSubKind

runner = CliRunner()

GAME_HEX = "0100000000010000"
ACCOUNT_HEX = "11111111222222223333333344444444"


def test_titles_lists_logged_applications(log_file):
    result = runner.invoke(app, ["titles", "--log", str(log_file)])

    assert result.exit_code == 0
    assert GAME_HEX in result.output


def test_sessions_prints_total_playtime(log_file):
    result = runner.invoke(app, ["sessions", GAME_HEX, ACCOUNT_HEX, "--log", str(log_file)])

    assert result.exit_code == 0
    assert "Total playtime: 00:08:20" in result.output


def test_sessions_rejects_bad_application_id(log_file):
    result = runner.invoke(app, ["sessions", "nope", ACCOUNT_HEX, "--log", str(log_file)])

    assert result.exit_code != 0


def test_corrupt_log_exits_with_error(tmp_path):
    path = tmp_path / "PlayEvent.dat"
    path.write_bytes(b"\x00" * 10)

    result = runner.invoke(app, ["titles", "--log", str(path)])

    assert result.exit_code == 1


def test_missing_log_exits_with_error(tmp_path):
    result = runner.invoke(app, ["titles", "--log", str(tmp_path / "missing.dat")])

    assert result.exit_code == 1


def test_recent_reports_empty_period(log_file):
    result = runner.invoke(
        app,
        ["recent", ACCOUNT_HEX, "--period", "day", "--date", "2024-01-01", "--log", str(log_file)],
    )

    assert result.exit_code == 0
    assert "No activity recorded" in result.output


def test_recent_offset_moves_to_previous_period(tmp_path):
    launch = int(datetime(2024, 3, 14, 12, 0).timestamp())
    path = tmp_path / "PlayEvent.dat"
    path.write_bytes(
        encode_events(
            [
                app_event(EventSubKind.LAUNCH, wall=launch),
                app_event(EventSubKind.EXIT, wall=launch + 600),
            ]
        )
    )
    args = ["recent", ACCOUNT_HEX, "--period", "day", "--date", "2024-03-15", "--log", str(path)]

    same_day = runner.invoke(app, args)
    previous_day = runner.invoke(app, args + ["--offset", "-1"])

    assert "No activity recorded" in same_day.output
    assert previous_day.exit_code == 0
    assert "Total playtime: 00:10:00" in previous_day.output
