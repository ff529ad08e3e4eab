"""
Tests for the command line interface.
"""

import json

import pytest
from typer.testing import CliRunner

from operatinghours import __version__
from operatinghours.cli.app import app
from operatinghours.domain.models import OperatingHours

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path):
    """Config pointing at a scratch copy of location data."""
    hours = OperatingHours.default().to_dict()
    hours["friday"] = {"open": "18:00", "close": "02:00", "closed": False}
    hours["sunday"] = {"open": "", "close": "", "closed": True}
    (tmp_path / "locations.json").write_text(
        json.dumps({"locations": [{"id": "1", "name": "Downtown", "operatingHours": hours}]}),
        encoding="utf-8",
    )

    config_path = tmp_path / "config.yaml"
    config_path.write_text('timezone: "UTC"\ndata_file: "locations.json"\n', encoding="utf-8")
    return config_path


def test_validate_valid_file(tmp_path):
    schedule_file = tmp_path / "hours.json"
    schedule_file.write_text(json.dumps(OperatingHours.default().to_dict()), encoding="utf-8")

    result = runner.invoke(app, ["validate", str(schedule_file)])

    assert result.exit_code == 0


def test_validate_reports_every_problem(tmp_path):
    data = OperatingHours.default().to_dict()
    del data["friday"]
    data["monday"] = {"open": "10:00", "close": "10:00", "closed": False}
    schedule_file = tmp_path / "hours.json"
    schedule_file.write_text(json.dumps(data), encoding="utf-8")

    result = runner.invoke(app, ["validate", str(schedule_file)])

    assert result.exit_code == 1
    assert "Missing schedule for friday" in result.output
    assert "monday: Opening and closing times cannot be the same" in result.output


def test_validate_sanitize_fills_missing_days(tmp_path):
    schedule_file = tmp_path / "hours.yaml"
    schedule_file.write_text("sunday:\n  closed: true\n", encoding="utf-8")

    result = runner.invoke(app, ["validate", str(schedule_file), "--sanitize"])

    assert result.exit_code == 0
    assert "Sanitized schedule" in result.output


def test_validate_missing_file(tmp_path):
    result = runner.invoke(app, ["validate", str(tmp_path / "nope.json")])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_status_open(config_file):
    result = runner.invoke(app, ["status", "1", "--at", "2024-11-29T23:30", "--config", str(config_file)])

    assert result.exit_code == 0
    assert "Open" in result.output


def test_status_closed_shows_next_opening(config_file):
    result = runner.invoke(app, ["status", "1", "--at", "2024-12-01T12:00", "--config", str(config_file)])

    assert result.exit_code == 0
    assert "Closed" in result.output
    assert "02.12.2024 09:00" in result.output


def test_status_unknown_location(config_file):
    result = runner.invoke(app, ["status", "42", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "Location not found" in result.output


def test_show(config_file):
    result = runner.invoke(app, ["show", "1", "--config", str(config_file)])

    assert result.exit_code == 0
    assert "Friday" in result.output
    assert "closed" in result.output


def test_set_day_updates_store(config_file):
    result = runner.invoke(
        app, ["set-day", "1", "sunday", "--not-closed", "--open", "12:00", "--close", "16:00", "-c", str(config_file)]
    )

    assert result.exit_code == 0
    stored = json.loads((config_file.parent / "locations.json").read_text(encoding="utf-8"))
    assert stored["locations"][0]["operatingHours"]["sunday"] == {
        "open": "12:00",
        "close": "16:00",
        "closed": False,
    }


def test_set_day_rejects_invalid_time(config_file):
    result = runner.invoke(app, ["set-day", "1", "monday", "--open", "25:00", "-c", str(config_file)])

    assert result.exit_code == 1
    assert "Invalid opening time format" in result.output


def test_set_day_requires_a_change(config_file):
    result = runner.invoke(app, ["set-day", "1", "monday", "-c", str(config_file)])

    assert result.exit_code == 1
    assert "Nothing to change" in result.output


def test_list_locations(config_file):
    result = runner.invoke(app, ["list-locations", "-c", str(config_file)])

    assert result.exit_code == 0
    assert "Downtown" in result.output


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output
