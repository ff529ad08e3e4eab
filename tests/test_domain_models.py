"""
Tests for domain models.
"""

import dataclasses

import pytest

from operatinghours.domain.exceptions import IncompleteScheduleError, UnknownDayError
from operatinghours.domain.models import (
    DAYS,
    DaySchedule,
    OperatingHours,
    ValidationResult,
    is_valid_time_format,
    minutes_to_time,
    time_to_minutes,
)


class TestTimeHelpers:
    """Tests for HH:MM parsing helpers."""

    @pytest.mark.parametrize("value", ["00:00", "09:30", "9:30", "23:59", "19:05"])
    def test_valid_time_format(self, value):
        assert is_valid_time_format(value)

    @pytest.mark.parametrize("value", ["24:00", "09:60", "0930", "9:5", "", "ab:cd", "09:00\n", " 09:00", None, 930])
    def test_invalid_time_format(self, value):
        assert not is_valid_time_format(value)

    def test_time_to_minutes(self):
        assert time_to_minutes("00:00") == 0
        assert time_to_minutes("09:30") == 570
        assert time_to_minutes("23:59") == 1439

    def test_time_to_minutes_is_lenient(self):
        """Unvalidated values still parse to something deterministic."""
        assert time_to_minutes("24:00") == 1440
        assert time_to_minutes("10") == 600
        assert time_to_minutes("9x:15") == 555
        assert time_to_minutes("") == 0

    def test_time_to_minutes_unparseable(self):
        assert time_to_minutes("ab:cd") is None
        assert time_to_minutes(None) is None

    def test_minutes_to_time(self):
        assert minutes_to_time(0) == "00:00"
        assert minutes_to_time(570) == "09:30"
        assert minutes_to_time(1439) == "23:59"


class TestDaySchedule:
    """Tests for DaySchedule model."""

    def test_minutes_properties(self):
        day = DaySchedule(open="09:00", close="22:00")

        assert day.open_minutes == 540
        assert day.close_minutes == 1320
        assert not day.crosses_midnight

    def test_crosses_midnight(self):
        assert DaySchedule(open="22:00", close="02:00").crosses_midnight
        assert not DaySchedule(open="22:00", close="02:00", closed=True).crosses_midnight

    def test_is_immutable(self):
        day = DaySchedule(open="09:00", close="22:00")

        with pytest.raises(dataclasses.FrozenInstanceError):
            day.open = "10:00"

    def test_from_mapping_defaults_closed_to_false(self):
        day = DaySchedule.from_mapping({"open": "08:00", "close": "20:00"})

        assert day == DaySchedule(open="08:00", close="20:00", closed=False)

    def test_str(self):
        assert str(DaySchedule(open="08:00", close="20:00")) == "08:00 - 20:00"
        assert str(DaySchedule(open="08:00", close="20:00", closed=True)) == "closed"


class TestOperatingHours:
    """Tests for OperatingHours model."""

    def test_default_schedule(self):
        hours = OperatingHours.default()

        for day in ("monday", "tuesday", "wednesday", "thursday", "friday"):
            assert hours.for_day(day) == DaySchedule(open="09:00", close="22:00", closed=False)
        assert hours.saturday == DaySchedule(open="10:00", close="22:00", closed=False)
        assert hours.sunday == DaySchedule(open="10:00", close="21:00", closed=False)

    def test_to_dict_keeps_canonical_order(self):
        data = OperatingHours.default().to_dict()

        assert tuple(data.keys()) == DAYS
        assert data["sunday"] == {"open": "10:00", "close": "21:00", "closed": False}

    def test_from_mapping_round_trip(self):
        data = OperatingHours.default().to_dict()
        data["sunday"] = {"open": "00:00", "close": "00:00", "closed": True}

        hours = OperatingHours.from_mapping(data)

        assert hours.sunday.closed
        assert hours.to_dict() == data

    def test_from_mapping_missing_day_raises(self):
        data = OperatingHours.default().to_dict()
        del data["friday"]
        del data["sunday"]

        with pytest.raises(IncompleteScheduleError) as exc_info:
            OperatingHours.from_mapping(data)

        assert exc_info.value.missing_days == ["friday", "sunday"]

    def test_from_mapping_empty_day_is_present(self):
        data = OperatingHours.default().to_dict()
        data["friday"] = {}

        hours = OperatingHours.from_mapping(data)

        assert hours.friday == DaySchedule(open="", close="", closed=False)

    def test_from_mapping_non_mapping_day_raises(self):
        data = OperatingHours.default().to_dict()
        data["friday"] = None

        with pytest.raises(IncompleteScheduleError) as exc_info:
            OperatingHours.from_mapping(data)

        assert exc_info.value.missing_days == ["friday"]

    def test_for_day_normalizes_name(self):
        hours = OperatingHours.default()

        assert hours.for_day(" Saturday ") is hours.saturday

    def test_for_day_unknown_raises(self):
        with pytest.raises(UnknownDayError, match="Unknown day 'funday'"):
            OperatingHours.default().for_day("funday")

    def test_replace_day_returns_new_value(self):
        original = OperatingHours.default()
        closed = DaySchedule(open="09:00", close="22:00", closed=True)

        updated = original.replace_day("monday", closed)

        assert updated.monday is closed
        assert not original.monday.closed
        assert updated.tuesday == original.tuesday

    def test_patch_day_changes_only_given_fields(self):
        original = OperatingHours.default()

        updated = original.patch_day("friday", close="02:00")

        assert updated.friday == DaySchedule(open="09:00", close="02:00", closed=False)
        assert original.friday.close == "22:00"

    def test_patch_day_closed_flag(self):
        updated = OperatingHours.default().patch_day("sunday", closed=True)

        assert updated.sunday.closed
        assert updated.sunday.open == "10:00"

    def test_items(self):
        names = [day for day, _ in OperatingHours.default().items()]

        assert tuple(names) == DAYS


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_empty_is_valid(self):
        result = ValidationResult()

        assert result.is_valid
        assert result.to_dict() == {"isValid": True, "errors": []}

    def test_errors_make_invalid(self):
        result = ValidationResult(errors=["Missing schedule for monday"])

        assert not result.is_valid
        assert result.to_dict() == {"isValid": False, "errors": ["Missing schedule for monday"]}
