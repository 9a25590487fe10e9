from datetime import datetime

import pytest

from schedule_chat.errors import EventEditError, EventValidationError, InvalidStructureError
from schedule_chat.recovery import recover_schedule_json
from schedule_chat.validation import check_event_range, validate_schedule


def _event(title="Standup", start="09:00", end="09:15", **extra):
    return {"title": title, "startTime": start, "endTime": end, **extra}


def test_valid_schedule_returns_specs():
    specs = validate_schedule({"events": [_event(description="Daily sync")]})
    assert len(specs) == 1
    assert specs[0].title == "Standup"
    assert specs[0].start_time == "09:00"
    assert specs[0].end_time == "09:15"
    assert specs[0].description == "Daily sync"


@pytest.mark.parametrize("bad_time", ["9:00", "25:00", "12:60", "24:00", "0900", "09:00\n"])
def test_malformed_start_time_names_event_index(bad_time):
    parsed = {"events": [_event(), _event(title="Lunch", start=bad_time, end="13:00")]}
    with pytest.raises(EventValidationError) as excinfo:
        validate_schedule(parsed)
    assert excinfo.value.index == 2
    assert excinfo.value.field == "startTime"
    assert bad_time in str(excinfo.value)


def test_malformed_end_time():
    with pytest.raises(EventValidationError) as excinfo:
        validate_schedule({"events": [_event(end="9:30")]})
    assert excinfo.value.index == 1
    assert excinfo.value.field == "endTime"


@pytest.mark.parametrize("field", ["title", "startTime", "endTime"])
def test_missing_required_field(field):
    event = _event()
    event[field] = ""
    with pytest.raises(EventValidationError) as excinfo:
        validate_schedule({"events": [event]})
    assert excinfo.value.field == field


def test_non_object_event_is_rejected():
    with pytest.raises(EventValidationError):
        validate_schedule({"events": ["Standup at 9"]})


def test_description_is_coerced_to_string():
    parsed = {"events": [_event(description=None), _event(title="Gym", description=42)]}
    specs = validate_schedule(parsed)
    assert [s.description for s in specs] == ["", ""]
    assert parsed["events"][1]["description"] == ""


@pytest.mark.parametrize("parsed", [{}, {"events": None}, {"events": {}}, ["events"]])
def test_missing_events_array(parsed):
    with pytest.raises(InvalidStructureError):
        validate_schedule(parsed)


def test_check_event_range_rejects_end_before_start():
    start = datetime(2026, 10, 16, 9, 0)
    end = datetime(2026, 10, 16, 8, 0)
    with pytest.raises(EventEditError) as excinfo:
        check_event_range(start, end)
    assert str(excinfo.value) == "Start time must be before end time"

    with pytest.raises(EventEditError) as excinfo:
        check_event_range(start, start, edited="end")
    assert str(excinfo.value) == "End time must be after start time"

    check_event_range(end, start)


def test_escaped_newline_after_time_is_rejected():
    raw = r'{"events": [{"title": "A", "startTime": "09:00\u000a", "endTime": "10:00"}]}'
    with pytest.raises(EventValidationError) as excinfo:
        recover_schedule_json(raw)
    assert excinfo.value.field == "startTime"
