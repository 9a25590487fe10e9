from datetime import date, datetime, timedelta

from schedule_chat.config import DEFAULT_RECURRENCE_COUNT, MAX_EPISODE_COUNT
from schedule_chat.models import EventSpec
from schedule_chat.recurrence import detect_episode_count, materialize_events

# Thursday; "tomorrow" is Friday 2026-10-16.
NOW = datetime(2026, 10, 15, 10, 0)
TOMORROW = date(2026, 10, 16)


def _spec(title="Study", start="09:00", end="10:30", description=""):
    return EventSpec(title=title, startTime=start, endTime=end, description=description)


def test_single_event_lands_tomorrow():
    events = materialize_events("Team meeting at 9", [_spec(title="Team")], now=NOW)
    assert len(events) == 1
    ev = events[0]
    assert ev.id == "team-single"
    assert ev.title == "Team"
    assert ev.start == datetime(2026, 10, 16, 9, 0, 0)
    assert ev.end == datetime(2026, 10, 16, 10, 30, 0)
    assert ev.end - ev.start == timedelta(minutes=90)


def test_episode_count_expands_consecutive_days():
    spec = _spec(title="Python", description="Intro course")
    events = materialize_events("Watch 5 episodes of the Python course", [spec], now=NOW)
    assert len(events) == 5
    assert [ev.start.date() for ev in events] == [TOMORROW + timedelta(days=i) for i in range(5)]
    assert [ev.title for ev in events] == [f"Python - Episode {i}" for i in range(1, 6)]
    assert [ev.id for ev in events] == [f"python-{i}" for i in range(5)]
    assert events[0].description == "Episode 1 of 5 - Intro course"
    assert events[4].description == "Episode 5 of 5 - Intro course"


def test_weekday_recurrence_skips_weekends():
    spec = _spec(title="Python", description="Weekdays only")
    events = materialize_events("5 Episodes please", [spec], now=NOW)
    assert [ev.start.date() for ev in events] == [
        date(2026, 10, 16),
        date(2026, 10, 19),
        date(2026, 10, 20),
        date(2026, 10, 21),
        date(2026, 10, 22),
    ]
    assert [ev.id for ev in events] == [f"python-{i}" for i in range(5)]


def test_every_day_uses_default_count():
    spec = _spec(title="Walk", description="Recurring: every day")
    events = materialize_events("walk daily", [spec], now=NOW)
    assert len(events) == DEFAULT_RECURRENCE_COUNT == 30
    assert all(ev.title == "Walk" for ev in events)
    assert all(ev.description == "Recurring: every day" for ev in events)
    assert events[-1].start.date() == TOMORROW + timedelta(days=29)


def test_every_day_weekday_filter():
    spec = _spec(title="Walk", description="EVERY DAY on weekdays")
    events = materialize_events("walk", [spec], now=NOW)
    assert len(events) == 30
    assert all(ev.start.weekday() < 5 for ev in events)


def test_episode_count_applies_to_every_spec():
    specs = [_spec(title="Show"), _spec(title="Gym", start="18:00", end="19:00")]
    events = materialize_events("Watch 3 episodes of my show and go to the gym", specs, now=NOW)
    assert len(events) == 6
    assert [ev.title for ev in events] == [
        "Show - Episode 1", "Show - Episode 2", "Show - Episode 3",
        "Gym - Episode 1", "Gym - Episode 2", "Gym - Episode 3",
    ]


def test_specs_keep_input_order():
    specs = [
        _spec(title="Read", description="every day"),
        _spec(title="Dentist", start="14:00", end="15:00"),
    ]
    events = materialize_events("read and dentist", specs, now=NOW)
    assert len(events) == 31
    assert events[-1].id == "dentist-single"


def test_unparseable_time_parts_default_to_zero():
    events = materialize_events("x", [{"title": "Odd", "startTime": "ab:cd", "endTime": "10"}], now=NOW)
    assert events[0].start == datetime(2026, 10, 16, 0, 0)
    assert events[0].end == datetime(2026, 10, 16, 10, 0)


def test_detect_episode_count():
    assert detect_episode_count("1 episode tonight") == 1
    assert detect_episode_count("12episodes") == 12
    assert detect_episode_count("an episode") is None


def test_episode_count_is_capped():
    assert detect_episode_count("watch 99999999 episodes") == MAX_EPISODE_COUNT
    events = materialize_events("watch 99999999 episodes", [_spec()], now=NOW)
    assert len(events) == MAX_EPISODE_COUNT
