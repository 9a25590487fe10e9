from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .config import DEFAULT_RECURRENCE_COUNT, EPISODE_COUNT_RE, MAX_EPISODE_COUNT
from .models import CalendarEvent, EventSpec
from .utils import _now, at_time, split_hhmm

SpecLike = Union[EventSpec, Dict[str, Any]]

_WEEKEND = (5, 6)  # date.weekday(): Saturday, Sunday


def _coerce_spec(spec: SpecLike) -> EventSpec:
    if isinstance(spec, EventSpec):
        return spec
    return EventSpec.model_validate(spec)


def detect_episode_count(request_text: str) -> Optional[int]:
    """"5 episodes" anywhere in the request -> 5, capped at MAX_EPISODE_COUNT."""
    match = EPISODE_COUNT_RE.search(request_text or "")
    if not match:
        return None
    return min(int(match.group(1)), MAX_EPISODE_COUNT)


def _resolve_recurrence(spec: EventSpec,
                        episode_count: Optional[int]) -> Tuple[bool, int]:
    """Return (is_recurring, occurrences).

    The episode count is read from the whole request, so it applies to every
    spec in the batch, not only the one that mentioned it.
    """
    if episode_count is not None:
        return (True, episode_count)
    if "every day" in (spec.description or "").lower():
        return (True, DEFAULT_RECURRENCE_COUNT)
    return (False, 1)


def _iter_occurrence_dates(first: date, count: int,
                           weekdays_only: bool) -> Iterable[date]:
    current = first
    produced = 0
    while produced < count:
        if weekdays_only and current.weekday() in _WEEKEND:
            current += timedelta(days=1)
            continue
        yield current
        produced += 1
        current += timedelta(days=1)


def _single_event(spec: EventSpec, day: date) -> CalendarEvent:
    start_h, start_m = split_hhmm(spec.start_time)
    end_h, end_m = split_hhmm(spec.end_time)
    return CalendarEvent(
        id=f"{spec.title.lower()}-single",
        title=spec.title,
        start=at_time(day, start_h, start_m),
        end=at_time(day, end_h, end_m),
        description=spec.description,
    )


def _expand_recurring_spec(spec: EventSpec, first: date, count: int,
                           numbered: bool) -> List[CalendarEvent]:
    """
    recurring spec -> 하루에 하나씩 count개의 일정으로 전개
    """
    start_h, start_m = split_hhmm(spec.start_time)
    end_h, end_m = split_hhmm(spec.end_time)
    weekdays_only = "weekday" in (spec.description or "").lower()

    results: List[CalendarEvent] = []
    for index, day in enumerate(_iter_occurrence_dates(first, count, weekdays_only)):
        if numbered:
            title = f"{spec.title} - Episode {index + 1}"
            description = f"Episode {index + 1} of {count} - {spec.description or ''}"
        else:
            title = spec.title
            description = spec.description
        results.append(CalendarEvent(
            id=f"{spec.title.lower()}-{index}",
            title=title,
            start=at_time(day, start_h, start_m),
            end=at_time(day, end_h, end_m),
            description=description,
        ))
    return results


def materialize_events(request_text: str,
                       specs: Iterable[SpecLike],
                       now: Optional[datetime] = None) -> List[CalendarEvent]:
    """Place each spec on the calendar, starting tomorrow.

    Specs are processed in order; a recurring spec emits all of its
    occurrences before the next spec is looked at.
    """
    reference = now or _now()
    first_day = (reference + timedelta(days=1)).date()
    episode_count = detect_episode_count(request_text)

    results: List[CalendarEvent] = []
    for raw in specs:
        spec = _coerce_spec(raw)
        recurring, count = _resolve_recurrence(spec, episode_count)
        if not recurring:
            results.append(_single_event(spec, first_day))
            continue
        results.extend(
            _expand_recurring_spec(spec, first_day, count,
                                   numbered=episode_count is not None))
    return results
