from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from .errors import ScheduleError
from .llm import generate_schedule_response, get_event_suggestions
from .models import CalendarEvent, ScheduleResponse, ScheduleResult
from .recovery import recover_schedule_json
from .recurrence import materialize_events
from .utils import _log_debug, format_hhmm, normalize_text

logger = logging.getLogger(__name__)


def process_schedule_request(text: str,
                             now: Optional[datetime] = None) -> ScheduleResult:
    """Natural-language request -> dated events, or an error message.

    Never raises for pipeline failures: the message ends up in ``error``
    and no events are returned.
    """
    request_text = normalize_text(text)
    raw: Optional[str] = None
    try:
        raw = generate_schedule_response(request_text)
        parsed = recover_schedule_json(raw)
        specs = ScheduleResponse.model_validate(parsed).events
        events = materialize_events(request_text, specs, now=now)
    except ScheduleError as exc:
        _log_debug(f"[SCHEDULE] failed: {exc!r}")
        return ScheduleResult(events=[], error=str(exc), raw_response=raw)
    except Exception:
        logger.exception("Schedule processing error")
        return ScheduleResult(events=[],
                              error="Failed to process schedule",
                              raw_response=raw)

    _log_debug(f"[SCHEDULE] materialized {len(events)} event(s)")
    return ScheduleResult(events=events, raw_response=raw)


def describe_result(result: ScheduleResult) -> str:
    """Chat reply shown for a processed request."""
    if result.error:
        return f"Sorry, I encountered an error: {result.error}"
    count = len(result.events)
    noun = "event" if count == 1 else "events"
    return f"I've scheduled {count} {noun} for you. You can click on any event to edit it."


def describe_event(event: CalendarEvent) -> str:
    return (f"{event.title} from {format_hhmm(event.start)} to "
            f"{format_hhmm(event.end)}. {event.description or ''}")


def update_event_with_ai(event: CalendarEvent) -> CalendarEvent:
    """Replace the description with model suggestions.

    Returns the event unchanged if the model cannot be reached.
    """
    try:
        suggestions = get_event_suggestions(describe_event(event))
    except ScheduleError as exc:
        logger.warning("Event suggestions failed for %s: %s", event.id, exc)
        return event
    return event.model_copy(update={"description": suggestions})
