from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from .errors import EventEditError, EventValidationError, InvalidStructureError
from .models import EventSpec
from .utils import _log_debug, is_hhmm


def validate_schedule(parsed: Any) -> List[EventSpec]:
    """Check a parsed ``{"events": [...]}`` object in place.

    A bad entry anywhere rejects the whole schedule. Non-string descriptions
    are replaced with "" on the dict itself.
    """
    if not isinstance(parsed, dict):
        raise InvalidStructureError()
    events = parsed.get("events")
    if not isinstance(events, list):
        _log_debug(f"[VALIDATION] invalid structure: {parsed!r}")
        raise InvalidStructureError()

    specs: List[EventSpec] = []
    for position, event in enumerate(events, start=1):
        if not isinstance(event, dict):
            raise EventValidationError(
                f"Invalid event structure for event {position}", position)
        for field in ("title", "startTime", "endTime"):
            if not event.get(field):
                raise EventValidationError(
                    f"Invalid event structure for event {position}: missing {field}",
                    position, field)
        title = event["title"]
        if not isinstance(title, str):
            raise EventValidationError(
                f"Invalid event structure for event {position}: title must be a string",
                position, "title")
        if not is_hhmm(event["startTime"]):
            raise EventValidationError(
                f"Invalid start time format for event {position}: {event['startTime']}",
                position, "startTime")
        if not is_hhmm(event["endTime"]):
            raise EventValidationError(
                f"Invalid end time format for event {position}: {event['endTime']}",
                position, "endTime")
        if not isinstance(event.get("description"), str):
            event["description"] = ""
        specs.append(EventSpec.model_validate(event))
    return specs


def check_event_range(start: datetime, end: datetime,
                      edited: Optional[str] = None) -> None:
    """Reject ``end <= start``; the message names the edge that moved."""
    if start < end:
        return
    if edited == "end":
        raise EventEditError("End time must be after start time")
    raise EventEditError("Start time must be before end time")
