"""Error kinds raised while turning a model completion into calendar events.

Every error carries the message that is shown to the user as-is.
"""

from __future__ import annotations

from typing import Optional


class ScheduleError(Exception):
    """Base class; terminal for the current request."""


class LLMConnectionError(ScheduleError):
    """The inference server refused the connection."""


class LLMRequestError(ScheduleError):
    """Any other transport or HTTP failure talking to the model."""


class NoJSONFoundError(ScheduleError):
    def __init__(self, message: str = "No valid JSON found in response"):
        super().__init__(message)


class InvalidStructureError(ScheduleError):
    def __init__(self, message: str = "Invalid response structure"):
        super().__init__(message)


class EventValidationError(ScheduleError):
    """An entry of ``events`` failed a field check.

    ``index`` is 1-based, matching how events are numbered for the user.
    """

    def __init__(self, message: str, index: int, field: Optional[str] = None):
        super().__init__(message)
        self.index = index
        self.field = field


class EventEditError(ValueError):
    """A user edit would leave an event in an invalid state."""
