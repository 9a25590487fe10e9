"""
Chat-driven calendar: natural language -> local LLM -> calendar events
"""

from .recovery import clean_json_string, extract_json, recover_schedule_json
from .recurrence import materialize_events

__all__ = [
    "clean_json_string",
    "extract_json",
    "recover_schedule_json",
    "materialize_events",
]
