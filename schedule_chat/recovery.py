"""Recover a JSON schedule object from free-form model output.

Models are asked for "ONLY a JSON object" but routinely wrap it in prose,
leave trailing commas or forget to quote keys. The helpers here pull out the
first ``{...}`` candidate that parses and carries an ``events`` field.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Iterator

from .errors import NoJSONFoundError, InvalidStructureError
from .utils import _log_debug
from .validation import validate_schedule

# One level of nested braces only; deeper objects are not matched.
_OBJECT_CANDIDATE_RE = re.compile(r"\{(?:[^{}]|(\{[^{}]*\}))*\}")

_LITERAL_NEWLINE_RE = re.compile(r"\\n")
_LINE_BREAK_RE = re.compile(r"\n")
_WHITESPACE_RE = re.compile(r"\s+")
_REPEATED_QUOTES_RE = re.compile(r'"{2,}')
_TRAILING_COMMA_RE = re.compile(r",\s*([\]}])")
_BARE_KEY_RE = re.compile(r"([{,]\s*)([a-zA-Z0-9_]+)\s*:")


def clean_json_string(text: str) -> str:
    """Apply the textual repairs, in order. Returns "" when no braces exist."""
    if not isinstance(text, str):
        return ""
    start = text.find("{")
    if start == -1:
        return ""
    text = text[start:]
    end = text.rfind("}")
    if end == -1:
        return ""
    text = text[:end + 1]

    text = _LITERAL_NEWLINE_RE.sub("", text)
    text = _LINE_BREAK_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text)
    text = text.replace('\\"', '"')
    text = _REPEATED_QUOTES_RE.sub('"', text)
    text = _TRAILING_COMMA_RE.sub(r"\1", text)
    text = _BARE_KEY_RE.sub(r'\1"\2":', text)
    return text.strip()


def _iter_candidates(text: str) -> Iterator[str]:
    for match in _OBJECT_CANDIDATE_RE.finditer(text):
        yield match.group(0)


def _has_events(cleaned: str) -> bool:
    try:
        parsed = json.loads(cleaned)
    except ValueError:
        return False
    return isinstance(parsed, dict) and "events" in parsed


def extract_json(text: str) -> str:
    """Return the first cleaned candidate holding ``events``, else ""."""
    if not isinstance(text, str) or not text:
        return ""

    found_any = False
    for candidate in _iter_candidates(text):
        found_any = True
        cleaned = clean_json_string(candidate)
        if _has_events(cleaned):
            return cleaned
    if not found_any:
        return ""

    cleaned = clean_json_string(text)
    if _has_events(cleaned):
        return cleaned
    return ""


def recover_schedule_json(raw: str) -> Dict[str, Any]:
    """Extract, parse and validate a schedule from raw model output.

    Returns the parsed ``{"events": [...]}`` dict with each description
    coerced to a string. Raises a ``ScheduleError`` subclass otherwise.
    """
    json_str = extract_json(raw)
    _log_debug(f"[RECOVERY] extracted: {json_str!r}")
    if not json_str:
        _log_debug(f"[RECOVERY] no JSON in response: {raw!r}")
        raise NoJSONFoundError()

    try:
        parsed = json.loads(json_str)
    except ValueError as exc:
        raise InvalidStructureError() from exc

    validate_schedule(parsed)
    return parsed
