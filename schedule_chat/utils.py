from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Optional, Tuple
import re

from .config import LLM_DEBUG, TIME_HHMM_RE


def _log_debug(message: str) -> None:
    if LLM_DEBUG:
        print(message, flush=True)


def _now() -> datetime:
    return datetime.now()


def normalize_text(text: str) -> str:
    t = (text or "").strip()
    t = re.sub(r"\s+", " ", t)
    return t


def is_hhmm(value: Any) -> bool:
    return isinstance(value, str) and bool(TIME_HHMM_RE.fullmatch(value))


def _to_int(raw: Any) -> int:
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return 0


def split_hhmm(value: Optional[str]) -> Tuple[int, int]:
    """Split "HH:mm" into (hour, minute); missing or garbled parts become 0."""
    parts = (value or "").split(":")
    hour = _to_int(parts[0]) if len(parts) > 0 else 0
    minute = _to_int(parts[1]) if len(parts) > 1 else 0
    return (hour, minute)


def at_time(day: date, hour: int, minute: int) -> datetime:
    # Out-of-range parts roll over into the next unit instead of raising.
    return datetime.combine(day, time(0, 0)) + timedelta(hours=hour, minutes=minute)


def format_hhmm(dt: datetime) -> str:
    return dt.strftime("%H:%M")


def _clean_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def _coerce_edit_datetime(value: str, base: datetime) -> Optional[datetime]:
    """Accept "HH:mm" (kept on ``base``'s date) or an ISO datetime."""
    candidate = value.strip()
    if is_hhmm(candidate):
        hour, minute = split_hhmm(candidate)
        return base.replace(hour=hour, minute=minute, second=0, microsecond=0)
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed.replace(second=0, microsecond=0)
