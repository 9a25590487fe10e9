from __future__ import annotations

from datetime import datetime
from threading import Lock
from typing import Callable, List, Optional
import uuid

from .config import MAX_CHAT_MESSAGES
from .models import CalendarEvent, ChatMessage

# 메모리 저장
# NOTE: 상태 변경은 ScheduleState 메서드에서만 처리한다.


class ScheduleState:
    """Event list and chat transcript for one running app.

    Nothing here is persisted; a restart starts from an empty calendar.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._events: List[CalendarEvent] = []
        self._messages: List[ChatMessage] = []
        self._busy = False

    # -------------------------
    # in-flight guard
    # -------------------------
    def try_begin_request(self) -> bool:
        with self._lock:
            if self._busy:
                return False
            self._busy = True
            return True

    def end_request(self) -> None:
        with self._lock:
            self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    # -------------------------
    # events
    # -------------------------
    def list_events(self) -> List[CalendarEvent]:
        with self._lock:
            return list(self._events)

    def get_event(self, event_id: str) -> Optional[CalendarEvent]:
        with self._lock:
            for ev in self._events:
                if ev.id == event_id:
                    return ev
        return None

    def replace_events(self, events: List[CalendarEvent]) -> None:
        with self._lock:
            self._events[:] = events

    def update_event(self, event_id: str,
                     mutate: Callable[[CalendarEvent], CalendarEvent]) -> Optional[CalendarEvent]:
        """Swap the event with ``mutate(event)``; None when the id is unknown.

        ``mutate`` may raise to reject the edit; the list is left untouched.
        """
        with self._lock:
            for idx, ev in enumerate(self._events):
                if ev.id == event_id:
                    updated = mutate(ev)
                    self._events[idx] = updated
                    return updated
        return None

    # -------------------------
    # chat transcript
    # -------------------------
    def add_message(self, kind: str, text: str) -> ChatMessage:
        message = ChatMessage(
            id=f"{kind}-{uuid.uuid4().hex[:12]}",
            type=kind,
            text=text,
            timestamp=datetime.now(),
        )
        with self._lock:
            self._messages.append(message)
            if len(self._messages) > MAX_CHAT_MESSAGES:
                del self._messages[:-MAX_CHAT_MESSAGES]
        return message

    def list_messages(self) -> List[ChatMessage]:
        with self._lock:
            return list(self._messages)

    def reset(self) -> int:
        with self._lock:
            count = len(self._events)
            self._events.clear()
            self._messages.clear()
            return count


_default_state = ScheduleState()


def get_state() -> ScheduleState:
    return _default_state
