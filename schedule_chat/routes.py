from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse

from .config import API_BASE
from .errors import EventEditError
from .frontend import INDEX_HTML
from .models import (
    CalendarEvent,
    ChatMessage,
    DeleteResult,
    EventUpdate,
    ScheduleReply,
    ScheduleRequest,
)
from .service import describe_result, process_schedule_request, update_event_with_ai
from .state import ScheduleState, get_state
from .utils import _clean_optional_str, _coerce_edit_datetime, normalize_text
from .validation import check_event_range

router = APIRouter()
logger = logging.getLogger(__name__)


def _api(path: str) -> str:
  return f"{API_BASE.rstrip('/')}/{path.lstrip('/')}"


def _require_event(state: ScheduleState, event_id: str) -> CalendarEvent:
  event = state.get_event(event_id)
  if event is None:
    raise HTTPException(status_code=404, detail="Event not found")
  return event


@router.get("/", response_class=HTMLResponse)
def index_page():
  return HTMLResponse(INDEX_HTML)


@router.get("/health")
def health():
  return {"ok": True}


@router.post(_api("/schedule"), response_model=ScheduleReply)
def submit_schedule(body: ScheduleRequest,
                    state: ScheduleState = Depends(get_state)):
  text = normalize_text(body.text)
  if not text:
    raise HTTPException(status_code=400, detail="Empty text")
  if not state.try_begin_request():
    raise HTTPException(status_code=409,
                        detail="A scheduling request is already in progress.")
  try:
    user_message = state.add_message("user", text)
    result = process_schedule_request(text)
    if not result.error:
      state.replace_events(result.events)
    ai_message = state.add_message("ai", describe_result(result))
  finally:
    state.end_request()

  return ScheduleReply(events=result.events,
                       error=result.error,
                       raw_response=result.raw_response,
                       messages=[user_message, ai_message])


@router.get(_api("/events"), response_model=List[CalendarEvent])
def list_events(state: ScheduleState = Depends(get_state)):
  return state.list_events()


@router.get(_api("/events/{event_id}"), response_model=CalendarEvent)
def get_event(event_id: str, state: ScheduleState = Depends(get_state)):
  return _require_event(state, event_id)


@router.patch(_api("/events/{event_id}"), response_model=CalendarEvent)
def update_event(event_id: str,
                 payload: EventUpdate,
                 state: ScheduleState = Depends(get_state)):
  def _apply(event: CalendarEvent) -> CalendarEvent:
    changes: Dict[str, Any] = {}
    if payload.title is not None:
      title = _clean_optional_str(payload.title)
      if not title:
        raise EventEditError("Title must not be empty")
      changes["title"] = title
    if payload.description is not None:
      changes["description"] = payload.description
    for field in ("start", "end"):
      raw = getattr(payload, field)
      if raw is None:
        continue
      parsed = _coerce_edit_datetime(raw, getattr(event, field))
      if parsed is None:
        raise EventEditError("Invalid time format")
      changes[field] = parsed
    updated = event.model_copy(update=changes)
    edited = "end" if "end" in changes and "start" not in changes else "start"
    check_event_range(updated.start, updated.end, edited=edited)
    return updated

  try:
    updated = state.update_event(event_id, _apply)
  except EventEditError as exc:
    raise HTTPException(status_code=422, detail=str(exc))
  if updated is None:
    raise HTTPException(status_code=404, detail="Event not found")
  return updated


@router.post(_api("/events/{event_id}/suggestions"), response_model=CalendarEvent)
def suggest_for_event(event_id: str, state: ScheduleState = Depends(get_state)):
  event = _require_event(state, event_id)
  enriched = update_event_with_ai(event)
  if enriched is event:
    raise HTTPException(status_code=502,
                        detail="Failed to update event with AI suggestions.")
  updated = state.update_event(
      event_id,
      lambda current: current.model_copy(update={"description": enriched.description}))
  if updated is None:
    raise HTTPException(status_code=404, detail="Event not found")
  return updated


@router.get(_api("/messages"), response_model=List[ChatMessage])
def list_messages(state: ScheduleState = Depends(get_state)):
  return state.list_messages()


@router.delete(_api("/messages"), response_model=DeleteResult)
def reset_conversation(state: ScheduleState = Depends(get_state)):
  count = state.reset()
  return DeleteResult(ok=True, count=count)
