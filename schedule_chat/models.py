from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class EventSpec(BaseModel):
    """One event as proposed by the model, before it is placed on a date."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = Field(min_length=1)
    start_time: str = Field(alias="startTime")  # "HH:mm"
    end_time: str = Field(alias="endTime")  # "HH:mm"
    description: str = ""


class ScheduleResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    events: List[EventSpec]


class CalendarEvent(BaseModel):
    id: str
    title: str
    start: datetime
    end: datetime
    description: Optional[str] = None


class ChatMessage(BaseModel):
    id: str
    type: Literal["user", "ai"]
    text: str
    timestamp: datetime


class ScheduleResult(BaseModel):
    events: List[CalendarEvent] = Field(default_factory=list)
    error: Optional[str] = None
    raw_response: Optional[str] = None


class ScheduleRequest(BaseModel):
    text: str


class ScheduleReply(ScheduleResult):
    messages: List[ChatMessage] = Field(default_factory=list)


class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    start: Optional[str] = None  # "HH:mm" or ISO datetime
    end: Optional[str] = None


class DeleteResult(BaseModel):
    ok: bool
    count: int
