from pydantic import BaseModel, Field
from typing import Optional, List
import datetime as dt
from enum import Enum

class CalendarView(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"

class EventType(str, Enum):
    BOOKING = "BOOKING"
    BLOCKOUT = "BLOCKOUT"
    IMPORTED = "IMPORTED"

class Zone(BaseModel):
    """A vertical band of the day grid, in pixels from the grid's first hour."""
    top: float
    height: float

class CalendarEvent(BaseModel):
    id: str
    title: str
    start: dt.datetime
    end: dt.datetime
    duration: int
    isBlockout: bool = False
    status: str
    clientName: Optional[str] = None
    serviceName: Optional[str] = None
    servicePrice: Optional[float] = None
    notes: Optional[str] = None
    type: EventType = EventType.BOOKING
    color: Optional[str] = None

    class Config:
        json_encoders = {
            dt.datetime: lambda value: value.isoformat()
        }

class PositionedEvent(CalendarEvent):
    top: float
    height: float

class DayLayout(BaseModel):
    date: dt.date
    isCurrentMonth: bool = True
    zones: List[Zone] = []
    events: List[PositionedEvent] = []

class CalendarGridResponse(BaseModel):
    view: CalendarView
    startHour: int
    endHour: int
    hourHeight: int
    days: List[DayLayout]

class BlockoutCreate(BaseModel):
    start: dt.datetime
    duration: int = Field(60, gt=0, le=24 * 60)
    notes: Optional[str] = None
