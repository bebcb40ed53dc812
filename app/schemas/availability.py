from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
import datetime as dt

# Zero-padded 24-hour clock, so plain string comparison orders correctly
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

class WeeklyScheduleEntry(BaseModel):
    dayOfWeek: int = Field(..., ge=0, le=6, description="0 = Sunday")
    isWorkingDay: bool
    startTime: str = Field("09:00", pattern=TIME_PATTERN)
    endTime: str = Field("17:00", pattern=TIME_PATTERN)

    @model_validator(mode="after")
    def validate_hours(self):
        # Hours of a day off are kept for the UI but never checked
        if self.isWorkingDay and self.startTime >= self.endTime:
            raise ValueError("startTime must be before endTime on a working day")
        return self

def default_schedule() -> List[WeeklyScheduleEntry]:
    """Mon-Fri 09:00-17:00, weekend off."""
    return [
        WeeklyScheduleEntry(dayOfWeek=day, isWorkingDay=1 <= day <= 5)
        for day in range(7)
    ]

class ScheduleUpdate(BaseModel):
    schedule: List[WeeklyScheduleEntry] = Field(..., min_length=1, max_length=7)
    stylistId: Optional[str] = None  # Admins only

    @field_validator("schedule")
    @classmethod
    def unique_days(cls, schedule: List[WeeklyScheduleEntry]) -> List[WeeklyScheduleEntry]:
        days = [entry.dayOfWeek for entry in schedule]
        if len(days) != len(set(days)):
            raise ValueError("each dayOfWeek may appear only once")
        return schedule

class DateException(BaseModel):
    date: dt.date
    isOff: bool = True
    startTime: Optional[str] = Field(None, pattern=TIME_PATTERN)
    endTime: Optional[str] = Field(None, pattern=TIME_PATTERN)
    reason: Optional[str] = Field(None, max_length=200)

    @model_validator(mode="after")
    def validate_override_hours(self):
        if not self.isOff:
            if not self.startTime or not self.endTime:
                raise ValueError("startTime and endTime are required unless isOff is true")
            if self.startTime >= self.endTime:
                raise ValueError("startTime must be before endTime")
        return self

class DateExceptionResponse(DateException):
    id: Optional[str] = None
    stylistId: Optional[str] = None
    updatedAt: Optional[dt.datetime] = None

class AvailabilityResponse(BaseModel):
    schedule: List[WeeklyScheduleEntry]
    exceptions: List[DateExceptionResponse] = []

class SlotCheckResponse(BaseModel):
    available: bool
    reason: Optional[str] = None
