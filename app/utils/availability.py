"""
Availability resolution.

A stylist's availability comes from two sources: the recurring weekly
schedule (one entry per weekday) and date-specific exceptions. An exception
for a date always wins over the weekly entry for that weekday, whether it
closes the day or widens/narrows the hours. Anything the data does not
explicitly open is treated as closed.

Everything here is pure: the caller loads schedule and exceptions and hands
them in, so the same code backs the booking endpoint, the calendar grid
endpoint and the Python client.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
from datetime import date, datetime, time, timedelta

from app.schemas.availability import WeeklyScheduleEntry, DateException
from app.utils.calendar_grid import GridConfig, Zone

TimeOfDay = Union[str, time]
Window = Tuple[str, str]

# Statuses that no longer occupy the stylist's time
INACTIVE_BOOKING_STATUSES = {"CANCELED", "CANCELLED_BY_CLIENT", "CANCELLED_BY_TECH"}


def to_hhmm(value: TimeOfDay) -> str:
    """Normalize a time-of-day to a zero-padded HH:MM string."""
    if isinstance(value, time):
        return value.strftime("%H:%M")
    hours, minutes = value.split(":")[:2]
    return f"{int(hours):02d}:{int(minutes):02d}"


def to_minutes(value: TimeOfDay) -> int:
    hours, minutes = to_hhmm(value).split(":")
    return int(hours) * 60 + int(minutes)


def to_decimal_hours(value: TimeOfDay) -> float:
    return to_minutes(value) / 60


def day_of_week(day: date) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return (day.weekday() + 1) % 7


class AvailabilityResolver:
    """Answers availability questions for one stylist."""

    def __init__(
        self,
        schedule: Iterable[Union[WeeklyScheduleEntry, Dict[str, Any]]],
        exceptions: Iterable[Union[DateException, Dict[str, Any]]] = (),
    ):
        self.schedule: Dict[int, WeeklyScheduleEntry] = {}
        for entry in schedule:
            if not isinstance(entry, WeeklyScheduleEntry):
                entry = WeeklyScheduleEntry(**entry)
            self.schedule[entry.dayOfWeek] = entry

        self.exceptions: Dict[date, DateException] = {}
        for exception in exceptions:
            if not isinstance(exception, DateException):
                exception = DateException(**exception)
            self.exceptions[exception.date] = exception

    def exception_for(self, day: date) -> Optional[DateException]:
        return self.exceptions.get(day)

    def working_window(self, day: date) -> Optional[Window]:
        """Effective (start, end) for the date, or None when closed all day."""
        exception = self.exception_for(day)
        if exception is not None:
            if exception.isOff or not exception.startTime or not exception.endTime:
                return None
            return exception.startTime, exception.endTime

        entry = self.schedule.get(day_of_week(day))
        if entry is None or not entry.isWorkingDay:
            return None
        return entry.startTime, entry.endTime

    def is_slot_available(self, day: date, time_of_day: TimeOfDay) -> bool:
        """True iff time_of_day falls in the half-open window [start, end)."""
        window = self.working_window(day)
        if window is None:
            return False
        start, end = window
        return start <= to_hhmm(time_of_day) < end

    def is_datetime_available(self, moment: datetime) -> bool:
        return self.is_slot_available(moment.date(), moment.time())

    def get_unavailable_zones(self, day: date, grid: Optional[GridConfig] = None) -> List[Zone]:
        """Pixel zones of the day grid that fall outside working hours."""
        grid = grid or GridConfig.from_settings()
        window = self.working_window(day)

        if window is None:
            return [Zone(top=0, height=grid.total_height)]

        # Hours outside the grid are clipped to its edges
        start_dec = min(max(to_decimal_hours(window[0]), grid.start_hour), grid.end_hour)
        end_dec = min(max(to_decimal_hours(window[1]), grid.start_hour), grid.end_hour)
        zones = []

        if start_dec > grid.start_hour:
            zones.append(Zone(top=0, height=grid.hours_to_px(start_dec - grid.start_hour)))

        if end_dec < grid.end_hour:
            zones.append(Zone(
                top=grid.hours_to_px(end_dec - grid.start_hour),
                height=grid.hours_to_px(grid.end_hour - end_dec),
            ))

        return zones


def evaluate_slot(
    window: Optional[Window],
    bookings: Iterable[Dict[str, Any]],
    start: datetime,
    duration: int,
    default_duration: int = 60,
) -> Tuple[bool, Optional[str]]:
    """
    Check a whole appointment [start, start + duration) against a day.

    `window` is the resolver's working window for start's date and
    `bookings` are that day's bookings (dicts with appointmentDate,
    duration and status). Returns (available, reason).
    """
    if window is None:
        return False, "Stylist is off on this date"

    slot_start = to_minutes(start.time())
    slot_end = slot_start + duration

    if slot_start < to_minutes(window[0]) or slot_end > to_minutes(window[1]):
        return False, f"Outside working hours ({window[0]} - {window[1]})"

    for booking in bookings:
        if booking.get("status") in INACTIVE_BOOKING_STATUSES:
            continue
        booked_at: datetime = booking["appointmentDate"]
        if booked_at.date() != start.date():
            continue
        booked_start = to_minutes(booked_at.time())
        booked_end = booked_start + (booking.get("duration") or default_duration)
        if slot_start < booked_end and slot_end > booked_start:
            return False, "Slot overlaps an existing booking"

    return True, None


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """[00:00, next day 00:00) for range queries."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)
