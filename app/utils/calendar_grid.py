"""
Layout math for the stylist calendar.

The day/week views are a vertical time grid running from GRID_START_HOUR to
GRID_END_HOUR with a fixed pixel height per hour. Events and unavailable
zones are both positioned through GridConfig so they always line up.
"""

import calendar
import math
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel

from app.core.config import settings
from app.schemas.calendar import CalendarView, DayLayout, PositionedEvent, Zone

DateLike = Union[date, datetime]


class GridConfig(BaseModel):
    start_hour: int = 6
    end_hour: int = 23
    hour_height: int = 80

    @classmethod
    def from_settings(cls) -> "GridConfig":
        return cls(
            start_hour=settings.GRID_START_HOUR,
            end_hour=settings.GRID_END_HOUR,
            hour_height=settings.HOUR_HEIGHT_PX,
        )

    @property
    def total_height(self) -> float:
        return self.hours_to_px(self.end_hour - self.start_hour)

    @property
    def hours(self) -> List[int]:
        """Row labels; the last row covers end_hour - 1 to end_hour."""
        return list(range(self.start_hour, self.end_hour))

    def hours_to_px(self, hours: float) -> float:
        return hours * self.hour_height

    def minutes_to_px(self, minutes: float) -> float:
        return minutes * self.hour_height / 60


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def start_of_week(value: DateLike) -> date:
    """Monday on or before the date (Sunday belongs to the previous week)."""
    day = _as_date(value)
    sunday_based = (day.weekday() + 1) % 7
    return day - timedelta(days=(sunday_based + 6) % 7)


def compute_visible_days(view: Union[CalendarView, str], current: DateLike) -> List[date]:
    view = CalendarView(view)
    day = _as_date(current)

    if view == CalendarView.MONTH:
        # 6 weeks * 7 days covers any month plus padding
        first = start_of_week(day.replace(day=1))
        return [first + timedelta(days=i) for i in range(42)]

    if view == CalendarView.WEEK:
        first = start_of_week(day)
        return [first + timedelta(days=i) for i in range(7)]

    return [day]


def shift_date(view: Union[CalendarView, str], current: DateLike, step: int) -> date:
    """Move the anchor date one page back (step=-1) or forward (step=1)."""
    view = CalendarView(view)
    day = _as_date(current)

    if view == CalendarView.MONTH:
        month_index = day.year * 12 + (day.month - 1) + step
        year, month = divmod(month_index, 12)
        month += 1
        last_day = calendar.monthrange(year, month)[1]
        return date(year, month, min(day.day, last_day))

    days = 7 if view == CalendarView.WEEK else 1
    return day + timedelta(days=days * step)


def visible_range(days: List[date]) -> Tuple[datetime, datetime]:
    """Inclusive [first day 00:00, last day 23:59:59.999999] for fetching."""
    return datetime.combine(days[0], time.min), datetime.combine(days[-1], time.max)


def event_position(start: datetime, duration: int, grid: Optional[GridConfig] = None) -> Zone:
    grid = grid or GridConfig.from_settings()
    minutes_from_start = (start.hour - grid.start_hour) * 60 + start.minute
    return Zone(top=grid.minutes_to_px(minutes_from_start), height=grid.minutes_to_px(duration))


def hour_from_offset(offset: float, grid: Optional[GridConfig] = None) -> Optional[int]:
    """Grid row for a vertical click offset, or None outside the grid."""
    grid = grid or GridConfig.from_settings()
    if offset < 0:
        return None
    hour = grid.start_hour + math.floor(offset / grid.hour_height)
    if hour >= grid.end_hour:
        return None
    return hour


def slot_from_click(day: DateLike, offset: float, grid: Optional[GridConfig] = None) -> Optional[datetime]:
    hour = hour_from_offset(offset, grid)
    if hour is None:
        return None
    return datetime.combine(_as_date(day), time(hour=hour))


def events_for_day(events: Iterable[Dict[str, Any]], day: date) -> List[Dict[str, Any]]:
    return [event for event in events if _as_date(event["start"]) == day]


def build_day_layout(
    day: date,
    events: Iterable[Dict[str, Any]],
    resolver,
    grid: Optional[GridConfig] = None,
    anchor: Optional[date] = None,
) -> DayLayout:
    """Zones plus positioned events for one column of the grid.

    `resolver` is an AvailabilityResolver; `anchor` marks the month being
    displayed so padding days of a month view can be dimmed.
    """
    grid = grid or GridConfig.from_settings()
    positioned = []
    for event in sorted(events_for_day(events, day), key=lambda e: e["start"]):
        position = event_position(event["start"], event["duration"], grid)
        positioned.append(PositionedEvent(**event, top=position.top, height=position.height))

    return DayLayout(
        date=day,
        isCurrentMonth=anchor is None or day.month == anchor.month,
        zones=resolver.get_unavailable_zones(day, grid),
        events=positioned,
    )
