from datetime import date, datetime, time, timedelta

from app.schemas.availability import default_schedule
from app.schemas.calendar import CalendarView
from app.utils.availability import AvailabilityResolver
from app.utils.calendar_grid import (
    GridConfig, build_day_layout, compute_visible_days, event_position,
    hour_from_offset, shift_date, slot_from_click, start_of_week, visible_range
)

GRID = GridConfig(start_hour=6, end_hour=23, hour_height=80)


def _event(event_id, start, duration=60, **extra):
    return {
        "id": event_id,
        "title": "Silk press",
        "start": start,
        "end": start + timedelta(minutes=duration),
        "duration": duration,
        "status": "APPROVED",
        **extra,
    }


def test_grid_dimensions():
    assert GRID.total_height == 1360
    assert GRID.hours[0] == 6
    assert GRID.hours[-1] == 22


def test_week_starts_on_monday():
    days = compute_visible_days("week", date(2024, 5, 8))
    assert days[0] == date(2024, 5, 6)
    assert days[-1] == date(2024, 5, 12)
    assert len(days) == 7


def test_sunday_belongs_to_the_previous_week():
    assert start_of_week(date(2024, 5, 12)) == date(2024, 5, 6)
    assert start_of_week(datetime(2024, 5, 6, 15, 0)) == date(2024, 5, 6)


def test_month_view_is_six_full_weeks():
    days = compute_visible_days(CalendarView.MONTH, date(2024, 5, 20))
    assert len(days) == 42
    assert days[0] == date(2024, 4, 29)
    assert days[0].weekday() == 0
    assert days[-1] == date(2024, 6, 9)
    assert date(2024, 5, 1) in days and date(2024, 5, 31) in days


def test_day_view_is_the_date_alone():
    assert compute_visible_days("day", date(2024, 5, 8)) == [date(2024, 5, 8)]


def test_shift_month_clamps_day():
    assert shift_date("month", date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert shift_date("month", date(2024, 12, 15), 1) == date(2025, 1, 15)
    assert shift_date("month", date(2024, 1, 10), -1) == date(2023, 12, 10)


def test_shift_week_and_day():
    assert shift_date("week", date(2024, 5, 8), 1) == date(2024, 5, 15)
    assert shift_date("week", date(2024, 5, 8), -1) == date(2024, 5, 1)
    assert shift_date("day", date(2024, 5, 31), 1) == date(2024, 6, 1)


def test_visible_range_spans_whole_days():
    start, end = visible_range(compute_visible_days("week", date(2024, 5, 8)))
    assert start == datetime(2024, 5, 6, 0, 0)
    assert end == datetime.combine(date(2024, 5, 12), time.max)


def test_event_position_is_linear():
    position = event_position(datetime(2024, 5, 6, 10, 30), 90, GRID)
    assert position.top == 4.5 * 80
    assert position.height == 1.5 * 80


def test_click_offset_to_hour():
    assert hour_from_offset(0, GRID) == 6
    assert hour_from_offset(79, GRID) == 6
    assert hour_from_offset(80, GRID) == 7
    assert hour_from_offset(1359, GRID) == 22
    assert hour_from_offset(1360, GRID) is None
    assert hour_from_offset(-5, GRID) is None


def test_slot_from_click():
    assert slot_from_click(date(2024, 5, 6), 250, GRID) == datetime(2024, 5, 6, 9, 0)
    assert slot_from_click(date(2024, 5, 6), 5000, GRID) is None


def test_day_layout_positions_that_days_events():
    resolver = AvailabilityResolver(default_schedule())
    events = [
        _event("late", datetime(2024, 5, 6, 14, 0)),
        _event("early", datetime(2024, 5, 6, 9, 0), duration=30),
        _event("tuesday", datetime(2024, 5, 7, 9, 0)),
    ]

    layout = build_day_layout(date(2024, 5, 6), events, resolver, GRID)

    assert [event.id for event in layout.events] == ["early", "late"]
    assert layout.events[0].top == 240
    assert layout.events[0].height == 40
    assert [(zone.top, zone.height) for zone in layout.zones] == [(0, 240), (880, 480)]


def test_day_layout_marks_padding_days_of_a_month():
    resolver = AvailabilityResolver(default_schedule())
    anchor = date(2024, 5, 20)

    padding = build_day_layout(date(2024, 4, 30), [], resolver, GRID, anchor=anchor)
    inside = build_day_layout(date(2024, 5, 2), [], resolver, GRID, anchor=anchor)

    assert not padding.isCurrentMonth
    assert inside.isCurrentMonth
