"""
Stylist calendar state for the Python client.

The controller keeps the view mode (day/week/month), the anchor date, the
visible days and whatever was last fetched for them. Navigation re-derives
the visible days and re-fetches. Fetches can overlap when the user clicks
through pages quickly; each one takes a generation number and only the
newest generation may write its result.
"""

import asyncio
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

import httpx
from pydantic import BaseModel, Field, ValidationError

from app.client.api import CrownSideClient
from app.client.errors import ClientError, SlotUnavailableError
from app.schemas.calendar import CalendarEvent, CalendarView, DayLayout
from app.utils.availability import AvailabilityResolver
from app.utils.calendar_grid import (
    GridConfig, build_day_layout, compute_visible_days, shift_date, slot_from_click, visible_range
)

logger = logging.getLogger(__name__)


class BookingDraft(BaseModel):
    """A booking form pre-filled from a calendar click."""
    stylistId: str
    appointmentDate: datetime
    serviceId: Optional[str] = None
    duration: Optional[int] = Field(None, gt=0)
    notes: Optional[str] = None
    clientName: Optional[str] = None


class CalendarController:
    def __init__(
        self,
        client: CrownSideClient,
        stylist_id: str,
        view: Union[CalendarView, str] = CalendarView.WEEK,
        today: Optional[date] = None,
        grid: Optional[GridConfig] = None,
    ):
        self.client = client
        self.stylist_id = stylist_id
        self.view = CalendarView(view)
        self.today = today or date.today()
        self.current_date = self.today
        self.grid = grid or GridConfig.from_settings()
        self.visible_days: List[date] = compute_visible_days(self.view, self.current_date)

        self.events: List[Dict[str, Any]] = []
        self.resolver: Optional[AvailabilityResolver] = None
        self.loading = False
        self.error: Optional[Exception] = None
        self._generation = 0

    # Navigation

    async def set_view(self, view: Union[CalendarView, str]) -> None:
        self.view = CalendarView(view)
        await self._show(self.current_date)

    async def go_prev(self) -> None:
        await self._show(shift_date(self.view, self.current_date, -1))

    async def go_next(self) -> None:
        await self._show(shift_date(self.view, self.current_date, 1))

    async def go_today(self) -> None:
        await self._show(self.today)

    async def _show(self, anchor: date) -> None:
        self.current_date = anchor
        self.visible_days = compute_visible_days(self.view, anchor)
        await self.refresh()

    async def refresh(self) -> bool:
        start, end = visible_range(self.visible_days)
        return await self.fetch_range(start, end)

    # Data

    async def fetch_range(self, start: datetime, end: datetime) -> bool:
        """Load events and availability for [start, end].

        Returns True when the result was applied. A failure keeps the
        previous events and availability and is not retried.
        """
        self._generation += 1
        generation = self._generation
        self.loading = True

        try:
            events, availability = await asyncio.gather(
                self.client.get_events(start, end),
                self.client.get_availability(self.stylist_id, start.date(), end.date()),
            )
            parsed_events = [CalendarEvent(**event).dict() for event in events]
            resolver = AvailabilityResolver(availability["schedule"], availability["exceptions"])
        except (ClientError, httpx.HTTPError, ValidationError, KeyError, TypeError) as fetch_error:
            if generation == self._generation:
                logger.error(f"Calendar fetch failed for {start:%Y-%m-%d} - {end:%Y-%m-%d}: {fetch_error}")
                self.error = fetch_error
                self.loading = False
            return False

        if generation != self._generation:
            logger.debug(f"Discarding stale calendar response (generation {generation})")
            return False

        self.events = parsed_events
        self.resolver = resolver
        self.error = None
        self.loading = False
        return True

    def day_layouts(self) -> List[DayLayout]:
        if self.resolver is None:
            return []
        anchor = self.current_date if self.view == CalendarView.MONTH else None
        return [
            build_day_layout(day, self.events, self.resolver, self.grid, anchor=anchor)
            for day in self.visible_days
        ]

    # Actions

    def on_slot_click(self, day: date, offset: float) -> BookingDraft:
        """Turn a click on a day column into a booking draft for that hour."""
        when = slot_from_click(day, offset, self.grid)
        if when is None:
            raise SlotUnavailableError("Click is outside the calendar grid")
        if self.resolver is None or not self.resolver.is_datetime_available(when):
            raise SlotUnavailableError(f"Stylist is unavailable at {when:%Y-%m-%d %H:%M}", when)
        return BookingDraft(stylistId=self.stylist_id, appointmentDate=when)

    async def submit_booking(self, draft: BookingDraft, **changes: Any) -> Dict[str, Any]:
        """Post the draft (with any form edits applied) and reload the range."""
        payload = {**draft.dict(exclude_none=True), **changes}
        if isinstance(payload["appointmentDate"], datetime):
            payload["appointmentDate"] = payload["appointmentDate"].isoformat()
        booking = await self.client.create_booking(payload)
        await self.refresh()
        return booking

    async def create_blockout(self, start: datetime, duration: int = 60, notes: Optional[str] = None) -> Dict[str, Any]:
        blockout = await self.client.create_blockout(start, duration, notes)
        await self.refresh()
        return blockout
