from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Any, Dict, List, Optional
from app.core.auth import get_current_user, require_role
from app.schemas.calendar import BlockoutCreate, CalendarEvent, CalendarGridResponse, CalendarView
from app.services.availability_service import get_resolver
from app.services.booking_service import create_blockout, get_calendar_events, to_calendar_event
from app.services.stylist_service import get_stylist_by_id
from app.utils.calendar_grid import GridConfig, build_day_layout, compute_visible_days, visible_range
from datetime import date, datetime

router = APIRouter()

def _require_stylist_profile(current_user: Dict[str, Any]) -> str:
    if not current_user.get("stylistId"):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Stylist profile not found"
        )
    return current_user["stylistId"]

def _as_busy(event: Dict[str, Any]) -> Dict[str, Any]:
    """Hide client details when someone else looks at a stylist's grid."""
    return {
        **event,
        "title": "Busy",
        "clientName": None,
        "serviceName": None,
        "servicePrice": None,
        "notes": None,
    }

@router.get("/events", response_model=List[CalendarEvent])
async def get_events(
    start: datetime = Query(...),
    end: datetime = Query(...),
    current_user: dict = Depends(require_role("STYLIST"))
):
    """
    Bookings and blockouts of the current stylist in [start, end]
    """
    stylist_id = _require_stylist_profile(current_user)
    if end < start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end must not be before start"
        )
    return await get_calendar_events(stylist_id, start, end)

@router.post("/blockout", response_model=CalendarEvent, status_code=status.HTTP_201_CREATED)
async def add_blockout(
    blockout_in: BlockoutCreate,
    current_user: dict = Depends(require_role("STYLIST"))
):
    """
    Block time on the current stylist's calendar
    """
    stylist_id = _require_stylist_profile(current_user)
    blockout = await create_blockout(stylist_id, blockout_in)
    return to_calendar_event(blockout)

@router.get("/grid", response_model=CalendarGridResponse)
async def get_grid(
    view: CalendarView = Query(CalendarView.WEEK),
    day: Optional[date] = Query(None, alias="date"),
    stylist_id: Optional[str] = Query(None, alias="stylistId"),
    current_user: dict = Depends(get_current_user)
):
    """
    Day columns for the requested view with unavailable zones and positioned events.

    Stylists get their own calendar by default. Looking at another stylist's
    grid shows when they are busy but not with whom.
    """
    own_stylist_id = current_user.get("stylistId")
    stylist_id = stylist_id or own_stylist_id
    if not stylist_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="stylistId is required"
        )
    if stylist_id != own_stylist_id and not await get_stylist_by_id(stylist_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Stylist not found"
        )

    anchor = day or date.today()
    days = compute_visible_days(view, anchor)
    range_start, range_end = visible_range(days)

    resolver = await get_resolver(stylist_id, days[0], days[-1])
    events = await get_calendar_events(stylist_id, range_start, range_end)
    if stylist_id != own_stylist_id and current_user.get("role") != "ADMIN":
        events = [_as_busy(event) for event in events]

    grid = GridConfig.from_settings()
    return {
        "view": view,
        "startHour": grid.start_hour,
        "endHour": grid.end_hour,
        "hourHeight": grid.hour_height,
        "days": [
            build_day_layout(
                visible_day, events, resolver, grid,
                anchor=anchor if view == CalendarView.MONTH else None,
            )
            for visible_day in days
        ],
    }
