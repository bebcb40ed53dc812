from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Any, Dict, Optional
from app.core.auth import require_role
from app.schemas.availability import (
    ScheduleUpdate, DateException, DateExceptionResponse, AvailabilityResponse, SlotCheckResponse
)
from app.services.availability_service import (
    get_schedule, replace_schedule, get_exceptions, upsert_exception,
    delete_exception, check_slot_availability
)
from app.services.stylist_service import get_stylist_by_id
from datetime import date, datetime, timedelta
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

# Window of exceptions returned when the caller gives no range
DEFAULT_EXCEPTION_WINDOW_DAYS = 90

def _own_stylist_id(current_user: Dict[str, Any], stylist_id: Optional[str] = None) -> str:
    """
    The stylist a schedule change applies to: stylists edit their own,
    admins must name one.
    """
    if current_user.get("role") == "ADMIN":
        if not stylist_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="stylistId is required for admin updates"
            )
        return stylist_id

    if not current_user.get("stylistId"):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Stylist profile not found"
        )
    return current_user["stylistId"]

@router.put("/schedule", response_model=AvailabilityResponse)
async def update_schedule(
    schedule_in: ScheduleUpdate,
    current_user: dict = Depends(require_role("STYLIST", "ADMIN"))
):
    """
    Replace the weekly schedule, one entry per submitted weekday
    """
    stylist_id = _own_stylist_id(current_user, schedule_in.stylistId)
    if current_user.get("role") == "ADMIN" and not await get_stylist_by_id(stylist_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Stylist not found"
        )

    schedule = await replace_schedule(stylist_id, schedule_in.schedule)
    return {"schedule": schedule, "exceptions": []}

@router.post("/exception", response_model=DateExceptionResponse, status_code=status.HTTP_201_CREATED)
async def add_exception(
    exception_in: DateException,
    current_user: dict = Depends(require_role("STYLIST"))
):
    """
    Close a date or give it custom hours (replaces any exception for that date)
    """
    stylist_id = _own_stylist_id(current_user)
    exception = await upsert_exception(stylist_id, exception_in)
    logger.info(f"Exception saved for stylist {stylist_id} on {exception['date']}")
    return exception

@router.delete("/exception/{day}", response_model=Dict[str, bool])
async def remove_exception(
    day: date,
    current_user: dict = Depends(require_role("STYLIST"))
):
    """
    Remove the exception for a date, restoring the weekly hours
    """
    stylist_id = _own_stylist_id(current_user)
    success = await delete_exception(stylist_id, day)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No exception for this date"
        )
    return {"success": success}

@router.get("/{stylist_id}", response_model=AvailabilityResponse)
async def get_stylist_availability(
    stylist_id: str,
    start: Optional[date] = Query(None, description="First date of exceptions to include"),
    end: Optional[date] = Query(None, description="Last date of exceptions to include"),
):
    """
    Get a stylist's weekly schedule and the exceptions in [start, end]
    """
    stylist = await get_stylist_by_id(stylist_id)
    if not stylist:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Stylist not found"
        )

    start = start or date.today()
    end = end or start + timedelta(days=DEFAULT_EXCEPTION_WINDOW_DAYS)
    if end < start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end must not be before start"
        )

    return {
        "schedule": await get_schedule(stylist_id),
        "exceptions": await get_exceptions(stylist_id, start, end),
    }

@router.get("/{stylist_id}/check", response_model=SlotCheckResponse)
async def check_availability(
    stylist_id: str,
    at: datetime = Query(..., description="Appointment start"),
    duration: Optional[int] = Query(None, gt=0, le=24 * 60),
):
    """
    Check whether an appointment of `duration` minutes fits at `at`
    """
    stylist = await get_stylist_by_id(stylist_id)
    if not stylist:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Stylist not found"
        )

    available, reason = await check_slot_availability(stylist_id, at.replace(tzinfo=None), duration)
    return {"available": available, "reason": reason}
