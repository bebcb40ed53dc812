from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
from app.core.auth import get_current_user, require_role
from app.schemas.booking import BookingCreate, BookingResponse, BookingStatusUpdate
from app.services.availability_service import check_slot_availability
from app.services.booking_service import (
    create_booking, get_booking_by_id, get_user_bookings, update_booking_status,
    booking_duration, wall_clock
)
from app.services.stylist_service import get_stylist_by_id, find_service
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_new_booking(
    booking_in: BookingCreate,
    current_user: dict = Depends(get_current_user)
):
    """
    Book an appointment. Stylists booking on their own calendar create a
    manual (already approved) booking for a walk-in client.
    """
    # Check if stylist exists
    stylist = await get_stylist_by_id(booking_in.stylistId)
    if not stylist:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Stylist not found"
        )

    if booking_in.serviceId and not find_service(stylist, booking_in.serviceId):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Service not offered by this stylist"
        )

    duration = booking_duration(booking_in.dict(), find_service(stylist, booking_in.serviceId))
    available, reason = await check_slot_availability(
        stylist["id"], wall_clock(booking_in.appointmentDate), duration
    )
    if not available:
        logger.info(f"Booking rejected for stylist {stylist['id']}: {reason}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=reason
        )

    return await create_booking(booking_in, stylist, current_user)

@router.get("/me", response_model=List[BookingResponse])
async def get_my_bookings(current_user: dict = Depends(get_current_user)):
    """
    Bookings the current user made, or received as a stylist
    """
    return await get_user_bookings(current_user)

@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def change_booking_status(
    booking_id: str,
    status_in: BookingStatusUpdate,
    current_user: dict = Depends(require_role("STYLIST"))
):
    """
    Approve, complete or cancel a booking (the booked stylist only)
    """
    booking = await get_booking_by_id(booking_id)
    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found"
        )

    if booking["stylistId"] != current_user.get("stylistId"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have access to this booking"
        )

    updated_booking = await update_booking_status(booking_id, status_in.status)
    if not updated_booking:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not update booking"
        )
    return updated_booking
