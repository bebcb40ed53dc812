from typing import Dict, Any, List, Optional
from datetime import datetime, timedelta
from bson import ObjectId
from bson.errors import InvalidId
import logging

from app.db.mongodb import db
from app.core.config import settings
from app.schemas.booking import BookingCreate, BookingStatus, ImportSource
from app.schemas.calendar import BlockoutCreate, EventType
from app.schemas.notification import NotificationCreate, NotificationType
from app.services.notification_service import create_notification
from app.services.stylist_service import find_service

logger = logging.getLogger(__name__)

BLOCKOUT_COLOR = "#fee2e2"

def wall_clock(moment: datetime) -> datetime:
    """
    Drop any UTC offset and keep the wall-clock time.

    Schedules are time-zone naive ("09:00" in the stylist's own day), so an
    appointment is compared by its local hour and minute.
    """
    return moment.replace(tzinfo=None)

def booking_duration(booking: Dict[str, Any], service: Optional[Dict[str, Any]] = None) -> int:
    """Booking override, then service duration, then the default."""
    return (
        booking.get("duration")
        or (service or {}).get("duration")
        or settings.DEFAULT_BOOKING_DURATION
    )

def _booking_out(booking: Dict[str, Any]) -> Dict[str, Any]:
    booking["id"] = str(booking["_id"])
    return booking

async def create_booking(
    booking_in: BookingCreate,
    stylist: Dict[str, Any],
    current_user: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Create a booking. The caller has already checked the slot.

    When the stylist books for themselves (manual booking) there is no
    CrownSide client attached, only the typed client name.
    """
    service = find_service(stylist, booking_in.serviceId)
    is_manual = current_user.get("stylistId") == stylist["id"]

    booking_data = {
        "stylistId": stylist["id"],
        "clientId": None if is_manual else current_user["id"],
        "clientName": booking_in.clientName if is_manual else current_user.get("fullName"),
        "serviceId": service["id"] if service else None,
        "serviceName": service["name"] if service else None,
        "servicePrice": service["price"] if service else None,
        "appointmentDate": wall_clock(booking_in.appointmentDate),
        "duration": booking_duration(booking_in.dict(), service),
        "status": BookingStatus.APPROVED.value if is_manual else BookingStatus.PENDING.value,
        "isBlockout": False,
        "notes": booking_in.notes,
        "importSource": ImportSource.MANUAL.value if is_manual else None,
        "createdAt": datetime.utcnow(),
    }

    result = await db.db.bookings.insert_one(booking_data)
    created_booking = _booking_out(await db.db.bookings.find_one({"_id": result.inserted_id}))

    if not is_manual:
        await create_notification(NotificationCreate(
            userId=stylist["userId"],
            senderId=current_user["id"],
            type=NotificationType.BOOKING_CREATED,
            bookingId=created_booking["id"],
            message=f"New booking request for {booking_data['appointmentDate']:%Y-%m-%d %H:%M}",
        ))

    return created_booking

async def create_blockout(stylist_id: str, blockout_in: BlockoutCreate) -> Dict[str, Any]:
    """
    Block time on the stylist's calendar
    """
    blockout_data = {
        "stylistId": stylist_id,
        "clientId": None,
        "appointmentDate": wall_clock(blockout_in.start),
        "duration": blockout_in.duration,
        "isBlockout": True,
        "notes": blockout_in.notes or "Busy",
        # Blockouts are effectively approved
        "status": BookingStatus.APPROVED.value,
        "importSource": ImportSource.MANUAL.value,
        "createdAt": datetime.utcnow(),
    }
    result = await db.db.bookings.insert_one(blockout_data)
    return _booking_out(await db.db.bookings.find_one({"_id": result.inserted_id}))

async def get_booking_by_id(booking_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a booking by ID
    """
    try:
        object_id = ObjectId(booking_id)
    except (InvalidId, TypeError):
        return None
    booking = await db.db.bookings.find_one({"_id": object_id})
    return _booking_out(booking) if booking else None

async def get_user_bookings(current_user: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Clients see their own bookings, stylists see bookings made with them
    """
    if current_user.get("role") == "STYLIST":
        if not current_user.get("stylistId"):
            return []
        query = {"stylistId": current_user["stylistId"], "isBlockout": False}
    else:
        query = {"clientId": current_user["id"]}

    cursor = db.db.bookings.find(query).sort("appointmentDate", 1)
    return [_booking_out(booking) for booking in await cursor.to_list(length=None)]

async def update_booking_status(booking_id: str, status: BookingStatus) -> Optional[Dict[str, Any]]:
    """
    Update the status of a booking
    """
    booking = await get_booking_by_id(booking_id)
    if not booking:
        return None

    await db.db.bookings.update_one(
        {"_id": ObjectId(booking_id)},
        {"$set": {"status": status.value, "updatedAt": datetime.utcnow()}}
    )
    return await get_booking_by_id(booking_id)

def to_calendar_event(booking: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shape a booking document into a calendar event
    """
    duration = booking_duration(booking)
    start = booking["appointmentDate"]
    is_blockout = booking.get("isBlockout", False)

    if booking.get("importSource") not in (None, ImportSource.MANUAL.value):
        event_type = EventType.IMPORTED
    elif is_blockout:
        event_type = EventType.BLOCKOUT
    else:
        event_type = EventType.BOOKING

    return {
        "id": str(booking["_id"]),
        "title": (booking.get("notes") or "Blocked") if is_blockout else (booking.get("serviceName") or "Appointment"),
        "start": start,
        "end": start + timedelta(minutes=duration),
        "duration": duration,
        "isBlockout": is_blockout,
        "status": booking.get("status", BookingStatus.PENDING.value),
        "clientName": None if is_blockout else (booking.get("clientName") or "Unknown Client"),
        "serviceName": booking.get("serviceName"),
        "servicePrice": booking.get("servicePrice"),
        "notes": booking.get("notes"),
        "type": event_type,
        "color": BLOCKOUT_COLOR if is_blockout else None,
    }

async def get_calendar_events(stylist_id: str, start: datetime, end: datetime) -> List[Dict[str, Any]]:
    """
    Bookings and blockouts with start <= appointmentDate <= end, as calendar events
    """
    cursor = db.db.bookings.find({
        "stylistId": stylist_id,
        "appointmentDate": {"$gte": wall_clock(start), "$lte": wall_clock(end)},
    }).sort("appointmentDate", 1)
    bookings = await cursor.to_list(length=None)
    return [to_calendar_event(booking) for booking in bookings]
