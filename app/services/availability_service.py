from typing import Dict, Any, List, Optional, Tuple
from datetime import date, datetime
import logging

from app.db.mongodb import db
from app.core.config import settings
from app.schemas.availability import WeeklyScheduleEntry, DateException, default_schedule
from app.utils.availability import AvailabilityResolver, evaluate_slot, day_bounds

logger = logging.getLogger(__name__)

async def get_schedule(stylist_id: str) -> List[Dict[str, Any]]:
    """
    Get the stylist's weekly schedule, always 7 entries.

    Stored entries win; weekdays never saved fall back to the Mon-Fri 9-5 template.
    """
    cursor = db.db.availability_schedules.find({"stylistId": stylist_id}).sort("dayOfWeek", 1)
    stored = {entry["dayOfWeek"]: entry for entry in await cursor.to_list(length=7)}

    schedule = []
    for default_entry in default_schedule():
        entry = stored.get(default_entry.dayOfWeek)
        if entry is None:
            schedule.append(default_entry.dict())
        else:
            schedule.append({
                "dayOfWeek": entry["dayOfWeek"],
                "isWorkingDay": entry["isWorkingDay"],
                "startTime": entry["startTime"],
                "endTime": entry["endTime"],
            })
    return schedule

async def replace_schedule(stylist_id: str, schedule: List[WeeklyScheduleEntry]) -> List[Dict[str, Any]]:
    """
    Save the submitted weekdays, one upsert per (stylist, dayOfWeek)
    """
    now = datetime.utcnow()
    for entry in schedule:
        await db.db.availability_schedules.update_one(
            {"stylistId": stylist_id, "dayOfWeek": entry.dayOfWeek},
            {"$set": {
                "isWorkingDay": entry.isWorkingDay,
                "startTime": entry.startTime,
                "endTime": entry.endTime,
                "updatedAt": now,
            }},
            upsert=True
        )
    logger.info(f"Schedule updated for stylist {stylist_id} ({len(schedule)} days)")
    return await get_schedule(stylist_id)

def _exception_out(document: Dict[str, Any]) -> Dict[str, Any]:
    document["id"] = str(document.pop("_id"))
    return document

async def get_exceptions(stylist_id: str, start: date, end: date) -> List[Dict[str, Any]]:
    """
    Get date exceptions with start <= date <= end (ISO date strings sort by date)
    """
    cursor = db.db.availability_exceptions.find({
        "stylistId": stylist_id,
        "date": {"$gte": start.isoformat(), "$lte": end.isoformat()},
    }).sort("date", 1)
    exceptions = await cursor.to_list(length=None)
    return [_exception_out(exception) for exception in exceptions]

async def upsert_exception(stylist_id: str, exception: DateException) -> Dict[str, Any]:
    """
    Add an exception, replacing any existing one for the same date
    """
    day = exception.date.isoformat()
    data = exception.dict()
    data["date"] = day
    data["stylistId"] = stylist_id
    data["updatedAt"] = datetime.utcnow()

    await db.db.availability_exceptions.update_one(
        {"stylistId": stylist_id, "date": day},
        {"$set": data},
        upsert=True
    )
    saved = await db.db.availability_exceptions.find_one({"stylistId": stylist_id, "date": day})
    return _exception_out(saved)

async def delete_exception(stylist_id: str, day: date) -> bool:
    result = await db.db.availability_exceptions.delete_one(
        {"stylistId": stylist_id, "date": day.isoformat()}
    )
    return result.deleted_count > 0

async def get_resolver(stylist_id: str, start: date, end: date) -> AvailabilityResolver:
    """
    Build a resolver for the stylist covering exceptions in [start, end]
    """
    schedule = await get_schedule(stylist_id)
    exceptions = await get_exceptions(stylist_id, start, end)
    return AvailabilityResolver(schedule, exceptions)

async def check_slot_availability(
    stylist_id: str,
    start: datetime,
    duration: Optional[int] = None,
) -> Tuple[bool, Optional[str]]:
    """
    Check a full appointment against working hours and existing bookings
    """
    duration = duration or settings.DEFAULT_BOOKING_DURATION
    day = start.date()

    resolver = await get_resolver(stylist_id, day, day)
    day_start, day_end = day_bounds(day)
    cursor = db.db.bookings.find({
        "stylistId": stylist_id,
        "appointmentDate": {"$gte": day_start, "$lt": day_end},
    })
    bookings = await cursor.to_list(length=None)

    return evaluate_slot(
        resolver.working_window(day),
        bookings,
        start,
        duration,
        default_duration=settings.DEFAULT_BOOKING_DURATION,
    )
