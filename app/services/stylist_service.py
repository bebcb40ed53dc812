from typing import Dict, Any, Optional
from app.db.mongodb import db
from app.schemas.stylist import StylistCreate
from datetime import datetime
from bson import ObjectId
from bson.errors import InvalidId

async def create_stylist(stylist_in: StylistCreate, user_id: str) -> Dict[str, Any]:
    """
    Create the stylist profile for a user
    """
    stylist_data = stylist_in.dict()
    stylist_data["userId"] = user_id
    stylist_data["createdAt"] = datetime.utcnow()
    stylist_data["rating"] = 0
    stylist_data["reviewCount"] = 0
    if not stylist_data.get("profileImage"):
        stylist_data["profileImage"] = ""

    # Give every service a stable id so bookings can reference it
    stylist_data["services"] = [
        {**service, "id": str(ObjectId())} for service in stylist_data.get("services", [])
    ]

    result = await db.db.stylists.insert_one(stylist_data)

    created_stylist = await db.db.stylists.find_one({"_id": result.inserted_id})
    created_stylist["id"] = str(created_stylist["_id"])
    return created_stylist

async def get_stylist_by_id(stylist_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a stylist by ID
    """
    try:
        object_id = ObjectId(stylist_id)
    except (InvalidId, TypeError):
        return None

    stylist = await db.db.stylists.find_one({"_id": object_id})
    if stylist:
        stylist["id"] = str(stylist["_id"])
        stylist.setdefault("profileImage", "")
    return stylist

async def get_stylist_by_user_id(user_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a stylist by user ID
    """
    stylist = await db.db.stylists.find_one({"userId": user_id})
    if stylist:
        stylist["id"] = str(stylist["_id"])
        stylist.setdefault("profileImage", "")
    return stylist

def find_service(stylist: Dict[str, Any], service_id: Optional[str]) -> Optional[Dict[str, Any]]:
    """Look up one of the stylist's active services by id."""
    if not service_id:
        return None
    for service in stylist.get("services", []):
        if service.get("id") == service_id and service.get("isActive", True):
            return service
    return None
