from typing import Dict, Any, Optional
from app.db.mongodb import db
from app.schemas.user import UserCreate
from app.core.auth import get_password_hash, verify_password
from datetime import datetime
from bson import ObjectId

async def create_user(user_in: UserCreate) -> Dict[str, Any]:
    """
    Create a new user in the database
    """
    # Create user with hashed password
    user_data = user_in.dict()
    user_data["email"] = user_data["email"].lower()
    user_data["role"] = user_in.role.value
    user_data["password"] = get_password_hash(user_data["password"])
    user_data["createdAt"] = datetime.utcnow()
    user_data["isActive"] = True
    user_data["mutedUntil"] = None

    # Insert user into database
    result = await db.db.users.insert_one(user_data)

    # Get the created user
    created_user = await db.db.users.find_one({"_id": result.inserted_id})

    # Transform the _id field to string
    created_user["id"] = str(created_user["_id"])

    return created_user

async def get_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    """
    Get a user by email
    """
    user = await db.db.users.find_one({"email": email.lower()})
    if user:
        user["id"] = str(user["_id"])
    return user

async def authenticate_user(email: str, password: str) -> Optional[Dict[str, Any]]:
    """
    Return the user when the password matches, otherwise None
    """
    user = await get_user_by_email(email)
    if not user or not user.get("isActive", True):
        return None
    if not verify_password(password, user.get("password", "")):
        return None
    return user

async def update_last_login(user_id: str) -> None:
    """
    Update user's last login timestamp
    """
    await db.db.users.update_one(
        {"_id": ObjectId(user_id)},
        {"$set": {"lastLogin": datetime.utcnow()}}
    )

def is_muted(user: Dict[str, Any], now: Optional[datetime] = None) -> bool:
    """True while a moderator mute is still running."""
    muted_until = user.get("mutedUntil")
    return bool(muted_until) and muted_until > (now or datetime.utcnow())
