from typing import Dict, Any, List, Optional
from app.db.mongodb import db
from app.schemas.notification import NotificationCreate
from datetime import datetime
from bson import ObjectId
from bson.errors import InvalidId
import logging

logger = logging.getLogger(__name__)

async def create_notification(notification: NotificationCreate) -> Dict[str, Any]:
    """
    Create a new notification
    """
    notification_data = notification.dict()
    notification_data["read"] = False
    notification_data["createdAt"] = datetime.utcnow()

    result = await db.db.notifications.insert_one(notification_data)

    created_notification = await db.db.notifications.find_one({"_id": result.inserted_id})
    created_notification["id"] = str(created_notification["_id"])
    return created_notification

async def create_notifications(notifications: List[NotificationCreate]) -> int:
    """
    Bulk insert notifications, returns how many were written
    """
    if not notifications:
        return 0

    now = datetime.utcnow()
    documents = [
        {**notification.dict(), "read": False, "createdAt": now}
        for notification in notifications
    ]
    result = await db.db.notifications.insert_many(documents)
    logger.info(f"Created {len(result.inserted_ids)} notifications")
    return len(result.inserted_ids)

async def get_notifications(
    user_id: str,
    unread_only: bool = False,
    skip: int = 0,
    limit: int = 20
) -> List[Dict[str, Any]]:
    """
    Get notifications for a user
    """
    query = {"userId": user_id}

    if unread_only:
        query["read"] = False

    cursor = db.db.notifications.find(query).sort("createdAt", -1).skip(skip).limit(limit)
    notifications = await cursor.to_list(length=limit)

    for notification in notifications:
        notification["id"] = str(notification["_id"])

    return notifications

async def mark_notification_read(notification_id: str, user_id: str) -> Optional[Dict[str, Any]]:
    """
    Mark a notification as read
    """
    try:
        object_id = ObjectId(notification_id)
    except (InvalidId, TypeError):
        return None

    await db.db.notifications.update_one(
        {"_id": object_id, "userId": user_id},
        {"$set": {"read": True, "readAt": datetime.utcnow()}}
    )

    updated_notification = await db.db.notifications.find_one({"_id": object_id, "userId": user_id})
    if updated_notification:
        updated_notification["id"] = str(updated_notification["_id"])

    return updated_notification

async def get_unread_notification_count(user_id: str) -> int:
    """
    Get unread notification count for a user
    """
    return await db.db.notifications.count_documents({"userId": user_id, "read": False})
