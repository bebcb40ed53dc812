from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Dict
from app.core.auth import get_current_user
from app.schemas.notification import NotificationResponse
from app.services.notification_service import (
    get_notifications, mark_notification_read, get_unread_notification_count
)

router = APIRouter()

@router.get("/", response_model=List[NotificationResponse])
async def get_user_notifications(
    unread_only: bool = Query(False),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    current_user: dict = Depends(get_current_user)
):
    """
    Get notifications for the current user
    """
    notifications = await get_notifications(
        current_user["id"],
        unread_only=unread_only,
        skip=skip,
        limit=limit
    )

    return notifications

@router.get("/count", response_model=Dict[str, int])
async def get_notification_count(current_user: dict = Depends(get_current_user)):
    """
    Get unread notification count for the current user
    """
    count = await get_unread_notification_count(current_user["id"])
    return {"count": count}

@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_as_read(
    notification_id: str,
    current_user: dict = Depends(get_current_user)
):
    """
    Mark a notification as read
    """
    notification = await mark_notification_read(notification_id, current_user["id"])
    if not notification:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found"
        )

    return notification
