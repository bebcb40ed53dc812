from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from enum import Enum

class NotificationType(str, Enum):
    REPLY = "REPLY"
    NEW_COMMENT = "NEW_COMMENT"
    MENTION = "MENTION"
    BOOKING_CREATED = "BOOKING_CREATED"

class NotificationCreate(BaseModel):
    userId: str
    senderId: Optional[str] = None
    type: NotificationType
    message: Optional[str] = None
    postId: Optional[str] = None
    commentId: Optional[str] = None
    bookingId: Optional[str] = None

class NotificationResponse(NotificationCreate):
    id: str
    read: bool = False
    readAt: Optional[datetime] = None
    createdAt: datetime

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }
