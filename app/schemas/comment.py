from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum

class LikeTarget(str, Enum):
    POST = "POST"
    COMMENT = "COMMENT"

class CommentCreate(BaseModel):
    content: str = ""  # Blank content is answered with a 400 by the endpoint
    parentId: Optional[str] = None
    mentionedUserId: Optional[str] = None

class CommentAuthor(BaseModel):
    id: str
    fullName: Optional[str] = None
    role: Optional[str] = None
    profileImage: Optional[str] = None

class CommentResponse(BaseModel):
    id: str
    postId: str
    authorId: str
    author: Optional[CommentAuthor] = None
    content: str
    parentId: Optional[str] = None
    depth: int = 0
    mentionedUserId: Optional[str] = None
    isRemoved: bool = False
    removedBy: Optional[str] = None
    removedReason: Optional[str] = None
    removedAt: Optional[datetime] = None
    likeCount: int = 0
    replyCount: int = 0
    isLiked: bool = False
    createdAt: datetime

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }

class CommentPage(BaseModel):
    comments: List[CommentResponse]
    nextCursor: Optional[str] = None

class LikeToggle(BaseModel):
    type: str  # Checked against LikeTarget by the endpoint (400 when unknown)
    id: str = Field(..., min_length=1)

class LikeResult(BaseModel):
    liked: bool
