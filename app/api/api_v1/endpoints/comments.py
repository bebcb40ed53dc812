from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional
from app.core.auth import get_current_user, get_optional_user
from app.core.config import settings
from app.schemas.comment import CommentCreate, CommentResponse, CommentPage, LikeToggle, LikeResult, LikeTarget
from app.services.comment_service import (
    create_comment, list_comments, toggle_like, get_comment_by_id, soft_delete_comment,
    removed_placeholder
)
from app.services.forum_service import get_post
from app.services.user_service import is_muted
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

AUTHOR_REMOVAL_REASON = "User deleted"
MODERATOR_REMOVAL_REASON = "Removed by Moderator"

# Declared before /{post_id} so "like" is never read as a post id
@router.post("/like", response_model=LikeResult)
async def like_or_unlike(
    like_in: LikeToggle,
    current_user: dict = Depends(get_current_user)
):
    """
    Toggle the current user's like on a post or comment
    """
    try:
        target_type = LikeTarget(like_in.type)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid type"
        )

    if target_type == LikeTarget.POST:
        target = await get_post(like_in.id)
    else:
        target = await get_comment_by_id(like_in.id)
    if not target:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{target_type.value.title()} not found"
        )

    liked = await toggle_like(current_user["id"], target_type, like_in.id)
    return {"liked": liked}

@router.post("/{post_id}", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    post_id: str,
    comment_in: CommentCreate,
    current_user: dict = Depends(get_current_user)
):
    """
    Comment on a post, or reply to a comment with parentId
    """
    if not comment_in.content.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Content is required"
        )

    if is_muted(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You are muted until {current_user['mutedUntil']:%Y-%m-%d %H:%M} UTC"
        )

    post = await get_post(post_id)
    if not post:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )

    return await create_comment(post, comment_in, current_user)

@router.get("/{post_id}", response_model=CommentPage)
async def get_comments(
    post_id: str,
    parent_id: Optional[str] = Query(None, alias="parentId"),
    limit: int = Query(settings.COMMENT_PAGE_LIMIT, ge=1, le=100),
    cursor: Optional[str] = Query(None),
    current_user: Optional[dict] = Depends(get_optional_user)
):
    """
    One page of root comments, or of replies to parentId, oldest first
    """
    return await list_comments(
        post_id,
        parent_id=parent_id,
        limit=limit,
        cursor=cursor,
        viewer_id=current_user["id"] if current_user else None,
    )

@router.delete("/{comment_id}", response_model=CommentResponse)
async def delete_comment(
    comment_id: str,
    current_user: dict = Depends(get_current_user)
):
    """
    Soft-remove a comment; its replies stay where they are
    """
    comment = await get_comment_by_id(comment_id)
    if not comment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Comment not found"
        )

    if comment["authorId"] == current_user["id"]:
        reason = AUTHOR_REMOVAL_REASON
    elif current_user.get("role") == "ADMIN":
        reason = MODERATOR_REMOVAL_REASON
    else:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to delete this comment"
        )

    removed = await soft_delete_comment(comment_id, current_user["id"], reason)
    logger.info(f"Comment {comment_id} removed by {current_user['id']} ({reason})")
    removed["content"] = removed_placeholder(removed)
    return removed
