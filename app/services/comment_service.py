"""
Forum comments: creation with depth capping and notifications, cursor
pagination per parent, likes and soft deletion.
"""

from typing import Dict, Any, List, Optional, Tuple
from datetime import datetime
from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import DuplicateKeyError
import logging

from app.db.mongodb import db
from app.core.config import settings
from app.schemas.comment import CommentCreate, LikeTarget
from app.schemas.notification import NotificationCreate, NotificationType
from app.services.notification_service import create_notifications
from app.services.forum_service import touch_post

logger = logging.getLogger(__name__)

AUTHOR_DELETED_TEXT = "This comment was deleted by its author."
MODERATOR_REMOVED_TEXT = "Comment removed by moderator."


def resolve_placement(
    parent: Optional[Dict[str, Any]],
    max_depth: int,
) -> Tuple[Optional[str], int]:
    """
    (parentId, depth) for a new comment.

    A reply past max_depth stays at max_depth and becomes a sibling of the
    comment it answers, i.e. it is attached to that comment's parent.
    """
    if parent is None:
        return None, 0

    depth = parent.get("depth", 0) + 1
    if depth > max_depth:
        return parent.get("parentId"), max_depth
    return str(parent["_id"]), depth


def plan_notifications(
    author_id: str,
    post_id: str,
    comment_id: str,
    post_author_id: Optional[str] = None,
    parent_author_id: Optional[str] = None,
    mentioned_user_id: Optional[str] = None,
) -> List[NotificationCreate]:
    """
    Reply beats new-comment beats mention; nobody is notified twice and the
    commenter never notifies themselves.
    """
    candidates = [
        (parent_author_id, NotificationType.REPLY),
        (post_author_id, NotificationType.NEW_COMMENT),
        (mentioned_user_id, NotificationType.MENTION),
    ]
    notifications = []
    recipients = {author_id}
    for user_id, notification_type in candidates:
        if not user_id or user_id in recipients:
            continue
        recipients.add(user_id)
        notifications.append(NotificationCreate(
            userId=user_id,
            senderId=author_id,
            type=notification_type,
            postId=post_id,
            commentId=comment_id,
        ))
    return notifications


def removed_placeholder(comment: Dict[str, Any]) -> str:
    if comment.get("removedBy") == comment.get("authorId"):
        return AUTHOR_DELETED_TEXT
    return MODERATOR_REMOVED_TEXT


def _object_id(value: Optional[str]) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


async def get_comment_by_id(comment_id: str) -> Optional[Dict[str, Any]]:
    object_id = _object_id(comment_id)
    if object_id is None:
        return None
    comment = await db.db.comments.find_one({"_id": object_id})
    if comment:
        comment["id"] = str(comment["_id"])
    return comment


async def create_comment(
    post: Dict[str, Any],
    comment_in: CommentCreate,
    author: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Create a comment on a post and notify the people involved
    """
    parent = None
    if comment_in.parentId:
        parent = await get_comment_by_id(comment_in.parentId)
        # A parent from another post is treated as no parent
        if parent and parent["postId"] != post["id"]:
            parent = None

    parent_id, depth = resolve_placement(parent, settings.COMMENT_MAX_DEPTH)

    comment_data = {
        "postId": post["id"],
        "authorId": author["id"],
        "content": comment_in.content,
        "parentId": parent_id,
        "depth": depth,
        "mentionedUserId": comment_in.mentionedUserId,
        "isRemoved": False,
        "createdAt": datetime.utcnow(),
    }
    result = await db.db.comments.insert_one(comment_data)
    created_comment = await db.db.comments.find_one({"_id": result.inserted_id})
    created_comment["id"] = str(created_comment["_id"])

    await touch_post(post["id"])

    # Notify the author the user meant to answer, even if the reply was flattened
    await create_notifications(plan_notifications(
        author_id=author["id"],
        post_id=post["id"],
        comment_id=created_comment["id"],
        post_author_id=post.get("authorId"),
        parent_author_id=parent.get("authorId") if parent else None,
        mentioned_user_id=comment_in.mentionedUserId,
    ))

    created_comment.update({
        "author": _author_summary(author),
        "likeCount": 0,
        "replyCount": 0,
        "isLiked": False,
    })
    return created_comment


def _author_summary(user: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": str(user.get("id") or user["_id"]),
        "fullName": user.get("fullName"),
        "role": user.get("role"),
        "profileImage": user.get("profileImage"),
    }


async def _count_by(collection, match: Dict[str, Any], key: str) -> Dict[str, int]:
    pipeline = [
        {"$match": match},
        {"$group": {"_id": f"${key}", "count": {"$sum": 1}}},
    ]
    rows = await collection.aggregate(pipeline).to_list(length=None)
    return {row["_id"]: row["count"] for row in rows}


async def list_comments(
    post_id: str,
    parent_id: Optional[str] = None,
    limit: int = 50,
    cursor: Optional[str] = None,
    viewer_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    One page of comments under parent_id (None for roots), oldest first.

    `cursor` is the id of the last comment the caller already has. A full
    page sets nextCursor to its last id; a short page ends the thread.
    """
    query: Dict[str, Any] = {"postId": post_id, "parentId": parent_id}

    if cursor:
        anchor = await get_comment_by_id(cursor)
        if anchor:
            query["$or"] = [
                {"createdAt": {"$gt": anchor["createdAt"]}},
                {"createdAt": anchor["createdAt"], "_id": {"$gt": anchor["_id"]}},
            ]

    page = await db.db.comments.find(query) \
        .sort([("createdAt", 1), ("_id", 1)]) \
        .limit(limit) \
        .to_list(length=limit)

    ids = [str(comment["_id"]) for comment in page]
    like_counts = await _count_by(db.db.likes, {"targetType": LikeTarget.COMMENT.value, "targetId": {"$in": ids}}, "targetId")
    reply_counts = await _count_by(db.db.comments, {"parentId": {"$in": ids}}, "parentId")

    liked_ids = set()
    if viewer_id and ids:
        liked = await db.db.likes.find(
            {"userId": viewer_id, "targetType": LikeTarget.COMMENT.value, "targetId": {"$in": ids}}
        ).to_list(length=None)
        liked_ids = {like["targetId"] for like in liked}

    author_ids = list({_object_id(comment["authorId"]) for comment in page} - {None})
    authors = {}
    if author_ids:
        users = await db.db.users.find({"_id": {"$in": author_ids}}).to_list(length=None)
        authors = {str(user["_id"]): _author_summary(user) for user in users}

    comments = []
    for comment in page:
        comment_id = str(comment["_id"])
        comment["id"] = comment_id
        comment["author"] = authors.get(comment["authorId"])
        comment["likeCount"] = like_counts.get(comment_id, 0)
        comment["replyCount"] = reply_counts.get(comment_id, 0)
        comment["isLiked"] = comment_id in liked_ids
        if comment.get("isRemoved"):
            comment["content"] = removed_placeholder(comment)
        comments.append(comment)

    next_cursor = ids[-1] if len(page) == limit else None
    return {"comments": comments, "nextCursor": next_cursor}


async def toggle_like(user_id: str, target_type: LikeTarget, target_id: str) -> bool:
    """
    Like or unlike a post/comment, returns the new liked state
    """
    key = {"userId": user_id, "targetType": target_type.value, "targetId": target_id}
    existing = await db.db.likes.find_one(key)

    if existing:
        await db.db.likes.delete_one({"_id": existing["_id"]})
        return False

    try:
        await db.db.likes.insert_one({**key, "createdAt": datetime.utcnow()})
    except DuplicateKeyError:
        # A concurrent request already liked it
        logger.info(f"Duplicate like ignored for {key}")
    return True


async def soft_delete_comment(comment_id: str, removed_by: str, reason: str) -> Optional[Dict[str, Any]]:
    """
    Mark a comment removed but keep it so the reply tree keeps its shape
    """
    await db.db.comments.update_one(
        {"_id": ObjectId(comment_id)},
        {"$set": {
            "isRemoved": True,
            "removedBy": removed_by,
            "removedReason": reason,
            "removedAt": datetime.utcnow(),
        }}
    )
    return await get_comment_by_id(comment_id)
