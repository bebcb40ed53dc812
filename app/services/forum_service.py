from typing import Dict, Any, List, Optional
from app.db.mongodb import db
from app.schemas.forum import PostCreate
from datetime import datetime
from bson import ObjectId
from bson.errors import InvalidId

async def create_post(post_in: PostCreate, author_id: str) -> Dict[str, Any]:
    """
    Create a new forum post
    """
    now = datetime.utcnow()
    post_data = post_in.dict()
    post_data["authorId"] = author_id
    post_data["createdAt"] = now
    post_data["updatedAt"] = now

    result = await db.db.forum_posts.insert_one(post_data)

    created_post = await db.db.forum_posts.find_one({"_id": result.inserted_id})
    created_post["id"] = str(created_post["_id"])
    return created_post

async def _with_counts(post: Dict[str, Any]) -> Dict[str, Any]:
    post["id"] = str(post["_id"])
    post["likeCount"] = await db.db.likes.count_documents({"targetType": "POST", "targetId": post["id"]})
    post["commentCount"] = await db.db.comments.count_documents({"postId": post["id"]})
    return post

async def get_post(post_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a forum post by ID
    """
    try:
        object_id = ObjectId(post_id)
    except (InvalidId, TypeError):
        return None

    post = await db.db.forum_posts.find_one({"_id": object_id})
    return await _with_counts(post) if post else None

async def list_posts(skip: int = 0, limit: int = 20) -> List[Dict[str, Any]]:
    """
    Most recently active posts first
    """
    cursor = db.db.forum_posts.find().sort("updatedAt", -1).skip(skip).limit(limit)
    posts = await cursor.to_list(length=limit)
    return [await _with_counts(post) for post in posts]

async def touch_post(post_id: str) -> None:
    """
    Bump updatedAt so active threads float up
    """
    await db.db.forum_posts.update_one(
        {"_id": ObjectId(post_id)},
        {"$set": {"updatedAt": datetime.utcnow()}}
    )
