from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List
from app.core.auth import get_current_user
from app.schemas.forum import PostCreate, PostResponse
from app.services.forum_service import create_post, get_post, list_posts

router = APIRouter()

@router.post("/posts", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_forum_post(
    post_in: PostCreate,
    current_user: dict = Depends(get_current_user)
):
    """
    Start a new forum thread
    """
    return await create_post(post_in, current_user["id"])

@router.get("/posts", response_model=List[PostResponse])
async def get_forum_posts(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100)
):
    """
    Most recently active posts first
    """
    return await list_posts(skip=skip, limit=limit)

@router.get("/posts/{post_id}", response_model=PostResponse)
async def get_forum_post(post_id: str):
    post = await get_post(post_id)
    if not post:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )
    return post
