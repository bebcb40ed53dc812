from fastapi import APIRouter, HTTPException, status, Depends
from typing import Any, Dict
from app.core.auth import create_access_token, get_current_user
from app.schemas.token import Token
from app.schemas.user import UserCreate, UserLogin, UserResponse, UserRole
from app.services.user_service import (
    create_user, get_user_by_email, authenticate_user, update_last_login
)
from datetime import timedelta
from app.core.config import settings
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

def _token_for(user: Dict[str, Any]) -> Dict[str, Any]:
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": str(user["_id"])},
        expires_delta=access_token_expires
    )
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": user,
    }

@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register(user_in: UserCreate) -> Any:
    """Register a new account and log it in"""
    if user_in.role == UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin accounts cannot be self-registered"
        )

    existing_user = await get_user_by_email(user_in.email)
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    user = await create_user(user_in)
    logger.info(f"Registered {user['role']} account {user['id']}")
    return _token_for(user)

@router.post("/login", response_model=Token)
async def login(credentials: UserLogin) -> Any:
    """Exchange email and password for a bearer token"""
    user = await authenticate_user(credentials.email, credentials.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    await update_last_login(user["id"])
    return _token_for(user)

@router.get("/me", response_model=UserResponse)
async def read_users_me(current_user: Dict[str, Any] = Depends(get_current_user)):
    """Get current user profile"""
    return current_user
