from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from app.core.config import settings
from app.db.mongodb import db
from bson.objectid import ObjectId
from bson.errors import InvalidId
import logging

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hashed password."""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Generate password hash."""
    return pwd_context.hash(password)

def create_access_token(
    data: Dict[str, Any], expires_delta: Optional[timedelta] = None
) -> str:
    """Create JWT access token."""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(
        to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM
    )

    return encoded_jwt

def decode_access_token(token: str) -> Optional[str]:
    """Return the subject of a valid token, or None."""
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except JWTError as jwt_error:
        logger.info(f"JWT decode error: {jwt_error}")
        return None
    return payload.get("sub")

async def _load_user(subject: str) -> Optional[Dict[str, Any]]:
    try:
        object_id = ObjectId(subject)
    except (InvalidId, TypeError):
        logger.warning(f"Invalid ObjectId format in token: {subject}")
        return None

    user = await db.db.users.find_one({"_id": object_id})
    if user is None:
        return None

    user["id"] = str(user["_id"])
    if user.get("role") == "STYLIST":
        stylist = await db.db.stylists.find_one({"userId": user["id"]}, {"_id": 1})
        user["stylistId"] = str(stylist["_id"]) if stylist else None
    return user

async def get_current_user(token: str = Depends(oauth2_scheme)) -> Dict[str, Any]:
    """Get current user from token.

    The token subject is the `users._id`. Stylist accounts additionally get a
    `stylistId` key pointing at their stylist profile (None until the profile
    exists), which the availability and calendar endpoints use for scoping.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    subject = decode_access_token(token)
    if subject is None:
        raise credentials_exception

    try:
        user = await _load_user(subject)
    except Exception as db_error:
        logger.error(f"Database error: {db_error}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error retrieving user data"
        )

    if user is None or not user.get("isActive", True):
        raise credentials_exception

    return user

async def get_optional_user(
    token: Optional[str] = Depends(optional_oauth2_scheme),
) -> Optional[Dict[str, Any]]:
    """Like get_current_user, but anonymous callers get None instead of a 401."""
    if not token:
        return None
    subject = decode_access_token(token)
    if subject is None:
        return None
    return await _load_user(subject)

def require_role(*roles: str):
    """Dependency factory that only lets the given roles through."""
    async def checker(current_user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if current_user.get("role") not in roles:
            logger.info(f"Role {current_user.get('role')} not in required: {roles}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not authorized for this action"
            )
        return current_user
    return checker
