from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from enum import Enum

class UserRole(str, Enum):
    CLIENT = "CLIENT"
    STYLIST = "STYLIST"
    ADMIN = "ADMIN"

class UserBase(BaseModel):
    email: EmailStr
    fullName: str
    phone: Optional[str] = None

class UserCreate(UserBase):
    password: str = Field(..., min_length=8)
    role: UserRole = UserRole.CLIENT

class UserLogin(BaseModel):
    email: EmailStr
    password: str

class UserResponse(BaseModel):
    id: str
    email: EmailStr
    fullName: str
    phone: Optional[str] = None
    role: UserRole
    profileImage: Optional[str] = None
    stylistId: Optional[str] = None
    mutedUntil: Optional[datetime] = None
    createdAt: datetime
    isActive: bool = True

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }
