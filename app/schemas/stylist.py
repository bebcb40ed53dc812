from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

class Service(BaseModel):
    name: str
    description: Optional[str] = None
    duration: int = Field(60, gt=0)  # Duration in minutes
    price: float = Field(..., ge=0)
    category: Optional[str] = None  # e.g., 'Hair', 'Nails', 'Lashes'
    isActive: bool = True

class ServiceResponse(Service):
    id: str

class StylistCreate(BaseModel):
    businessName: str
    bio: Optional[str] = None
    location: Optional[str] = None
    specialties: List[str] = []
    profileImage: Optional[str] = None
    services: List[Service] = []

class StylistResponse(BaseModel):
    id: str
    userId: str
    businessName: str
    bio: Optional[str] = None
    location: Optional[str] = None
    specialties: List[str] = []
    profileImage: str = ""
    services: List[ServiceResponse] = []
    rating: float = 0
    reviewCount: int = 0
    createdAt: datetime

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }
