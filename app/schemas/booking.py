from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

class BookingStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"
    CANCELLED_BY_CLIENT = "CANCELLED_BY_CLIENT"
    CANCELLED_BY_TECH = "CANCELLED_BY_TECH"

class ImportSource(str, Enum):
    MANUAL = "MANUAL"
    CSV = "CSV"
    BOOKSY = "BOOKSY"

class BookingCreate(BaseModel):
    stylistId: str
    appointmentDate: datetime
    serviceId: Optional[str] = None
    duration: Optional[int] = Field(None, gt=0, le=24 * 60)
    notes: Optional[str] = None
    clientName: Optional[str] = None  # Manual bookings made by the stylist

class BookingStatusUpdate(BaseModel):
    status: BookingStatus

class BookingResponse(BaseModel):
    id: str
    stylistId: str
    clientId: Optional[str] = None
    clientName: Optional[str] = None
    serviceId: Optional[str] = None
    serviceName: Optional[str] = None
    servicePrice: Optional[float] = None
    appointmentDate: datetime
    duration: int
    status: BookingStatus
    isBlockout: bool = False
    notes: Optional[str] = None
    importSource: Optional[ImportSource] = None
    createdAt: datetime

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }
