# salon/schemas.py

from pydantic import BaseModel, ConfigDict, Field
from enum import Enum
from datetime import datetime
from typing import List, Optional


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    rejected = "rejected"


class AdminAction(str, Enum):
    confirm = "confirm"
    reject = "reject"


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class BookingRequest(BaseModel):
    # every field optional here; the booking engine reports what is missing
    model_config = ConfigDict(populate_by_name=True)

    date: Optional[str] = None
    time: Optional[str] = None
    service: Optional[str] = None
    client_name: Optional[str] = Field(default=None, alias="clientName")
    client_phone: Optional[str] = Field(default=None, alias="clientPhone")
    client_email: Optional[str] = Field(default=None, alias="clientEmail")
    stylist: Optional[str] = None


class BookingCreated(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    confirmation_code: str = Field(alias="confirmationCode")
    message: str = "Request sent"


class SlotStatus(BaseModel):
    time: str
    status: str  # free or taken
    available: int


class StylistPublic(BaseModel):
    name: str
    title: str = ""
    photo: Optional[str] = None


class BookingStatus(BaseModel):
    found: bool = True
    status: AppointmentStatus
    date: str
    time: str
    service: str
    name: str
    stylist: Optional[str] = None


class AppointmentPublic(BaseModel):
    id: int
    date: str
    time: str
    service: str
    price: int
    stylist: Optional[str] = None
    client_name: str
    client_phone: str
    client_email: Optional[str] = None
    status: AppointmentStatus
    confirmation_code: str
    reminder_sent: bool
    created_at: datetime


class ActionRequest(BaseModel):
    id: Optional[int] = None
    action: Optional[str] = None


class NotificationOutcome(BaseModel):
    telegram: bool = False
    email: bool = False


class ActionResult(BaseModel):
    success: bool = True
    notifications: NotificationOutcome


class EditNameRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    client_name: Optional[str] = Field(default=None, alias="clientName")


class EditClientRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    phone: Optional[str] = None
    client_name: Optional[str] = Field(default=None, alias="clientName")


class PhoneRequest(BaseModel):
    phone: Optional[str] = None
    reason: Optional[str] = None


class BlockedPhonePublic(BaseModel):
    id: int
    phone: str
    reason: Optional[str] = None
    blocked_at: datetime


class Stats(BaseModel):
    total: int
    pending: int
    revenue: int


class ClientSummary(BaseModel):
    name: str
    phone: str
    email: Optional[str] = None
    visits: int
    total_spent: int
    last_visit: str


class ChartData(BaseModel):
    labels: List[str]
    values: List[int]
