# salon/models.py

from typing import Optional
from datetime import datetime, timezone

from sqlalchemy import Index, text
from sqlmodel import SQLModel, Field

ACTIVE_STATUSES = ("pending", "confirmed")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Appointment(SQLModel, table=True):
    __table_args__ = (
        # one active booking per named stylist per slot
        Index(
            "uq_active_stylist_slot", "date", "time", "stylist",
            unique=True,
            sqlite_where=text("status IN ('pending', 'confirmed') AND stylist IS NOT NULL"),
            postgresql_where=text("status IN ('pending', 'confirmed') AND stylist IS NOT NULL"),
        ),
        Index("ix_appt_date_status", "date", "status"),
        Index("ix_appt_stylist_date", "stylist", "date"),
        {"sqlite_autoincrement": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    date: str               # YYYY-MM-DD
    time: str               # work-hour slot label, e.g. "09:00"
    service: str
    price: int = 0
    stylist: Optional[str] = None
    client_name: str
    client_phone: str = Field(index=True)
    client_email: Optional[str] = None
    status: str = "pending"  # pending, confirmed or rejected
    confirmation_code: str = Field(index=True, unique=True)
    reminder_sent: bool = False
    created_at: datetime = Field(default_factory=utcnow)


class BlockedClient(SQLModel, table=True):
    __tablename__ = "blocked_phones"

    id: Optional[int] = Field(default=None, primary_key=True)
    phone: str = Field(index=True, unique=True)
    reason: Optional[str] = None
    blocked_at: datetime = Field(default_factory=utcnow)


class TelegramSubscriber(SQLModel, table=True):
    __tablename__ = "telegram_subscribers"

    id: Optional[int] = Field(default=None, primary_key=True)
    chat_id: str = Field(unique=True)
    phone: str = Field(index=True, unique=True)
    name: Optional[str] = None
    subscribed_at: datetime = Field(default_factory=utcnow)
