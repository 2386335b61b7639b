# salon/routers/public_routes.py

from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlmodel import Session

from salon.availability import available_stylists, compute_slots
from salon.booking import book, booking_status, check_phone
from salon.data import SalonConfig
from salon.db import get_session
from salon.deps import get_config, get_notifiers
from salon.notifications import Notifiers, attempt
from salon.schemas import (
    BookingCreated,
    BookingRequest,
    BookingStatus,
    PhoneRequest,
    SlotStatus,
    StylistPublic,
)

router = APIRouter(
    prefix="/api",
    tags=["booking"],
)


@router.get("/health")
def health_check():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/config")
def public_config(config: SalonConfig = Depends(get_config)):
    return config.public_dict()


@router.get("/slots", response_model=List[SlotStatus])
def slots(
    date: Optional[str] = None,
    stylist: Optional[str] = None,
    session: Session = Depends(get_session),
    config: SalonConfig = Depends(get_config),
):
    return compute_slots(session, config, date, stylist)


@router.get("/available-stylists", response_model=List[StylistPublic])
def stylists_for_slot(
    date: Optional[str] = None,
    time: Optional[str] = None,
    session: Session = Depends(get_session),
    config: SalonConfig = Depends(get_config),
):
    return available_stylists(session, config, date, time)


@router.get("/status/{code}", response_model=BookingStatus)
def status(code: str, session: Session = Depends(get_session)):
    return booking_status(session, code)


@router.post("/book", response_model=BookingCreated, status_code=201)
def create_booking(
    req: BookingRequest,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    config: SalonConfig = Depends(get_config),
    notifiers: Notifiers = Depends(get_notifiers),
):
    appt = book(session, config, req)

    # operator alert goes out after the response; its outcome is only logged
    if notifiers.telegram.enabled:
        background_tasks.add_task(attempt, notifiers.telegram.send_admin_new_booking, appt.model_dump())

    return {"id": appt.id, "confirmation_code": appt.confirmation_code, "message": "Request sent"}


@router.post("/check-phone")
def is_phone_blocked(
    req: PhoneRequest,
    session: Session = Depends(get_session),
    config: SalonConfig = Depends(get_config),
):
    return check_phone(session, config, req.phone)
