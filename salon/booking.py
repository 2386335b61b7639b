# salon/booking.py

import logging
import re
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .core import (
    SlotLocks,
    canonical_phone,
    generate_confirmation_code,
    is_valid_date,
    sanitize_email,
    sanitize_name,
    slot_locks,
    strip_phone,
)
from .data import SalonConfig
from .errors import (
    Blocked,
    InvalidArgument,
    InvalidDate,
    InvalidEmail,
    InvalidPhone,
    InvalidService,
    InvalidStylist,
    InvalidTime,
    MissingField,
    NotFound,
    SlotTaken,
    StoreUnavailable,
)
from .models import ACTIVE_STATUSES, Appointment, BlockedClient
from .schemas import BookingRequest

logger = logging.getLogger(__name__)

CODE_ATTEMPTS = 5


@dataclass(frozen=True)
class ValidBooking:
    date: str
    time: str
    service: str
    price: int
    client_name: str
    client_phone: str
    client_email: Optional[str]
    stylist: Optional[str]


def validate_request(config: SalonConfig, req: BookingRequest) -> ValidBooking:
    """Check a booking request field by field and normalize it.

    The order of the checks decides which error a caller sees first.
    """
    # 1) Required fields
    if not all([req.date, req.time, req.service, req.client_name, req.client_phone]):
        raise MissingField()

    # 2) Date format
    if not is_valid_date(req.date):
        raise InvalidDate()

    # 3) Slot on the grid
    if req.time not in config.work_hours:
        raise InvalidTime()

    # 4) Service and its price
    price = config.price_of(req.service)
    if price is None:
        raise InvalidService()

    # 5) Phone pattern (digits and "+" only)
    stripped = strip_phone(req.client_phone)
    if not re.search(config.phone_regex, stripped):
        raise InvalidPhone()

    # 6) Email, if any
    if req.client_email and "@" not in req.client_email:
        raise InvalidEmail()

    stylist = req.stylist or None
    if stylist and stylist not in config.stylist_names:
        raise InvalidStylist()

    return ValidBooking(
        date=req.date,
        time=req.time,
        service=req.service,
        price=price,
        client_name=sanitize_name(req.client_name),
        client_phone=canonical_phone(stripped, config.international_prefix),
        client_email=sanitize_email(req.client_email),
        stylist=stylist,
    )


def is_blocked(session: Session, phone: str) -> bool:
    return session.exec(
        select(BlockedClient.id).where(BlockedClient.phone == phone)
    ).first() is not None


def ensure_slot_free(session: Session, config: SalonConfig, booking: ValidBooking):
    taken_by = session.exec(
        select(Appointment.stylist)
        .where(Appointment.date == booking.date)
        .where(Appointment.time == booking.time)
        .where(Appointment.status.in_(ACTIVE_STATUSES))
    ).all()

    # stylist-less bookings use up the shared roster capacity
    if len(taken_by) >= config.slot_capacity():
        raise SlotTaken()
    if booking.stylist and booking.stylist in taken_by:
        raise SlotTaken()


def _code_exists(session: Session, code: str) -> bool:
    return session.exec(
        select(Appointment.id).where(Appointment.confirmation_code == code)
    ).first() is not None


def book(
    session: Session,
    config: SalonConfig,
    req: BookingRequest,
    locks: SlotLocks = slot_locks,
) -> Appointment:
    booking = validate_request(config, req)

    # check-then-insert runs under the slot lock
    with locks.hold(booking.date, booking.time):
        if is_blocked(session, booking.client_phone):
            logger.info(f"Rejected booking from blocked phone {booking.client_phone}")
            raise Blocked()

        ensure_slot_free(session, config, booking)

        for _ in range(CODE_ATTEMPTS):
            appt = Appointment(
                date=booking.date,
                time=booking.time,
                service=booking.service,
                price=booking.price,
                stylist=booking.stylist,
                client_name=booking.client_name,
                client_phone=booking.client_phone,
                client_email=booking.client_email,
                status="pending",
                confirmation_code=generate_confirmation_code(config.confirmation_prefix),
            )
            session.add(appt)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                if _code_exists(session, appt.confirmation_code):
                    logger.warning(f"Confirmation code collision on {appt.confirmation_code}, retrying")
                    continue
                raise SlotTaken()

            session.refresh(appt)
            logger.info(
                f"Booked #{appt.id} {appt.date} {appt.time} "
                f"stylist={appt.stylist or '-'} code={appt.confirmation_code}"
            )
            return appt

    raise StoreUnavailable("Could not allocate a confirmation code")


def booking_status(session: Session, code: Optional[str]) -> dict:
    if not code or len(code) < 5:
        raise InvalidArgument()

    appt = session.exec(
        select(Appointment).where(func.upper(Appointment.confirmation_code) == code.upper())
    ).first()
    if appt is None:
        raise NotFound()

    return {
        "found": True,
        "status": appt.status,
        "date": appt.date,
        "time": appt.time,
        "service": appt.service,
        "name": appt.client_name,
        "stylist": appt.stylist,
    }


def check_phone(session: Session, config: SalonConfig, phone: Optional[str]) -> dict:
    if not phone:
        raise MissingField("Missing")
    return {"blocked": is_blocked(session, canonical_phone(phone, config.international_prefix))}
