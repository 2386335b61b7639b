# salon/availability.py

from collections import Counter
from typing import List, Optional

from sqlmodel import Session, select

from .core import is_valid_date
from .data import SalonConfig
from .errors import InvalidArgument, MissingField
from .models import ACTIVE_STATUSES, Appointment


def compute_slots(
    session: Session,
    config: SalonConfig,
    day: str,
    stylist: Optional[str] = None,
) -> List[dict]:
    """Occupancy of every work-hour slot on ``day``, in grid order.

    With a stylist the capacity of a slot is that stylist alone; without one
    it is the whole roster.
    """
    if not is_valid_date(day):
        raise InvalidArgument("Valid date required")

    stmt = (
        select(Appointment.time)
        .where(Appointment.date == day)
        .where(Appointment.status.in_(ACTIVE_STATUSES))
    )
    if stylist:
        stmt = stmt.where(Appointment.stylist == stylist)

    booked = Counter(session.exec(stmt).all())
    capacity = config.slot_capacity(stylist)

    slots = []
    for slot in config.work_hours:
        available = max(capacity - booked[slot], 0)
        slots.append({
            "time": slot,
            "status": "taken" if available <= 0 else "free",
            "available": available,
        })
    return slots


def available_stylists(
    session: Session,
    config: SalonConfig,
    day: Optional[str],
    slot: Optional[str],
) -> List[dict]:
    if not day or not slot:
        raise MissingField("Date and time required")

    taken = set(session.exec(
        select(Appointment.stylist)
        .where(Appointment.date == day)
        .where(Appointment.time == slot)
        .where(Appointment.status.in_(ACTIVE_STATUSES))
    ).all())

    return [s.as_dict() for s in config.stylists if s.name not in taken]
