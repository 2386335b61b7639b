# salon/reports.py

from datetime import date as Date, timedelta
from typing import Optional

from sqlalchemy import case, func, or_
from sqlmodel import Session, col, select

from .core import canonical_phone, is_valid_date
from .data import SalonConfig
from .errors import InvalidDate
from .models import ACTIVE_STATUSES, Appointment

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def list_appointments(session: Session, search: Optional[str] = None, limit: int = 100):
    stmt = select(Appointment)

    if search and search.strip():
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(or_(
            col(Appointment.client_name).ilike(pattern),
            col(Appointment.client_phone).like(pattern),
            col(Appointment.confirmation_code).ilike(pattern),
            col(Appointment.client_email).ilike(pattern),
            col(Appointment.date).like(pattern),
            col(Appointment.stylist).ilike(pattern),
        ))

    status_rank = case(
        (Appointment.status == "pending", 0),
        (Appointment.status == "confirmed", 1),
        else_=2,
    )
    stmt = stmt.order_by(status_rank, col(Appointment.date).desc(), col(Appointment.time).desc()).limit(limit)
    return session.exec(stmt).all()


def stats(session: Session) -> dict:
    total, pending, revenue = session.exec(
        select(
            func.count(Appointment.id),
            func.sum(case((Appointment.status == "pending", 1), else_=0)),
            func.sum(case((Appointment.status == "confirmed", Appointment.price), else_=0)),
        )
    ).one()
    return {"total": total or 0, "pending": pending or 0, "revenue": revenue or 0}


def pending_feed(session: Session, limit: int = 20):
    return session.exec(
        select(Appointment)
        .where(Appointment.status == "pending")
        .order_by(col(Appointment.created_at).desc())
        .limit(limit)
    ).all()


def clients(session: Session, config: SalonConfig) -> list:
    """Confirmed visits grouped by client phone, most loyal first."""
    rows = session.exec(select(Appointment).where(Appointment.status == "confirmed")).all()

    by_phone = {}
    for r in rows:
        if not r.client_phone:
            continue
        phone = canonical_phone(r.client_phone, config.international_prefix)
        entry = by_phone.get(phone)
        if entry is None:
            entry = by_phone[phone] = {
                "name": r.client_name,
                "phone": phone,
                "email": r.client_email,
                "visits": 0,
                "total_spent": 0,
                "last_visit": r.date,
            }
        entry["visits"] += 1
        entry["total_spent"] += r.price or 0
        # latest visit wins name and email
        if r.date > entry["last_visit"]:
            entry["name"] = r.client_name
            entry["last_visit"] = r.date
            if r.client_email:
                entry["email"] = r.client_email

    return sorted(by_phone.values(), key=lambda c: (c["visits"], c["total_spent"]), reverse=True)


def schedule(session: Session, day: Optional[str]):
    if not is_valid_date(day):
        raise InvalidDate("Valid date required")
    return session.exec(
        select(Appointment)
        .where(Appointment.date == day)
        .where(col(Appointment.status).in_(ACTIVE_STATUSES))
        .order_by(Appointment.time)
    ).all()


def chart_data(session: Session, today: Optional[Date] = None) -> dict:
    today = today or Date.today()
    days = [(today - timedelta(days=i)).isoformat() for i in range(6, -1, -1)]

    counts = dict(session.exec(
        select(Appointment.date, func.count(Appointment.id))
        .where(col(Appointment.date).in_(days))
        .where(col(Appointment.status).in_(ACTIVE_STATUSES))
        .group_by(Appointment.date)
    ).all())

    return {
        "labels": [WEEKDAY_LABELS[Date.fromisoformat(d).weekday()] for d in days],
        "values": [counts.get(d, 0) for d in days],
    }
