# salon/moderation.py

import logging
from typing import Optional

from sqlalchemy import update
from sqlmodel import Session, select

from .core import canonical_phone, sanitize_name
from .data import SalonConfig
from .errors import AlreadyFinalized, InvalidAction, MissingField, NotFound
from .models import Appointment, BlockedClient, TelegramSubscriber
from .notifications import Notifiers, attempt
from .schemas import AdminAction

logger = logging.getLogger(__name__)

STATUS_FOR_ACTION = {
    AdminAction.confirm.value: "confirmed",
    AdminAction.reject.value: "rejected",
}


def chat_id_for(session: Session, phone: str) -> Optional[str]:
    return session.exec(
        select(TelegramSubscriber.chat_id).where(TelegramSubscriber.phone == phone)
    ).first()


def act(
    session: Session,
    notifiers: Notifiers,
    appt_id: Optional[int],
    action: Optional[str],
) -> dict:
    """Confirm or reject a pending appointment, then tell the client.

    The status change is committed before any notification goes out. A row
    that is no longer pending cannot be moderated again.
    """
    if not appt_id or action not in STATUS_FOR_ACTION:
        raise InvalidAction("Invalid")

    # 1) Find the appointment
    target = session.get(Appointment, appt_id)
    if target is None:
        raise NotFound()

    # 2) Transition only a row that is still pending
    result = session.connection().execute(
        update(Appointment)
        .where(Appointment.id == appt_id)
        .where(Appointment.status == "pending")
        .values(status=STATUS_FOR_ACTION[action])
    )
    if result.rowcount == 0:
        session.rollback()
        session.refresh(target)
        raise AlreadyFinalized(f"Appointment already {target.status}")
    session.commit()
    session.refresh(target)
    logger.info(f"Appointment #{target.id} {target.status}")

    # 3) Notify; outcomes are reported, never raised
    appt = target.model_dump()
    notifications = {"telegram": False, "email": False}
    if action == AdminAction.confirm.value:
        chat_id = chat_id_for(session, target.client_phone)
        if notifiers.telegram.enabled and chat_id:
            notifications["telegram"] = attempt(notifiers.telegram.send_confirmation, chat_id, appt)
        if notifiers.email.enabled and target.client_email:
            notifications["email"] = attempt(notifiers.email.send_confirmation, target.client_email, appt)
    else:
        if notifiers.email.enabled and target.client_email:
            notifications["email"] = attempt(notifiers.email.send_rejection, target.client_email, appt)

    return {"success": True, "notifications": notifications}


def block_phone(session: Session, config: SalonConfig, phone: Optional[str], reason: Optional[str] = None) -> dict:
    if not phone:
        raise MissingField("Missing")
    canonical = canonical_phone(phone, config.international_prefix)

    existing = session.exec(select(BlockedClient).where(BlockedClient.phone == canonical)).first()
    if existing is None:
        session.add(BlockedClient(phone=canonical, reason=reason or None))
        session.commit()
        logger.info(f"Blocked phone {canonical}")
    return {"success": True, "blocked": canonical}


def unblock_phone(session: Session, config: SalonConfig, phone: Optional[str]) -> dict:
    if not phone:
        raise MissingField("Missing")
    canonical = canonical_phone(phone, config.international_prefix)

    existing = session.exec(select(BlockedClient).where(BlockedClient.phone == canonical)).first()
    if existing is not None:
        session.delete(existing)
        session.commit()
        logger.info(f"Unblocked phone {canonical}")
    return {"success": True}


def list_blocked(session: Session):
    return session.exec(
        select(BlockedClient).order_by(BlockedClient.blocked_at.desc(), BlockedClient.id.desc())
    ).all()


def edit_name(session: Session, appt_id: Optional[int], client_name: Optional[str]) -> dict:
    if not appt_id or not client_name:
        raise MissingField("Missing")

    target = session.get(Appointment, appt_id)
    if target is None:
        raise NotFound()

    target.client_name = sanitize_name(client_name)
    session.add(target)
    session.commit()
    return {"success": True}


def edit_client(session: Session, phone: Optional[str], client_name: Optional[str]) -> dict:
    if not phone or not client_name:
        raise MissingField("Missing")

    rows = session.exec(select(Appointment).where(Appointment.client_phone == phone)).all()
    name = sanitize_name(client_name)
    for row in rows:
        row.client_name = name
        session.add(row)
    session.commit()
    return {"success": True, "updated": len(rows)}
