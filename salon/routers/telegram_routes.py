# salon/routers/telegram_routes.py

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlmodel import Session, select

from salon import settings
from salon.core import canonical_phone
from salon.data import SalonConfig
from salon.db import get_session
from salon.deps import get_config
from salon.models import TelegramSubscriber

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/telegram",
    tags=["telegram"],
)


@router.post("/webhook")
def telegram_webhook(
    update: dict,
    session: Session = Depends(get_session),
    config: SalonConfig = Depends(get_config),
    x_telegram_bot_api_secret_token: Optional[str] = Header(default=None),
):
    """Remember which chat belongs to which phone once a client shares their contact."""
    if settings.TELEGRAM_WEBHOOK_SECRET and x_telegram_bot_api_secret_token != settings.TELEGRAM_WEBHOOK_SECRET:
        raise HTTPException(status_code=403, detail="Forbidden")

    message = update.get("message") or {}
    contact = message.get("contact")
    chat_id = (message.get("chat") or {}).get("id")
    if not contact or not contact.get("phone_number") or chat_id is None:
        return {"ok": True, "subscribed": False}

    phone = canonical_phone(contact["phone_number"], config.international_prefix)
    if not phone.startswith(("0", "+")):
        # Telegram sends phone numbers without the leading "+"
        phone = canonical_phone("+" + phone, config.international_prefix)
    name = contact.get("first_name") or (message.get("from") or {}).get("first_name")

    subscriber = session.exec(
        select(TelegramSubscriber).where(
            (TelegramSubscriber.chat_id == str(chat_id)) | (TelegramSubscriber.phone == phone)
        )
    ).first()
    if subscriber is None:
        subscriber = TelegramSubscriber(chat_id=str(chat_id), phone=phone, name=name)
    else:
        subscriber.chat_id = str(chat_id)
        subscriber.phone = phone
        subscriber.name = name or subscriber.name

    session.add(subscriber)
    session.commit()
    logger.info(f"Telegram chat {chat_id} subscribed for {phone}")
    return {"ok": True, "subscribed": True}
