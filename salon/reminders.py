# salon/reminders.py

import asyncio
import logging
from datetime import date as Date, timedelta
from typing import Optional

from sqlmodel import Session, select
from starlette.concurrency import run_in_threadpool

from .models import Appointment
from .moderation import chat_id_for
from .notifications import Notifiers, attempt

logger = logging.getLogger(__name__)


def send_due_reminders(session: Session, notifiers: Notifiers, today: Optional[Date] = None) -> int:
    """Remind clients of tomorrow's confirmed appointments.

    Each row is flagged ``reminder_sent`` after one attempt, delivered or not.
    Returns the number of rows processed.
    """
    tomorrow = ((today or Date.today()) + timedelta(days=1)).isoformat()
    due = session.exec(
        select(Appointment)
        .where(Appointment.date == tomorrow)
        .where(Appointment.status == "confirmed")
        .where(Appointment.reminder_sent == False)  # noqa: E712
    ).all()

    for appt in due:
        data = appt.model_dump()
        sent_telegram = attempt(notifiers.telegram.send_reminder, chat_id_for(session, appt.client_phone), data)
        sent_email = attempt(notifiers.email.send_reminder, appt.client_email, data)
        logger.info(f"Reminder for #{appt.id}: telegram={sent_telegram} email={sent_email}")

        appt.reminder_sent = True
        session.add(appt)
    session.commit()
    return len(due)


async def reminder_loop(engine, notifiers: Notifiers, interval: int):
    def run_once():
        with Session(engine) as session:
            return send_due_reminders(session, notifiers)

    while True:
        try:
            processed = await run_in_threadpool(run_once)
            if processed:
                logger.info(f"Reminder run processed {processed} appointments")
        except Exception as e:
            logger.error(f"Reminder run failed: {e}")
        await asyncio.sleep(interval)
