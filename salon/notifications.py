"""
Client and operator notifications over Telegram (Bot API) and email (SMTP).

Every send returns True/False; delivery problems are logged and never raised
into the booking or moderation flow.
"""

import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

import httpx

from . import settings

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"


def _describe(appt) -> str:
    stylist = f" with {appt['stylist']}" if appt.get("stylist") else ""
    return f"{appt['service']} on {appt['date']} at {appt['time']}{stylist}"


class TelegramNotifier:
    def __init__(
        self,
        token: Optional[str],
        admin_chat_id: Optional[str] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.token = token
        self.admin_chat_id = admin_chat_id
        self._client = client or httpx.Client(timeout=10.0)

    @property
    def enabled(self) -> bool:
        return bool(self.token)

    def _send(self, chat_id, text: str) -> bool:
        if not self.enabled or not chat_id:
            return False
        try:
            response = self._client.post(
                f"{TELEGRAM_API_URL}/bot{self.token}/sendMessage",
                json={"chat_id": chat_id, "text": text},
            )
        except httpx.HTTPError as e:
            logger.error(f"Telegram API error: {e}")
            return False
        except Exception as e:
            logger.error(f"Error sending Telegram message: {e}")
            return False

        if response.status_code != 200:
            logger.error(f"Telegram API responded {response.status_code}: {response.text[:200]}")
            return False
        logger.info(f"Telegram message sent to chat {chat_id}")
        return True

    def send_admin_new_booking(self, appt: dict) -> bool:
        text = (
            "New booking request\n"
            f"{appt['client_name']} ({appt['client_phone']})\n"
            f"{_describe(appt)} - {appt.get('price', 0)}"
        )
        return self._send(self.admin_chat_id, text)

    def send_confirmation(self, chat_id, appt: dict) -> bool:
        return self._send(
            chat_id,
            f"Your appointment is confirmed: {_describe(appt)}.\n"
            f"Code: {appt['confirmation_code']}",
        )

    def send_reminder(self, chat_id, appt: dict) -> bool:
        return self._send(chat_id, f"Reminder: {_describe(appt)}.")


class EmailNotifier:
    def __init__(
        self,
        host: Optional[str],
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        from_address: str = "Salon <noreply@example.com>",
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.from_address = from_address

    @property
    def enabled(self) -> bool:
        return bool(self.host)

    def _send(self, to: Optional[str], subject: str, body: str) -> bool:
        if not self.enabled or not to:
            return False
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to
        msg.attach(MIMEText(body, "plain"))

        try:
            if self.port == 465:
                context = ssl.create_default_context()
                server = smtplib.SMTP_SSL(self.host, self.port, context=context, timeout=30)
            else:
                server = smtplib.SMTP(self.host, self.port, timeout=30)
                if self.use_tls:
                    server.starttls(context=ssl.create_default_context())
            if self.username:
                server.login(self.username, self.password or "")
            server.sendmail(self.from_address.split("<")[-1].rstrip(">"), [to], msg.as_string())
            server.quit()
        except Exception as e:
            logger.error(f"SMTP send to {to} failed: {e}")
            return False

        logger.info(f"Email '{subject}' sent to {to}")
        return True

    def send_confirmation(self, to: Optional[str], appt: dict) -> bool:
        return self._send(
            to,
            "Your appointment is confirmed",
            f"Hello {appt['client_name']},\n\n"
            f"Your appointment is confirmed: {_describe(appt)}.\n"
            f"Confirmation code: {appt['confirmation_code']}\n",
        )

    def send_rejection(self, to: Optional[str], appt: dict) -> bool:
        return self._send(
            to,
            "Your appointment request",
            f"Hello {appt['client_name']},\n\n"
            f"Unfortunately we cannot take your appointment: {_describe(appt)}.\n"
            "Please choose another time.\n",
        )

    def send_reminder(self, to: Optional[str], appt: dict) -> bool:
        return self._send(
            to,
            "Appointment reminder",
            f"Hello {appt['client_name']},\n\nA reminder of your appointment: {_describe(appt)}.\n",
        )


@dataclass
class Notifiers:
    telegram: TelegramNotifier
    email: EmailNotifier


def build_notifiers() -> Notifiers:
    return Notifiers(
        telegram=TelegramNotifier(settings.TELEGRAM_BOT_TOKEN, settings.TELEGRAM_ADMIN_CHAT_ID),
        email=EmailNotifier(
            settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USERNAME,
            password=settings.SMTP_PASSWORD,
            use_tls=settings.SMTP_USE_TLS,
            from_address=settings.EMAIL_FROM_ADDRESS,
        ),
    )


def attempt(send, *args) -> bool:
    """Run one notifier call; any failure becomes False."""
    try:
        return bool(send(*args))
    except Exception as e:
        logger.error(f"Notification {getattr(send, '__name__', send)} failed: {e}")
        return False
