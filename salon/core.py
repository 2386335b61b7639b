# salon/core.py

import re
import secrets
import string
import threading
from contextlib import contextmanager
from datetime import date as Date
from typing import Optional

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 6
MAX_NAME_LENGTH = 100
MAX_EMAIL_LENGTH = 100


def is_valid_date(value: Optional[str]) -> bool:
    if not value or not DATE_RE.match(value):
        return False
    try:
        Date.fromisoformat(value)
    except ValueError:
        return False
    return True


def strip_phone(phone: str) -> str:
    # keep digits and "+"
    return re.sub(r"[^0-9+]", "", phone)


def canonical_phone(phone: str, international_prefix: str = "+359") -> str:
    """Return the local form of a phone number, e.g. ``+359887...`` -> ``0887...``."""
    stripped = strip_phone(phone)
    if international_prefix and stripped.startswith(international_prefix):
        return "0" + stripped[len(international_prefix):]
    return stripped


def sanitize_name(name: str) -> str:
    return re.sub(r"[<>]", "", name).strip()[:MAX_NAME_LENGTH]


def sanitize_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    return email.strip().lower()[:MAX_EMAIL_LENGTH]


def generate_confirmation_code(prefix: str = "FY") -> str:
    suffix = "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
    return f"{prefix}-{suffix}"


class SlotLocks:
    """Process-wide mutexes keyed by (date, time).

    Booking holds the lock for its slot across the blocklist check, the
    occupancy count and the insert, so two requests for the same slot
    cannot both see it free. An entry lives only while someone holds or
    waits on it.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = {}  # (date, time) -> [lock, holders + waiters]

    def __len__(self):
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, day: str, slot: str):
        key = (day, slot)
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = [threading.Lock(), 0]
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]


slot_locks = SlotLocks()
