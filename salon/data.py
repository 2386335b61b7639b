# salon/data.py

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


DEFAULT_CONFIG = {
    "business": {"name": "Salon", "phone": "", "address": ""},
    "services": [
        {"name": "Haircut", "price": 25},
        {"name": "Coloring", "price": 50},
        {"name": "Manicure", "price": 35},
        {"name": "Pedicure", "price": 40},
        {"name": "Facial", "price": 45},
        {"name": "Massage", "price": 50},
    ],
    "workHours": {
        "slots": [
            "09:00", "09:30", "10:00", "10:30", "11:00", "11:30",
            "12:00", "12:30", "13:00", "13:30", "14:00", "14:30",
            "15:00", "15:30", "16:00", "16:30", "17:00", "17:30",
        ],
    },
    "stylists": [
        {"name": "Iva", "title": "Hair stylist"},
        {"name": "Maria", "title": "Colorist"},
        {"name": "Desi", "title": "Nail artist"},
        {"name": "Gabi", "title": "Therapist"},
    ],
    "booking": {
        "phoneRegex": r"^(\+359|0)8[789]\d{7}$",
        "confirmationPrefix": "FY",
        "internationalPrefix": "+359",
    },
}


@dataclass(frozen=True)
class Stylist:
    name: str
    title: str = ""
    photo: Optional[str] = None

    def as_dict(self) -> dict:
        return {"name": self.name, "title": self.title, "photo": self.photo}


@dataclass(frozen=True)
class SalonConfig:
    """Service catalog, work-hour grid and stylist roster.

    Built once at startup and handed to every component; never mutated.
    """

    business: Tuple[Tuple[str, str], ...] = ()
    services: Tuple[Tuple[str, int], ...] = ()
    work_hours: Tuple[str, ...] = ()
    stylists: Tuple[Stylist, ...] = ()
    phone_regex: str = r"^\+?\d{6,15}$"
    confirmation_prefix: str = "FY"
    international_prefix: str = "+359"
    _prices: dict = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_prices", dict(self.services))

    def price_of(self, service: str) -> Optional[int]:
        return self._prices.get(service)

    @property
    def stylist_names(self) -> Tuple[str, ...]:
        return tuple(s.name for s in self.stylists)

    def slot_capacity(self, stylist: Optional[str] = None) -> int:
        # a named stylist is one seat; otherwise every stylist on the roster
        if stylist:
            return 1
        return len(self.stylists) or 1

    def public_dict(self) -> dict:
        return {
            "business": dict(self.business),
            "services": [{"name": n, "price": p} for n, p in self.services],
            "workHours": {"slots": list(self.work_hours)},
            "stylists": [s.as_dict() for s in self.stylists],
            "booking": {"confirmationPrefix": self.confirmation_prefix},
        }


def config_from_dict(raw: dict) -> SalonConfig:
    booking = raw.get("booking", {})
    return SalonConfig(
        business=tuple((str(k), str(v)) for k, v in raw.get("business", {}).items()),
        services=tuple((s["name"], int(s["price"])) for s in raw.get("services", [])),
        work_hours=tuple(raw.get("workHours", {}).get("slots", [])),
        stylists=tuple(
            Stylist(name=s["name"], title=s.get("title", ""), photo=s.get("photo"))
            for s in raw.get("stylists") or []
        ),
        phone_regex=booking.get("phoneRegex", SalonConfig.phone_regex),
        confirmation_prefix=booking.get("confirmationPrefix") or "FY",
        international_prefix=booking.get("internationalPrefix", "+359"),
    )


def load_config(path: Optional[str] = None) -> SalonConfig:
    if not path:
        logger.info("No salon config file set, using built-in defaults")
        return config_from_dict(DEFAULT_CONFIG)

    with Path(path).open(encoding="utf-8") as fh:
        raw = json.load(fh)
    config = config_from_dict(raw)
    logger.info(
        "Loaded salon config from %s: %d services, %d slots, %d stylists",
        path, len(config.services), len(config.work_hours), len(config.stylists),
    )
    return config
