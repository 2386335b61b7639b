from salon.data import SalonConfig, Stylist
from salon.schemas import BookingRequest

DAY = "2030-05-10"


def make_config(stylists=("Iva", "Maria", "Desi"), slots=("09:00", "09:30", "10:00")):
    return SalonConfig(
        business=(("name", "Test Salon"),),
        services=(("Haircut", 25), ("Manicure", 35)),
        work_hours=tuple(slots),
        stylists=tuple(Stylist(name=n) for n in stylists),
        phone_regex=r"^(\+359|0)8[789]\d{7}$",
        confirmation_prefix="FY",
        international_prefix="+359",
    )


def make_request(**overrides):
    fields = {
        "date": DAY,
        "time": "09:00",
        "service": "Haircut",
        "client_name": "Maria Ivanova",
        "client_phone": "0887123456",
    }
    fields.update(overrides)
    return BookingRequest(**fields)


class FakeChannel:
    """Records notifier calls; ``result`` is returned, ``error`` is raised."""

    def __init__(self, enabled=True, result=True, error=None):
        self.enabled = enabled
        self.result = result
        self.error = error
        self.calls = []

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if self.error is not None:
            raise self.error
        return self.result

    def sent(self, name):
        return [c for c in self.calls if c[0] == name]


class FakeTelegram(FakeChannel):
    def send_admin_new_booking(self, appt):
        return self._record("send_admin_new_booking", appt)

    def send_confirmation(self, chat_id, appt):
        return self._record("send_confirmation", chat_id, appt)

    def send_reminder(self, chat_id, appt):
        return self._record("send_reminder", chat_id, appt)


class FakeEmail(FakeChannel):
    def send_confirmation(self, to, appt):
        return self._record("send_confirmation", to, appt)

    def send_rejection(self, to, appt):
        return self._record("send_rejection", to, appt)

    def send_reminder(self, to, appt):
        return self._record("send_reminder", to, appt)
