# salon/errors.py


class BookingError(Exception):
    """Base for every failure the booking engine reports to a caller.

    ``kind`` is the machine-readable name rendered next to the message;
    ``status_code`` is the HTTP status the API answers with.
    """

    kind = "BookingError"
    status_code = 400
    default_message = "Invalid request"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingField(BookingError):
    kind = "MissingField"
    default_message = "Missing fields"


class InvalidArgument(BookingError):
    kind = "InvalidArgument"
    default_message = "Invalid"


class InvalidDate(BookingError):
    kind = "InvalidDate"
    default_message = "Invalid date"


class InvalidTime(BookingError):
    kind = "InvalidTime"
    default_message = "Invalid time"


class InvalidService(BookingError):
    kind = "InvalidService"
    default_message = "Invalid service"


class InvalidPhone(BookingError):
    kind = "InvalidPhone"
    default_message = "Invalid phone"


class InvalidEmail(BookingError):
    kind = "InvalidEmail"
    default_message = "Invalid email"


class InvalidStylist(BookingError):
    kind = "InvalidStylist"
    default_message = "Unknown stylist"


class InvalidAction(BookingError):
    kind = "InvalidAction"
    default_message = "Invalid action"


class Blocked(BookingError):
    kind = "Blocked"
    status_code = 403
    default_message = "blocked"


class NotFound(BookingError):
    kind = "NotFound"
    status_code = 404
    default_message = "Not found"


class SlotTaken(BookingError):
    kind = "SlotTaken"
    status_code = 409
    default_message = "Slot taken"


class AlreadyFinalized(BookingError):
    kind = "AlreadyFinalized"
    status_code = 409
    default_message = "Appointment already finalized"


class StoreUnavailable(BookingError):
    kind = "StoreUnavailable"
    status_code = 500
    default_message = "DB error"
