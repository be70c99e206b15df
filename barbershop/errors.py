# barbershop/errors.py

"""Business errors raised by the scheduling core.

Every error carries the HTTP status the route layer answers with, so the
single handler in ``main.py`` can translate them without a lookup table.
"""


class SchedulingError(Exception):
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(SchedulingError):
    status_code = 404


class Unauthorized(SchedulingError):
    status_code = 403


class InvalidState(SchedulingError):
    """Illegal status transition or a change to a finished appointment."""
    status_code = 409


class SlotUnavailable(SchedulingError):
    """The barber already has an overlapping appointment."""
    status_code = 400


class ValidationError(SchedulingError):
    status_code = 422


class InvalidTimeFormat(ValidationError):
    pass


class InvalidRange(ValidationError):
    pass


class AlreadyRated(SchedulingError):
    status_code = 409


class StorageError(SchedulingError):
    status_code = 500
