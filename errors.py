class ReservationError(Exception):
    """Base class for every rejection the booking core can produce.

    Each subclass carries a machine-checkable ``category`` and the HTTP
    status the API layer answers with.
    """

    category = "reservation-error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequest(ReservationError):
    category = "invalid-request"
    status_code = 400


class InvalidDateRange(ReservationError):
    category = "invalid-date-range"
    status_code = 400


class CapacityExceeded(ReservationError):
    category = "capacity-exceeded"
    status_code = 400


class CapacityConflict(ReservationError):
    category = "capacity-conflict"
    status_code = 409


class NotFound(ReservationError):
    category = "not-found"
    status_code = 404


class StorageFailure(ReservationError):
    category = "storage-failure"
    status_code = 500
