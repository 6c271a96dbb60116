"""Reservation domain errors"""


class ReservationError(Exception):
    """Base class for reservation failures"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidReservationError(ReservationError):
    """Request violates a reservation invariant (party size, window, blank fields)"""


class SlotUnavailableError(ReservationError):
    """Requested time is not offered, or is fully booked, for that date"""


class DuplicateReservationError(ReservationError):
    """Same customer already holds an active reservation for that slot"""


class ReservationNotFoundError(ReservationError):
    pass


class ReservationAccessError(ReservationError):
    """Caller may not act on another customer's reservation"""


class ReservationStateError(ReservationError):
    """Status transition not allowed (e.g. cancelling twice)"""
