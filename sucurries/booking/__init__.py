"""Table reservation domain"""

from sucurries.booking.availability import AvailabilityResolver, generate_slots
from sucurries.booking.service import ReservationService

__all__ = [
    "AvailabilityResolver",
    "ReservationService",
    "generate_slots",
]
