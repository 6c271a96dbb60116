"""Database models"""

from sucurries.models.user import User, UserRole
from sucurries.models.reservation import Reservation, ReservationStatus
from sucurries.models.order import Order, OrderStatus, PaymentStatus
from sucurries.models.payment import PaymentIntent, PaymentIntentStatus

__all__ = [
    "User",
    "UserRole",
    "Reservation",
    "ReservationStatus",
    "Order",
    "OrderStatus",
    "PaymentStatus",
    "PaymentIntent",
    "PaymentIntentStatus",
]
