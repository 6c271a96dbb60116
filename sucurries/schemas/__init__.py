"""Pydantic schemas for request/response validation"""

from sucurries.schemas.auth import (
    Token,
    RefreshRequest,
    UserCreate,
    UserResponse,
    CsrfTokenResponse,
)
from sucurries.schemas.reservation import (
    ReservationCreate,
    ReservationStatusUpdate,
    ReservationResponse,
    ReservationListResponse,
    AvailabilityResponse,
)
from sucurries.schemas.order import (
    OrderCreate,
    OrderItemCreate,
    OrderResponse,
    OrderListResponse,
    OrderStatusUpdate,
)
from sucurries.schemas.payment import (
    CreatePaymentIntentRequest,
    PaymentIntentResponse,
)

__all__ = [
    "Token",
    "RefreshRequest",
    "UserCreate",
    "UserResponse",
    "CsrfTokenResponse",
    "ReservationCreate",
    "ReservationStatusUpdate",
    "ReservationResponse",
    "ReservationListResponse",
    "AvailabilityResponse",
    "OrderCreate",
    "OrderItemCreate",
    "OrderResponse",
    "OrderListResponse",
    "OrderStatusUpdate",
    "CreatePaymentIntentRequest",
    "PaymentIntentResponse",
]
