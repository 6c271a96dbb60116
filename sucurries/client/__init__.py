"""Async client for the booking API"""

from sucurries.client.booking import (
    AuthSession,
    BookingApiClient,
    BookingConfirmation,
    BookingForm,
    SessionUser,
    extract_error_message,
    load_session,
)

__all__ = [
    "AuthSession",
    "BookingApiClient",
    "BookingConfirmation",
    "BookingForm",
    "SessionUser",
    "extract_error_message",
    "load_session",
]
