"""Simulated card payment gateway"""

from sucurries.payments.simulator import (
    PaymentSimulator,
    PaymentError,
    PaymentIntentNotFoundError,
    PaymentStateError,
    PaymentOrderNotFoundError,
    PaymentMismatchError,
    to_minor_units,
)

__all__ = [
    "PaymentSimulator",
    "PaymentError",
    "PaymentIntentNotFoundError",
    "PaymentStateError",
    "PaymentOrderNotFoundError",
    "PaymentMismatchError",
    "to_minor_units",
]
