"""
Payment intent simulator.

Fabricates gateway-shaped payment intents locally and keeps them in the
database so confirmation and lookup return the real amount and order link.
No external gateway is contacted.
"""

import secrets
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from sucurries.config import settings
from sucurries.models.order import Order, OrderStatus, PaymentStatus
from sucurries.models.payment import PaymentIntent, PaymentIntentStatus

logger = structlog.get_logger()


class PaymentError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PaymentIntentNotFoundError(PaymentError):
    pass


class PaymentStateError(PaymentError):
    pass


class PaymentOrderNotFoundError(PaymentError):
    pass


class PaymentMismatchError(PaymentError):
    pass


def to_minor_units(amount: Decimal) -> int:
    """12.345 -> 1235 (half-up)"""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def new_payment_intent_id() -> str:
    return f"pi_sim_{secrets.token_hex(12)}"


class PaymentSimulator:
    """Create, confirm and look up simulated payment intents"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_order(self, order_id: UUID) -> Order:
        result = await self.db.execute(select(Order).where(Order.id == order_id))
        order = result.scalar_one_or_none()
        if not order:
            raise PaymentOrderNotFoundError("Order not found")
        return order

    @staticmethod
    def _check_covers_order(order: Order, amount: int, currency: str) -> None:
        """An intent linked to an order must charge exactly the order total"""
        order_currency = (order.currency or settings.payment_currency).lower()
        if currency.lower() != order_currency:
            raise PaymentMismatchError(
                f"Currency {currency.upper()} does not match order currency {order_currency.upper()}"
            )
        if amount != order.total_cents:
            raise PaymentMismatchError(
                f"Amount {amount} does not match order total {order.total_cents}"
            )

    async def create_payment_intent(
        self,
        amount: Decimal,
        currency: Optional[str] = None,
        order_id: Optional[UUID] = None,
    ) -> PaymentIntent:
        if amount <= 0:
            raise PaymentError("Amount must be positive")

        minor_amount = to_minor_units(amount)
        currency = (currency or settings.payment_currency).lower()

        if order_id is not None:
            order = await self._get_order(order_id)
            self._check_covers_order(order, minor_amount, currency)

        intent_id = new_payment_intent_id()
        intent = PaymentIntent(
            id=intent_id,
            client_secret=f"{intent_id}_secret_{secrets.token_hex(8)}",
            order_id=order_id,
            amount=minor_amount,
            currency=currency,
            status=PaymentIntentStatus.REQUIRES_PAYMENT_METHOD,
        )
        self.db.add(intent)
        await self.db.commit()
        await self.db.refresh(intent)

        logger.info(
            "Simulated payment intent created",
            payment_intent_id=intent.id,
            order_id=str(order_id) if order_id else None,
            amount=str(amount),
            currency=intent.currency.upper(),
            status=intent.status,
        )

        return intent

    async def get_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        result = await self.db.execute(
            select(PaymentIntent).where(PaymentIntent.id == payment_intent_id)
        )
        intent = result.scalar_one_or_none()
        if not intent:
            raise PaymentIntentNotFoundError("Payment intent not found")
        return intent

    async def confirm_payment(self, payment_intent_id: str) -> PaymentIntent:
        """Mark the intent succeeded; repeat confirmations are no-ops"""
        intent = await self.get_payment_intent(payment_intent_id)

        if intent.status == PaymentIntentStatus.SUCCEEDED:
            return intent
        if intent.status == PaymentIntentStatus.CANCELED:
            raise PaymentStateError("Payment intent has been canceled")

        order = None
        if intent.order_id is not None:
            # Order total may have changed since the intent was created
            order = await self._get_order(intent.order_id)
            self._check_covers_order(order, intent.amount, intent.currency)

        intent.status = PaymentIntentStatus.SUCCEEDED
        intent.confirmed_at = datetime.utcnow()

        if order is not None:
            order.payment_status = PaymentStatus.PAID
            if order.status == OrderStatus.PENDING:
                order.status = OrderStatus.CONFIRMED

        await self.db.commit()
        await self.db.refresh(intent)

        logger.info(
            "Simulated payment confirmed",
            payment_intent_id=intent.id,
            order_id=str(intent.order_id) if intent.order_id else None,
            amount=intent.amount,
        )

        return intent

    async def expire_stale_intents(self, now: Optional[datetime] = None) -> int:
        """Cancel intents nobody confirmed within the configured TTL"""
        now = now or datetime.utcnow()
        cutoff = now - timedelta(hours=settings.payment_intent_ttl_hours)

        result = await self.db.execute(
            update(PaymentIntent)
            .where(
                PaymentIntent.status == PaymentIntentStatus.REQUIRES_PAYMENT_METHOD,
                PaymentIntent.created_at < cutoff,
            )
            .values(status=PaymentIntentStatus.CANCELED, updated_at=now)
        )
        await self.db.commit()
        return result.rowcount
