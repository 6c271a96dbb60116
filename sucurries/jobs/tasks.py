"""Background job tasks"""

from datetime import datetime, timedelta
from typing import List, Optional
import asyncio

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from sucurries.jobs.celery_app import celery_app
from sucurries.config import settings
from sucurries.models.reservation import Reservation, ReservationStatus
from sucurries.payments.simulator import PaymentSimulator

logger = structlog.get_logger()


def run_async(coro):
    """Helper to run async functions in sync context"""
    return asyncio.run(coro)


def reminder_message(reservation: Reservation) -> str:
    return (
        f"Reminder: your table for {reservation.party_size} is booked on "
        f"{reservation.reservation_date.strftime('%A %d %B')} at {reservation.reservation_time}. "
        f"Booking number {reservation.booking_number}. See you soon!"
    )


async def send_due_reminders(db: AsyncSession, now: Optional[datetime] = None) -> List[Reservation]:
    """
    Stamp ``reminder_sent`` on confirmed reservations starting inside the
    reminder window and return them.
    """
    now = now or datetime.utcnow()
    window_start = now + timedelta(hours=settings.reminder_window_start_hours)
    window_end = now + timedelta(hours=settings.reminder_window_end_hours)

    # Coarse filter by date in SQL, exact start time checked below
    result = await db.execute(
        select(Reservation).where(
            and_(
                Reservation.reservation_date.between(window_start.date(), window_end.date()),
                Reservation.status == ReservationStatus.CONFIRMED,
                Reservation.reminder_sent.is_(None),
            )
        )
    )
    candidates = result.scalars().all()

    reminded = []
    for reservation in candidates:
        if not window_start <= reservation.starts_at <= window_end:
            continue

        logger.info(
            "Sending reservation reminder",
            reservation_id=str(reservation.id),
            email=reservation.customer_email,
            message=reminder_message(reservation),
        )
        reservation.reminder_sent = now
        reminded.append(reservation)

    await db.commit()
    return reminded


@celery_app.task(name="send_reservation_reminders")
def send_reservation_reminders():
    """Send reminders for upcoming reservations"""
    logger.info("Sending reservation reminders")

    async def _send():
        from sucurries.database import SessionLocal

        async with SessionLocal() as db:
            reminded = await send_due_reminders(db)
            logger.info("Reservation reminders sent", count=len(reminded))

    run_async(_send())


@celery_app.task(name="expire_payment_intents")
def expire_payment_intents():
    """Cancel simulated payment intents that were never confirmed"""
    logger.info("Expiring stale payment intents")

    async def _expire():
        from sucurries.database import SessionLocal

        async with SessionLocal() as db:
            expired = await PaymentSimulator(db).expire_stale_intents()
            logger.info("Payment intents expired", count=expired)

    run_async(_expire())
