"""Time slot availability"""

from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from sucurries.config import WEEKDAYS, settings
from sucurries.models.reservation import Reservation, ReservationStatus


def _parse_clock(value: str) -> datetime:
    return datetime.strptime(value, "%H:%M")


def generate_slots(hours: Optional[Dict[str, str]], slot_minutes: int) -> List[str]:
    """
    Half-open schedule: slots start at ``open`` and step ``slot_minutes``
    while a full slot still fits before ``close``.
    """
    if slot_minutes <= 0:
        raise ValueError("slot_minutes must be positive")
    if not hours:
        return []

    start = _parse_clock(hours["open"])
    close = _parse_clock(hours["close"])
    step = timedelta(minutes=slot_minutes)

    slots = []
    current = start
    while current + step <= close:
        slots.append(current.strftime("%H:%M"))
        current += step
    return slots


class AvailabilityResolver:
    """
    Resolves bookable time slots for a date.

    The schedule comes from the configured opening hours for the weekday;
    slots whose active reservations already reached ``slot_capacity`` are
    dropped. Past dates are not rejected here.
    """

    def __init__(
        self,
        db: AsyncSession,
        opening_hours: Optional[Dict[str, Optional[Dict[str, str]]]] = None,
        slot_minutes: Optional[int] = None,
        slot_capacity: Optional[int] = None,
    ):
        self.db = db
        self.opening_hours = opening_hours if opening_hours is not None else settings.opening_hours
        self.slot_minutes = slot_minutes if slot_minutes is not None else settings.slot_minutes
        self.slot_capacity = slot_capacity if slot_capacity is not None else settings.slot_capacity

    def schedule_for(self, day: date) -> List[str]:
        """All slots the restaurant offers on ``day``, ignoring bookings"""
        return generate_slots(self.opening_hours.get(WEEKDAYS[day.weekday()]), self.slot_minutes)

    async def booked_counts(self, day: date) -> Dict[str, int]:
        result = await self.db.execute(
            select(Reservation.reservation_time, func.count(Reservation.id))
            .where(
                Reservation.reservation_date == day,
                Reservation.status.in_(ReservationStatus.ACTIVE),
            )
            .group_by(Reservation.reservation_time)
        )
        return {slot: count for slot, count in result.all()}

    async def get_available_time_slots(self, day: date) -> List[str]:
        """Ordered "HH:MM" slots still open for booking on ``day``"""
        schedule = self.schedule_for(day)
        if not schedule:
            return []

        booked = await self.booked_counts(day)
        return [slot for slot in schedule if booked.get(slot, 0) < self.slot_capacity]
