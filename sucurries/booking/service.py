"""Reservation service"""

import calendar
import uuid
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from sucurries.config import Settings, settings as default_settings
from sucurries.booking.availability import AvailabilityResolver
from sucurries.booking.exceptions import (
    InvalidReservationError,
    SlotUnavailableError,
    DuplicateReservationError,
    ReservationNotFoundError,
    ReservationAccessError,
    ReservationStateError,
)
from sucurries.models.reservation import Reservation, ReservationStatus
from sucurries.models.user import User, UserRole
from sucurries.schemas.reservation import ReservationCreate

logger = structlog.get_logger()


def new_reservation_id() -> UUID:
    return uuid.uuid4()


def new_booking_number() -> str:
    """Short customer-facing reference, e.g. BK-3F9A0C12DE"""
    return f"BK-{uuid.uuid4().hex[:10].upper()}"


def add_months(day: date, months: int) -> date:
    """Shift by calendar months, clamping to the last day of the target month"""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


class ReservationService:
    """
    Creates, cancels and lists table reservations backed by the database.

    ``today`` and ``now`` are injectable so the booking window and the
    cancellation cutoff can be evaluated against a fixed clock.
    """

    def __init__(
        self,
        db: AsyncSession,
        resolver: Optional[AvailabilityResolver] = None,
        today: Callable[[], date] = date.today,
        config: Optional[Settings] = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.db = db
        self.config = config or default_settings
        self.resolver = resolver or AvailabilityResolver(
            db,
            opening_hours=self.config.opening_hours,
            slot_minutes=self.config.slot_minutes,
            slot_capacity=self.config.slot_capacity,
        )
        self.today = today
        self.now = now

    def booking_window(self) -> Tuple[date, date]:
        start = self.today()
        return start, add_months(start, self.config.booking_window_months)

    async def get_available_time_slots(self, day: date) -> List[str]:
        return await self.resolver.get_available_time_slots(day)

    async def _lock_slot(self, day: date, slot: str) -> None:
        """
        Serialize bookings for one slot until the transaction ends, so the
        capacity count and the insert cannot interleave with another request.
        """
        if self.db.get_bind().dialect.name != "postgresql":
            return
        key = f"reservation-slot:{day.isoformat()}:{slot}"
        await self.db.execute(select(func.pg_advisory_xact_lock(func.hashtext(key))))

    async def _validate(self, request: ReservationCreate) -> None:
        if not request.customer_name.strip():
            raise InvalidReservationError("Customer name is required")
        if not str(request.customer_email).strip():
            raise InvalidReservationError("Customer email is required")

        if request.party_size < 1 or request.party_size > self.config.max_party_size:
            raise InvalidReservationError(
                f"Party size must be between 1 and {self.config.max_party_size}"
            )

        first_day, last_day = self.booking_window()
        if request.date < first_day:
            raise InvalidReservationError("Cannot book a table for a past date")
        if request.date > last_day:
            raise InvalidReservationError(
                f"Reservations can only be made up to {self.config.booking_window_months} months ahead"
            )

        if request.time not in self.resolver.schedule_for(request.date):
            raise SlotUnavailableError(
                f"{request.time} is not a bookable time on {request.date.isoformat()}"
            )

        available = await self.resolver.get_available_time_slots(request.date)
        if request.time not in available:
            raise SlotUnavailableError(
                f"{request.time} on {request.date.isoformat()} is fully booked"
            )

        result = await self.db.execute(
            select(func.count(Reservation.id)).where(
                func.lower(Reservation.customer_email) == str(request.customer_email).lower(),
                Reservation.reservation_date == request.date,
                Reservation.reservation_time == request.time,
                Reservation.status.in_(ReservationStatus.ACTIVE),
            )
        )
        if result.scalar():
            raise DuplicateReservationError(
                "You already have a reservation for this date and time"
            )

    async def create_reservation(
        self,
        request: ReservationCreate,
        user: Optional[User] = None,
    ) -> Reservation:
        """Validate and persist a reservation"""
        await self._lock_slot(request.date, request.time)
        await self._validate(request)

        status = (
            ReservationStatus.CONFIRMED
            if self.config.auto_confirm_reservations
            else ReservationStatus.PENDING
        )
        now = datetime.utcnow()

        reservation = Reservation(
            id=new_reservation_id(),
            booking_number=new_booking_number(),
            user_id=user.id if user else None,
            customer_name=request.customer_name.strip(),
            customer_email=str(request.customer_email).strip(),
            customer_phone=request.customer_phone,
            reservation_date=request.date,
            reservation_time=request.time,
            party_size=request.party_size,
            special_requests=request.special_requests,
            status=status,
            created_at=now,
            updated_at=now,
        )

        self.db.add(reservation)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateReservationError(
                "You already have a reservation for this date and time"
            )
        await self.db.refresh(reservation)

        logger.info(
            "Reservation created",
            reservation_id=str(reservation.id),
            booking_number=reservation.booking_number,
            date=reservation.reservation_date.isoformat(),
            time=reservation.reservation_time,
            party_size=reservation.party_size,
            status=reservation.status,
        )

        return reservation

    async def get_reservation(self, reservation_id: UUID, user: Optional[User] = None) -> Reservation:
        result = await self.db.execute(
            select(Reservation).where(Reservation.id == reservation_id)
        )
        reservation = result.scalar_one_or_none()

        if not reservation:
            raise ReservationNotFoundError("Reservation not found")

        if user is not None and not user.has_permission(UserRole.ADMIN):
            if reservation.user_id != user.id:
                raise ReservationAccessError("You can only access your own reservations")

        return reservation

    async def cancel_reservation(self, reservation_id: UUID, user: Optional[User] = None) -> Reservation:
        """Cancel a stored reservation, keeping its original details"""
        reservation = await self.get_reservation(reservation_id, user)

        if reservation.status == ReservationStatus.CANCELLED:
            raise ReservationStateError("Reservation is already cancelled")

        cutoff_hours = self.config.cancellation_cutoff_hours
        is_staff = user is not None and user.has_permission(UserRole.ADMIN)
        if cutoff_hours and not is_staff:
            if reservation.starts_at - self.now() < timedelta(hours=cutoff_hours):
                raise ReservationStateError(
                    f"Reservations can only be cancelled up to {cutoff_hours} hours in advance"
                )

        reservation.status = ReservationStatus.CANCELLED
        reservation.cancelled_at = datetime.utcnow()
        await self.db.commit()
        await self.db.refresh(reservation)

        logger.info(
            "Reservation cancelled",
            reservation_id=str(reservation.id),
            booking_number=reservation.booking_number,
        )

        return reservation

    async def get_user_reservations(self, user: User) -> List[Reservation]:
        result = await self.db.execute(
            select(Reservation)
            .where(Reservation.user_id == user.id)
            .order_by(Reservation.reservation_date.desc(), Reservation.reservation_time.desc())
        )
        return list(result.scalars().all())

    async def list_reservations(
        self,
        page: int = 1,
        page_size: int = 20,
        status: Optional[str] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> Tuple[List[Reservation], int]:
        query = select(Reservation)
        count_query = select(func.count(Reservation.id))

        if status:
            query = query.where(Reservation.status == status)
            count_query = count_query.where(Reservation.status == status)

        if from_date:
            query = query.where(Reservation.reservation_date >= from_date)
            count_query = count_query.where(Reservation.reservation_date >= from_date)

        if to_date:
            query = query.where(Reservation.reservation_date <= to_date)
            count_query = count_query.where(Reservation.reservation_date <= to_date)

        total_result = await self.db.execute(count_query)
        total = total_result.scalar()

        offset = (page - 1) * page_size
        query = (
            query.order_by(Reservation.reservation_date.desc(), Reservation.reservation_time.desc())
            .offset(offset)
            .limit(page_size)
        )

        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    async def update_status(
        self,
        reservation_id: UUID,
        status: str,
        notes: Optional[str] = None,
    ) -> Reservation:
        """Staff status change: pending -> confirmed, or anything active -> cancelled"""
        if status not in ReservationStatus.ALL:
            raise InvalidReservationError(f"Unknown reservation status: {status}")

        reservation = await self.get_reservation(reservation_id)

        if reservation.status == ReservationStatus.CANCELLED and status != ReservationStatus.CANCELLED:
            raise ReservationStateError("Cancelled reservations cannot be reopened")
        if status == ReservationStatus.PENDING and reservation.status != ReservationStatus.PENDING:
            raise ReservationStateError("Reservations cannot be moved back to pending")
        if status == ReservationStatus.CANCELLED and reservation.status == ReservationStatus.CANCELLED:
            raise ReservationStateError("Reservation is already cancelled")

        if status == ReservationStatus.CANCELLED:
            reservation.cancelled_at = datetime.utcnow()
        reservation.status = status
        if notes is not None:
            reservation.notes = notes

        await self.db.commit()
        await self.db.refresh(reservation)

        logger.info(
            "Reservation status updated",
            reservation_id=str(reservation.id),
            status=status,
        )

        return reservation
