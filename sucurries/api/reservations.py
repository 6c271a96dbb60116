"""Reservation API endpoints"""

from datetime import date
from typing import Callable, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from sucurries.database import get_db
from sucurries.booking.service import ReservationService
from sucurries.booking.exceptions import (
    ReservationError,
    InvalidReservationError,
    SlotUnavailableError,
    DuplicateReservationError,
    ReservationNotFoundError,
    ReservationAccessError,
    ReservationStateError,
)
from sucurries.models.user import User, UserRole
from sucurries.schemas.reservation import (
    ReservationCreate,
    ReservationStatusUpdate,
    ReservationResponse,
    ReservationListResponse,
    AvailabilityResponse,
)
from sucurries.api.auth import get_current_active_user, get_optional_user, require_role

router = APIRouter()


ERROR_STATUS = {
    InvalidReservationError: 400,
    ReservationAccessError: 403,
    ReservationNotFoundError: 404,
    SlotUnavailableError: 409,
    DuplicateReservationError: 409,
    ReservationStateError: 409,
}


def to_http_error(exc: ReservationError) -> HTTPException:
    return HTTPException(status_code=ERROR_STATUS.get(type(exc), 400), detail=exc.message)


def get_today() -> Callable[[], date]:
    """Clock used for the booking window"""
    return date.today


def get_reservation_service(
    db: AsyncSession = Depends(get_db),
    today: Callable[[], date] = Depends(get_today),
) -> ReservationService:
    return ReservationService(db, today=today)


@router.get("/availability", response_model=AvailabilityResponse)
async def get_available_time_slots(
    date: date,
    service: ReservationService = Depends(get_reservation_service),
):
    """Bookable time slots for a date"""
    slots = await service.get_available_time_slots(date)
    return AvailabilityResponse(date=date, slots=slots)


@router.post("", response_model=ReservationResponse, status_code=201)
async def create_reservation(
    reservation_data: ReservationCreate,
    current_user: Optional[User] = Depends(get_optional_user),
    service: ReservationService = Depends(get_reservation_service),
):
    """Create a reservation as a guest or a signed-in customer"""
    try:
        return await service.create_reservation(reservation_data, user=current_user)
    except ReservationError as e:
        raise to_http_error(e)


@router.get("/me", response_model=List[ReservationResponse])
async def get_user_reservations(
    current_user: User = Depends(get_current_active_user),
    service: ReservationService = Depends(get_reservation_service),
):
    """Reservations booked by the signed-in user"""
    return await service.get_user_reservations(current_user)


@router.get("", response_model=ReservationListResponse)
async def list_reservations(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: Optional[str] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    service: ReservationService = Depends(get_reservation_service),
):
    """List all reservations with pagination (staff)"""
    reservations, total = await service.list_reservations(
        page=page,
        page_size=page_size,
        status=status,
        from_date=from_date,
        to_date=to_date,
    )

    return ReservationListResponse(
        items=reservations,
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{reservation_id}", response_model=ReservationResponse)
async def get_reservation(
    reservation_id: UUID,
    current_user: User = Depends(get_current_active_user),
    service: ReservationService = Depends(get_reservation_service),
):
    """Get reservation details"""
    try:
        return await service.get_reservation(reservation_id, user=current_user)
    except ReservationError as e:
        raise to_http_error(e)


@router.post("/{reservation_id}/cancel", response_model=ReservationResponse)
async def cancel_reservation(
    reservation_id: UUID,
    current_user: Optional[User] = Depends(get_optional_user),
    service: ReservationService = Depends(get_reservation_service),
):
    """
    Cancel a reservation.

    Signed-in customers may cancel only their own bookings. Guests cancel
    by reservation id, which is only handed out in the confirmation.
    """
    try:
        if current_user is None:
            reservation = await service.get_reservation(reservation_id)
            if reservation.user_id is not None:
                raise ReservationAccessError("Sign in to cancel this reservation")
        return await service.cancel_reservation(reservation_id, user=current_user)
    except ReservationError as e:
        raise to_http_error(e)


@router.put("/{reservation_id}", response_model=ReservationResponse)
async def update_reservation_status(
    reservation_id: UUID,
    update_data: ReservationStatusUpdate,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    service: ReservationService = Depends(get_reservation_service),
):
    """Confirm or cancel a reservation (staff)"""
    try:
        return await service.update_status(
            reservation_id,
            update_data.status,
            notes=update_data.notes,
        )
    except ReservationError as e:
        raise to_http_error(e)
