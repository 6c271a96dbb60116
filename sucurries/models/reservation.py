"""Reservation model"""

import uuid
from datetime import datetime, time
from sqlalchemy import Column, String, Integer, Date, DateTime, ForeignKey, Text, Index, Uuid, func
from sqlalchemy.orm import relationship

from sucurries.database import Base


class ReservationStatus:
    """Allowed reservation status values"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

    ACTIVE = (PENDING, CONFIRMED)
    ALL = (PENDING, CONFIRMED, CANCELLED)


class Reservation(Base):
    """Table reservations"""
    __tablename__ = "reservations"
    __table_args__ = (
        Index("ix_reservations_slot", "reservation_date", "reservation_time"),
    )
    
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    booking_number = Column(String(20), unique=True, nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"))
    
    # Customer information
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(20))
    
    # Reservation details
    party_size = Column(Integer, nullable=False)
    reservation_date = Column(Date, nullable=False)
    reservation_time = Column(String(5), nullable=False)  # "HH:MM", 24-hour
    
    # Status
    status = Column(String(20), default=ReservationStatus.CONFIRMED)  # pending, confirmed, cancelled
    
    # Notes
    special_requests = Column(Text)
    notes = Column(Text)  # staff only
    
    # Notifications
    confirmation_sent = Column(DateTime)
    reminder_sent = Column(DateTime)
    
    # Metadata
    cancelled_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    user = relationship("User", back_populates="reservations")
    
    @property
    def starts_at(self) -> datetime:
        hours, minutes = (int(part) for part in self.reservation_time.split(":"))
        return datetime.combine(self.reservation_date, time(hours, minutes))


# One active booking per customer email and slot
_active = Reservation.status.in_(ReservationStatus.ACTIVE)
Index(
    "uq_reservations_active_email_slot",
    func.lower(Reservation.customer_email),
    Reservation.reservation_date,
    Reservation.reservation_time,
    unique=True,
    postgresql_where=_active,
    sqlite_where=_active,
)
