"""Order model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, JSON, Text, Integer, Uuid
from sqlalchemy.orm import relationship

from sucurries.database import Base


class OrderStatus:
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    CANCELLABLE = (PENDING, CONFIRMED)
    # Kitchen flow, staff may only move an order forward through it
    FLOW = (PENDING, CONFIRMED, PREPARING, READY, DELIVERED)
    ALL = FLOW + (CANCELLED,)


class PaymentStatus:
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class Order(Base):
    """Online food orders"""
    __tablename__ = "orders"
    
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_number = Column(String(20), unique=True, nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"))
    
    # Customer information
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(20))
    
    # Order details
    # [{"product_name": "...", "quantity": 1, "unit_price_cents": 1500}, ...]
    items_json = Column(JSON, nullable=False)
    
    # Pricing
    subtotal_cents = Column(Integer, nullable=False, default=0)
    tax_cents = Column(Integer, default=0)
    total_cents = Column(Integer, nullable=False, default=0)
    currency = Column(String(3), default="eur")
    
    # Status
    status = Column(String(20), default=OrderStatus.PENDING)
    payment_status = Column(String(20), default=PaymentStatus.PENDING)
    
    # Notes
    notes = Column(Text)
    
    # Metadata
    cancelled_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    user = relationship("User", back_populates="orders")
    payment_intents = relationship("PaymentIntent", back_populates="order")
