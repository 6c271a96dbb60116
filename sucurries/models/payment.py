"""Simulated payment intent model"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Uuid
from sqlalchemy.orm import relationship

from sucurries.database import Base


class PaymentIntentStatus:
    REQUIRES_PAYMENT_METHOD = "requires_payment_method"
    REQUIRES_CONFIRMATION = "requires_confirmation"
    SUCCEEDED = "succeeded"
    CANCELED = "canceled"


class PaymentIntent(Base):
    """Locally fabricated payment intents mimicking a card gateway"""
    __tablename__ = "payment_intents"
    
    id = Column(String(64), primary_key=True)  # pi_sim_<hex>
    client_secret = Column(String(128), nullable=False)
    order_id = Column(Uuid(as_uuid=True), ForeignKey("orders.id"))
    
    amount = Column(Integer, nullable=False)  # minor units
    currency = Column(String(3), nullable=False, default="eur")
    status = Column(String(32), default=PaymentIntentStatus.REQUIRES_PAYMENT_METHOD)
    
    confirmed_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    order = relationship("Order", back_populates="payment_intents")
