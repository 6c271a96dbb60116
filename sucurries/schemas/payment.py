"""Payment schemas"""

from decimal import Decimal
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field


class CreatePaymentIntentRequest(BaseModel):
    """Amount is given in major currency units (e.g. 12.50 EUR)"""
    amount: Decimal = Field(gt=0)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    order_id: Optional[UUID] = None


class PaymentIntentResponse(BaseModel):
    """Payment intent in the gateway's response shape"""
    id: str
    amount: int
    currency: str
    status: str
    client_secret: str
    order_id: Optional[UUID] = None

    class Config:
        from_attributes = True
