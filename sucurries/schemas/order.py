"""Order schemas"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field


class OrderItemCreate(BaseModel):
    """Order line item"""
    product_name: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)
    unit_price_cents: int = Field(ge=0)


class OrderCreate(BaseModel):
    """Create order request"""
    customer_name: Optional[str] = None
    customer_email: Optional[EmailStr] = None
    customer_phone: Optional[str] = None
    items: List[OrderItemCreate] = Field(min_length=1)
    notes: Optional[str] = None


class OrderStatusUpdate(BaseModel):
    """Update order status (staff)"""
    status: str
    notes: Optional[str] = None


class OrderItemResponse(BaseModel):
    product_name: str
    quantity: int
    unit_price_cents: int


class OrderResponse(BaseModel):
    """Order response"""
    id: UUID
    order_number: str
    user_id: Optional[UUID]
    customer_name: str
    customer_email: str
    customer_phone: Optional[str]
    items: List[OrderItemResponse] = Field(validation_alias="items_json")
    subtotal_cents: int
    tax_cents: int
    total_cents: int
    currency: str
    status: str
    payment_status: str
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        populate_by_name = True


class OrderListResponse(BaseModel):
    """Paginated order list"""
    items: List[OrderResponse]
    total: int
    page: int
    page_size: int
