"""Order management API endpoints"""

import uuid
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from sucurries.config import settings
from sucurries.database import get_db
from sucurries.models.order import Order, OrderStatus
from sucurries.models.user import User, UserRole
from sucurries.schemas.order import OrderCreate, OrderResponse, OrderListResponse, OrderStatusUpdate
from sucurries.api.auth import get_current_active_user, require_role

router = APIRouter()
logger = structlog.get_logger()


def new_order_number() -> str:
    return f"ORD-{uuid.uuid4().hex[:10].upper()}"


def calculate_totals(items: list) -> dict:
    """Subtotal, tax and total in cents for a list of item dicts"""
    subtotal = sum(item["unit_price_cents"] * item["quantity"] for item in items)
    tax = int(round(subtotal * settings.tax_rate))
    return {
        "subtotal_cents": subtotal,
        "tax_cents": tax,
        "total_cents": subtotal + tax,
    }


async def _get_order_for_user(db: AsyncSession, order_id: UUID, user: User) -> Order:
    query = select(Order).where(Order.id == order_id)
    if not user.has_permission(UserRole.ADMIN):
        query = query.where(Order.user_id == user.id)

    result = await db.execute(query)
    order = result.scalar_one_or_none()

    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    return order


@router.get("", response_model=OrderListResponse)
async def list_orders(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: Optional[str] = None,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """List the user's orders (all orders for staff) with pagination"""
    query = select(Order)
    count_query = select(func.count(Order.id))

    if not current_user.has_permission(UserRole.ADMIN):
        query = query.where(Order.user_id == current_user.id)
        count_query = count_query.where(Order.user_id == current_user.id)

    if status:
        query = query.where(Order.status == status)
        count_query = count_query.where(Order.status == status)

    # Get total
    total_result = await db.execute(count_query)
    total = total_result.scalar()

    # Get paginated results
    offset = (page - 1) * page_size
    query = query.order_by(Order.created_at.desc()).offset(offset).limit(page_size)

    result = await db.execute(query)
    orders = result.scalars().all()

    return OrderListResponse(
        items=orders,
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=OrderResponse, status_code=201)
async def create_order(
    order_data: OrderCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a new order; totals are computed server-side"""
    items_json = [item.model_dump() for item in order_data.items]
    totals = calculate_totals(items_json)

    order = Order(
        order_number=new_order_number(),
        user_id=current_user.id,
        customer_name=order_data.customer_name or current_user.full_name,
        customer_email=order_data.customer_email or current_user.email,
        customer_phone=order_data.customer_phone or current_user.phone,
        items_json=items_json,
        currency=settings.payment_currency,
        notes=order_data.notes,
        **totals,
    )

    db.add(order)
    await db.commit()
    await db.refresh(order)

    logger.info(
        "Order created",
        order_id=str(order.id),
        order_number=order.order_number,
        item_count=len(items_json),
        total_cents=order.total_cents,
    )

    return order


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Get order details"""
    return await _get_order_for_user(db, order_id, current_user)


@router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Cancel an order that has not started preparation"""
    order = await _get_order_for_user(db, order_id, current_user)

    if order.status not in OrderStatus.CANCELLABLE:
        raise HTTPException(status_code=409, detail="Cannot cancel order in current status")

    order.status = OrderStatus.CANCELLED
    order.cancelled_at = datetime.utcnow()
    await db.commit()
    await db.refresh(order)

    logger.info("Order cancelled", order_id=str(order.id))

    return order


@router.put("/{order_id}", response_model=OrderResponse)
async def update_order_status(
    order_id: UUID,
    update_data: OrderStatusUpdate,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Move an order forward through the kitchen flow or cancel it (staff)"""
    order = await _get_order_for_user(db, order_id, current_user)
    new_status = update_data.status

    if new_status not in OrderStatus.ALL:
        raise HTTPException(status_code=400, detail=f"Unknown order status: {new_status}")

    if order.status in (OrderStatus.CANCELLED, OrderStatus.DELIVERED):
        raise HTTPException(status_code=409, detail=f"Order is already {order.status}")

    if new_status == OrderStatus.CANCELLED:
        order.cancelled_at = datetime.utcnow()
    elif OrderStatus.FLOW.index(new_status) <= OrderStatus.FLOW.index(order.status):
        raise HTTPException(
            status_code=409,
            detail=f"Cannot move order from {order.status} to {new_status}",
        )

    order.status = new_status
    if update_data.notes is not None:
        order.notes = update_data.notes

    await db.commit()
    await db.refresh(order)

    logger.info("Order status updated", order_id=str(order.id), status=new_status)

    return order
