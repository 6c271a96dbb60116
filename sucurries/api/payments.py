"""Payment API endpoints backed by the simulated gateway"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from sucurries.database import get_db
from sucurries.payments import (
    PaymentSimulator,
    PaymentError,
    PaymentIntentNotFoundError,
    PaymentOrderNotFoundError,
    PaymentStateError,
)
from sucurries.schemas.payment import CreatePaymentIntentRequest, PaymentIntentResponse

router = APIRouter()


def get_payment_simulator(db: AsyncSession = Depends(get_db)) -> PaymentSimulator:
    return PaymentSimulator(db)


def _http_error(exc: PaymentError) -> HTTPException:
    if isinstance(exc, (PaymentIntentNotFoundError, PaymentOrderNotFoundError)):
        return HTTPException(status_code=404, detail=exc.message)
    if isinstance(exc, PaymentStateError):
        return HTTPException(status_code=409, detail=exc.message)
    return HTTPException(status_code=400, detail=exc.message)


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    request: CreatePaymentIntentRequest,
    simulator: PaymentSimulator = Depends(get_payment_simulator),
):
    """Create a simulated payment intent"""
    try:
        return await simulator.create_payment_intent(
            amount=request.amount,
            currency=request.currency,
            order_id=request.order_id,
        )
    except PaymentError as e:
        raise _http_error(e)


@router.post("/confirm/{payment_intent_id}", response_model=PaymentIntentResponse)
async def confirm_payment(
    payment_intent_id: str,
    simulator: PaymentSimulator = Depends(get_payment_simulator),
):
    """Confirm a simulated payment intent"""
    try:
        return await simulator.confirm_payment(payment_intent_id)
    except PaymentError as e:
        raise _http_error(e)


@router.get("/{payment_intent_id}", response_model=PaymentIntentResponse)
async def get_payment_intent(
    payment_intent_id: str,
    simulator: PaymentSimulator = Depends(get_payment_simulator),
):
    """Retrieve a simulated payment intent"""
    try:
        return await simulator.get_payment_intent(payment_intent_id)
    except PaymentError as e:
        raise _http_error(e)
