"""Tests for the simulated payment gateway"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from httpx import AsyncClient
from uuid import UUID, uuid4

from sucurries.models.order import Order
from sucurries.models.payment import PaymentIntent
from sucurries.payments import PaymentSimulator, to_minor_units


def test_to_minor_units_rounds_half_up():
    assert to_minor_units(Decimal("12.50")) == 1250
    assert to_minor_units(Decimal("0.005")) == 1
    assert to_minor_units(Decimal("19.994")) == 1999


@pytest.mark.asyncio
async def test_create_payment_intent(client: AsyncClient):
    response = await client.post(
        "/payments/create-payment-intent",
        json={"amount": 24.99},
    )
    
    assert response.status_code == 200
    data = response.json()
    assert data["id"].startswith("pi_sim_")
    assert data["client_secret"].startswith(f"{data['id']}_secret_")
    assert data["amount"] == 2499
    assert data["currency"] == "eur"
    assert data["status"] == "requires_payment_method"


@pytest.mark.asyncio
async def test_confirm_and_get_keep_stored_amount(client: AsyncClient):
    created = (await client.post(
        "/payments/create-payment-intent",
        json={"amount": "10.00", "currency": "GBP"},
    )).json()
    
    confirmed = await client.post(f"/payments/confirm/{created['id']}")
    assert confirmed.status_code == 200
    assert confirmed.json()["status"] == "succeeded"
    assert confirmed.json()["amount"] == 1000
    assert confirmed.json()["currency"] == "gbp"
    
    # Confirming again is a no-op
    again = await client.post(f"/payments/confirm/{created['id']}")
    assert again.status_code == 200
    assert again.json()["status"] == "succeeded"
    
    fetched = await client.get(f"/payments/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["amount"] == 1000


@pytest.mark.asyncio
async def test_unknown_payment_intent(client: AsyncClient):
    assert (await client.get("/payments/pi_sim_missing")).status_code == 404
    assert (await client.post("/payments/confirm/pi_sim_missing")).status_code == 404


@pytest.mark.asyncio
async def test_non_positive_amount_rejected(client: AsyncClient):
    response = await client.post("/payments/create-payment-intent", json={"amount": 0})
    
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_unknown_order_rejected(client: AsyncClient):
    response = await client.post(
        "/payments/create-payment-intent",
        json={"amount": 5, "order_id": str(uuid4())},
    )
    
    assert response.status_code == 404
    assert response.json()["detail"] == "Order not found"


@pytest.mark.asyncio
async def test_confirming_marks_order_paid(authenticated_client: AsyncClient):
    order = (await authenticated_client.post(
        "/orders",
        json={"items": [{"product_name": "Butter Chicken", "quantity": 2, "unit_price_cents": 1250}]},
    )).json()
    
    intent = (await authenticated_client.post(
        "/payments/create-payment-intent",
        json={"amount": order["total_cents"] / 100, "order_id": order["id"]},
    )).json()
    assert intent["order_id"] == order["id"]
    assert intent["amount"] == order["total_cents"]
    
    await authenticated_client.post(f"/payments/confirm/{intent['id']}")
    
    refreshed = (await authenticated_client.get(f"/orders/{order['id']}")).json()
    assert refreshed["payment_status"] == "paid"
    assert refreshed["status"] == "confirmed"


@pytest.mark.asyncio
async def test_expire_stale_intents(test_db):
    simulator = PaymentSimulator(test_db)
    stale = await simulator.create_payment_intent(Decimal("5.00"))
    fresh = await simulator.create_payment_intent(Decimal("6.00"))
    stale.created_at = datetime.utcnow() - timedelta(hours=48)
    await test_db.commit()
    
    expired = await simulator.expire_stale_intents()
    
    assert expired == 1
    await test_db.refresh(stale)
    await test_db.refresh(fresh)
    assert stale.status == "canceled"
    assert fresh.status == "requires_payment_method"


@pytest.mark.asyncio
async def test_canceled_intent_cannot_be_confirmed(client: AsyncClient, test_db):
    created = (await client.post("/payments/create-payment-intent", json={"amount": 3})).json()
    intent = await test_db.get(PaymentIntent, created["id"])
    intent.status = "canceled"
    await test_db.commit()
    
    response = await client.post(f"/payments/confirm/{created['id']}")
    
    assert response.status_code == 409


async def create_order(client: AsyncClient) -> dict:
    response = await client.post(
        "/orders",
        json={"items": [{"product_name": "Lamb Rogan Josh", "quantity": 2, "unit_price_cents": 2500}]},
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_intent_amount_must_match_order_total(authenticated_client: AsyncClient):
    order = await create_order(authenticated_client)
    
    response = await authenticated_client.post(
        "/payments/create-payment-intent",
        json={"amount": "0.01", "order_id": order["id"]},
    )
    
    assert response.status_code == 400
    assert "order total" in response.json()["detail"]
    
    refreshed = (await authenticated_client.get(f"/orders/{order['id']}")).json()
    assert refreshed["payment_status"] != "paid"


@pytest.mark.asyncio
async def test_intent_currency_must_match_order(authenticated_client: AsyncClient):
    order = await create_order(authenticated_client)
    
    response = await authenticated_client.post(
        "/payments/create-payment-intent",
        json={"amount": order["total_cents"] / 100, "currency": "usd", "order_id": order["id"]},
    )
    
    assert response.status_code == 400
    assert "currency" in response.json()["detail"]


@pytest.mark.asyncio
async def test_confirm_rechecks_order_total(authenticated_client: AsyncClient, test_db):
    order = await create_order(authenticated_client)
    intent = (await authenticated_client.post(
        "/payments/create-payment-intent",
        json={"amount": order["total_cents"] / 100, "order_id": order["id"]},
    )).json()
    
    stored = await test_db.get(Order, UUID(order["id"]))
    stored.total_cents += 1000
    await test_db.commit()
    
    response = await authenticated_client.post(f"/payments/confirm/{intent['id']}")
    
    assert response.status_code == 400
    await test_db.refresh(stored)
    assert stored.payment_status != "paid"
    assert (await authenticated_client.get(f"/payments/{intent['id']}")).json()["status"] == "requires_payment_method"
