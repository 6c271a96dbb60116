"""Tests for the booking form client"""

import asyncio
from datetime import date

import httpx
import pytest
from httpx import AsyncClient

from sucurries.client.booking import (
    AuthSession,
    BookingApiClient,
    BookingForm,
    SessionUser,
    extract_error_message,
    load_session,
)


def status_error(status_code: int, body) -> httpx.HTTPStatusError:
    request = httpx.Request("POST", "http://testserver/reservations")
    if isinstance(body, (dict, list)):
        response = httpx.Response(status_code, json=body, request=request)
    else:
        response = httpx.Response(status_code, text=body, request=request)
    return httpx.HTTPStatusError("error", request=request, response=response)


class FakeBookingApi:
    """Stands in for BookingApiClient; each call can be scripted"""

    def __init__(self, slots=None, slot_error=None, create_error=None):
        self.slots = slots or {}
        self.slot_error = slot_error
        self.create_error = create_error
        self.gates = {}
        self.created = []

    async def get_available_time_slots(self, day):
        if day in self.gates:
            await self.gates[day].wait()
        if self.slot_error:
            raise self.slot_error
        return self.slots.get(day, ["17:00", "17:30"])

    async def create_reservation(self, payload):
        if self.create_error:
            raise self.create_error
        self.created.append(payload)
        return {
            "id": "0b3c7c1e-1111-4c1e-9a55-2f1e0f3b7d10",
            "booking_number": "BK-TEST000001",
            "customer_name": payload["customer_name"],
            "date": payload["date"],
            "time": payload["time"],
            "party_size": payload["party_size"],
            "special_requests": payload["special_requests"],
        }


def test_extract_error_message_prefers_message():
    error = status_error(400, {"message": "Slot taken", "detail": "ignored"})

    assert extract_error_message(error, "fallback") == "Slot taken"


def test_extract_error_message_uses_detail():
    error = status_error(409, {"detail": "Reservation is already cancelled"})

    assert extract_error_message(error, "fallback") == "Reservation is already cancelled"


def test_extract_error_message_validation_list():
    error = status_error(422, {"detail": [{"loc": ["body", "time"], "msg": "Value error, bad time"}]})

    assert extract_error_message(error, "fallback") == "Value error, bad time"


def test_extract_error_message_fallbacks():
    assert extract_error_message(status_error(500, "Internal Server Error"), "fallback") == "fallback"
    assert extract_error_message(status_error(500, {}), "fallback") == "fallback"
    assert extract_error_message(httpx.ConnectError("refused"), "fallback") == "fallback"


@pytest.mark.asyncio
async def test_end_to_end_booking(client: AsyncClient, today):
    """Guest fills in the form and gets a confirmation"""
    form = BookingForm(BookingApiClient(client), today=lambda: today)
    await form.load()

    assert form.state.date == "2024-05-20"
    assert form.state.time == "17:00"
    assert len(form.state.available_times) == 10

    await form.change_date("2024-06-01")
    form.update(
        name="Jane Doe",
        email="jane@example.com",
        time="19:00",
        party_size=4,
    )

    confirmation = await form.submit()

    assert form.state.error == ""
    assert confirmation is not None
    assert confirmation.booking_number.startswith("BK-")
    assert confirmation.date == "2024-06-01"
    assert confirmation.time == "19:00"
    assert confirmation.party_size == 4
    assert form.state.confirmation == confirmation

    # Transient fields reset, guest identity cleared
    assert form.state.date == "2024-05-20"
    assert form.state.time == "17:00"
    assert form.state.party_size == 2
    assert form.state.special_requests == ""
    assert form.state.name == ""
    assert form.state.email == ""


@pytest.mark.asyncio
async def test_authenticated_session_prefills_and_keeps_identity(authenticated_client: AsyncClient, today):
    api = BookingApiClient(authenticated_client)
    session = await load_session(api)

    assert session.is_authenticated
    form = BookingForm(api, session=session, today=lambda: today)
    await form.load()

    assert form.state.name == "Jane Doe"
    assert form.state.email == "jane@example.com"
    assert form.state.phone == "+15551234567"

    await form.change_date("2024-06-01")
    form.update(special_requests="High chair")
    confirmation = await form.submit()

    assert confirmation is not None
    assert confirmation.special_requests == "High chair"
    assert form.state.name == "Jane Doe"
    assert form.state.email == "jane@example.com"
    assert form.state.special_requests == ""

    reservations = await api.get_user_reservations()
    assert [r["booking_number"] for r in reservations] == [confirmation.booking_number]

    cancelled = await api.cancel_reservation(confirmation.reservation_id)
    assert cancelled["status"] == "cancelled"


@pytest.mark.asyncio
async def test_guest_session(client: AsyncClient):
    session = await load_session(BookingApiClient(client))

    assert session.is_authenticated is False
    assert session.user is None


@pytest.mark.asyncio
async def test_api_error_surfaces_and_form_stays_editable(client: AsyncClient, today):
    form = BookingForm(BookingApiClient(client), today=lambda: today)
    await form.load()
    form.update(name="Jane Doe", email="jane@example.com", party_size=13)

    confirmation = await form.submit()

    assert confirmation is None
    assert "Party size" in form.state.error
    assert form.state.submitting is False
    assert form.state.name == "Jane Doe"
    assert form.state.party_size == 13


@pytest.mark.asyncio
async def test_create_failure_without_message_uses_fallback(today):
    api = FakeBookingApi(create_error=status_error(500, "boom"))
    form = BookingForm(api, today=lambda: today)
    await form.load()
    form.update(name="Jane Doe", email="jane@example.com")

    assert await form.submit() is None
    assert form.state.error == "Failed to create reservation"


@pytest.mark.asyncio
async def test_slot_failure_uses_fallback(today):
    api = FakeBookingApi(slot_error=httpx.ConnectError("refused"))
    form = BookingForm(api, today=lambda: today)

    await form.load()

    assert form.state.error == "Failed to load available time slots"
    assert form.state.loading is False


@pytest.mark.asyncio
async def test_chosen_time_kept_when_still_offered(today):
    api = FakeBookingApi(slots={"2024-06-01": ["18:00", "19:00"], "2024-06-02": ["19:00", "20:00"]})
    form = BookingForm(api, today=lambda: today)
    await form.change_date("2024-06-01")
    form.update(time="19:00")

    await form.change_date("2024-06-02")
    assert form.state.time == "19:00"

    api.slots["2024-06-03"] = ["20:00"]
    await form.change_date("2024-06-03")
    assert form.state.time == "20:00"


@pytest.mark.asyncio
async def test_stale_slot_response_is_discarded(today):
    api = FakeBookingApi(slots={"2024-06-01": ["17:00"], "2024-06-02": ["21:00", "21:30"]})
    api.gates["2024-06-01"] = asyncio.Event()
    form = BookingForm(api, today=lambda: today)

    slow = asyncio.create_task(form.change_date("2024-06-01"))
    await asyncio.sleep(0)
    await form.change_date("2024-06-02")

    api.gates["2024-06-01"].set()
    await slow

    assert form.state.date == "2024-06-02"
    assert form.state.available_times == ["21:00", "21:30"]
    assert form.state.time == "21:00"


def test_update_rejects_unknown_fields(today):
    form = BookingForm(FakeBookingApi(), session=AuthSession(), today=lambda: today)

    with pytest.raises(AttributeError):
        form.update(colour="red")
    with pytest.raises(ValueError):
        form.update(date="2024-06-01")


def test_prefill_ignored_for_guest_session(today):
    session = AuthSession(
        is_authenticated=False,
        user=SessionUser(first_name="Jane", last_name="Doe", email="jane@example.com"),
    )
    form = BookingForm(FakeBookingApi(), session=session, today=lambda: today)

    form.prefill()

    assert form.state.name == ""


@pytest.mark.asyncio
async def test_closed_date_clears_chosen_time(today):
    api = FakeBookingApi(slots={"2024-06-01": ["19:00"], "2024-06-03": []})
    form = BookingForm(api, today=lambda: today)
    await form.change_date("2024-06-01")
    assert form.state.time == "19:00"

    await form.change_date("2024-06-03")

    assert form.state.available_times == []
    assert form.state.time == ""


@pytest.mark.asyncio
async def test_successful_reload_clears_slot_error(today):
    api = FakeBookingApi(slot_error=status_error(503, {"detail": "down"}))
    form = BookingForm(api, today=lambda: today)
    await form.load()
    assert form.state.error == "down"

    api.slot_error = None
    await form.change_date("2024-06-01")

    assert form.state.error == ""
    assert form.state.available_times == ["17:00", "17:30"]
    assert form.state.time == "17:00"
