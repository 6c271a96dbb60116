"""
Booking form client.

Drives the reservation API the way the table booking page does: load time
slots when the date changes, submit the form, and turn the result into a
confirmation summary or a user-visible error message.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Optional

import httpx
import structlog

from sucurries.config import settings

logger = structlog.get_logger()

SLOTS_ERROR = "Failed to load available time slots"
CREATE_ERROR = "Failed to create reservation"
DEFAULT_PARTY_SIZE = 2


def extract_error_message(error: Exception, fallback: str) -> str:
    """
    Best-effort message from an API error body: ``message`` first, then a
    string ``detail``, then the first validation error, else ``fallback``.
    """
    if not isinstance(error, httpx.HTTPStatusError):
        return fallback

    try:
        data = error.response.json()
    except ValueError:
        return fallback

    if not isinstance(data, dict):
        return fallback

    if data.get("message"):
        return str(data["message"])

    detail = data.get("detail")
    if isinstance(detail, str) and detail:
        return detail
    if isinstance(detail, list) and detail and isinstance(detail[0], dict) and detail[0].get("msg"):
        return str(detail[0]["msg"])

    return fallback


@dataclass
class SessionUser:
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None


@dataclass
class AuthSession:
    """What the booking form needs to know about the signed-in user"""
    is_authenticated: bool = False
    user: Optional[SessionUser] = None


@dataclass
class BookingConfirmation:
    booking_number: str
    reservation_id: str
    customer_name: str
    date: str
    time: str
    party_size: int
    special_requests: Optional[str] = None


@dataclass
class BookingFormState:
    name: str = ""
    email: str = ""
    phone: str = ""
    date: str = ""
    time: str = ""
    party_size: int = DEFAULT_PARTY_SIZE
    special_requests: str = ""
    available_times: List[str] = field(default_factory=list)
    error: str = ""
    confirmation: Optional[BookingConfirmation] = None
    loading: bool = False
    submitting: bool = False


class BookingApiClient:
    """Thin async wrapper over the reservation and auth endpoints"""

    def __init__(self, http: httpx.AsyncClient):
        self.http = http

    async def fetch_csrf_token(self) -> str:
        response = await self.http.get("/auth/csrf-token")
        response.raise_for_status()
        token = response.json()["csrf_token"]
        self.http.headers[settings.csrf_header_name] = token
        return token

    async def get_current_user(self) -> Dict[str, Any]:
        response = await self.http.get("/auth/me")
        response.raise_for_status()
        return response.json()

    async def get_available_time_slots(self, day: str) -> List[str]:
        response = await self.http.get("/reservations/availability", params={"date": day})
        response.raise_for_status()
        return response.json()["slots"]

    async def create_reservation(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.http.post("/reservations", json=payload)
        response.raise_for_status()
        return response.json()

    async def cancel_reservation(self, reservation_id: str) -> Dict[str, Any]:
        response = await self.http.post(f"/reservations/{reservation_id}/cancel")
        response.raise_for_status()
        return response.json()

    async def get_user_reservations(self) -> List[Dict[str, Any]]:
        response = await self.http.get("/reservations/me")
        response.raise_for_status()
        return response.json()


async def load_session(api: BookingApiClient) -> AuthSession:
    """Session for the client's bearer token, or a guest session"""
    try:
        profile = await api.get_current_user()
    except httpx.HTTPStatusError:
        return AuthSession()

    return AuthSession(
        is_authenticated=True,
        user=SessionUser(
            first_name=profile["first_name"],
            last_name=profile["last_name"],
            email=profile["email"],
            phone=profile.get("phone"),
        ),
    )


class BookingForm:
    """
    State and actions of the table booking form.

    Only the most recent slot request may update the form: a response for a
    date the user has already moved away from is dropped.
    """

    def __init__(
        self,
        api: BookingApiClient,
        session: Optional[AuthSession] = None,
        today: Callable[[], date] = date.today,
    ):
        self.api = api
        self.session = session or AuthSession()
        self.today = today
        self.state = BookingFormState(date=today().isoformat())
        self._slot_request = 0

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated and self.session.user is not None

    def prefill(self) -> None:
        if not self.is_authenticated:
            return
        user = self.session.user
        self.state.name = f"{user.first_name} {user.last_name}"
        self.state.email = user.email
        self.state.phone = user.phone or ""

    async def load(self) -> None:
        self.prefill()
        await self.refresh_time_slots()

    def update(self, **fields) -> None:
        for name, value in fields.items():
            if name == "date":
                raise ValueError("use change_date() to change the date")
            if not hasattr(self.state, name):
                raise AttributeError(f"Unknown booking form field: {name}")
            setattr(self.state, name, value)

    async def change_date(self, day: str) -> None:
        self.state.date = day
        await self.refresh_time_slots()

    async def refresh_time_slots(self) -> None:
        self._slot_request += 1
        request_id = self._slot_request
        requested_date = self.state.date

        self.state.loading = True
        try:
            times = await self.api.get_available_time_slots(requested_date)
        except httpx.HTTPError as e:
            if request_id == self._slot_request:
                self.state.error = extract_error_message(e, SLOTS_ERROR)
                self.state.loading = False
            return

        if request_id != self._slot_request:
            logger.debug("Discarding stale time slots", date=requested_date)
            return

        self.state.available_times = times
        self.state.error = ""
        if self.state.time not in times:
            self.state.time = times[0] if times else ""
        self.state.loading = False

    def payload(self) -> Dict[str, Any]:
        return {
            "customer_name": self.state.name,
            "customer_email": self.state.email,
            "customer_phone": self.state.phone or None,
            "date": self.state.date,
            "time": self.state.time,
            "party_size": int(self.state.party_size),
            "special_requests": self.state.special_requests or None,
        }

    async def submit(self) -> Optional[BookingConfirmation]:
        """Create the reservation; returns the confirmation or None on error"""
        self.state.submitting = True
        self.state.error = ""

        try:
            booking = await self.api.create_reservation(self.payload())
        except httpx.HTTPError as e:
            self.state.error = extract_error_message(e, CREATE_ERROR)
            logger.info("Reservation submit failed", error=self.state.error)
            return None
        finally:
            self.state.submitting = False

        confirmation = BookingConfirmation(
            booking_number=booking["booking_number"],
            reservation_id=booking["id"],
            customer_name=booking["customer_name"],
            date=booking["date"],
            time=booking["time"],
            party_size=booking["party_size"],
            special_requests=booking.get("special_requests"),
        )
        self.state.confirmation = confirmation

        await self._reset()
        return confirmation

    async def _reset(self) -> None:
        self.state.party_size = DEFAULT_PARTY_SIZE
        self.state.special_requests = ""
        self.state.time = ""
        if not self.is_authenticated:
            self.state.name = ""
            self.state.email = ""
            self.state.phone = ""
        await self.change_date(self.today().isoformat())
