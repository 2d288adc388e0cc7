"""
Shared fixtures: principals for each role, a booking factory and an
in-memory RemoteSyncAdapter that records every call it receives.
"""
import json
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence

import pytest
import requests
from jose import jwt

from homevisit.core.config import Settings
from homevisit.core.errors import AuthenticationError, NotFoundError
from homevisit.core.session import Session
from homevisit.schemas.auth import Registration, Token
from homevisit.schemas.booking import Booking, BookingCreate, BookingStatus, PaymentStatus
from homevisit.schemas.contact import ContactMessage
from homevisit.schemas.property import (
    Property,
    PropertyCreate,
    PropertyFilter,
    PropertyStatus,
    PropertyType,
    PropertyUpdate,
)
from homevisit.schemas.user import Principal, Role, UserCreate, UserLogin, UserOut

CUSTOMER_ID = 100
OWNER_ID = 200
OTHER_OWNER_ID = 201
ADMIN_ID = 1


def make_booking(**overrides) -> Booking:
    data = dict(
        id=1,
        property_id=10,
        customer_id=CUSTOMER_ID,
        owner_id=OWNER_ID,
        visit_date=date(2030, 1, 15),
        visit_time=time(14, 0),
        status=BookingStatus.PENDING,
        payment_status=PaymentStatus.PENDING,
    )
    data.update(overrides)
    return Booking(**data)


def make_property(**overrides) -> Property:
    data = dict(
        id=10,
        owner_id=OWNER_ID,
        address="12 Elm Street",
        city="Austin",
        state="TX",
        postal_code="73301",
        price="250000",
        bedrooms=3,
        bathrooms=2,
        type=PropertyType.SALE,
        status=PropertyStatus.AVAILABLE,
    )
    data.update(overrides)
    return Property(**data)


def make_jwt(expires_in: Optional[timedelta] = None, **claims) -> str:
    """HS256 token signed with a throwaway key; the client never verifies it."""
    if expires_in is not None:
        claims["exp"] = int((datetime.now(timezone.utc) + expires_in).timestamp())
    return jwt.encode({"sub": "olive@example.com", **claims}, "server-side-secret", algorithm="HS256")



def make_response(status_code: int, body=None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    if body is None:
        response._content = b""
    elif isinstance(body, (dict, list)):
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = str(body).encode("utf-8")
    return response


class FakeRemote:
    """
    In-memory stand-in for HttpRemoteAdapter.

    ``calls`` lists every method invoked, in order. Put an exception in
    ``failures[method_name]`` to make that method raise it.
    """

    def __init__(self):
        self.bookings: Dict[int, Booking] = {}
        self.properties: Dict[int, Property] = {}
        self.users: Dict[str, Any] = {}
        self.calls: List[tuple] = []
        self.failures: Dict[str, Exception] = {}
        self.contact_reply: Optional[str] = "Message received successfully. Thank you!"
        self._next_id = 1000

    def _record(self, name: str, *args) -> None:
        self.calls.append((name,) + args)
        if name in self.failures:
            raise self.failures[name]

    def call_names(self) -> List[str]:
        return [c[0] for c in self.calls]

    def add_user(self, principal: Principal, password: str, token: str = "opaque-token") -> None:
        self.users[principal.email] = (password, principal, token)

    # users

    def login(self, credentials: UserLogin) -> Token:
        self._record("login", credentials.email)
        entry = self.users.get(credentials.email)
        if entry is None or entry[0] != credentials.password:
            raise AuthenticationError("Invalid email or password", status_code=401)
        _, principal, token = entry
        return Token(
            token=token,
            user_id=principal.user_id,
            user_email=principal.email,
            user_role=principal.role,
            message="Login successful",
        )

    def register(self, body: UserCreate) -> Registration:
        self._record("register", body.email)
        self._next_id += 1
        user = UserOut(id=self._next_id, name=body.name, email=body.email, role=body.role)
        return Registration(message="User registered successfully", user=user)

    # bookings

    def fetch_bookings_for(self, principal: Principal) -> List[Booking]:
        self._record("fetch_bookings_for", principal.role)
        return list(self.bookings.values())

    def fetch_booking(self, booking_id: int) -> Booking:
        self._record("fetch_booking", booking_id)
        if booking_id not in self.bookings:
            raise NotFoundError("Booking not found", status_code=404)
        return self.bookings[booking_id]

    def create_booking(self, body: BookingCreate) -> Booking:
        self._record("create_booking", body)
        self._next_id += 1
        booking = make_booking(
            id=self._next_id,
            property_id=body.property_id,
            visit_date=body.visit_date,
            visit_time=body.visit_time,
            customer_notes=body.customer_notes or None,
        )
        self.bookings[booking.id] = booking
        return booking

    def patch_booking_status(self, booking_id: int, new_status: BookingStatus, notes: str = "") -> Booking:
        self._record("patch_booking_status", booking_id, new_status, notes)
        updated = self.bookings[booking_id].model_copy(
            update={"status": new_status, "owner_agent_notes": notes or None}
        )
        self.bookings[booking_id] = updated
        return updated

    def confirm_payment_manual(self, booking_id: int) -> Booking:
        self._record("confirm_payment_manual", booking_id)
        updated = self.bookings[booking_id].model_copy(update={"payment_status": PaymentStatus.RECEIVED})
        self.bookings[booking_id] = updated
        return updated

    # properties

    def fetch_properties(self, query: Optional[PropertyFilter] = None) -> List[Property]:
        self._record("fetch_properties", query)
        return list(self.properties.values())

    def fetch_property(self, property_id: int) -> Property:
        self._record("fetch_property", property_id)
        if property_id not in self.properties:
            raise NotFoundError("Property not found", status_code=404)
        return self.properties[property_id]

    def fetch_all_properties(self) -> List[Property]:
        self._record("fetch_all_properties")
        return list(self.properties.values())

    def create_property(self, body: PropertyCreate) -> Property:
        self._record("create_property", body)
        self._next_id += 1
        prop = make_property(id=self._next_id, **body.model_dump(exclude_none=True))
        self.properties[prop.id] = prop
        return prop

    def update_property(self, property_id: int, body: PropertyUpdate) -> Property:
        self._record("update_property", property_id, body)
        updated = self.properties[property_id].model_copy(update=body.model_dump(exclude_none=True))
        self.properties[property_id] = updated
        return updated

    def delete_property(self, property_id: int) -> None:
        self._record("delete_property", property_id)
        self.properties.pop(property_id, None)

    def admin_delete_property(self, property_id: int) -> None:
        self._record("admin_delete_property", property_id)
        self.properties.pop(property_id, None)

    def upload_images(self, property_id: int, files: Sequence[Any]) -> Any:
        self._record("upload_images", property_id, len(files))
        return {"message": f"{len(files)} image(s) uploaded"}

    # public

    def submit_contact(self, body: ContactMessage) -> Optional[str]:
        self._record("submit_contact", body)
        return self.contact_reply


@pytest.fixture
def settings() -> Settings:
    return Settings(API_BASE_URL="http://api.example.com/api/")


@pytest.fixture
def customer() -> Principal:
    return Principal(user_id=CUSTOMER_ID, email="casey@example.com", role=Role.CUSTOMER)


@pytest.fixture
def owner() -> Principal:
    return Principal(user_id=OWNER_ID, email="olive@example.com", role=Role.PROPERTY_OWNER)


@pytest.fixture
def other_owner() -> Principal:
    return Principal(user_id=OTHER_OWNER_ID, email="oscar@example.com", role=Role.PROPERTY_OWNER)


@pytest.fixture
def admin() -> Principal:
    return Principal(user_id=ADMIN_ID, email="ada@example.com", role=Role.ADMIN)


@pytest.fixture
def session() -> Session:
    return Session()


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def login_as(session):
    """Start the shared session for a principal: ``login_as(owner)``."""

    def _start(principal: Principal, token: str = "opaque-token") -> Principal:
        session.start(principal, token)
        return principal

    return _start
