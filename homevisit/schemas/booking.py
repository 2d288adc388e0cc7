# homevisit/schemas/booking.py
from datetime import date, datetime, time
from enum import Enum
from typing import Dict, FrozenSet, Optional

from pydantic import BaseModel, field_serializer
from pydantic.alias_generators import to_camel


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    RECEIVED = "RECEIVED"


TERMINAL_STATUSES: FrozenSet[BookingStatus] = frozenset(
    {BookingStatus.REJECTED, BookingStatus.CANCELLED, BookingStatus.COMPLETED}
)

# Legal status moves. Terminal statuses have no entry.
TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset(
        {BookingStatus.CONFIRMED, BookingStatus.REJECTED, BookingStatus.CANCELLED}
    ),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
}


def can_move(current: BookingStatus, target: BookingStatus) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


_camel = {"alias_generator": to_camel, "populate_by_name": True}


class Booking(BaseModel):
    id: int
    property_id: int
    customer_id: int
    owner_id: int
    visit_date: date
    visit_time: time
    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    customer_notes: Optional[str] = None
    owner_agent_notes: Optional[str] = None
    created_at: Optional[datetime] = None

    # denormalised display fields sent by the API
    property_address: Optional[str] = None
    property_city: Optional[str] = None
    customer_name: Optional[str] = None
    owner_name: Optional[str] = None

    model_config = {**_camel, "frozen": True}

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def status_label(self) -> str:
        return self.status.value.lower()

    @property
    def payment_label(self) -> str:
        return self.payment_status.value.lower()


class BookingCreate(BaseModel):
    property_id: int
    visit_date: date
    visit_time: time
    customer_notes: str = ""

    model_config = _camel

    @field_serializer("visit_time")
    def _hh_mm(self, v: time) -> str:
        # API parses HH:mm only
        return v.strftime("%H:%M")


class BookingStatusUpdate(BaseModel):
    new_status: BookingStatus
    notes: str = ""

    model_config = _camel
