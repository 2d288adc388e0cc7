# homevisit/core/policy.py
"""
Authorization policy.

Pure functions of (principal, resource). No I/O and no session access, so
they can be called from view code and tests alike. The server still enforces
its own rules; these only decide which actions the client offers and which
requests it is willing to send.
"""
from enum import Enum
from typing import Dict, FrozenSet, Optional

from homevisit.schemas.booking import (
    Booking,
    BookingStatus,
    PaymentStatus,
    TERMINAL_STATUSES,
    can_move,
)
from homevisit.schemas.property import Property, VISITABLE_STATUSES
from homevisit.schemas.user import Principal, Role


class BookingAction(str, Enum):
    CONFIRM = "CONFIRM"
    REJECT = "REJECT"
    CANCEL = "CANCEL"
    COMPLETE = "COMPLETE"
    MARK_PAYMENT_RECEIVED = "MARK_PAYMENT_RECEIVED"


class PropertyAction(str, Enum):
    EDIT = "EDIT"
    DELETE = "DELETE"
    CREATE = "CREATE"


# Status each lifecycle action requests from the API
ACTION_TARGETS: Dict[BookingAction, BookingStatus] = {
    BookingAction.CONFIRM: BookingStatus.CONFIRMED,
    BookingAction.REJECT: BookingStatus.REJECTED,
    BookingAction.CANCEL: BookingStatus.CANCELLED,
    BookingAction.COMPLETE: BookingStatus.COMPLETED,
}

_NONE: FrozenSet = frozenset()


def _manages_booking(principal: Principal, booking: Booking) -> bool:
    """Owner of the booked property, or an admin."""
    if principal.role is Role.ADMIN:
        return True
    if principal.role is Role.PROPERTY_OWNER:
        return principal.user_id == booking.owner_id
    return False


def _is_party(principal: Principal, booking: Booking) -> bool:
    if principal.role is Role.ADMIN:
        return True
    if principal.role is Role.PROPERTY_OWNER:
        return principal.user_id == booking.owner_id
    if principal.role is Role.CUSTOMER:
        return principal.user_id == booking.customer_id
    raise ValueError(f"Unhandled role: {principal.role!r}")


def allowed_booking_actions(
    principal: Optional[Principal], booking: Booking
) -> FrozenSet[BookingAction]:
    if principal is None or booking.status in TERMINAL_STATUSES:
        return _NONE

    allowed = set()
    manages = _manages_booking(principal, booking)
    party = _is_party(principal, booking)

    for action, target in ACTION_TARGETS.items():
        if not can_move(booking.status, target):
            continue
        # anyone party to the booking may cancel; the rest is owner/admin work
        if party if action is BookingAction.CANCEL else manages:
            allowed.add(action)

    if (
        principal.role is Role.PROPERTY_OWNER
        and principal.user_id == booking.owner_id
        and booking.payment_status is PaymentStatus.PENDING
    ):
        allowed.add(BookingAction.MARK_PAYMENT_RECEIVED)

    return frozenset(allowed)


def allowed_property_actions(
    principal: Optional[Principal], prop: Optional[Property] = None
) -> FrozenSet[PropertyAction]:
    if principal is None:
        return _NONE
    if principal.role is Role.CUSTOMER:
        return _NONE

    allowed = {PropertyAction.CREATE}
    if prop is not None:
        if principal.role is Role.ADMIN or principal.user_id == prop.owner_id:
            allowed.add(PropertyAction.EDIT)
            allowed.add(PropertyAction.DELETE)
    return frozenset(allowed)


def can_request_visit(principal: Optional[Principal], prop: Property) -> bool:
    """
    Customers may ask to visit someone else's property while it is still on
    the market.
    """
    return (
        principal is not None
        and principal.role is Role.CUSTOMER
        and principal.user_id != prop.owner_id
        and prop.status in VISITABLE_STATUSES
    )


def booking_list_path(role: Role) -> str:
    if role is Role.CUSTOMER:
        return "/bookings/my/customer"
    if role is Role.PROPERTY_OWNER:
        return "/bookings/my/owner"
    if role is Role.ADMIN:
        return "/bookings/admin/all"
    raise ValueError(f"Unhandled role: {role!r}")
