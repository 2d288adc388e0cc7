# homevisit/services/bookings.py
"""
Booking lifecycle view model.

Holds the principal's bookings as last reported by the server and requests
status changes on their behalf. The server's answer is the only thing that
ever changes a booking here; nothing is predicted locally.
"""
import logging
from datetime import date, datetime, time
from typing import Callable, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel

from homevisit.api.adapter import RemoteSyncAdapter
from homevisit.core.config import Settings, get_settings
from homevisit.core.errors import BadRequestError, ConflictError, NotFoundError, PermissionDenied, ValidationError
from homevisit.core.policy import ACTION_TARGETS, BookingAction, allowed_booking_actions
from homevisit.core.session import Session
from homevisit.schemas.booking import Booking, BookingCreate, PaymentStatus, TERMINAL_STATUSES
from homevisit.schemas.user import Principal, Role
from homevisit.services.inflight import InFlightRegistry

logger = logging.getLogger(__name__)

DateInput = Union[date, str]
TimeInput = Union[time, str]


# ---------------------------
# Input parsing
# ---------------------------

def parse_visit_date(value: DateInput) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as e:
        raise ValidationError("Please select a valid visit date (YYYY-MM-DD).") from e


def parse_visit_time(value: TimeInput) -> time:
    if isinstance(value, time):
        return value
    try:
        return time.fromisoformat(str(value).strip())
    except ValueError as e:
        raise ValidationError("Please select a valid visit time (HH:MM).") from e


# ---------------------------
# Display rules
# ---------------------------

class ActionControl(BaseModel):
    action: BookingAction
    label: str
    enabled: bool
    hint: str

    model_config = {"frozen": True}


class PartyVisibility(BaseModel):
    show_customer: bool
    show_owner: bool

    model_config = {"frozen": True}


# display order of the action buttons
_CONTROL_ORDER: List[Tuple[BookingAction, str, str]] = [
    (BookingAction.MARK_PAYMENT_RECEIVED, "Mark Payment Received", "Mark payment as received offline"),
    (BookingAction.CONFIRM, "Confirm Visit", "Confirm"),
    (BookingAction.REJECT, "Reject Visit", "Reject request"),
    (BookingAction.CANCEL, "Cancel Booking", "Cancel booking"),
    (BookingAction.COMPLETE, "Mark Completed", "Mark visit completed"),
]


def booking_controls(
    principal: Optional[Principal], booking: Booking, in_flight: bool = False
) -> List[ActionControl]:
    """
    One control per allowed action. All of them are disabled while a call for
    this booking is outstanding; Confirm also waits for the payment.
    """
    allowed = allowed_booking_actions(principal, booking)
    controls = []
    for action, label, hint in _CONTROL_ORDER:
        if action not in allowed:
            continue
        enabled = not in_flight
        if action is BookingAction.CONFIRM and booking.payment_status is not PaymentStatus.RECEIVED:
            enabled = False
            hint = "Confirm after payment received"
        if in_flight:
            hint = "Processing..."
        controls.append(ActionControl(action=action, label=label, enabled=enabled, hint=hint))
    return controls


def visible_parties(principal: Principal) -> PartyVisibility:
    role = principal.role
    if role is Role.CUSTOMER:
        return PartyVisibility(show_customer=False, show_owner=True)
    if role is Role.PROPERTY_OWNER:
        return PartyVisibility(show_customer=True, show_owner=False)
    if role is Role.ADMIN:
        return PartyVisibility(show_customer=True, show_owner=True)
    raise ValueError(f"Unhandled role: {role!r}")


# ---------------------------
# Lifecycle
# ---------------------------

class BookingLifecycle:
    def __init__(
        self,
        session: Session,
        remote: RemoteSyncAdapter,
        settings: Optional[Settings] = None,
        *,
        inflight: Optional[InFlightRegistry] = None,
        today: Callable[[], date] = date.today,
    ):
        self.session = session
        self.remote = remote
        self.settings = settings or get_settings()
        self.inflight = inflight or InFlightRegistry()
        self.today = today
        self._bookings: Dict[int, Booking] = {}

    # --- local copy ---

    @property
    def bookings(self) -> Tuple[Booking, ...]:
        return tuple(self._bookings.values())

    def get(self, booking_id: int) -> Optional[Booking]:
        return self._bookings.get(booking_id)

    def is_busy(self, booking_id: int) -> bool:
        return self.inflight.is_busy("booking", booking_id)

    def controls_for(self, booking: Booking) -> List[ActionControl]:
        return booking_controls(self.session.current(), booking, self.is_busy(booking.id))

    def _store(self, booking: Booking) -> Booking:
        self._bookings[booking.id] = booking
        return booking

    # --- reads ---

    def refresh(self) -> Tuple[Booking, ...]:
        """
        Replace the local list with the server's list for the current role.
        """
        principal = self.session.require()
        items = self.remote.fetch_bookings_for(principal)
        self._bookings = {b.id: b for b in items}
        return self.bookings

    def refetch(self, booking_id: int) -> Booking:
        """
        Reload one booking, e.g. after a ConflictError. A booking the server
        no longer knows is dropped from the local list.
        """
        try:
            booking = self.remote.fetch_booking(booking_id)
        except NotFoundError:
            self._bookings.pop(booking_id, None)
            raise
        return self._store(booking)

    # --- mutations ---

    def request_visit(
        self,
        property_id: int,
        visit_date: DateInput,
        visit_time: TimeInput,
        notes: str = "",
    ) -> Booking:
        """
        Ask for a visit. Date and time are checked locally first; nothing is
        sent when they are out of range.
        """
        principal = self.session.require()
        if principal.role is not Role.CUSTOMER:
            raise PermissionDenied("Only customers can request a visit.")

        day = parse_visit_date(visit_date)
        at = parse_visit_time(visit_time)
        if day < self.today():
            raise ValidationError("Visit date must be today or a future date.")

        start, end = self.settings.VISIT_HOURS_START, self.settings.VISIT_HOURS_END
        if not (start <= at < end):
            raise ValidationError(
                f"Please select a time from {start:%H:%M} up to (not including) {end:%H:%M}."
            )

        body = BookingCreate(
            property_id=property_id,
            visit_date=day,
            visit_time=at,
            customer_notes=notes or "",
        )
        with self.inflight.track("visit-request", property_id):
            booking = self.remote.create_booking(body)
        logger.info("visit requested: booking %s for property %s", booking.id, property_id)
        return self._store(booking)

    def transition(self, booking: Booking, action: BookingAction, notes: str = "") -> Booking:
        """
        Move a booking to the status the action stands for.

        Raises:
            PermissionDenied: the policy does not offer the action (no request sent)
            ConflictError: the server refused the move, usually because the
                booking changed in the meantime; re-fetch before trying again
        """
        principal = self.session.current()
        if booking.status in TERMINAL_STATUSES:
            logger.warning(
                "%s refused on closed booking %s (status %s)", action.value, booking.id, booking.status.value
            )
            raise PermissionDenied(
                f"This booking is already {booking.status_label}. Refresh to see its current state."
            )
        if action is BookingAction.MARK_PAYMENT_RECEIVED:
            return self.mark_payment_received(booking)

        if action not in allowed_booking_actions(principal, booking):
            logger.warning(
                "%s not allowed on booking %s (status %s) for user %s",
                action.value,
                booking.id,
                booking.status.value,
                principal.user_id if principal else None,
            )
            raise PermissionDenied(
                f"You cannot {action.value.lower()} this booking. Refresh to see its current state."
            )

        target = ACTION_TARGETS[action]
        with self.inflight.track("booking", booking.id):
            try:
                updated = self.remote.patch_booking_status(booking.id, target, notes or "")
            except BadRequestError as e:
                raise ConflictError(e.message, status_code=e.status_code, payload=e.payload) from e

        logger.info("booking %s moved %s -> %s", booking.id, booking.status.value, updated.status.value)
        return self._store(updated)

    def mark_payment_received(self, booking: Booking) -> Booking:
        """
        Owner attests that the visit fee was paid. Repeating it on a booking
        already marked RECEIVED returns the booking untouched.
        """
        principal = self.session.current()
        is_owner = (
            principal is not None
            and principal.role is Role.PROPERTY_OWNER
            and principal.user_id == booking.owner_id
        )
        if not is_owner:
            raise PermissionDenied("Only the property owner can confirm the payment.")

        if booking.status in TERMINAL_STATUSES:
            raise PermissionDenied("Payment cannot be recorded for a closed booking.")

        if booking.payment_status is PaymentStatus.RECEIVED:
            logger.debug("payment for booking %s already received", booking.id)
            return booking

        with self.inflight.track("booking", booking.id):
            updated = self.remote.confirm_payment_manual(booking.id)

        logger.info("payment marked received for booking %s", booking.id)
        return self._store(updated)
