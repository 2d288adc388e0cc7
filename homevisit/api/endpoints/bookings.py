# homevisit/api/endpoints/bookings.py
from typing import Any, Dict

from homevisit.api.client import ApiClient
from homevisit.core.policy import booking_list_path
from homevisit.schemas.user import Role


def create_booking(client: ApiClient, body: Dict[str, Any]) -> Any:
    return client.post("/bookings", json=body)


def list_bookings_for_role(client: ApiClient, role: Role) -> Any:
    """
    Customers see their own requests, owners see requests for their
    properties, admins see everything.
    """
    return client.get(booking_list_path(role))


def get_booking(client: ApiClient, booking_id: int) -> Any:
    return client.get(f"/bookings/{booking_id}")


def update_booking_status(client: ApiClient, booking_id: int, body: Dict[str, Any]) -> Any:
    return client.patch(f"/bookings/{booking_id}/status", json=body)
