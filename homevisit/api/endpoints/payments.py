# homevisit/api/endpoints/payments.py
from typing import Any

from homevisit.api.client import ApiClient


def confirm_manual_payment(client: ApiClient, booking_id: int) -> Any:
    # owner-attested; there is no payment gateway behind this
    return client.post(f"/payments/booking/{booking_id}/confirm-manual")
