# homevisit/api/endpoints/public.py
from typing import Any, Dict

from homevisit.api.client import ApiClient


def submit_contact(client: ApiClient, body: Dict[str, Any]) -> Any:
    return client.post("/public/contact", json=body, auth=False)
