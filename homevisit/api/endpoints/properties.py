# homevisit/api/endpoints/properties.py
from typing import Any, Dict, Optional

from homevisit.api.client import ApiClient


def list_properties(client: ApiClient, params: Optional[Dict[str, str]] = None) -> Any:
    """
    Public search. Only non-empty filters are sent; the server filters.
    """
    return client.get("/properties", params=params or None, auth=False)


def get_property(client: ApiClient, property_id: int) -> Any:
    # public; a stale token is left off rather than failing the read
    return client.get(f"/properties/{property_id}", auth=client.session.has_live_token())


def create_property(client: ApiClient, body: Dict[str, Any]) -> Any:
    return client.post("/properties", json=body)
