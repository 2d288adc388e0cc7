# homevisit/api/endpoints/admin.py
from typing import Any

from homevisit.api.client import ApiClient


def list_all_properties(client: ApiClient) -> Any:
    return client.get("/admin/properties")


def delete_property(client: ApiClient, property_id: int) -> None:
    client.delete(f"/admin/properties/{property_id}")
