# homevisit/api/endpoints/users.py
from typing import Any, Dict

from homevisit.api.client import ApiClient


def login(client: ApiClient, body: Dict[str, Any]) -> Any:
    return client.post("/users/login", json=body, auth=False)


def register(client: ApiClient, body: Dict[str, Any]) -> Any:
    return client.post("/users/register", json=body, auth=False)
