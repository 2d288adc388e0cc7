# homevisit/api/endpoints/owner.py
from typing import Any, Dict, Sequence

from homevisit.api.client import ApiClient


def update_property(client: ApiClient, property_id: int, body: Dict[str, Any]) -> Any:
    return client.put(f"/owner/properties/{property_id}", json=body)


def delete_property(client: ApiClient, property_id: int) -> None:
    client.delete(f"/owner/properties/{property_id}")


def upload_images(client: ApiClient, property_id: int, files: Sequence[Any]) -> Any:
    # multipart, every part under the "files" field
    parts = [("files", f) for f in files]
    return client.post(f"/owner/properties/{property_id}/images", files=parts)
