# homevisit/services/contact.py
from typing import Optional

from pydantic import ValidationError as SchemaError

from homevisit.api.adapter import RemoteSyncAdapter
from homevisit.core.errors import ValidationError
from homevisit.schemas.contact import ContactMessage


class ContactService:
    def __init__(self, remote: RemoteSyncAdapter):
        self.remote = remote

    def submit(self, name: str, email: str, message: str, subject: Optional[str] = None) -> str:
        try:
            body = ContactMessage(name=name, email=email, message=message, subject=subject or None)
        except SchemaError as e:
            raise ValidationError("Name, email, and message are required.") from e
        return self.remote.submit_contact(body) or "Message received successfully. Thank you!"
