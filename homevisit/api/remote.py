# homevisit/api/remote.py
import logging
from typing import Any, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError as SchemaError

from homevisit.api.adapter import UploadFile
from homevisit.api.client import ApiClient
from homevisit.api.endpoints import admin, bookings, owner, payments, properties, public, users
from homevisit.core.errors import ResponseFormatError
from homevisit.schemas.auth import Registration, Token
from homevisit.schemas.booking import Booking, BookingCreate, BookingStatus, BookingStatusUpdate
from homevisit.schemas.contact import ContactMessage
from homevisit.schemas.property import Property, PropertyCreate, PropertyFilter, PropertyUpdate
from homevisit.schemas.user import Principal, UserCreate, UserLogin

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _parse(model: Type[M], payload: Any) -> M:
    try:
        return model.model_validate(payload)
    except SchemaError as e:
        logger.error("unexpected %s payload: %s", model.__name__, e)
        raise ResponseFormatError(
            "The server sent data this client does not understand.", payload=payload
        ) from e


def _parse_list(model: Type[M], payload: Any) -> List[M]:
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise ResponseFormatError(
            f"Expected a list of {model.__name__} records.", payload=payload
        )
    return [_parse(model, item) for item in payload]


def _body(model: BaseModel) -> dict:
    return model.model_dump(by_alias=True, exclude_none=True, mode="json")


class HttpRemoteAdapter:
    """
    RemoteSyncAdapter over the REST API. Requests go out through ApiClient,
    responses come back as validated schema objects.
    """

    def __init__(self, client: ApiClient):
        self.client = client

    # --- users ---

    def login(self, credentials: UserLogin) -> Token:
        return _parse(Token, users.login(self.client, credentials.model_dump(mode="json")))

    def register(self, body: UserCreate) -> Registration:
        return _parse(Registration, users.register(self.client, body.model_dump(mode="json")))

    # --- bookings ---

    def fetch_bookings_for(self, principal: Principal) -> List[Booking]:
        return _parse_list(Booking, bookings.list_bookings_for_role(self.client, principal.role))

    def fetch_booking(self, booking_id: int) -> Booking:
        return _parse(Booking, bookings.get_booking(self.client, booking_id))

    def create_booking(self, body: BookingCreate) -> Booking:
        return _parse(Booking, bookings.create_booking(self.client, _body(body)))

    def patch_booking_status(
        self, booking_id: int, new_status: BookingStatus, notes: str = ""
    ) -> Booking:
        update = BookingStatusUpdate(new_status=new_status, notes=notes)
        return _parse(Booking, bookings.update_booking_status(self.client, booking_id, _body(update)))

    def confirm_payment_manual(self, booking_id: int) -> Booking:
        return _parse(Booking, payments.confirm_manual_payment(self.client, booking_id))

    # --- properties ---

    def fetch_properties(self, query: Optional[PropertyFilter] = None) -> List[Property]:
        params = query.to_params() if query is not None else None
        return _parse_list(Property, properties.list_properties(self.client, params))

    def fetch_property(self, property_id: int) -> Property:
        return _parse(Property, properties.get_property(self.client, property_id))

    def fetch_all_properties(self) -> List[Property]:
        return _parse_list(Property, admin.list_all_properties(self.client))

    def create_property(self, body: PropertyCreate) -> Property:
        return _parse(Property, properties.create_property(self.client, _body(body)))

    def update_property(self, property_id: int, body: PropertyUpdate) -> Property:
        return _parse(Property, owner.update_property(self.client, property_id, _body(body)))

    def delete_property(self, property_id: int) -> None:
        owner.delete_property(self.client, property_id)

    def admin_delete_property(self, property_id: int) -> None:
        admin.delete_property(self.client, property_id)

    def upload_images(self, property_id: int, files: Sequence[UploadFile]) -> Any:
        return owner.upload_images(self.client, property_id, files)

    # --- public ---

    def submit_contact(self, body: ContactMessage) -> Optional[str]:
        payload = public.submit_contact(self.client, body.model_dump(mode="json", exclude_none=True))
        if isinstance(payload, dict):
            return payload.get("message")
        return None
