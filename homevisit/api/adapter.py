# homevisit/api/adapter.py
"""
Boundary to the remote listing/booking API.

Services depend on this protocol only; HttpRemoteAdapter is the production
implementation and tests substitute an in-memory fake. Every method may raise
a RemoteError subclass; none of them retry.
"""
from typing import Any, BinaryIO, List, Optional, Protocol, Sequence, Tuple, Union

from homevisit.schemas.auth import Registration, Token
from homevisit.schemas.booking import Booking, BookingCreate, BookingStatus
from homevisit.schemas.contact import ContactMessage
from homevisit.schemas.property import Property, PropertyCreate, PropertyFilter, PropertyUpdate
from homevisit.schemas.user import Principal, UserCreate, UserLogin

# (filename, file object or bytes, content type)
UploadFile = Tuple[str, Union[BinaryIO, bytes], str]


class RemoteSyncAdapter(Protocol):
    # users
    def login(self, credentials: UserLogin) -> Token: ...

    def register(self, body: UserCreate) -> Registration: ...

    # bookings
    def fetch_bookings_for(self, principal: Principal) -> List[Booking]: ...

    def fetch_booking(self, booking_id: int) -> Booking: ...

    def create_booking(self, body: BookingCreate) -> Booking: ...

    def patch_booking_status(
        self, booking_id: int, new_status: BookingStatus, notes: str = ""
    ) -> Booking: ...

    def confirm_payment_manual(self, booking_id: int) -> Booking: ...

    # properties
    def fetch_properties(self, query: Optional[PropertyFilter] = None) -> List[Property]: ...

    def fetch_property(self, property_id: int) -> Property: ...

    def fetch_all_properties(self) -> List[Property]: ...

    def create_property(self, body: PropertyCreate) -> Property: ...

    def update_property(self, property_id: int, body: PropertyUpdate) -> Property: ...

    def delete_property(self, property_id: int) -> None: ...

    def admin_delete_property(self, property_id: int) -> None: ...

    def upload_images(self, property_id: int, files: Sequence[UploadFile]) -> Any: ...

    # public
    def submit_contact(self, body: ContactMessage) -> Optional[str]: ...
