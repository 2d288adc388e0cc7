# homevisit/services/properties.py
import logging
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from pydantic import ValidationError as SchemaError

from homevisit.api.adapter import RemoteSyncAdapter, UploadFile
from homevisit.core.errors import PermissionDenied, ValidationError
from homevisit.core.policy import PropertyAction, allowed_property_actions, can_request_visit
from homevisit.core.session import Session
from homevisit.schemas.property import (
    Property,
    PropertyCreate,
    PropertyFilter,
    PropertyStatus,
    PropertyUpdate,
)
from homevisit.schemas.user import Role
from homevisit.services.inflight import InFlightRegistry

logger = logging.getLogger(__name__)

FilterInput = Union[PropertyFilter, Dict[str, Any], None]


def build_filter(query: FilterInput = None) -> PropertyFilter:
    """
    Accepts a PropertyFilter, raw form values (camelCase or snake_case keys)
    or None. Blank values are dropped.
    """
    if query is None:
        return PropertyFilter()
    if isinstance(query, PropertyFilter):
        return query
    try:
        return PropertyFilter.model_validate(query)
    except SchemaError as e:
        raise ValidationError.from_schema(e) from e


class PropertyCatalog:
    """
    Listing search plus owner/admin property management.

    Searches return a snapshot; call again to re-query. Mutations are checked
    against the policy before anything is sent.
    """

    def __init__(
        self,
        session: Session,
        remote: RemoteSyncAdapter,
        *,
        inflight: Optional[InFlightRegistry] = None,
    ):
        self.session = session
        self.remote = remote
        self.inflight = inflight or InFlightRegistry()

    # --- reads ---

    def list_properties(self, query: FilterInput = None) -> Tuple[Property, ...]:
        return tuple(self.remote.fetch_properties(build_filter(query)))

    def featured(self) -> Tuple[Property, ...]:
        return self.list_properties(PropertyFilter(status=PropertyStatus.AVAILABLE))

    def get_property(self, property_id: int) -> Property:
        return self.remote.fetch_property(property_id)

    def list_all(self) -> Tuple[Property, ...]:
        """
        Every listing regardless of status. Admins only.
        """
        principal = self.session.current()
        if principal is None or principal.role is not Role.ADMIN:
            raise PermissionDenied("Only administrators can view all properties.")
        return tuple(self.remote.fetch_all_properties())

    def actions_for(self, prop: Optional[Property] = None):
        return allowed_property_actions(self.session.current(), prop)

    def can_request_visit(self, prop: Property) -> bool:
        return can_request_visit(self.session.current(), prop)

    def is_busy(self, property_id: int) -> bool:
        return self.inflight.is_busy("property", property_id)

    # --- mutations ---

    def _require(self, action: PropertyAction, prop: Optional[Property] = None) -> None:
        if action not in self.actions_for(prop):
            principal = self.session.current()
            logger.warning(
                "%s denied on property %s for user %s",
                action.value,
                prop.id if prop else None,
                principal.user_id if principal else None,
            )
            raise PermissionDenied(f"You are not allowed to {action.value.lower()} this property.")

    def create_property(self, data: Union[PropertyCreate, Dict[str, Any]]) -> Property:
        self._require(PropertyAction.CREATE)
        if not isinstance(data, PropertyCreate):
            try:
                data = PropertyCreate.model_validate(data)
            except SchemaError as e:
                raise ValidationError.from_schema(e) from e
        prop = self.remote.create_property(data)
        logger.info("property %s created", prop.id)
        return prop

    def update_property(self, prop: Property, data: Union[PropertyUpdate, Dict[str, Any]]) -> Property:
        self._require(PropertyAction.EDIT, prop)
        if not isinstance(data, PropertyUpdate):
            try:
                data = PropertyUpdate.model_validate(data)
            except SchemaError as e:
                raise ValidationError.from_schema(e) from e
        with self.inflight.track("property", prop.id):
            updated = self.remote.update_property(prop.id, data)
        logger.info("property %s updated", prop.id)
        return updated

    def delete_property(self, prop: Property) -> None:
        self._require(PropertyAction.DELETE, prop)
        principal = self.session.current()
        with self.inflight.track("property", prop.id):
            if principal.role is Role.ADMIN and principal.user_id != prop.owner_id:
                self.remote.admin_delete_property(prop.id)
            else:
                self.remote.delete_property(prop.id)
        logger.info("property %s deleted", prop.id)

    def upload_images(self, prop: Property, files: Sequence[UploadFile]) -> Any:
        """
        Attach images to the owner's own listing.
        """
        self._require(PropertyAction.EDIT, prop)
        principal = self.session.current()
        if principal.user_id != prop.owner_id:
            raise PermissionDenied("Only the owner can upload images for this property.")
        if not files:
            raise ValidationError("Select at least one image to upload.")
        with self.inflight.track("property", prop.id):
            result = self.remote.upload_images(prop.id, files)
        logger.info("uploaded %d image(s) for property %s", len(files), prop.id)
        return result
