# homevisit/schemas/property.py
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class PropertyType(str, Enum):
    SALE = "SALE"
    RENT = "RENT"


class PropertyStatus(str, Enum):
    PENDING_APPROVAL = "PENDING_APPROVAL"
    AVAILABLE = "AVAILABLE"
    PENDING = "PENDING"
    SOLD = "SOLD"
    RENTED = "RENTED"
    UNAVAILABLE = "UNAVAILABLE"


# Statuses for which a customer may still ask for a visit
VISITABLE_STATUSES = frozenset({PropertyStatus.AVAILABLE, PropertyStatus.PENDING})

_camel = {"alias_generator": to_camel, "populate_by_name": True}


class Property(BaseModel):
    id: int
    owner_id: int
    address: str
    city: str
    state: Optional[str] = None
    postal_code: Optional[str] = None
    price: Decimal
    bedrooms: int
    bathrooms: int
    area_sqft: Optional[Decimal] = None
    description: Optional[str] = None
    type: PropertyType
    status: PropertyStatus
    amenities: Set[str] = Field(default_factory=set)
    # API field is a comma-joined string of stored file names
    image_refs: List[str] = Field(default_factory=list, alias="imageUrls")
    owner_name: Optional[str] = None
    owner_email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = _camel

    @model_validator(mode="before")
    @classmethod
    def _owner_from_nested(cls, data: Any) -> Any:
        # /admin/properties returns the entity with a nested owner object
        if isinstance(data, dict) and data.get("ownerId") is None and data.get("owner_id") is None:
            owner = data.get("owner")
            if isinstance(owner, dict) and owner.get("id") is not None:
                data = {
                    **data,
                    "ownerId": owner["id"],
                    "ownerName": data.get("ownerName") or owner.get("name"),
                    "ownerEmail": data.get("ownerEmail") or owner.get("email"),
                }
        return data

    @field_validator("image_refs", mode="before")
    @classmethod
    def _split_image_refs(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [name.strip() for name in v.split(",") if name.strip()]
        return v

    @field_validator("amenities", mode="before")
    @classmethod
    def _amenities_default(cls, v):
        return set() if v is None else v


class PropertyCreate(BaseModel):
    address: str
    city: str
    state: str
    postal_code: str
    price: Decimal = Field(ge=0)
    bedrooms: int = Field(ge=0)
    bathrooms: int = Field(ge=0)
    type: PropertyType
    area_sqft: Optional[Decimal] = Field(default=None, ge=0)
    description: Optional[str] = None
    status: Optional[PropertyStatus] = None
    amenities: Set[str] = Field(default_factory=set)

    model_config = _camel

    @field_validator("address", "city", "state", "postal_code")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class PropertyUpdate(BaseModel):
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    bedrooms: Optional[int] = Field(default=None, ge=0)
    bathrooms: Optional[int] = Field(default=None, ge=0)
    type: Optional[PropertyType] = None
    area_sqft: Optional[Decimal] = Field(default=None, ge=0)
    description: Optional[str] = None
    status: Optional[PropertyStatus] = None
    amenities: Optional[Set[str]] = None

    model_config = _camel


class PropertyFilter(BaseModel):
    """
    Search query for GET /properties. Empty fields are left out of the
    request entirely; the server does all of the filtering.
    """
    city: Optional[str] = None
    type: Optional[PropertyType] = None
    min_price: Optional[Decimal] = Field(default=None, ge=0)
    max_price: Optional[Decimal] = Field(default=None, ge=0)
    min_bedrooms: Optional[int] = Field(default=None, ge=0)
    min_bathrooms: Optional[int] = Field(default=None, ge=0)
    status: Optional[PropertyStatus] = None

    model_config = _camel

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_none(cls, v):
        # form inputs arrive as "" when untouched
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def _price_range(self) -> "PropertyFilter":
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("min_price must not exceed max_price")
        return self

    def to_params(self) -> Dict[str, str]:
        data = self.model_dump(by_alias=True, exclude_none=True, mode="json")
        return {k: str(v) for k, v in data.items()}
