# homevisit/schemas/user.py
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, EmailStr, field_validator
from pydantic.alias_generators import to_camel


class Role(str, Enum):
    CUSTOMER = "CUSTOMER"
    PROPERTY_OWNER = "PROPERTY_OWNER"
    ADMIN = "ADMIN"


def _normalise_role(value):
    # API sends roles upper-case; tolerate stray whitespace/case
    if isinstance(value, str):
        return value.strip().upper()
    return value


RoleField = Annotated[Role, BeforeValidator(_normalise_role)]


class Principal(BaseModel):
    """
    The authenticated actor. Built from the login response and held by the
    Session until logout or forced invalidation.
    """
    user_id: int
    email: EmailStr
    role: RoleField

    model_config = {"frozen": True}

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


class UserLogin(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def _clean_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class UserCreate(BaseModel):
    """
    Self-registration body. ADMIN accounts cannot be created this way.
    """
    name: str
    email: EmailStr
    password: str
    role: RoleField = Role.CUSTOMER

    @field_validator("name", "password")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def _clean_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("role")
    @classmethod
    def _no_admin(cls, v: Role) -> Role:
        if v is Role.ADMIN:
            raise ValueError("cannot register as ADMIN")
        return v


class UserOut(BaseModel):
    """Public-facing user data returned by /users/register."""
    id: int
    name: str
    email: EmailStr
    role: RoleField
    phone: Optional[str] = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

