# homevisit/schemas/auth.py
from typing import Optional

from pydantic import BaseModel, EmailStr
from pydantic.alias_generators import to_camel

from homevisit.schemas.user import Principal, RoleField, UserOut


class Token(BaseModel):
    """
    Body of a successful POST /users/login:
      { token, userId, userEmail, userRole, message }
    """
    token: str
    user_id: int
    user_email: EmailStr
    user_role: RoleField
    message: Optional[str] = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    def to_principal(self) -> Principal:
        return Principal(user_id=self.user_id, email=self.user_email, role=self.user_role)


class Registration(BaseModel):
    message: Optional[str] = None
    user: UserOut
