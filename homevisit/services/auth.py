# homevisit/services/auth.py
import logging
from typing import Optional

from pydantic import ValidationError as SchemaError

from homevisit.api.adapter import RemoteSyncAdapter
from homevisit.core.errors import ValidationError
from homevisit.core.session import Session
from homevisit.schemas.user import Principal, Role, UserCreate, UserLogin, UserOut

logger = logging.getLogger(__name__)


class AuthService:
    """
    Login, logout and self-registration on top of a Session.
    """

    def __init__(self, session: Session, remote: RemoteSyncAdapter):
        self.session = session
        self.remote = remote

    def current(self) -> Optional[Principal]:
        return self.session.current()

    def login(self, email: str, password: str) -> Principal:
        """
        Raises:
            ValidationError: email/password missing or malformed (no request sent)
            AuthenticationError: wrong credentials
        """
        if not email or not password:
            raise ValidationError("Email and password are required.")
        try:
            credentials = UserLogin(email=email, password=password)
        except SchemaError as e:
            raise ValidationError.from_schema(e) from e

        # a new login always replaces whatever session was there
        self.session.logout()
        token = self.remote.login(credentials)
        principal = token.to_principal()
        self.session.start(principal, token.token)
        return principal

    def logout(self) -> None:
        self.session.logout()

    def register(
        self,
        name: str,
        email: str,
        password: str,
        role: Role = Role.CUSTOMER,
    ) -> UserOut:
        """
        Create a CUSTOMER or PROPERTY_OWNER account. Does not log in.
        """
        try:
            body = UserCreate(name=name, email=email, password=password, role=role)
        except SchemaError as e:
            raise ValidationError.from_schema(e) from e

        registration = self.remote.register(body)
        logger.info("registered user %s as %s", registration.user.id, registration.user.role.value)
        return registration.user
