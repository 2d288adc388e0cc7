# homevisit/core/session.py
import logging
from typing import Callable, List, Optional

from homevisit.core.errors import AuthenticationError
from homevisit.core.security import is_token_expired
from homevisit.schemas.user import Principal

logger = logging.getLogger(__name__)

InvalidationListener = Callable[[str], None]


class Session:
    """
    Current principal and bearer token.

    Created empty, started by a successful login, cleared on logout or when
    the API reports an authentication failure. Passed explicitly to whatever
    needs it; there is no module-level instance.
    """

    def __init__(self, *, expiry_leeway_seconds: int = 0):
        self._principal: Optional[Principal] = None
        self._token: Optional[str] = None
        self._listeners: List[InvalidationListener] = []
        self.expiry_leeway_seconds = expiry_leeway_seconds

    def start(self, principal: Principal, token: str) -> None:
        self._principal = principal
        self._token = token
        logger.info("session started for user %s (%s)", principal.user_id, principal.role.value)

    def current(self) -> Optional[Principal]:
        return self._principal

    @property
    def is_authenticated(self) -> bool:
        return self._principal is not None

    def require(self) -> Principal:
        """
        Return the principal or raise AuthenticationError if nobody is logged in.
        """
        if self._principal is None:
            raise AuthenticationError("Please log in to continue.")
        return self._principal

    def bearer_token(self) -> Optional[str]:
        """
        Token to attach to an authenticated request.

        A token whose exp claim has already passed ends the session here,
        before the request is sent.
        """
        if self._token is None:
            return None
        if is_token_expired(self._token, leeway_seconds=self.expiry_leeway_seconds):
            self.invalidate("token expired")
            raise AuthenticationError("Your session has expired. Please log in again.", status_code=401)
        return self._token

    def has_live_token(self) -> bool:
        """True when a token is held and it is not known to be expired. Never invalidates."""
        return self._token is not None and not is_token_expired(
            self._token, leeway_seconds=self.expiry_leeway_seconds
        )

    def logout(self) -> None:
        if self._principal is not None:
            logger.info("user %s logged out", self._principal.user_id)
        self._clear()

    def invalidate(self, reason: str) -> None:
        """
        Forced end of the session (401 from the API, expired token).
        Listeners are told so the UI can drop to its logged-out state.
        """
        had_session = self._principal is not None or self._token is not None
        self._clear()
        if not had_session:
            return
        logger.warning("session invalidated: %s", reason)
        for listener in list(self._listeners):
            listener(reason)

    def on_invalidated(self, listener: InvalidationListener) -> Callable[[], None]:
        """
        Register a callback for forced invalidation. Returns an unsubscribe function.
        """
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def _clear(self) -> None:
        self._principal = None
        self._token = None
