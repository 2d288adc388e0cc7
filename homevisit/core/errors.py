"""
Error taxonomy for the homevisit client.

Local errors are raised before any network traffic. Remote errors are raised
by the transport after classifying the HTTP response; they carry the status
code and the decoded body when there was one.
"""
from typing import Any, Optional


class HomeVisitError(Exception):
    """Base class. ``message`` is safe to show to the user."""

    refresh_required = False
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# --- local ---

class ValidationError(HomeVisitError):
    """Bad input caught locally (date/time, blank fields). Needs new input."""

    @classmethod
    def from_schema(cls, exc) -> "ValidationError":
        """Wrap a pydantic ValidationError, reporting its first problem."""
        err = exc.errors()[0]
        field = ".".join(str(p) for p in err.get("loc", ())) or "input"
        return cls(f"{field}: {err.get('msg', 'invalid value')}")


class PermissionDenied(HomeVisitError):
    """The policy does not allow the action for the current principal.

    Usually means the view is stale relative to the role or ownership.
    """

    refresh_required = True


class ActionInFlight(HomeVisitError):
    """Another call for the same entity has not finished yet."""


# --- remote ---

class RemoteError(HomeVisitError):
    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        payload: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class TransportError(RemoteError):
    """Network failure or timeout. The user may retry."""

    retryable = True


class BadRequestError(RemoteError):
    """400/422 from the API."""


class AuthenticationError(RemoteError):
    """401: credential missing, invalid or expired. The session is cleared."""


class AuthorizationError(RemoteError):
    """403: the server refused the action. Session is left as is."""

    refresh_required = True


class NotFoundError(RemoteError):
    """404: the entity is gone or the local list is stale."""

    refresh_required = True


class ConflictError(RemoteError):
    """The server rejected a transition because the entity changed underneath."""

    refresh_required = True


class ServerError(RemoteError):
    """Any other error status (5xx, unexpected 4xx)."""


class ResponseFormatError(RemoteError):
    """The API answered 2xx with a body that does not match the schema."""
