# homevisit/api/client.py
import logging
from typing import Any, Dict, Optional, Type

import requests

from homevisit.core.config import Settings, get_settings
from homevisit.core.errors import (
    AuthenticationError,
    AuthorizationError,
    BadRequestError,
    ConflictError,
    NotFoundError,
    RemoteError,
    ServerError,
    TransportError,
)
from homevisit.core.session import Session

logger = logging.getLogger(__name__)

_STATUS_ERRORS: Dict[int, Type[RemoteError]] = {
    400: BadRequestError,
    401: AuthenticationError,
    403: AuthorizationError,
    404: NotFoundError,
    409: ConflictError,
    422: BadRequestError,
}

_DEFAULT_MESSAGES: Dict[Type[RemoteError], str] = {
    BadRequestError: "The request was rejected.",
    AuthenticationError: "Authentication required. Please log in again.",
    AuthorizationError: "You do not have permission to do that.",
    NotFoundError: "Not found. The list may be out of date.",
    ConflictError: "This item changed in the meantime. Refresh and try again.",
    ServerError: "The server could not process the request.",
}


def _decode(response: requests.Response) -> Any:
    if response.status_code == 204 or not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _message_from(payload: Any) -> Optional[str]:
    # API error bodies look like {"error": "..."} or {"message": "..."}
    if isinstance(payload, dict):
        for key in ("error", "message", "detail"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return None


class ApiClient:
    """
    Thin HTTP client for the listing/booking API.

    Attaches the session's bearer token to authenticated calls and turns
    every failure into a typed RemoteError. Never retries. A 401 from any
    call clears the session.
    """

    def __init__(
        self,
        session: Session,
        settings: Optional[Settings] = None,
        http: Optional[requests.Session] = None,
    ):
        self.settings = settings or get_settings()
        self.base_url = self.settings.API_BASE_URL.rstrip("/")
        self.timeout = self.settings.REQUEST_TIMEOUT_SECONDS
        self.session = session
        self.http = http or requests.Session()
        self.http.headers.setdefault("Accept", "application/json")

    def get(self, path: str, **kwargs) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> Any:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs) -> Any:
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs) -> Any:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        return self.request("DELETE", path, **kwargs)

    def request(
        self,
        method: str,
        path: str,
        *,
        auth: bool = True,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        files: Any = None,
    ) -> Any:
        """
        Send one request and return the decoded body (None for empty bodies).

        Raises:
            TransportError: network failure or timeout
            AuthenticationError: 401, or the stored token has already expired
            AuthorizationError / NotFoundError / ConflictError / BadRequestError /
            ServerError: classified HTTP error status
        """
        headers: Dict[str, str] = {}
        if auth:
            token = self.session.bearer_token()
            if token:
                headers["Authorization"] = f"Bearer {token}"

        url = f"{self.base_url}{path}"
        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = self.http.request(
                method,
                url,
                params=params,
                json=json,
                files=files,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise TransportError("The server took too long to respond.") from e
        except requests.RequestException as e:
            raise TransportError("Could not reach the server. Check your connection.") from e

        payload = _decode(response)
        if response.status_code < 400:
            return payload

        raise self._error_for(method, path, response.status_code, payload)

    def _error_for(self, method: str, path: str, status_code: int, payload: Any) -> RemoteError:
        error_cls = _STATUS_ERRORS.get(status_code, ServerError)
        message = _message_from(payload) or _DEFAULT_MESSAGES[error_cls]

        if error_cls is AuthenticationError:
            self.session.invalidate(f"401 from {method} {path}")
        else:
            logger.warning("%s %s failed with %s: %s", method, path, status_code, message)

        return error_cls(message, status_code=status_code, payload=payload)
