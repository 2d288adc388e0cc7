from dataclasses import dataclass
from typing import Optional

import requests

from homevisit.api.adapter import RemoteSyncAdapter
from homevisit.api.client import ApiClient
from homevisit.api.remote import HttpRemoteAdapter
from homevisit.core.config import Settings, get_settings
from homevisit.core.session import Session
from homevisit.services.auth import AuthService
from homevisit.services.bookings import BookingLifecycle
from homevisit.services.contact import ContactService
from homevisit.services.inflight import InFlightRegistry
from homevisit.services.properties import PropertyCatalog


@dataclass
class App:
    """Everything a UI needs, sharing one session and one in-flight registry."""

    settings: Settings
    session: Session
    remote: RemoteSyncAdapter
    auth: AuthService
    bookings: BookingLifecycle
    properties: PropertyCatalog
    contact: ContactService


def build_app(
    settings: Optional[Settings] = None,
    *,
    remote: Optional[RemoteSyncAdapter] = None,
    http: Optional[requests.Session] = None,
) -> App:
    """
    Wire the client together.

    Pass ``remote`` to swap the HTTP adapter (tests, offline demos); otherwise
    an HttpRemoteAdapter is built over ``http`` or a fresh requests.Session.
    """
    settings = settings or get_settings()
    session = Session(expiry_leeway_seconds=settings.TOKEN_EXPIRY_LEEWAY_SECONDS)
    if remote is None:
        remote = HttpRemoteAdapter(ApiClient(session, settings, http=http))
    inflight = InFlightRegistry()

    return App(
        settings=settings,
        session=session,
        remote=remote,
        auth=AuthService(session, remote),
        bookings=BookingLifecycle(session, remote, settings, inflight=inflight),
        properties=PropertyCatalog(session, remote, inflight=inflight),
        contact=ContactService(remote),
    )
