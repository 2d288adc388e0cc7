# homevisit/services/inflight.py
import logging
from contextlib import contextmanager
from typing import Hashable, Iterator, Set, Tuple

from homevisit.core.errors import ActionInFlight

logger = logging.getLogger(__name__)

EntityKey = Tuple[str, Hashable]


class InFlightRegistry:
    """
    At most one outstanding remote call per entity.

    Views read is_busy() to disable the control that triggered the call.
    """

    def __init__(self):
        self._busy: Set[EntityKey] = set()

    def is_busy(self, kind: str, entity_id: Hashable) -> bool:
        return (kind, entity_id) in self._busy

    @contextmanager
    def track(self, kind: str, entity_id: Hashable) -> Iterator[None]:
        key = (kind, entity_id)
        if key in self._busy:
            logger.warning("duplicate %s action for id %s while one is in flight", kind, entity_id)
            raise ActionInFlight("Please wait for the current action to finish.")
        self._busy.add(key)
        try:
            yield
        finally:
            self._busy.discard(key)
