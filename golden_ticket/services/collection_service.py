"""Service layer for a user's ingot collection."""

from __future__ import annotations

import logging

from golden_ticket.db import Store
from golden_ticket.domain.models import DrawScope, Ingot
from golden_ticket.repositories.ingot_repository import IngotRepository
from golden_ticket.utils.dates import Clock, utcnow

logger = logging.getLogger(__name__)


class CollectionService:
    """Uncommitted ingots per (user, game, draw date)."""

    def __init__(self, store: Store, repository: IngotRepository | None = None, clock: Clock = utcnow) -> None:
        self._store = store
        self._repo = repository or IngotRepository()
        self._clock = clock

    def add(self, scope: DrawScope, ingot: Ingot) -> None:
        with self._store.session() as session:
            self._repo.add(session, scope, ingot, self._clock())
        logger.info("Ingot %s added to collection %s", ingot.ingot_id, scope)

    def list(self, scope: DrawScope) -> list[Ingot]:
        """Most recently added first."""

        with self._store.session() as session:
            return self._repo.list(session, scope)

    def get(self, scope: DrawScope, ingot_id: int) -> Ingot | None:
        with self._store.session() as session:
            return self._repo.get(session, scope, ingot_id)

    def remove(self, scope: DrawScope, ingot_id: int) -> int:
        with self._store.session() as session:
            count = self._repo.remove(session, scope, ingot_id)
        if count == 0:
            logger.warning("Ingot %s not found in collection %s", ingot_id, scope)
        return count

    def clear_all(self, scope: DrawScope) -> int:
        with self._store.session() as session:
            count = self._repo.clear_all(session, scope)
        logger.info("Cleared %s ingot(s) from collection %s", count, scope)
        return count
