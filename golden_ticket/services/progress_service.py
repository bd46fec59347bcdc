"""User progress and followed games."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from golden_ticket.db import Store
from golden_ticket.domain.models import GameProgress
from golden_ticket.repositories.user_progress_repository import UserProgressRepository
from golden_ticket.utils.dates import Clock, utcnow

logger = logging.getLogger(__name__)


class ProgressService:
    def __init__(self, store: Store, repository: UserProgressRepository | None = None, clock: Clock = utcnow) -> None:
        self._store = store
        self._repo = repository or UserProgressRepository()
        self._clock = clock

    def record_profile(self, user_id: int, membership_level: str | None = None) -> None:
        with self._store.session() as session:
            self._repo.upsert_profile(session, user_id, self._clock(), membership_level=membership_level)

    def get_profile(self, user_id: int) -> dict[str, Any] | None:
        with self._store.session() as session:
            return self._repo.get_profile(session, user_id)

    def upsert_progress(
        self,
        user_id: int,
        game_name: str,
        score_to_add: int = 0,
        awards_to_add: Iterable[str] | None = None,
        statistics: Mapping[str, Any] | None = None,
        membership_level: str | None = None,
    ) -> GameProgress:
        with self._store.session() as session:
            progress = self._repo.upsert_progress(
                session,
                user_id,
                game_name,
                self._clock(),
                score_to_add=score_to_add,
                awards_to_add=awards_to_add,
                statistics=statistics,
                membership_level=membership_level,
            )
        logger.info("Progress updated for %s/%s: score %s", user_id, game_name, progress.game_score)
        return progress

    def get_progress(self, user_id: int, game_name: str) -> GameProgress | None:
        with self._store.session() as session:
            return self._repo.get_progress(session, user_id, game_name)

    def list_progress(self, user_id: int) -> list[GameProgress]:
        with self._store.session() as session:
            return self._repo.list_progress(session, user_id)

    def total_score(self, user_id: int) -> int:
        with self._store.session() as session:
            return self._repo.total_score(session, user_id)

    def activate(self, user_id: int, game_name: str) -> bool:
        with self._store.session() as session:
            changed = self._repo.activate(session, user_id, game_name, self._clock())
        if changed:
            logger.info("Activated game %s for user %s", game_name, user_id)
        return changed

    def deactivate(self, user_id: int, game_name: str) -> int:
        with self._store.session() as session:
            return self._repo.deactivate(session, user_id, game_name, self._clock())

    def active_games(self, user_id: int) -> list[str]:
        with self._store.session() as session:
            return self._repo.active_games(session, user_id)

    def followed_games(self, user_id: int) -> list[str]:
        """Active games first, then any other game the user has progress in."""

        with self._store.session() as session:
            games = self._repo.active_games(session, user_id)
            for progress in self._repo.list_progress(session, user_id):
                if progress.game_name not in games:
                    games.append(progress.game_name)
        return games
