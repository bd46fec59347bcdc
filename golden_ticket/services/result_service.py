"""Result cache use-cases."""

from __future__ import annotations

import logging
from datetime import date

from golden_ticket.clients.api_client import GoldenTicketApi
from golden_ticket.db import Store
from golden_ticket.domain.models import ODDS_TIERS, CachedResult
from golden_ticket.repositories.result_cache_repository import ResultCacheRepository
from golden_ticket.utils.dates import Clock, utcnow

logger = logging.getLogger(__name__)


class ResultService:
    def __init__(
        self,
        store: Store,
        api: GoldenTicketApi,
        repository: ResultCacheRepository | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self._store = store
        self._api = api
        self._repo = repository or ResultCacheRepository()
        self._clock = clock

    def get(self, game_name: str, draw_date: date) -> CachedResult | None:
        with self._store.session() as session:
            return self._repo.get(session, game_name, draw_date)

    def upsert(self, result: CachedResult) -> CachedResult:
        with self._store.session() as session:
            return self._repo.upsert(session, result, self._clock())

    def insert_placeholder(self, game_name: str, draw_date: date) -> bool:
        with self._store.session() as session:
            inserted = self._repo.insert_placeholder(session, game_name, draw_date, self._clock())
        if inserted:
            logger.info("Inserted placeholder result for %s / %s", game_name, draw_date.isoformat())
        return inserted

    def mark_seen(self, game_name: str, draw_date: date) -> int:
        with self._store.session() as session:
            count = self._repo.mark_seen(session, game_name, draw_date)
        logger.info("Cleared new flag for %s / %s (%s row(s))", game_name, draw_date.isoformat(), count)
        return count

    def any_unseen(self) -> bool:
        with self._store.session() as session:
            return self._repo.any_unseen(session)

    def fetch_and_cache(self, game_name: str, draw_date: date) -> CachedResult | None:
        """Fetch a draw's result from the server and upsert it.

        Returns None when the server sent an empty body; nothing is written.
        """

        payload = self._api.get_game_result(game_name, draw_date)
        if payload is None:
            return None

        odds = {tier: payload.odds.get(tier) for tier in ODDS_TIERS}
        result = self.upsert(
            CachedResult(
                game_name=game_name,
                draw_date=draw_date,
                winning_numbers=payload.winning_numbers,
                bonus_number=payload.bonus_number,
                total_combinations=payload.total_combinations,
                odds=odds,
                user_score=payload.user_score,
                win_id=payload.win_id,
                archive_password=payload.archive_password,
                archive_checksum=payload.archive_checksum,
            )
        )
        logger.info(
            "Cached result for %s / %s (numbers: %s)",
            game_name,
            draw_date.isoformat(),
            "yes" if result.has_numbers else "not yet",
        )
        return result
