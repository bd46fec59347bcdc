"""Draw-info cache: durable rows plus a short-TTL next-draw-date layer.

The in-memory layer only answers "what is the next draw date for this game".
A hit is honored only while the durable row for that date still exists;
otherwise the lookup falls through to a forced remote refresh.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from datetime import date

from golden_ticket.clients.api_client import GoldenTicketApi
from golden_ticket.db import Store
from golden_ticket.domain.models import DrawInfo
from golden_ticket.repositories.draw_info_repository import DrawInfoRepository
from golden_ticket.utils.dates import Clock, utcnow

logger = logging.getLogger(__name__)


class DrawInfoService:
    def __init__(
        self,
        store: Store,
        api: GoldenTicketApi,
        repository: DrawInfoRepository | None = None,
        clock: Clock = utcnow,
        ttl_seconds: float = 300.0,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self._api = api
        self._repo = repository or DrawInfoRepository()
        self._clock = clock
        self._ttl = ttl_seconds
        self._monotonic = monotonic
        self._next_dates: dict[str, tuple[date, float]] = {}
        self._lock = threading.Lock()

    # --- durable cache ---

    def get(self, game_name: str, draw_date: date | None = None) -> DrawInfo | None:
        with self._store.session() as session:
            return self._repo.get(session, game_name, draw_date)

    def upsert(self, info: DrawInfo) -> DrawInfo:
        with self._store.session() as session:
            return self._repo.upsert(session, info, self._clock())

    # --- in-memory layer ---

    def invalidate(self, game_name: str | None = None) -> None:
        with self._lock:
            if game_name is None:
                self._next_dates.clear()
            else:
                self._next_dates.pop(game_name, None)

    def _remember(self, game_name: str, draw_date: date) -> None:
        with self._lock:
            self._next_dates[game_name] = (draw_date, self._monotonic() + self._ttl)

    def _memo(self, game_name: str) -> date | None:
        with self._lock:
            entry = self._next_dates.get(game_name)
            if entry is None:
                return None
            draw_date, expires_at = entry
            if self._monotonic() >= expires_at:
                del self._next_dates[game_name]
                return None
            return draw_date

    # --- remote ---

    def refresh(self, game_name: str) -> DrawInfo | None:
        """Fetch next-draw info from the server and upsert the full row."""

        try:
            payload = self._api.get_game_info(game_name)
        except Exception:
            self.invalidate(game_name)
            raise

        if payload is None:
            self.invalidate(game_name)
            return None

        info = self.upsert(
            DrawInfo(
                game_name=game_name,
                draw_date=payload.draw_date,
                total_combinations=payload.total_combinations,
                user_request_limit=payload.user_request_limit,
                user_combinations_requested=payload.user_combinations_requested,
                archive_checksum=payload.archive_checksum,
            )
        )
        self._remember(game_name, info.draw_date)
        logger.info("Draw info refreshed for %s: next draw %s", game_name, info.draw_date.isoformat())
        return info

    def get_next_draw_date(self, game_name: str, force_refresh: bool = False) -> date | None:
        if not force_refresh:
            cached = self._memo(game_name)
            if cached is not None:
                if self.get(game_name, cached) is not None:
                    return cached
                logger.info(
                    "Next draw date %s for %s missing from durable cache; refreshing", cached.isoformat(), game_name
                )

        info = self.refresh(game_name)
        return info.draw_date if info is not None else None
