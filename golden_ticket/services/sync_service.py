"""Sync orchestrator: keeps caches warm and owns the result poller."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from golden_ticket.db import Store
from golden_ticket.domain.models import DrawScope
from golden_ticket.repositories.crucible_repository import CrucibleRepository
from golden_ticket.services.draw_info_service import DrawInfoService
from golden_ticket.services.game_rules_service import GameRulesService
from golden_ticket.services.poller import PollOutcome, ResultPoller
from golden_ticket.services.progress_service import ProgressService
from golden_ticket.services.result_service import ResultService
from golden_ticket.utils.dates import Clock, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregateStatus:
    needs_submission: bool
    has_unseen_results: bool
    next_draw_date: date | None = None
    last_draw_date: date | None = None


@dataclass(frozen=True)
class DrawWindow:
    game_name: str
    next_draw_date: date | None
    last_draw_date: date | None
    polling: bool = False
    poll_outcome: PollOutcome | None = None


class SyncService:
    def __init__(
        self,
        store: Store,
        rules: GameRulesService,
        draw_info: DrawInfoService,
        results: ResultService,
        poller: ResultPoller,
        progress: ProgressService,
        crucibles: CrucibleRepository | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self._store = store
        self._rules = rules
        self._draw_info = draw_info
        self._results = results
        self.poller = poller
        self._progress = progress
        self._crucibles = crucibles or CrucibleRepository()
        self._clock = clock

    def ensure_initial_cache(self, game_name: str, last_draw_date: date, next_draw_date: date) -> None:
        """Warm draw info and results before any detail view asks for them."""

        self._draw_info.refresh(game_name)

        cached = self._results.get(game_name, last_draw_date)
        if cached is None or not cached.has_numbers:
            self._results.fetch_and_cache(game_name, last_draw_date)

        # Downstream "has this draw a result yet" lookups expect a row.
        self._results.insert_placeholder(game_name, next_draw_date)

    def _window(self, game_name: str) -> tuple[date | None, date | None]:
        next_draw_date = self._draw_info.get_next_draw_date(game_name)
        if next_draw_date is None:
            return None, None
        return next_draw_date, self._rules.previous_draw_date(game_name, next_draw_date)

    def aggregate_status(self, user_id: int, game_name: str) -> AggregateStatus:
        next_draw_date, last_draw_date = self._window(game_name)

        needs_submission = False
        if next_draw_date is not None:
            scope = DrawScope(user_id=user_id, game_name=game_name, draw_date=next_draw_date)
            with self._store.session() as session:
                needs_submission = not self._crucibles.exists(session, scope)

        return AggregateStatus(
            needs_submission=needs_submission,
            has_unseen_results=self._results.any_unseen(),
            next_draw_date=next_draw_date,
            last_draw_date=last_draw_date,
        )

    def refresh(self, game_name: str) -> DrawWindow:
        """Resolve the draw window, warm caches, and start polling if due."""

        next_draw_date, last_draw_date = self._window(game_name)
        if next_draw_date is None or last_draw_date is None:
            logger.warning("Cannot resolve draw window for %s", game_name)
            return DrawWindow(game_name, next_draw_date, last_draw_date)

        self.ensure_initial_cache(game_name, last_draw_date, next_draw_date)

        outcome = None
        if self.poller.should_poll(game_name, last_draw_date):
            outcome = self.poller.start(game_name, last_draw_date)

        return DrawWindow(
            game_name,
            next_draw_date,
            last_draw_date,
            polling=self.poller.is_running,
            poll_outcome=outcome,
        )

    def on_sign_in(self, user_id: int, game_name: str | None = None) -> list[DrawWindow]:
        games = [game_name] if game_name else self.followed_games(user_id)
        return [self.refresh(game) for game in games]

    def on_sign_out(self) -> None:
        self.poller.stop()
        self._draw_info.invalidate()

    def followed_games(self, user_id: int) -> list[str]:
        return self._progress.followed_games(user_id)

    def close(self) -> None:
        self.poller.stop()
