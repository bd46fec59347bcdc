"""Game rules plus the schedule/cutoff questions every flow asks about them."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from golden_ticket.db import Store
from golden_ticket.domain import schedule as sched
from golden_ticket.domain.models import GameRuleRecord
from golden_ticket.errors import NotFoundError
from golden_ticket.repositories.game_rule_repository import GameRuleRepository
from golden_ticket.utils.dates import Clock, utcnow


class GameRulesService:
    def __init__(
        self,
        store: Store,
        repository: GameRuleRepository | None = None,
        clock: Clock = utcnow,
        cutoff_lead: timedelta = sched.DEFAULT_CUTOFF_LEAD,
    ) -> None:
        self._store = store
        self._repo = repository or GameRuleRepository()
        self._clock = clock
        self.cutoff_lead = cutoff_lead

    def list_all(self) -> list[GameRuleRecord]:
        with self._store.session() as session:
            return self._repo.list_all(session)

    def get(self, game_name: str) -> GameRuleRecord:
        with self._store.session() as session:
            rule = self._repo.get(session, game_name)
        if rule is None:
            raise NotFoundError(message=f"Unknown game {game_name}")
        return rule

    def schedule(self, game_name: str) -> list[sched.ScheduleEntry]:
        return sched.parse_schedule(self.get(game_name).draw_schedule)

    def previous_draw_date(self, game_name: str, next_draw_date: date) -> date | None:
        return sched.previous_draw_date(next_draw_date, self.schedule(game_name))

    def draw_instant(self, game_name: str, draw_date: date) -> datetime | None:
        return sched.draw_instant_utc(draw_date, self.schedule(game_name))

    def cutoff(self, game_name: str, draw_date: date) -> datetime | None:
        return sched.cutoff_instant_utc(draw_date, self.schedule(game_name), self.cutoff_lead)

    def is_past_cutoff(self, game_name: str, draw_date: date) -> bool:
        return sched.is_past_cutoff(draw_date, self.schedule(game_name), self._clock(), self.cutoff_lead)
