"""Smelting: request a random combination from the server for a draw."""

from __future__ import annotations

import dataclasses
import logging
import random
from dataclasses import dataclass
from datetime import date

from golden_ticket.clients.api_client import GoldenTicketApi
from golden_ticket.db import Store
from golden_ticket.domain.crucible import RejectReason
from golden_ticket.domain.models import DrawScope, Ingot
from golden_ticket.domain.quota import QuotaTracker
from golden_ticket.repositories.draw_info_repository import DrawInfoRepository
from golden_ticket.repositories.ingot_repository import IngotRepository
from golden_ticket.services.game_rules_service import GameRulesService
from golden_ticket.utils.dates import Clock, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SmeltResult:
    accepted: bool
    reason: RejectReason | None = None
    ingot: Ingot | None = None
    remaining: int = 0


class SmelterService:
    def __init__(
        self,
        store: Store,
        api: GoldenTicketApi,
        rules: GameRulesService,
        draw_infos: DrawInfoRepository | None = None,
        ingots: IngotRepository | None = None,
        clock: Clock = utcnow,
        rng: random.Random | None = None,
    ) -> None:
        self._store = store
        self._api = api
        self._rules = rules
        self._draw_infos = draw_infos or DrawInfoRepository()
        self._ingots = ingots or IngotRepository()
        self._clock = clock
        self._rng = rng or random.Random()

    def quota(self, game_name: str, draw_date: date) -> QuotaTracker:
        with self._store.session() as session:
            return QuotaTracker.from_draw_info(self._draw_infos.get(session, game_name, draw_date))

    def smelt(self, scope: DrawScope) -> SmeltResult:
        """Request one combination and add it to the collection.

        The server's returned request count replaces the local one. If the
        local write fails after the server issued the ingot, the error is
        re-raised: the quota is already consumed server-side.
        """

        with self._store.session() as session:
            info = self._draw_infos.get(session, scope.game_name, scope.draw_date)

        if info is None or not info.total_combinations:
            logger.info("Smelt rejected for %s: no draw info", scope)
            return SmeltResult(accepted=False, reason=RejectReason.DRAW_INFO_MISSING)

        quota = QuotaTracker.from_draw_info(info)
        if quota.exhausted:
            logger.info("Smelt rejected for %s: quota exhausted (%s/%s)", scope, quota.used, quota.limit)
            return SmeltResult(accepted=False, reason=RejectReason.QUOTA_EXHAUSTED)

        if self._rules.is_past_cutoff(scope.game_name, scope.draw_date):
            logger.info("Smelt rejected for %s: past cutoff", scope)
            return SmeltResult(accepted=False, reason=RejectReason.PAST_CUTOFF, remaining=quota.remaining())

        combination_number = self._rng.randint(1, info.total_combinations)
        grant = self._api.request_combination(scope.game_name, scope.draw_date, combination_number)
        remaining = quota.record_request(grant.user_requests_count)
        ingot = Ingot(ingot_id=grant.ingot_id, numbers=grant.numbers)

        now = self._clock()
        try:
            with self._store.session() as session:
                self._ingots.add(session, scope, ingot, now)
                self._draw_infos.upsert(
                    session,
                    dataclasses.replace(info, user_combinations_requested=quota.used),
                    now,
                )
        except Exception:
            logger.error(
                "Ingot %s issued by server but local save failed for %s; quota already consumed",
                ingot.ingot_id,
                scope,
            )
            raise

        logger.info("Smelted ingot %s for %s (%s request(s) left)", ingot.ingot_id, scope, remaining)
        return SmeltResult(accepted=True, ingot=ingot, remaining=remaining)
