"""Crucible use-cases: create, add, replace and forge (lock).

Add and replace move ingots between the collection and the crucible inside a
single store transaction, so a failed save leaves both exactly as they were.
Forge persists ``submitted`` before the remote lock call and reverts to
``draft`` if that call fails.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from golden_ticket.clients.api_client import GoldenTicketApi
from golden_ticket.db import Store
from golden_ticket.domain.crucible import Crucible, MutationResult, RejectReason
from golden_ticket.domain.models import DrawScope, GameRuleRecord
from golden_ticket.repositories.crucible_repository import CrucibleRepository
from golden_ticket.repositories.ingot_repository import IngotRepository
from golden_ticket.services.game_rules_service import GameRulesService
from golden_ticket.utils.dates import Clock, utcnow

logger = logging.getLogger(__name__)


class ForgeService:
    def __init__(
        self,
        store: Store,
        api: GoldenTicketApi,
        rules: GameRulesService,
        crucibles: CrucibleRepository | None = None,
        ingots: IngotRepository | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self._store = store
        self._api = api
        self._rules = rules
        self._crucibles = crucibles or CrucibleRepository()
        self._ingots = ingots or IngotRepository()
        self._clock = clock

    def _load_or_create(self, session: Session, scope: DrawScope, rule: GameRuleRecord) -> Crucible:
        crucible = self._crucibles.get(session, scope, rule.regular_balls_drawn)
        if crucible is not None:
            return crucible

        crucible = Crucible(
            scope=scope,
            capacity=rule.regular_balls_drawn,
            name=f"{rule.game_name} Crucible",
            last_modified=self._clock(),
        )
        self._crucibles.save(session, crucible)
        logger.info("Created draft crucible %s for %s", crucible.id, scope)
        return crucible

    @staticmethod
    def _reject(action: str, scope: DrawScope, reason: RejectReason, crucible: Crucible | None) -> MutationResult:
        logger.info("Crucible %s rejected for %s: %s", action, scope, reason.value)
        return MutationResult.rejected(reason, crucible)

    def get_or_create(self, scope: DrawScope) -> Crucible:
        rule = self._rules.get(scope.game_name)
        with self._store.session() as session:
            return self._load_or_create(session, scope, rule)

    def get(self, scope: DrawScope) -> Crucible | None:
        rule = self._rules.get(scope.game_name)
        with self._store.session() as session:
            return self._crucibles.get(session, scope, rule.regular_balls_drawn)

    def add_ingot(self, scope: DrawScope, ingot_id: int) -> MutationResult:
        rule = self._rules.get(scope.game_name)
        past_cutoff = self._rules.is_past_cutoff(scope.game_name, scope.draw_date)

        with self._store.session() as session:
            crucible = self._load_or_create(session, scope, rule)

            ingot = self._ingots.get(session, scope, ingot_id)
            if ingot is None:
                reason = crucible.check_editable(past_cutoff) or RejectReason.INGOT_NOT_IN_COLLECTION
                return self._reject("add", scope, reason, crucible)

            reason = crucible.add(ingot, past_cutoff=past_cutoff, now=self._clock())
            if reason is not None:
                return self._reject("add", scope, reason, crucible)

            self._ingots.remove(session, scope, ingot_id)
            self._crucibles.save(session, crucible)

        logger.info("Ingot %s moved into crucible %s (%s/%s)", ingot_id, crucible.id, len(crucible.ingots), crucible.capacity)
        return MutationResult.ok(crucible)

    def replace_ingot(self, scope: DrawScope, collection_ingot_id: int, crucible_ingot_id: int) -> MutationResult:
        """Swap a collection ingot into the slot held by ``crucible_ingot_id``.

        The displaced ingot goes back to the collection and is reported as
        ``MutationResult.returned``.
        """

        rule = self._rules.get(scope.game_name)
        past_cutoff = self._rules.is_past_cutoff(scope.game_name, scope.draw_date)
        now = self._clock()

        with self._store.session() as session:
            crucible = self._load_or_create(session, scope, rule)

            incoming = self._ingots.get(session, scope, collection_ingot_id)
            if incoming is None:
                reason = crucible.check_editable(past_cutoff) or RejectReason.INGOT_NOT_IN_COLLECTION
                return self._reject("replace", scope, reason, crucible)

            reason, displaced = crucible.replace(incoming, crucible_ingot_id, past_cutoff=past_cutoff, now=now)
            if reason is not None or displaced is None:
                return self._reject("replace", scope, reason or RejectReason.INGOT_NOT_IN_CRUCIBLE, crucible)

            self._ingots.remove(session, scope, incoming.ingot_id)
            self._ingots.add(session, scope, displaced, now)
            self._crucibles.save(session, crucible)

        logger.info(
            "Replaced ingot %s with %s in crucible %s", displaced.ingot_id, incoming.ingot_id, crucible.id
        )
        return MutationResult.ok(crucible, returned=displaced)

    def forge(self, scope: DrawScope, confirmed: bool) -> MutationResult:
        """Lock the crucible locally, then remotely.

        Remote failures revert the crucible to ``draft`` and are re-raised. A
        failure to clear the collection after a remote success is logged only.
        """

        rule = self._rules.get(scope.game_name)
        past_cutoff = self._rules.is_past_cutoff(scope.game_name, scope.draw_date)

        with self._store.session() as session:
            crucible = self._load_or_create(session, scope, rule)
            reason = crucible.check_forgeable(confirmed=confirmed, past_cutoff=past_cutoff)
            if reason is not None:
                return self._reject("forge", scope, reason, crucible)

            crucible.mark_submitted(self._clock())
            self._crucibles.save(session, crucible)

        logger.info("Crucible %s marked submitted; sending to server", crucible.id)
        try:
            outcome = self._api.submit_playcard(
                user_id=scope.user_id,
                game_name=scope.game_name,
                draw_date=scope.draw_date,
                play_card_id=crucible.id,
                ingot_ids=crucible.ingot_ids(),
            )
        except Exception:
            logger.warning("Forge of crucible %s failed remotely; reverting to draft", crucible.id)
            crucible.revert_to_draft(self._clock())
            with self._store.session() as session:
                self._crucibles.save(session, crucible)
            raise

        # The lock is final on both sides; a failed cleanup only leaves stale ingots.
        try:
            with self._store.session() as session:
                leftover = self._ingots.clear_all(session, scope)
        except Exception:
            logger.warning(
                "Crucible %s forged but clearing the collection for %s failed", crucible.id, scope, exc_info=True
            )
            return MutationResult.ok(crucible)

        logger.info(
            "Crucible %s forged (%s); cleared %s leftover ingot(s)", crucible.id, outcome.message or "ok", leftover
        )
        return MutationResult.ok(crucible)
