"""Background result poller.

One poller belongs to one sync orchestrator. ``start`` runs a check right
away and, unless that check already captured the result, hands the game to a
daemon thread that re-checks every ``interval_seconds`` until results are
captured or ``stop`` is called. A failed check of any kind is logged and
retried on the next tick.
"""

from __future__ import annotations

import logging
import threading
from datetime import date, datetime, tzinfo
from enum import Enum

from golden_ticket.domain import schedule as sched
from golden_ticket.errors import AppError
from golden_ticket.services.draw_info_service import DrawInfoService
from golden_ticket.services.game_rules_service import GameRulesService
from golden_ticket.services.result_service import ResultService
from golden_ticket.utils.dates import Clock, utcnow

logger = logging.getLogger(__name__)


class PollOutcome(str, Enum):
    CAPTURED = "captured"  # fetched non-empty numbers this cycle
    ALREADY_CAPTURED = "already_captured"  # cached numbers still flagged new
    SEEN = "seen"  # cached numbers already viewed; keep polling
    PENDING = "pending"  # server has no numbers yet
    FAILED = "failed"  # error this cycle; retried next tick

    @property
    def stops_polling(self) -> bool:
        return self in (PollOutcome.CAPTURED, PollOutcome.ALREADY_CAPTURED)


class ResultPoller:
    def __init__(
        self,
        draw_info: DrawInfoService,
        results: ResultService,
        rules: GameRulesService,
        local_tz: tzinfo,
        interval_seconds: float = 3600.0,
        noon_hour: int = 12,
        clock: Clock = utcnow,
    ) -> None:
        self._draw_info = draw_info
        self._results = results
        self._rules = rules
        self._local_tz = local_tz
        self._interval = interval_seconds
        self._noon_hour = noon_hour
        self._clock = clock

        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._starting = False
        self.game_name: str | None = None
        self.last_outcome: PollOutcome | None = None

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def should_poll(self, game_name: str, last_draw_date: date, now: datetime | None = None) -> bool:
        """True once local time passes noon on the day after the draw."""

        instant = self._rules.draw_instant(game_name, last_draw_date)
        if instant is None:
            return False
        expected = sched.results_expected_after(instant, self._local_tz, self._noon_hour)
        return (now or self._clock()) >= expected

    def check(self, game_name: str) -> PollOutcome:
        try:
            outcome = self._check(game_name)
        except AppError as exc:
            logger.warning("Poll check for %s failed: %s", game_name, exc)
            outcome = PollOutcome.FAILED
        except Exception:
            logger.exception("Unexpected error in poll check for %s", game_name)
            outcome = PollOutcome.FAILED
        self.last_outcome = outcome
        return outcome

    def _check(self, game_name: str) -> PollOutcome:
        # Force a refresh so the previous-draw calculation follows date rollover.
        next_draw_date = self._draw_info.get_next_draw_date(game_name, force_refresh=True)
        if next_draw_date is None:
            logger.warning("Poll check for %s: next draw date unavailable", game_name)
            return PollOutcome.FAILED

        last_draw_date = self._rules.previous_draw_date(game_name, next_draw_date)
        if last_draw_date is None:
            logger.warning("Poll check for %s: cannot derive previous draw date", game_name)
            return PollOutcome.FAILED

        cached = self._results.get(game_name, last_draw_date)
        if cached is None or not cached.has_numbers:
            fetched = self._results.fetch_and_cache(game_name, last_draw_date)
            if fetched is not None and fetched.has_numbers:
                logger.info("Results captured for %s / %s", game_name, last_draw_date.isoformat())
                return PollOutcome.CAPTURED
            logger.info("No results yet for %s / %s", game_name, last_draw_date.isoformat())
            return PollOutcome.PENDING

        if cached.new_draw_flag:
            return PollOutcome.ALREADY_CAPTURED
        return PollOutcome.SEEN

    def start(self, game_name: str, last_draw_date: date) -> PollOutcome | None:
        """Check now, then keep polling in the background if still needed.

        Returns None without doing anything when already running.
        """

        with self._lock:
            if self._starting or self.is_running:
                logger.debug("Poller already running for %s", self.game_name)
                return None
            self._starting = True
            self._stop_event = threading.Event()
            self.game_name = game_name

        try:
            logger.info("Poller starting for %s (last draw %s)", game_name, last_draw_date.isoformat())
            outcome = self.check(game_name)
            if outcome.stops_polling:
                logger.info("Poller for %s done after first check (%s)", game_name, outcome.value)
                return outcome

            stop_event = self._stop_event
            thread = threading.Thread(
                target=self._run,
                args=(game_name, stop_event),
                name=f"result-poller-{game_name}",
                daemon=True,
            )
            with self._lock:
                if stop_event.is_set():
                    return outcome
                self._thread = thread
                thread.start()
            return outcome
        finally:
            with self._lock:
                self._starting = False

    def _run(self, game_name: str, stop_event: threading.Event) -> None:
        while not stop_event.wait(self._interval):
            outcome = self.check(game_name)
            if outcome.stops_polling:
                logger.info("Poller for %s stopping (%s)", game_name, outcome.value)
                break

    def stop(self, timeout: float | None = 5.0) -> None:
        with self._lock:
            self._stop_event.set()
            thread = self._thread
            self._thread = None

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
            logger.info("Poller stopped for %s", self.game_name)
