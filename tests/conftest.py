from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from golden_ticket import create_app
from golden_ticket.db import Store
from golden_ticket.domain.models import DrawInfo, DrawScope, Ingot
from golden_ticket.schemas.remote import (
    CombinationGrant,
    GameInfoPayload,
    GameResultPayload,
    LoginPayload,
    RegisterOutcome,
    SubmitOutcome,
)
from golden_ticket.services.registry import build_services

UTC = timezone.utc

GAME = "lotto649"
NEXT_DRAW = date(2024, 6, 8)  # Saturday
LAST_DRAW = date(2024, 6, 5)  # Wednesday

TEST_CONFIG = {
    "DATABASE_URL": "sqlite://",
    "TESTING": True,
    "API_BASE_URL": "https://api.invalid/v1",
    "CUTOFF_LEAD_MINUTES": 60,
    "LOCAL_TIMEZONE": "America/Edmonton",
    "POLL_INTERVAL_SECONDS": 3600.0,
    "POLL_NOON_HOUR": 12,
    "NEXT_DRAW_CACHE_TTL_SECONDS": 300.0,
    "DEFAULT_GAME": GAME,
}


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeApi:
    """In-memory stand-in for GoldenTicketApi."""

    def __init__(self) -> None:
        self.token: str | None = None
        self.game_info: dict[str, GameInfoPayload] = {}
        self.results: dict[tuple[str, date], GameResultPayload] = {}
        self.grants: list[CombinationGrant] = []
        self.info_error: Exception | None = None
        self.result_error: Exception | None = None
        self.grant_error: Exception | None = None
        self.submit_error: Exception | None = None
        self.calls: list[tuple] = []

    def set_token(self, token):
        self.token = token

    def clear_token(self):
        self.token = None

    @property
    def has_token(self):
        return self.token is not None

    def close(self):
        pass

    def login(self, username, password):
        self.calls.append(("login", username))
        return LoginPayload(
            user_id=7,
            auth_token="tok-7",
            account_status="active",
            membership_level="gold",
            min_app_version="1.0.0",
        )

    def register(self, username, password, email, first_name="", last_name=""):
        self.calls.append(("register", username))
        return RegisterOutcome(status="success", message="Account created", user_id=8)

    def get_game_info(self, game_name):
        self.calls.append(("game_info", game_name))
        if self.info_error is not None:
            raise self.info_error
        return self.game_info.get(game_name)

    def get_game_result(self, game_name, draw_date):
        self.calls.append(("game_result", game_name, draw_date))
        if self.result_error is not None:
            raise self.result_error
        return self.results.get((game_name, draw_date))

    def request_combination(self, game_name, draw_date, combination_number):
        self.calls.append(("request_combination", game_name, draw_date, combination_number))
        if self.grant_error is not None:
            raise self.grant_error
        return self.grants.pop(0)

    def submit_playcard(self, user_id, game_name, draw_date, play_card_id, ingot_ids):
        self.calls.append(("submit_playcard", user_id, game_name, draw_date, play_card_id, list(ingot_ids)))
        if self.submit_error is not None:
            raise self.submit_error
        return SubmitOutcome(status="playcard_submitted", message="Play card submitted")

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


@pytest.fixture
def clock() -> FakeClock:
    # Friday noon UTC: before Saturday's cutoff, after Wednesday's results are due.
    return FakeClock(datetime(2024, 6, 7, 12, 0, tzinfo=UTC))


@pytest.fixture
def api() -> FakeApi:
    fake = FakeApi()
    fake.set_token("tok-7")
    fake.game_info[GAME] = GameInfoPayload(
        draw_date=NEXT_DRAW,
        total_combinations=13_983_816,
        user_request_limit=5,
        user_combinations_requested=3,
        archive_checksum="abc123",
    )
    return fake


@pytest.fixture
def store():
    store = Store("sqlite://").open()
    yield store
    store.close()


@pytest.fixture
def services(store, api, clock):
    services = build_services(store, TEST_CONFIG, api=api, clock=clock)
    yield services
    services.sync.close()


@pytest.fixture
def scope() -> DrawScope:
    return DrawScope(user_id=7, game_name=GAME, draw_date=NEXT_DRAW)


@pytest.fixture
def seed_draw_info(services):
    def _seed(limit=5, used=3, total=13_983_816, draw_date=NEXT_DRAW) -> DrawInfo:
        return services.draw_info.upsert(
            DrawInfo(
                game_name=GAME,
                draw_date=draw_date,
                total_combinations=total,
                user_request_limit=limit,
                user_combinations_requested=used,
                archive_checksum="abc123",
            )
        )

    return _seed


@pytest.fixture
def fill_collection(services, clock, scope):
    def _fill(*ingot_ids: int) -> list[Ingot]:
        ingots = []
        for ingot_id in ingot_ids:
            ingot = Ingot(ingot_id=ingot_id, numbers=(1, 2, 3, 4, 5, ingot_id % 49 + 1))
            services.collection.add(scope, ingot)
            clock.advance(seconds=1)
            ingots.append(ingot)
        return ingots

    return _fill


@pytest.fixture
def app(api, clock):
    app = create_app(TEST_CONFIG, api=api, clock=clock)
    yield app
    app.extensions["services"].close()


@pytest.fixture
def client(app):
    return app.test_client()
