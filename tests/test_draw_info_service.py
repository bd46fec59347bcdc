from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy import delete

from golden_ticket.domain.models import DrawInfo
from golden_ticket.errors import RemoteTimeoutError
from golden_ticket.models.draw_info import GameDrawInfo
from golden_ticket.services.draw_info_service import DrawInfoService
from tests.conftest import GAME, NEXT_DRAW


class FakeMonotonic:
    def __init__(self) -> None:
        self.value = 1000.0

    def __call__(self) -> float:
        return self.value


@pytest.fixture
def ticker():
    return FakeMonotonic()


@pytest.fixture
def draw_info(store, api, clock, ticker):
    return DrawInfoService(store, api, clock=clock, ttl_seconds=60, monotonic=ticker)


def test_get_without_date_returns_latest(draw_info):
    draw_info.upsert(DrawInfo(game_name=GAME, draw_date=date(2024, 6, 1)))
    draw_info.upsert(DrawInfo(game_name=GAME, draw_date=date(2024, 6, 8), total_combinations=10))
    draw_info.upsert(DrawInfo(game_name="LottoMax", draw_date=date(2024, 6, 14)))

    assert draw_info.get(GAME).draw_date == date(2024, 6, 8)
    assert draw_info.get(GAME, date(2024, 6, 1)).total_combinations is None
    assert draw_info.get("DailyGrand") is None


def test_upsert_replaces_row_and_stamps_time(draw_info, clock):
    draw_info.upsert(DrawInfo(game_name=GAME, draw_date=NEXT_DRAW, total_combinations=10, archive_checksum="a"))
    clock.advance(minutes=5)
    stored = draw_info.upsert(DrawInfo(game_name=GAME, draw_date=NEXT_DRAW, user_request_limit=3))

    assert stored.total_combinations is None
    assert stored.archive_checksum is None
    assert stored.user_request_limit == 3
    assert stored.last_updated == datetime(2024, 6, 7, 12, 5, tzinfo=timezone.utc)


def test_next_draw_date_reads_through_memo(draw_info, api):
    assert draw_info.get_next_draw_date(GAME) == NEXT_DRAW
    assert draw_info.get_next_draw_date(GAME) == NEXT_DRAW
    assert api.count("game_info") == 1
    assert draw_info.get(GAME, NEXT_DRAW).user_request_limit == 5


def test_memo_expires_after_ttl(draw_info, api, ticker):
    draw_info.get_next_draw_date(GAME)
    ticker.value += 61
    draw_info.get_next_draw_date(GAME)
    assert api.count("game_info") == 2


def test_memo_hit_without_durable_row_forces_refresh(draw_info, api, store):
    draw_info.get_next_draw_date(GAME)
    with store.session() as session:
        session.execute(delete(GameDrawInfo))

    assert draw_info.get_next_draw_date(GAME) == NEXT_DRAW
    assert api.count("game_info") == 2
    assert draw_info.get(GAME, NEXT_DRAW) is not None


def test_force_refresh_always_calls_remote(draw_info, api):
    draw_info.get_next_draw_date(GAME)
    draw_info.get_next_draw_date(GAME, force_refresh=True)
    assert api.count("game_info") == 2


def test_failed_refresh_invalidates_and_raises(draw_info, api):
    draw_info.get_next_draw_date(GAME)
    api.info_error = RemoteTimeoutError()

    with pytest.raises(RemoteTimeoutError):
        draw_info.get_next_draw_date(GAME, force_refresh=True)

    api.info_error = None
    draw_info.get_next_draw_date(GAME)
    assert api.count("game_info") == 3


def test_invalidate_clears_memo(draw_info, api):
    draw_info.get_next_draw_date(GAME)
    draw_info.invalidate()
    draw_info.get_next_draw_date(GAME)
    assert api.count("game_info") == 2


def test_empty_remote_answer_yields_none(draw_info, api):
    api.game_info.clear()
    assert draw_info.get_next_draw_date(GAME) is None
