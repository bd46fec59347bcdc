from __future__ import annotations

from datetime import date

from golden_ticket.domain.models import CachedResult
from golden_ticket.schemas.remote import GameResultPayload

from tests.conftest import GAME, LAST_DRAW, NEXT_DRAW


def test_upsert_with_numbers_sets_new_flag_and_mark_seen_clears_once(services, clock):
    stored = services.results.upsert(
        CachedResult(game_name=GAME, draw_date=LAST_DRAW, winning_numbers=(1, 2, 3, 4, 5, 6), bonus_number=7)
    )

    assert stored.new_draw_flag
    assert stored.fetched_at == clock.now
    assert services.results.any_unseen()

    assert services.results.mark_seen(GAME, LAST_DRAW) == 1
    assert not services.results.get(GAME, LAST_DRAW).new_draw_flag
    assert services.results.mark_seen(GAME, LAST_DRAW) == 0
    assert not services.results.any_unseen()


def test_upsert_without_numbers_is_not_new(services):
    stored = services.results.upsert(CachedResult(game_name=GAME, draw_date=LAST_DRAW, winning_numbers=()))
    assert not stored.new_draw_flag
    assert not stored.has_numbers


def test_upsert_derives_flag_regardless_of_caller_value(services):
    stored = services.results.upsert(
        CachedResult(game_name=GAME, draw_date=LAST_DRAW, winning_numbers=None, new_draw_flag=True)
    )
    assert not stored.new_draw_flag


def test_mark_seen_on_missing_row_is_zero(services):
    assert services.results.mark_seen(GAME, date(2020, 1, 1)) == 0


def test_placeholder_does_not_overwrite_existing_row(services):
    assert services.results.insert_placeholder(GAME, NEXT_DRAW)
    placeholder = services.results.get(GAME, NEXT_DRAW)
    assert placeholder.winning_numbers is None
    assert not placeholder.new_draw_flag

    services.results.upsert(CachedResult(game_name=GAME, draw_date=LAST_DRAW, winning_numbers=(9,)))
    assert not services.results.insert_placeholder(GAME, LAST_DRAW)
    assert services.results.get(GAME, LAST_DRAW).winning_numbers == (9,)


def test_fetch_and_cache_maps_remote_payload(services, api):
    api.results[(GAME, LAST_DRAW)] = GameResultPayload(
        winning_numbers=(3, 11, 19, 27, 35, 43),
        bonus_number=5,
        total_combinations=13_983_816,
        odds={"odds_6_6": 13983816.0, "odds_any_prize": 6.6, "unrelated": 1.0},
        user_score=120,
        win_id="W-1",
        archive_password="pw",
        archive_checksum="sum",
    )

    result = services.results.fetch_and_cache(GAME, LAST_DRAW)

    assert result.new_draw_flag
    assert result.winning_numbers == (3, 11, 19, 27, 35, 43)
    assert result.odds["odds_6_6"] == 13983816.0
    assert result.odds["odds_5_6"] is None
    assert "unrelated" not in result.odds
    assert result.user_score == 120
    assert result.win_id == "W-1"
    assert services.results.get(GAME, LAST_DRAW) == result


def test_fetch_and_cache_empty_body_writes_nothing(services):
    assert services.results.fetch_and_cache(GAME, LAST_DRAW) is None
    assert services.results.get(GAME, LAST_DRAW) is None
