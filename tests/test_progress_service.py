from __future__ import annotations

from tests.conftest import GAME


def test_upsert_progress_accumulates(services):
    progress = services.progress

    progress.upsert_progress(7, GAME, score_to_add=10, awards_to_add=["first_smelt"], statistics={"smelts": 1})
    updated = progress.upsert_progress(
        7, GAME, score_to_add=5, awards_to_add=["first_smelt", "full_crucible"], statistics={"forges": 1}
    )

    assert updated.game_score == 15
    assert updated.game_awards == ("first_smelt", "full_crucible")
    assert updated.game_statistics == {"smelts": 1, "forges": 1}
    assert progress.get_progress(7, GAME) == updated


def test_total_score_spans_games(services):
    services.progress.upsert_progress(7, GAME, score_to_add=10)
    services.progress.upsert_progress(7, "LottoMax", score_to_add=3)
    services.progress.upsert_progress(8, GAME, score_to_add=100)

    assert services.progress.total_score(7) == 13
    assert services.progress.total_score(99) == 0
    assert [p.game_name for p in services.progress.list_progress(7)] == ["LottoMax", GAME]


def test_profile_keeps_omitted_fields(services):
    services.progress.record_profile(7, "gold")
    services.progress.record_profile(7)

    assert services.progress.get_profile(7)["membership_level"] == "gold"
    assert services.progress.get_profile(8) is None


def test_activate_and_deactivate(services):
    progress = services.progress

    assert progress.activate(7, "LottoMax") is True
    assert progress.activate(7, "LottoMax") is False
    assert progress.active_games(7) == ["LottoMax"]

    assert progress.deactivate(7, "LottoMax") == 1
    assert progress.deactivate(7, "LottoMax") == 0
    assert progress.active_games(7) == []

    assert progress.activate(7, "LottoMax") is True
    assert progress.active_games(7) == ["LottoMax"]


def test_followed_games_orders_active_first(services):
    services.progress.upsert_progress(7, "DailyGrand")
    services.progress.upsert_progress(7, GAME)
    services.progress.activate(7, GAME)

    assert services.progress.followed_games(7) == [GAME, "DailyGrand"]
