from __future__ import annotations

import pytest

from golden_ticket.schemas.remote import CombinationGrant, GameResultPayload
from tests.conftest import GAME, LAST_DRAW

FORGE_URL = f"/games/{GAME}/draws/2024-06-08/forge"


@pytest.fixture
def signed_in(client):
    resp = client.post("/session/login", json={"username": "ada", "password": "secret"})
    assert resp.status_code == 200
    return resp.get_json()["data"]


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["data"]["store_open"] is True
    assert body["data"]["signed_in"] is False


def test_forge_requires_sign_in(client):
    resp = client.get(FORGE_URL)
    assert resp.status_code == 401
    assert resp.get_json()["error"]["code"] == "not_signed_in"


def test_login_warms_default_game(signed_in):
    assert signed_in["user_id"] == 7
    assert signed_in["membership_level"] == "gold"
    assert signed_in["sync_error"] is None
    assert signed_in["synced"][0]["game_name"] == GAME
    assert signed_in["synced"][0]["next_draw_date"] == "2024-06-08"
    assert signed_in["synced"][0]["last_draw_date"] == "2024-06-05"


def test_login_validation_error(client):
    resp = client.post("/session/login", json={"username": "ada"})
    assert resp.status_code == 400
    assert "password" in resp.get_json()["error"]["details"]


def test_register(client):
    resp = client.post(
        "/session/register",
        json={"username": "ada", "password": "secret", "email": "ada@example.com"},
    )
    assert resp.status_code == 201
    assert resp.get_json()["data"]["user_id"] == 8


def test_list_games(client):
    resp = client.get("/games")
    names = [g["game_name"] for g in resp.get_json()["data"]]
    assert names == ["DailyGrand", "LottoMax", GAME]


def test_forge_view(client, signed_in):
    resp = client.get(FORGE_URL)
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["crucible"]["status"] == "draft"
    assert data["crucible"]["capacity"] == 6
    assert data["crucible"]["ingots"] == []
    assert data["collection"] == []
    assert data["quota"] == {"limit": 5, "used": 3, "remaining": 2}
    assert data["cutoff"] == "2024-06-09T01:30:00+00:00"
    assert data["past_cutoff"] is False


def test_smelt_then_add_then_premature_submit(client, api, signed_in):
    api.grants.append(CombinationGrant(ingot_id=42, numbers=(3, 9, 12, 20, 33, 41), user_requests_count=4))

    resp = client.post(f"{FORGE_URL}/smelt")
    assert resp.status_code == 201
    assert resp.get_json()["data"] == {"ingot": {"ingot_id": 42, "numbers": [3, 9, 12, 20, 33, 41]}, "remaining": 1}

    resp = client.post(f"{FORGE_URL}/ingots", json={"ingot_id": 42})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["crucible"]["ingots"][0]["ingot_id"] == 42
    assert resp.get_json()["data"]["crucible"]["slots_left"] == 5

    resp = client.post(f"{FORGE_URL}/ingots", json={"ingot_id": 999})
    assert resp.status_code == 409
    assert resp.get_json()["error"]["message"] == "ingot_not_in_collection"

    resp = client.post(f"{FORGE_URL}/submit", json={"confirmed": True})
    assert resp.status_code == 409
    assert resp.get_json()["error"]["message"] == "crucible_incomplete"
    assert api.count("submit_playcard") == 0


def test_smelt_rejected_when_quota_exhausted(client, api, signed_in):
    api.grants.append(CombinationGrant(ingot_id=1, numbers=(1,), user_requests_count=4))
    api.grants.append(CombinationGrant(ingot_id=2, numbers=(2,), user_requests_count=5))
    assert client.post(f"{FORGE_URL}/smelt").status_code == 201
    assert client.post(f"{FORGE_URL}/smelt").status_code == 201

    resp = client.post(f"{FORGE_URL}/smelt")
    assert resp.status_code == 409
    assert resp.get_json()["error"]["message"] == "quota_exhausted"


def test_invalid_draw_date_is_400(client, signed_in):
    resp = client.get(f"/games/{GAME}/draws/06-08-2024/forge")
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "validation_error"


def test_unknown_game_is_404(client, signed_in):
    resp = client.get("/games/Keno/draws/2024-06-08/forge")
    assert resp.status_code == 404


def test_result_view_and_seen(client, api, signed_in):
    api.results[(GAME, LAST_DRAW)] = GameResultPayload(winning_numbers=(4, 8, 15, 16, 23, 42), bonus_number=7)

    resp = client.get(f"/games/{GAME}/results/2024-06-05?fetch=1")
    assert resp.status_code == 200
    assert resp.get_json()["data"]["new_draw_flag"] is True

    status = client.get(f"/games/{GAME}/status").get_json()["data"]
    assert status["has_unseen_results"] is True
    assert status["needs_submission"] is True

    assert client.post(f"/games/{GAME}/results/2024-06-05/seen").get_json()["data"] == {"cleared": 1}
    assert client.post(f"/games/{GAME}/results/2024-06-05/seen").get_json()["data"] == {"cleared": 0}

    status = client.get(f"/games/{GAME}/status").get_json()["data"]
    assert status["has_unseen_results"] is False


def test_missing_result_is_404(client, signed_in):
    resp = client.get(f"/games/{GAME}/results/2024-05-01")
    assert resp.status_code == 404


def test_draw_info_endpoint(client, signed_in):
    resp = client.get(f"/games/{GAME}/draw-info")
    data = resp.get_json()["data"]
    assert data["draw_date"] == "2024-06-08"
    assert data["user_request_limit"] == 5


def test_progress_endpoints(client, signed_in):
    resp = client.post(f"/games/{GAME}/progress", json={"score_to_add": 12, "awards_to_add": ["first_forge"]})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["game_score"] == 12

    assert client.post("/games/LottoMax/activate").get_json()["data"]["changed"] is True

    data = client.get("/games/progress").get_json()["data"]
    assert data["total_score"] == 12
    assert data["followed"] == ["LottoMax", GAME]

    assert client.post("/games/LottoMax/deactivate").get_json()["data"]["changed"] is True


def test_logout(client, signed_in):
    resp = client.post("/session/logout")
    assert resp.get_json()["data"] == {"signed_in": False}
    assert client.get(FORGE_URL).status_code == 401
