from __future__ import annotations

import random
from datetime import datetime, timezone

import pytest

from golden_ticket.domain.crucible import RejectReason
from golden_ticket.errors import RemoteDecodeError
from golden_ticket.repositories.ingot_repository import IngotRepository
from golden_ticket.schemas.remote import CombinationGrant
from golden_ticket.services.smelter_service import SmelterService


def test_smelt_adds_ingot_and_mirrors_server_count(services, scope, seed_draw_info, api):
    seed_draw_info(limit=5, used=3)
    api.grants.append(CombinationGrant(ingot_id=901, numbers=(4, 8, 15, 16, 23, 42), user_requests_count=4))

    result = services.smelter.smelt(scope)

    assert result.accepted
    assert result.ingot.ingot_id == 901
    assert result.remaining == 1
    assert [i.ingot_id for i in services.collection.list(scope)] == [901]

    info = services.draw_info.get(scope.game_name, scope.draw_date)
    assert info.user_combinations_requested == 4
    assert info.user_request_limit == 5
    assert info.total_combinations == 13_983_816
    assert info.archive_checksum == "abc123"


def test_smelt_trusts_server_count_over_local_increment(services, scope, seed_draw_info, api):
    seed_draw_info(limit=10, used=1)
    api.grants.append(CombinationGrant(ingot_id=1, numbers=(1,), user_requests_count=6))

    result = services.smelter.smelt(scope)

    assert result.remaining == 4
    assert services.smelter.quota(scope.game_name, scope.draw_date).used == 6


def test_combination_number_within_total(store, api, services, scope, seed_draw_info, clock):
    seed_draw_info(total=10)
    smelter = SmelterService(store, api, services.rules, clock=clock, rng=random.Random(1))
    api.grants.append(CombinationGrant(ingot_id=1, numbers=(1,), user_requests_count=4))

    smelter.smelt(scope)

    call = [c for c in api.calls if c[0] == "request_combination"][0]
    assert 1 <= call[3] <= 10


def test_smelt_rejected_when_quota_exhausted(services, scope, seed_draw_info, api):
    seed_draw_info(limit=5, used=5)

    result = services.smelter.smelt(scope)

    assert result.reason is RejectReason.QUOTA_EXHAUSTED
    assert api.count("request_combination") == 0


def test_smelt_rejected_without_draw_info(services, scope, api):
    assert services.smelter.smelt(scope).reason is RejectReason.DRAW_INFO_MISSING
    assert api.count("request_combination") == 0


def test_smelt_rejected_after_cutoff(services, scope, seed_draw_info, clock, api):
    seed_draw_info()
    clock.now = datetime(2024, 6, 9, 2, 0, tzinfo=timezone.utc)

    assert services.smelter.smelt(scope).reason is RejectReason.PAST_CUTOFF
    assert api.count("request_combination") == 0


def test_decode_failure_fails_the_smelt(services, scope, seed_draw_info, api):
    seed_draw_info()
    api.grant_error = RemoteDecodeError("Missing updated request count from server")

    with pytest.raises(RemoteDecodeError):
        services.smelter.smelt(scope)

    assert services.collection.list(scope) == []
    assert services.draw_info.get(scope.game_name, scope.draw_date).user_combinations_requested == 3


class BrokenIngotRepository(IngotRepository):
    def add(self, session, scope, ingot, now):
        raise RuntimeError("write failed")


def test_local_write_failure_is_reported_after_remote_success(store, api, services, scope, seed_draw_info, clock):
    seed_draw_info(limit=5, used=3)
    smelter = SmelterService(store, api, services.rules, ingots=BrokenIngotRepository(), clock=clock)
    api.grants.append(CombinationGrant(ingot_id=77, numbers=(1, 2), user_requests_count=4))

    with pytest.raises(RuntimeError):
        smelter.smelt(scope)

    assert api.count("request_combination") == 1
    # Nothing was written locally; the server-side quota is already spent.
    assert services.draw_info.get(scope.game_name, scope.draw_date).user_combinations_requested == 3
