from __future__ import annotations

from datetime import date

import pytest

from golden_ticket.domain.models import DrawInfo
from golden_ticket.domain.quota import QuotaTracker
from golden_ticket.errors import RemoteDecodeError


def test_remaining_then_record_server_count():
    quota = QuotaTracker(limit=5, used=3)
    assert quota.remaining() == 2

    assert quota.record_request(4) == 1
    assert quota.used == 4
    assert quota.remaining() == 1


@pytest.mark.parametrize("limit", [0, 1, 5, 10])
@pytest.mark.parametrize("used", [0, 1, 5, 12])
def test_remaining_is_clamped_difference(limit, used):
    quota = QuotaTracker(limit=limit, used=used)
    assert quota.remaining() == max(0, limit - used)
    assert quota.remaining() >= 0


def test_missing_values_count_as_zero():
    assert QuotaTracker().remaining() == 0
    assert QuotaTracker(limit=3).remaining() == 3
    assert QuotaTracker(used=3).exhausted


def test_record_request_mirrors_server_even_when_not_plus_one():
    quota = QuotaTracker(limit=10, used=2)
    quota.record_request(7)
    assert quota.used == 7


@pytest.mark.parametrize("bad", ["4", 4.0, None, True])
def test_record_request_rejects_non_integer(bad):
    quota = QuotaTracker(limit=5, used=3)
    with pytest.raises(RemoteDecodeError):
        quota.record_request(bad)
    assert quota.used == 3


def test_from_draw_info():
    info = DrawInfo(game_name="lotto649", draw_date=date(2024, 6, 8), user_request_limit=5, user_combinations_requested=1)
    assert QuotaTracker.from_draw_info(info).remaining() == 4
    assert QuotaTracker.from_draw_info(None).remaining() == 0
