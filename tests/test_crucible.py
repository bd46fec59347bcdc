from __future__ import annotations

from datetime import date, datetime, timezone

from golden_ticket.domain.crucible import Crucible, CrucibleStatus, RejectReason
from golden_ticket.domain.models import DrawScope, Ingot

NOW = datetime(2024, 6, 7, 12, tzinfo=timezone.utc)
SCOPE = DrawScope(user_id=1, game_name="lotto649", draw_date=date(2024, 6, 8))


def _ingot(i: int) -> Ingot:
    return Ingot(ingot_id=i, numbers=(i, i + 1, i + 2))


def test_add_stops_at_capacity():
    crucible = Crucible(scope=SCOPE, capacity=3)
    for i in range(3):
        assert crucible.add(_ingot(i), past_cutoff=False, now=NOW) is None

    assert crucible.add(_ingot(99), past_cutoff=False, now=NOW) is RejectReason.CRUCIBLE_FULL
    assert crucible.ingot_ids() == [0, 1, 2]
    assert crucible.slots_left == 0


def test_add_rejected_past_cutoff_or_when_not_draft():
    crucible = Crucible(scope=SCOPE, capacity=3)
    assert crucible.add(_ingot(1), past_cutoff=True, now=NOW) is RejectReason.PAST_CUTOFF

    crucible.status = CrucibleStatus.LOCKED
    assert crucible.add(_ingot(1), past_cutoff=False, now=NOW) is RejectReason.NOT_DRAFT
    assert crucible.ingots == []


def test_replace_keeps_position_and_returns_displaced():
    crucible = Crucible(scope=SCOPE, capacity=3, ingots=[_ingot(1), _ingot(2), _ingot(3)])

    reason, displaced = crucible.replace(_ingot(9), 2, past_cutoff=False, now=NOW)

    assert reason is None
    assert displaced == _ingot(2)
    assert crucible.ingot_ids() == [1, 9, 3]


def test_replace_stale_selection_changes_nothing():
    crucible = Crucible(scope=SCOPE, capacity=3, ingots=[_ingot(1)])

    reason, displaced = crucible.replace(_ingot(9), 42, past_cutoff=False, now=NOW)

    assert reason is RejectReason.INGOT_NOT_IN_CRUCIBLE
    assert displaced is None
    assert crucible.ingot_ids() == [1]
    assert crucible.last_modified is None


def test_check_forgeable_requires_confirmation_full_list_and_draft():
    crucible = Crucible(scope=SCOPE, capacity=2, ingots=[_ingot(1)])
    assert crucible.check_forgeable(confirmed=False, past_cutoff=False) is RejectReason.NOT_CONFIRMED
    assert crucible.check_forgeable(confirmed=True, past_cutoff=False) is RejectReason.CRUCIBLE_INCOMPLETE

    crucible.add(_ingot(2), past_cutoff=False, now=NOW)
    assert crucible.check_forgeable(confirmed=True, past_cutoff=True) is RejectReason.PAST_CUTOFF
    assert crucible.check_forgeable(confirmed=True, past_cutoff=False) is None

    crucible.mark_submitted(NOW)
    assert crucible.status.is_final
    assert crucible.check_forgeable(confirmed=True, past_cutoff=False) is RejectReason.NOT_DRAFT

    crucible.revert_to_draft(NOW)
    assert crucible.is_draft
