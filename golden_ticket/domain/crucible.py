"""Crucible (per-draw submission) state machine.

Transitions are pure in-memory operations; persistence and the remote lock
call live in ``services.forge_service``. Every guard returns a
``RejectReason`` instead of raising: a rejected mutation is an expected,
user-facing outcome.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from golden_ticket.domain.models import DrawScope, Ingot


class CrucibleStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    # Reserved; treated exactly like SUBMITTED.
    LOCKED = "locked"

    @property
    def is_final(self) -> bool:
        return self is not CrucibleStatus.DRAFT


class RejectReason(str, Enum):
    NOT_DRAFT = "not_draft"
    PAST_CUTOFF = "past_cutoff"
    CRUCIBLE_FULL = "crucible_full"
    CRUCIBLE_INCOMPLETE = "crucible_incomplete"
    INGOT_NOT_IN_COLLECTION = "ingot_not_in_collection"
    INGOT_NOT_IN_CRUCIBLE = "ingot_not_in_crucible"
    NOT_CONFIRMED = "not_confirmed"
    QUOTA_EXHAUSTED = "quota_exhausted"
    DRAW_INFO_MISSING = "draw_info_missing"


@dataclass
class Crucible:
    scope: DrawScope
    capacity: int  # the game's regular_balls_drawn
    ingots: list[Ingot] = field(default_factory=list)
    status: CrucibleStatus = CrucibleStatus.DRAFT
    id: int | None = None
    name: str | None = None
    last_modified: datetime | None = None

    @property
    def is_draft(self) -> bool:
        return self.status is CrucibleStatus.DRAFT

    @property
    def is_full(self) -> bool:
        return len(self.ingots) >= self.capacity

    @property
    def slots_left(self) -> int:
        return max(0, self.capacity - len(self.ingots))

    def ingot_ids(self) -> list[int]:
        return [ingot.ingot_id for ingot in self.ingots]

    def position_of(self, ingot_id: int) -> int | None:
        for index, ingot in enumerate(self.ingots):
            if ingot.ingot_id == ingot_id:
                return index
        return None

    def check_editable(self, past_cutoff: bool) -> RejectReason | None:
        if not self.is_draft:
            return RejectReason.NOT_DRAFT
        if past_cutoff:
            return RejectReason.PAST_CUTOFF
        return None

    def add(self, ingot: Ingot, *, past_cutoff: bool, now: datetime) -> RejectReason | None:
        reason = self.check_editable(past_cutoff)
        if reason is None and self.is_full:
            reason = RejectReason.CRUCIBLE_FULL
        if reason is not None:
            return reason

        self.ingots.append(ingot)
        self.last_modified = now
        return None

    def replace(
        self,
        incoming: Ingot,
        outgoing_id: int,
        *,
        past_cutoff: bool,
        now: datetime,
    ) -> tuple[RejectReason | None, Ingot | None]:
        """Put ``incoming`` at the position of ``outgoing_id``.

        Returns ``(None, displaced_ingot)`` on success. A stale
        ``outgoing_id`` leaves the list untouched.
        """

        reason = self.check_editable(past_cutoff)
        if reason is not None:
            return reason, None

        position = self.position_of(outgoing_id)
        if position is None:
            return RejectReason.INGOT_NOT_IN_CRUCIBLE, None

        displaced = self.ingots[position]
        self.ingots[position] = incoming
        self.last_modified = now
        return None, displaced

    def check_forgeable(self, *, confirmed: bool, past_cutoff: bool) -> RejectReason | None:
        if not confirmed:
            return RejectReason.NOT_CONFIRMED
        if not self.is_draft:
            return RejectReason.NOT_DRAFT
        if len(self.ingots) != self.capacity:
            return RejectReason.CRUCIBLE_INCOMPLETE
        if past_cutoff:
            return RejectReason.PAST_CUTOFF
        return None

    def mark_submitted(self, now: datetime) -> None:
        self.status = CrucibleStatus.SUBMITTED
        self.last_modified = now

    def revert_to_draft(self, now: datetime) -> None:
        self.status = CrucibleStatus.DRAFT
        self.last_modified = now


@dataclass(frozen=True)
class MutationResult:
    """Outcome of a crucible mutation.

    ``returned`` is the ingot sent back to the collection by a replace.
    """

    accepted: bool
    crucible: Crucible | None = None
    reason: RejectReason | None = None
    returned: Ingot | None = None

    @classmethod
    def ok(cls, crucible: Crucible, returned: Ingot | None = None) -> "MutationResult":
        return cls(accepted=True, crucible=crucible, returned=returned)

    @classmethod
    def rejected(cls, reason: RejectReason, crucible: Crucible | None = None) -> "MutationResult":
        return cls(accepted=False, crucible=crucible, reason=reason)
