"""Per-(game, draw) request quota."""

from __future__ import annotations

from dataclasses import dataclass

from golden_ticket.domain.models import DrawInfo
from golden_ticket.errors import RemoteDecodeError


@dataclass
class QuotaTracker:
    """Mirrors the server's request limit and used-count for one draw.

    The server is authoritative for ``used``: ``record_request`` stores the
    count it reports and never increments locally.
    """

    limit: int | None = None
    used: int | None = None

    @classmethod
    def from_draw_info(cls, info: DrawInfo | None) -> "QuotaTracker":
        if info is None:
            return cls()
        return cls(limit=info.user_request_limit, used=info.user_combinations_requested)

    def remaining(self) -> int:
        return max(0, (self.limit or 0) - (self.used or 0))

    @property
    def exhausted(self) -> bool:
        return self.remaining() == 0

    def record_request(self, new_used) -> int:
        # bool is an int subclass; reject it explicitly.
        if isinstance(new_used, bool) or not isinstance(new_used, int):
            raise RemoteDecodeError(
                "Server returned an invalid request count",
                {"user_requests_count": repr(new_used)},
            )
        self.used = new_used
        return self.remaining()
