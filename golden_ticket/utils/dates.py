"""Date/instant helpers for the ISO strings kept in the local store."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime, timezone

from golden_ticket.errors import ValidationError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_date(value: date) -> str:
    return value.isoformat()


def parse_date(value: str) -> date:
    """Parse ``yyyy-MM-dd``; raises ValueError on anything else."""

    return date.fromisoformat(value.strip()[:10])


def format_instant(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def parse_instant(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


Clock = Callable[[], datetime]


def draw_date_arg(value: str) -> date:
    """Parse a ``yyyy-MM-dd`` URL segment or raise a 400."""

    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError(message="Invalid draw date", details={"draw_date": value}) from exc
