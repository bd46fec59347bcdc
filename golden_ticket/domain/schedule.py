# domain/schedule.py
"""Weekly draw schedule arithmetic.

A schedule string is a comma-separated list of ``Weekday HH:mm Area/Location``
entries, e.g. ``"Wed 20:30 America/Edmonton,Sat 20:30 America/Edmonton"``.
Every function here is pure: results depend only on the arguments, never on
the host timezone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

WEEKDAYS: dict[str, int] = {"Mon": 1, "Tue": 2, "Wed": 3, "Thu": 4, "Fri": 5, "Sat": 6, "Sun": 7}

DEFAULT_CUTOFF_LEAD = timedelta(hours=1)


@dataclass(frozen=True)
class ScheduleEntry:
    weekday: int  # ISO: Mon=1 .. Sun=7
    hour: int
    minute: int
    tz_id: str


def parse_schedule(raw: str | None) -> list[ScheduleEntry]:
    """Parse a schedule string, skipping malformed entries with a warning.

    A second entry on an already scheduled weekday is skipped too (the first
    one wins), so every weekday maps to at most one draw time.
    """

    entries: list[ScheduleEntry] = []
    seen: set[int] = set()

    for part in (raw or "").split(","):
        part = part.strip()
        if not part:
            continue

        tokens = part.split()
        if len(tokens) != 3:
            logger.warning("Invalid schedule part format skipped: %r", part)
            continue

        day, hhmm, tz_id = tokens
        weekday = WEEKDAYS.get(day)
        if weekday is None:
            logger.warning("Unknown weekday skipped: %r in schedule part %r", day, part)
            continue

        try:
            hour_raw, minute_raw = hhmm.split(":")
            hour, minute = int(hour_raw), int(minute_raw)
        except ValueError:
            logger.warning("Unparsable time skipped: %r in schedule part %r", hhmm, part)
            continue
        if not (0 <= hour <= 23 and 0 <= minute <= 59):
            logger.warning("Out-of-range time skipped: %r in schedule part %r", hhmm, part)
            continue

        if "/" not in tz_id:
            logger.warning("Invalid Timezone ID format skipped: %r in schedule part %r", tz_id, part)
            continue

        if weekday in seen:
            logger.warning("Duplicate weekday skipped: %r (first entry for %s wins)", part, day)
            continue

        seen.add(weekday)
        entries.append(ScheduleEntry(weekday=weekday, hour=hour, minute=minute, tz_id=tz_id))

    return entries


def entry_for(draw_date: date, schedule: list[ScheduleEntry]) -> ScheduleEntry | None:
    weekday = draw_date.isoweekday()
    for entry in schedule:
        if entry.weekday == weekday:
            return entry
    return None


def draw_instant_utc(draw_date: date, schedule: list[ScheduleEntry]) -> datetime | None:
    """Exact draw instant (aware, UTC) for ``draw_date``, or None.

    The date must fall on a scheduled weekday; no nearest-occurrence guessing.
    """

    entry = entry_for(draw_date, schedule)
    if entry is None:
        logger.warning(
            "No schedule entry for weekday %s (date %s)", draw_date.isoweekday(), draw_date.isoformat()
        )
        return None

    try:
        zone = ZoneInfo(entry.tz_id)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        logger.error("Timezone error processing schedule for %s: %s", entry.tz_id, exc)
        return None

    local = datetime(draw_date.year, draw_date.month, draw_date.day, entry.hour, entry.minute, tzinfo=zone)
    return local.astimezone(timezone.utc)


def previous_draw_date(next_draw_date: date, schedule: list[ScheduleEntry]) -> date | None:
    """Date of the draw that precedes ``next_draw_date`` in cyclic weekday order."""

    if not schedule:
        logger.warning("Cannot calculate previous draw date: empty schedule")
        return None

    ordered = sorted(schedule, key=lambda e: e.weekday)
    next_weekday = next_draw_date.isoweekday()

    index = next((i for i, e in enumerate(ordered) if e.weekday == next_weekday), -1)
    if index == -1:
        logger.warning(
            "Cannot calculate previous draw date: weekday %s of %s not in schedule",
            next_weekday,
            next_draw_date.isoformat(),
        )
        return None

    previous_weekday = ordered[(index - 1) % len(ordered)].weekday
    delta = (next_weekday - previous_weekday + 7) % 7
    if delta == 0:
        # Single draw per week.
        delta = 7

    return next_draw_date - timedelta(days=delta)


def cutoff_instant_utc(
    draw_date: date,
    schedule: list[ScheduleEntry],
    lead_time: timedelta = DEFAULT_CUTOFF_LEAD,
) -> datetime | None:
    instant = draw_instant_utc(draw_date, schedule)
    if instant is None:
        return None
    return instant - lead_time


def is_past_cutoff(
    draw_date: date,
    schedule: list[ScheduleEntry],
    now: datetime,
    lead_time: timedelta = DEFAULT_CUTOFF_LEAD,
) -> bool:
    """True once ``now`` is after the cutoff.

    An uncomputable cutoff counts as passed: editing is only allowed while the
    deadline is known.
    """

    cutoff = cutoff_instant_utc(draw_date, schedule, lead_time)
    if cutoff is None:
        logger.warning("Cutoff unknown for %s, treating as passed", draw_date.isoformat())
        return True
    return now > cutoff


def results_expected_after(draw_instant: datetime, local_tz: tzinfo, noon_hour: int = 12) -> datetime:
    """Noon (local) on the calendar day after the draw's local date.

    Results are normally published overnight; this is a fixed policy, not a
    value obtained from the backend.
    """

    local_draw = draw_instant.astimezone(local_tz)
    next_day = local_draw.date() + timedelta(days=1)
    return datetime.combine(next_day, time(hour=noon_hour), tzinfo=local_tz)


def resolve_local_timezone(name: str | None = None) -> tzinfo:
    """IANA zone from config, or the host's zone when unset or unknown."""

    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown LOCAL_TIMEZONE %r, falling back to host timezone", name)

    host = datetime.now().astimezone().tzinfo
    return host if host is not None else timezone.utc
