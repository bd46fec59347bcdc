"""Repository layer for ``game_results_cache``."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from golden_ticket.domain.models import ODDS_TIERS, CachedResult
from golden_ticket.models.cached_result import GameResultCache
from golden_ticket.utils.dates import format_date, format_instant, parse_date, parse_instant

logger = logging.getLogger(__name__)


def _decode_numbers(raw: str | None) -> tuple[int, ...] | None:
    if raw is None:
        return None
    try:
        values = json.loads(raw)
    except ValueError:
        logger.warning("Malformed cached winning numbers: %r", raw)
        return None
    if not isinstance(values, list):
        return None
    return tuple(int(v) for v in values)


def _to_record(row: GameResultCache) -> CachedResult:
    return CachedResult(
        game_name=row.game_name,
        draw_date=parse_date(row.draw_date),
        winning_numbers=_decode_numbers(row.last_draw_numbers),
        bonus_number=row.bonus_number,
        total_combinations=row.total_combinations,
        odds={tier: getattr(row, tier) for tier in ODDS_TIERS},
        user_score=row.user_score,
        new_draw_flag=bool(row.new_draw_flag),
        win_id=row.win_id,
        archive_password=row.archive_password,
        archive_checksum=row.archive_checksum,
        fetched_at=parse_instant(row.fetched_at),
    )


class ResultCacheRepository:
    def get(self, session: Session, game_name: str, draw_date: date) -> CachedResult | None:
        row = session.get(GameResultCache, (game_name, format_date(draw_date)))
        return _to_record(row) if row is not None else None

    def upsert(self, session: Session, result: CachedResult, now: datetime) -> CachedResult:
        """Replace by (game, draw date).

        The new flag is derived, never taken from the caller: set iff winning
        numbers are non-empty.
        """

        numbers = list(result.winning_numbers or ())
        row = GameResultCache(
            game_name=result.game_name,
            draw_date=format_date(result.draw_date),
            last_draw_numbers=json.dumps(numbers) if numbers else None,
            bonus_number=result.bonus_number,
            total_combinations=result.total_combinations,
            user_score=result.user_score,
            fetched_at=format_instant(now),
            new_draw_flag=1 if numbers else 0,
            win_id=result.win_id,
            archive_password=result.archive_password,
            archive_checksum=result.archive_checksum,
        )
        for tier in ODDS_TIERS:
            setattr(row, tier, result.odds.get(tier))

        merged = session.merge(row)
        session.flush()
        return _to_record(merged)

    def insert_placeholder(self, session: Session, game_name: str, draw_date: date, now: datetime) -> bool:
        """Insert an empty, not-new row unless one already exists."""

        if session.get(GameResultCache, (game_name, format_date(draw_date))) is not None:
            return False
        session.add(
            GameResultCache(
                game_name=game_name,
                draw_date=format_date(draw_date),
                last_draw_numbers=None,
                fetched_at=format_instant(now),
                new_draw_flag=0,
            )
        )
        session.flush()
        return True

    def mark_seen(self, session: Session, game_name: str, draw_date: date) -> int:
        stmt = (
            update(GameResultCache)
            .where(
                GameResultCache.game_name == game_name,
                GameResultCache.draw_date == format_date(draw_date),
                GameResultCache.new_draw_flag == 1,
            )
            .values(new_draw_flag=0)
        )
        return int(session.execute(stmt).rowcount or 0)

    def any_unseen(self, session: Session) -> bool:
        stmt = select(GameResultCache.game_name).where(GameResultCache.new_draw_flag == 1).limit(1)
        return session.scalars(stmt).first() is not None
