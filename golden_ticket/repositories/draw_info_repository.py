"""Repository layer for ``game_draw_info``."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from golden_ticket.domain.models import DrawInfo
from golden_ticket.models.draw_info import GameDrawInfo
from golden_ticket.utils.dates import format_date, format_instant, parse_date, parse_instant


def _to_record(row: GameDrawInfo) -> DrawInfo:
    return DrawInfo(
        game_name=row.game_name,
        draw_date=parse_date(row.draw_date),
        total_combinations=row.total_combinations,
        user_request_limit=row.user_request_limit,
        user_combinations_requested=row.user_combinations_requested,
        archive_checksum=row.archive_checksum,
        last_updated=parse_instant(row.last_updated),
    )


class DrawInfoRepository:
    def get(self, session: Session, game_name: str, draw_date: date | None = None) -> DrawInfo | None:
        """Row for ``draw_date``, or the latest cached draw when omitted."""

        if draw_date is not None:
            row = session.get(GameDrawInfo, (game_name, format_date(draw_date)))
        else:
            stmt = (
                select(GameDrawInfo)
                .where(GameDrawInfo.game_name == game_name)
                .order_by(GameDrawInfo.draw_date.desc())
                .limit(1)
            )
            row = session.scalars(stmt).first()
        return _to_record(row) if row is not None else None

    def upsert(self, session: Session, info: DrawInfo, now: datetime) -> DrawInfo:
        """Full replace keyed by (game, draw date); always stamps ``last_updated``."""

        row = GameDrawInfo(
            game_name=info.game_name,
            draw_date=format_date(info.draw_date),
            total_combinations=info.total_combinations,
            user_request_limit=info.user_request_limit,
            user_combinations_requested=info.user_combinations_requested,
            archive_checksum=info.archive_checksum,
            last_updated=format_instant(now),
        )
        merged = session.merge(row)
        session.flush()
        return _to_record(merged)
