"""Repository layer for seeded game rules."""

from __future__ import annotations

import json
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from golden_ticket.domain.models import GameRuleRecord
from golden_ticket.models.game_rule import GameRule

logger = logging.getLogger(__name__)


def _to_record(row: GameRule) -> GameRuleRecord:
    odds: dict[str, str] = {}
    if row.official_odds_json:
        try:
            odds = json.loads(row.official_odds_json)
        except ValueError:
            logger.warning("Malformed official odds for %s", row.game_name)

    return GameRuleRecord(
        game_name=row.game_name,
        total_numbers=row.total_numbers,
        regular_balls_drawn=row.regular_balls_drawn,
        bonus_ball_pool=row.bonus_ball_pool,
        bonus_balls_drawn=row.bonus_balls_drawn,
        draw_schedule=row.draw_schedule or "",
        prize_tier_format=row.prize_tier_format or "",
        official_odds=odds,
    )


class GameRuleRepository:
    """Read-only access to ``game_rules``."""

    def get(self, session: Session, game_name: str) -> GameRuleRecord | None:
        row = session.get(GameRule, game_name)
        return _to_record(row) if row is not None else None

    def list_all(self, session: Session) -> list[GameRuleRecord]:
        stmt = select(GameRule).order_by(GameRule.game_name.asc())
        return [_to_record(row) for row in session.scalars(stmt).all()]
