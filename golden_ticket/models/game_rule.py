"""Static per-game configuration."""

from __future__ import annotations

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from golden_ticket.models.base import Base


class GameRule(Base):
    """One row per game, seeded at store initialization."""

    __tablename__ = "game_rules"

    game_name: Mapped[str] = mapped_column(String(64), primary_key=True)
    total_numbers: Mapped[int] = mapped_column(Integer, nullable=False)
    regular_balls_drawn: Mapped[int] = mapped_column(Integer, nullable=False)
    bonus_ball_pool: Mapped[int] = mapped_column(Integer, nullable=False)
    bonus_balls_drawn: Mapped[int] = mapped_column(Integer, nullable=False)
    draw_schedule: Mapped[str | None] = mapped_column(Text, nullable=True)
    prize_tier_format: Mapped[str | None] = mapped_column(String(64), nullable=True)
    official_odds_json: Mapped[str | None] = mapped_column(Text, nullable=True)
