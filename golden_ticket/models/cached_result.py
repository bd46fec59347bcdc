"""Cached draw results.

Columns:
- (game_name, draw_date) (PK)
- last_draw_numbers: JSON list, NULL for placeholders
- odds_*: decimal odds per prize tier
- new_draw_flag: 1 while the user has not viewed fetched numbers
"""

from __future__ import annotations

from sqlalchemy import Float, Integer, SmallInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from golden_ticket.models.base import Base


class GameResultCache(Base):
    """One row per (game, draw date)."""

    __tablename__ = "game_results_cache"

    game_name: Mapped[str] = mapped_column(String(64), primary_key=True)
    draw_date: Mapped[str] = mapped_column(String(10), primary_key=True)

    last_draw_numbers: Mapped[str | None] = mapped_column(Text, nullable=True)
    bonus_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_combinations: Mapped[int | None] = mapped_column(Integer, nullable=True)

    odds_6_6: Mapped[float | None] = mapped_column(Float, nullable=True)
    odds_5_6_plus: Mapped[float | None] = mapped_column(Float, nullable=True)
    odds_5_6: Mapped[float | None] = mapped_column(Float, nullable=True)
    odds_4_6: Mapped[float | None] = mapped_column(Float, nullable=True)
    odds_3_6: Mapped[float | None] = mapped_column(Float, nullable=True)
    odds_2_6_plus: Mapped[float | None] = mapped_column(Float, nullable=True)
    odds_2_6: Mapped[float | None] = mapped_column(Float, nullable=True)
    odds_any_prize: Mapped[float | None] = mapped_column(Float, nullable=True)

    user_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    fetched_at: Mapped[str] = mapped_column(String(40), nullable=False)
    new_draw_flag: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0, index=True)
    win_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    archive_password: Mapped[str | None] = mapped_column(Text, nullable=True)
    archive_checksum: Mapped[str | None] = mapped_column(Text, nullable=True)
