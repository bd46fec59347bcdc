"""Per-draw submissions (crucibles)."""

from __future__ import annotations

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from golden_ticket.models.base import Base


class IngotCrucible(Base):
    """The single submission per (user, game, draw date)."""

    __tablename__ = "ingot_crucibles"
    __table_args__ = (
        Index("idx_crucible_user_game_draw", "user_id", "game_name", "draw_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    game_name: Mapped[str] = mapped_column(String(64), nullable=False)
    submitted_date: Mapped[str] = mapped_column(String(40), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    combinations: Mapped[str] = mapped_column(Text, nullable=False)  # JSON list of {ingot_id, numbers}
    draw_date: Mapped[str] = mapped_column(String(10), nullable=False)
