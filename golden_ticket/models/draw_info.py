"""Server-reported draw metadata."""

from __future__ import annotations

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from golden_ticket.models.base import Base


class GameDrawInfo(Base):
    """Totals, per-user quota and archive checksum for one (game, draw date)."""

    __tablename__ = "game_draw_info"

    game_name: Mapped[str] = mapped_column(String(64), primary_key=True)
    draw_date: Mapped[str] = mapped_column(String(10), primary_key=True)  # yyyy-MM-dd
    total_combinations: Mapped[int | None] = mapped_column(Integer, nullable=True)
    user_request_limit: Mapped[int | None] = mapped_column(Integer, nullable=True)
    user_combinations_requested: Mapped[int | None] = mapped_column(Integer, nullable=True)
    archive_checksum: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_updated: Mapped[str | None] = mapped_column(String(40), nullable=True)
