"""Collected (not yet committed) ingots."""

from __future__ import annotations

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from golden_ticket.models.base import Base


class IngotCollectionEntry(Base):
    """An ingot issued by the server and held in a user's collection."""

    __tablename__ = "ingot_collection"
    __table_args__ = (
        Index("idx_ingot_collection_user_game_draw", "user_id", "game_name", "draw_date"),
    )

    ingot_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    game_name: Mapped[str] = mapped_column(String(64), nullable=False)
    draw_date: Mapped[str] = mapped_column(String(10), nullable=False)
    numbers: Mapped[str] = mapped_column(Text, nullable=False)  # JSON list of ints
    added_timestamp: Mapped[str] = mapped_column(String(40), nullable=False)
