"""User profile, per-game progress and active games."""

from __future__ import annotations

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from golden_ticket.models.base import Base


class UserProfile(Base):
    __tablename__ = "user_profiles"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    membership_level: Mapped[str | None] = mapped_column(String(64), nullable=True)
    global_awards: Mapped[str | None] = mapped_column(Text, nullable=True)
    global_statistics: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_updated: Mapped[str] = mapped_column(String(40), nullable=False)


class UserGameProgress(Base):
    """Cumulative score, awards and statistics for one (user, game)."""

    __tablename__ = "user_game_progress"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False, index=True)
    game_name: Mapped[str] = mapped_column(String(64), primary_key=True)
    game_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    game_awards: Mapped[str | None] = mapped_column(Text, nullable=True)  # JSON list
    game_statistics: Mapped[str | None] = mapped_column(Text, nullable=True)  # JSON object
    membership_level: Mapped[str | None] = mapped_column(String(64), nullable=True)
    last_played: Mapped[str | None] = mapped_column(String(40), nullable=True)


class UserActiveGame(Base):
    __tablename__ = "user_active_games"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    game_name: Mapped[str] = mapped_column(String(64), nullable=False)
    activated_at: Mapped[str] = mapped_column(String(40), nullable=False)
    deactivated_at: Mapped[str | None] = mapped_column(String(40), nullable=True)
