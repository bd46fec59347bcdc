"""Repository layer for user profile, per-game progress and active games."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from golden_ticket.domain.models import GameProgress
from golden_ticket.models.user_progress import UserActiveGame, UserGameProgress, UserProfile
from golden_ticket.utils.dates import format_instant, parse_instant

logger = logging.getLogger(__name__)


def _load_json(raw: str | None, default: Any, what: str) -> Any:
    if not raw:
        return default
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("Error decoding stored %s JSON: %r", what, raw)
        return default


def _to_progress(row: UserGameProgress) -> GameProgress:
    awards = _load_json(row.game_awards, [], "game_awards")
    stats = _load_json(row.game_statistics, {}, "game_statistics")
    return GameProgress(
        user_id=row.user_id,
        game_name=row.game_name,
        game_score=row.game_score or 0,
        game_awards=tuple(str(a) for a in awards),
        game_statistics=stats if isinstance(stats, dict) else {},
        membership_level=row.membership_level,
        last_played=parse_instant(row.last_played),
    )


class UserProgressRepository:
    # --- profile ---

    def upsert_profile(
        self,
        session: Session,
        user_id: int,
        now: datetime,
        membership_level: str | None = None,
        global_awards: Iterable[str] | None = None,
        global_statistics: Mapping[str, Any] | None = None,
    ) -> None:
        row = session.get(UserProfile, user_id)
        if row is None:
            row = UserProfile(user_id=user_id)
            session.add(row)

        # Omitted fields keep their stored value.
        if membership_level is not None:
            row.membership_level = membership_level
        if global_awards is not None:
            row.global_awards = json.dumps(list(global_awards))
        if global_statistics is not None:
            row.global_statistics = json.dumps(dict(global_statistics))
        row.last_updated = format_instant(now)
        session.flush()

    def get_profile(self, session: Session, user_id: int) -> dict[str, Any] | None:
        row = session.get(UserProfile, user_id)
        if row is None:
            return None
        return {
            "user_id": row.user_id,
            "membership_level": row.membership_level,
            "global_awards": _load_json(row.global_awards, [], "global_awards"),
            "global_statistics": _load_json(row.global_statistics, {}, "global_statistics"),
            "last_updated": row.last_updated,
        }

    # --- per-game progress ---

    def upsert_progress(
        self,
        session: Session,
        user_id: int,
        game_name: str,
        now: datetime,
        score_to_add: int = 0,
        awards_to_add: Iterable[str] | None = None,
        statistics: Mapping[str, Any] | None = None,
        membership_level: str | None = None,
    ) -> GameProgress:
        """Add score, union awards, shallow-merge statistics."""

        row = session.get(UserGameProgress, (user_id, game_name))
        if row is None:
            row = UserGameProgress(user_id=user_id, game_name=game_name, game_score=0)
            session.add(row)

        awards: list[str] = list(_load_json(row.game_awards, [], "game_awards"))
        for award in awards_to_add or ():
            if award not in awards:
                awards.append(award)

        stats = _load_json(row.game_statistics, {}, "game_statistics")
        if not isinstance(stats, dict):
            stats = {}
        stats.update(statistics or {})

        row.game_score = (row.game_score or 0) + score_to_add
        row.game_awards = json.dumps(awards)
        row.game_statistics = json.dumps(stats)
        if membership_level is not None:
            row.membership_level = membership_level
        row.last_played = format_instant(now)

        session.flush()
        return _to_progress(row)

    def get_progress(self, session: Session, user_id: int, game_name: str) -> GameProgress | None:
        row = session.get(UserGameProgress, (user_id, game_name))
        return _to_progress(row) if row is not None else None

    def list_progress(self, session: Session, user_id: int) -> list[GameProgress]:
        stmt = (
            select(UserGameProgress)
            .where(UserGameProgress.user_id == user_id)
            .order_by(UserGameProgress.game_name.asc())
        )
        return [_to_progress(row) for row in session.scalars(stmt).all()]

    def total_score(self, session: Session, user_id: int) -> int:
        stmt = select(func.coalesce(func.sum(UserGameProgress.game_score), 0)).where(
            UserGameProgress.user_id == user_id
        )
        return int(session.scalar(stmt) or 0)

    # --- active games ---

    def active_games(self, session: Session, user_id: int) -> list[str]:
        stmt = (
            select(UserActiveGame.game_name)
            .where(UserActiveGame.user_id == user_id, UserActiveGame.deactivated_at.is_(None))
            .order_by(UserActiveGame.id.asc())
        )
        return list(session.scalars(stmt).all())

    def activate(self, session: Session, user_id: int, game_name: str, now: datetime) -> bool:
        """Activate or reactivate; returns False when already active."""

        stmt = select(UserActiveGame).where(
            UserActiveGame.user_id == user_id, UserActiveGame.game_name == game_name
        )
        row = session.scalars(stmt).first()

        if row is None:
            session.add(UserActiveGame(user_id=user_id, game_name=game_name, activated_at=format_instant(now)))
        elif row.deactivated_at is not None:
            row.deactivated_at = None
            row.activated_at = format_instant(now)
        else:
            return False

        session.flush()
        return True

    def deactivate(self, session: Session, user_id: int, game_name: str, now: datetime) -> int:
        stmt = select(UserActiveGame).where(
            UserActiveGame.user_id == user_id,
            UserActiveGame.game_name == game_name,
            UserActiveGame.deactivated_at.is_(None),
        )
        rows = list(session.scalars(stmt).all())
        for row in rows:
            row.deactivated_at = format_instant(now)
        session.flush()
        return len(rows)
