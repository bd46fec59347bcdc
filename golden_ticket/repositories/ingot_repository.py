"""Repository layer for the ingot collection."""

from __future__ import annotations

import json
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from golden_ticket.domain.models import DrawScope, Ingot
from golden_ticket.models.ingot import IngotCollectionEntry
from golden_ticket.utils.dates import format_date, format_instant


def _to_ingot(row: IngotCollectionEntry) -> Ingot:
    return Ingot(ingot_id=row.ingot_id, numbers=tuple(int(n) for n in json.loads(row.numbers)))


def _scoped(stmt, scope: DrawScope):
    return stmt.where(
        IngotCollectionEntry.user_id == scope.user_id,
        IngotCollectionEntry.game_name == scope.game_name,
        IngotCollectionEntry.draw_date == format_date(scope.draw_date),
    )


class IngotRepository:
    """CRUD for ``ingot_collection``; every call is scoped to one draw."""

    def add(self, session: Session, scope: DrawScope, ingot: Ingot, now: datetime) -> None:
        # Keyed by the server-issued id: re-adding overwrites.
        session.merge(
            IngotCollectionEntry(
                ingot_id=ingot.ingot_id,
                user_id=scope.user_id,
                game_name=scope.game_name,
                draw_date=format_date(scope.draw_date),
                numbers=json.dumps(list(ingot.numbers)),
                added_timestamp=format_instant(now),
            )
        )
        session.flush()

    def list(self, session: Session, scope: DrawScope) -> list[Ingot]:
        stmt = _scoped(select(IngotCollectionEntry), scope).order_by(
            IngotCollectionEntry.added_timestamp.desc(),
            IngotCollectionEntry.ingot_id.desc(),
        )
        return [_to_ingot(row) for row in session.scalars(stmt).all()]

    def get(self, session: Session, scope: DrawScope, ingot_id: int) -> Ingot | None:
        stmt = _scoped(select(IngotCollectionEntry), scope).where(IngotCollectionEntry.ingot_id == ingot_id)
        row = session.scalars(stmt).first()
        return _to_ingot(row) if row is not None else None

    def remove(self, session: Session, scope: DrawScope, ingot_id: int) -> int:
        stmt = _scoped(delete(IngotCollectionEntry), scope).where(IngotCollectionEntry.ingot_id == ingot_id)
        return int(session.execute(stmt).rowcount or 0)

    def clear_all(self, session: Session, scope: DrawScope) -> int:
        return int(session.execute(_scoped(delete(IngotCollectionEntry), scope)).rowcount or 0)
