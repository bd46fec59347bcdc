"""Repository layer for ``ingot_crucibles``."""

from __future__ import annotations

import json

from sqlalchemy import select
from sqlalchemy.orm import Session

from golden_ticket.domain.crucible import Crucible, CrucibleStatus
from golden_ticket.domain.models import DrawScope, Ingot
from golden_ticket.models.crucible import IngotCrucible
from golden_ticket.utils.dates import format_date, format_instant, parse_instant


def _scoped_select(scope: DrawScope):
    return (
        select(IngotCrucible)
        .where(
            IngotCrucible.user_id == scope.user_id,
            IngotCrucible.game_name == scope.game_name,
            IngotCrucible.draw_date == format_date(scope.draw_date),
        )
        .order_by(IngotCrucible.id.asc())
    )


def _encode_ingots(ingots: list[Ingot]) -> str:
    return json.dumps([{"ingot_id": i.ingot_id, "numbers": list(i.numbers)} for i in ingots])


def _decode_ingots(raw: str) -> list[Ingot]:
    return [
        Ingot(ingot_id=int(item["ingot_id"]), numbers=tuple(int(n) for n in item["numbers"]))
        for item in json.loads(raw or "[]")
    ]


class CrucibleRepository:
    def get(self, session: Session, scope: DrawScope, capacity: int) -> Crucible | None:
        row = session.scalars(_scoped_select(scope).limit(1)).first()
        if row is None:
            return None
        return Crucible(
            scope=scope,
            capacity=capacity,
            ingots=_decode_ingots(row.combinations),
            status=CrucibleStatus(row.status),
            id=row.id,
            name=row.name,
            last_modified=parse_instant(row.submitted_date),
        )

    def exists(self, session: Session, scope: DrawScope) -> bool:
        return session.scalars(_scoped_select(scope).limit(1)).first() is not None

    def save(self, session: Session, crucible: Crucible) -> Crucible:
        """Insert on first save (assigning ``crucible.id``), update afterwards."""

        row = session.get(IngotCrucible, crucible.id) if crucible.id is not None else None
        if row is None:
            row = IngotCrucible(
                user_id=crucible.scope.user_id,
                game_name=crucible.scope.game_name,
                draw_date=format_date(crucible.scope.draw_date),
            )
            session.add(row)

        row.name = crucible.name
        row.status = crucible.status.value
        row.combinations = _encode_ingots(crucible.ingots)
        if crucible.last_modified is not None:
            row.submitted_date = format_instant(crucible.last_modified)

        session.flush()
        crucible.id = row.id
        return crucible
