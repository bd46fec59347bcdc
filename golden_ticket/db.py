"""SQLAlchemy engine + session management for the local store.

The store is an explicitly constructed object: the process entry point opens
it, hands it to every component that needs persistence, and closes it on
shutdown. Each unit of work runs in its own short-lived session.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager

from flask import Flask
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from golden_ticket import models  # noqa: F401  (register tables on Base.metadata)
from golden_ticket.game_rules import GAME_RULES_DATA
from golden_ticket.models.base import Base
from golden_ticket.models.game_rule import GameRule

logger = logging.getLogger(__name__)


def create_app_engine(database_url: str) -> Engine:
    url = make_url(database_url)

    # In-memory SQLite must share one connection or every session sees an empty db.
    if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            future=True,
        )

    if url.get_backend_name() == "sqlite":
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            future=True,
        )

    return create_engine(database_url, pool_pre_ping=True, future=True)


class Store:
    """Owns the engine and hands out transactional sessions."""

    def __init__(self, database_url: str) -> None:
        self._database_url = database_url
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    def open(self) -> "Store":
        if self._engine is not None:
            return self

        engine = create_app_engine(self._database_url)
        # Create tables directly (no migrations for a local client cache).
        Base.metadata.create_all(bind=engine)

        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        self._seed_game_rules()
        logger.info("Store opened (%s)", make_url(self._database_url).get_backend_name())
        return self

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Store closed")

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Unit of work: commit on success, roll back on error, always close."""

        if self._session_factory is None:
            raise RuntimeError("Store is not open")

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _seed_game_rules(self) -> None:
        with self.session() as session:
            for rule in GAME_RULES_DATA:
                if session.get(GameRule, rule["game_name"]) is not None:
                    continue
                session.add(
                    GameRule(
                        game_name=rule["game_name"],
                        total_numbers=rule["total_numbers"],
                        regular_balls_drawn=rule["regular_balls_drawn"],
                        bonus_ball_pool=rule["bonus_ball_pool"],
                        bonus_balls_drawn=rule["bonus_balls_drawn"],
                        draw_schedule=rule["draw_schedule"],
                        prize_tier_format=rule["prize_tier_format"],
                        official_odds_json=json.dumps(rule["official_odds"]),
                    )
                )
                logger.debug("Seeded game rule %s", rule["game_name"])


def init_db(app: Flask) -> Store:
    """Open the store for the Flask app and register it as an extension."""

    store = Store(str(app.config["DATABASE_URL"])).open()
    app.extensions["store"] = store
    return store


def get_store(app: Flask) -> Store:
    store: Store | None = app.extensions.get("store")
    if store is None:
        raise RuntimeError("Store not initialized")
    return store
