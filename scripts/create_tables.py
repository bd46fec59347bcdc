"""Create and seed the local store in the configured database.

Reads DATABASE_URL from .env / environment, creates all registered ORM tables
and seeds the built-in game rules.

Usage:
  python scripts/create_tables.py
"""

from __future__ import annotations

import logging
import pathlib

from dotenv import load_dotenv

from golden_ticket.config import resolve_database_url
from golden_ticket.db import Store
from golden_ticket.services.game_rules_service import GameRulesService

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]

logger = logging.getLogger(__name__)


def main() -> int:
    """Open (create + seed) the store once and report the seeded games."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    load_dotenv()
    env_local = PROJECT_ROOT / ".env.local"
    if env_local.exists():
        load_dotenv(dotenv_path=env_local, override=True)

    store = Store(resolve_database_url()).open()
    try:
        for rule in GameRulesService(store).list_all():
            logger.info("Game %s: %s", rule.game_name, rule.draw_schedule)
    finally:
        store.close()

    print("Tables created (or already exist).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
