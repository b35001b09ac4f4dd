"""Create the room, ticket and called-number tables in the configured database.

Reads DATABASE_URL (or PG* variables) from .env / environment.

Usage:
  python scripts/create_tables.py
"""

from __future__ import annotations

import pathlib
import sys

from dotenv import load_dotenv
from sqlalchemy import text

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from loto_game.models.base import Base  # noqa: E402
from loto_game.config import resolve_database_url  # noqa: E402
from loto_game.db import create_app_engine  # noqa: E402

# Import models so they register with Base.metadata
from loto_game import models  # noqa: F401,E402


def main() -> int:
    """Create all ORM tables in the target database."""

    load_dotenv()
    env_local = PROJECT_ROOT / ".env.local"
    if env_local.exists():
        load_dotenv(dotenv_path=env_local, override=True)

    engine = create_app_engine(resolve_database_url())
    Base.metadata.create_all(bind=engine)

    # create_all() does not add indexes to existing tables.
    # For PostgreSQL, apply the lookup indexes idempotently.
    if engine.dialect.name == "postgresql":
        ddl = [
            "CREATE INDEX IF NOT EXISTS idx_called_numbers_room_time ON called_numbers (room_id, called_at DESC)",
            "CREATE INDEX IF NOT EXISTS ix_tickets_room_player ON tickets (room_id, player_id)",
        ]
        with engine.begin() as conn:
            for stmt in ddl:
                conn.execute(text(stmt))

    print("Tables created (or already exist).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
