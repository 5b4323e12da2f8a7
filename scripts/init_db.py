from __future__ import annotations

from sqlalchemy import inspect

from leaguedraw.config import Settings
from leaguedraw.db.engine import get_sessionmaker, make_engine
from leaguedraw.models import Base
from leaguedraw.storage import TeamRepository


def create_tables(database_url: str) -> None:
    """Create every table known to the models (no-op for existing ones)."""
    engine = make_engine(database_url)
    Base.metadata.create_all(engine)


def seed_teams(database_url: str) -> bool:
    """Insert the default roster if the teams table is empty."""
    engine = make_engine(database_url)
    return TeamRepository(get_sessionmaker(engine)).ensure_teams_exist()


def print_tables(database_url: str) -> None:
    """Inspect the configured database and print all table names."""
    engine = make_engine(database_url)
    insp = inspect(engine)
    print("Current tables:", ", ".join(sorted(insp.get_table_names())))


def main() -> None:
    """Create the schema, seed the roster and report the resulting tables."""
    settings = Settings.from_env()
    create_tables(settings.db_url)
    seeded = seed_teams(settings.db_url)
    print("Seeded default teams." if seeded else "Teams already present.")
    print_tables(settings.db_url)


if __name__ == "__main__":
    main()
