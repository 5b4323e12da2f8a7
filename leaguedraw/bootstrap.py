"""Wiring of settings into a ready-to-use :class:`DrawService`."""

from __future__ import annotations

import logging
from typing import Optional

from .config import Settings
from .db.engine import get_sessionmaker, make_engine
from .events import build_publisher
from .models import Base
from .service import DrawService
from .storage import TeamRepository, build_draw_repository

logger = logging.getLogger(__name__)


def build_service(settings: Optional[Settings] = None) -> DrawService:
    """Create the engine, ensure the tables exist and assemble the service."""

    settings = settings or Settings.from_env()
    engine = make_engine(settings.db_url, echo=settings.sql_echo)
    # Teams live in the relational store whichever draw backend is active.
    Base.metadata.create_all(engine)
    Session = get_sessionmaker(engine)

    logger.info(
        f"Using {settings.storage_backend} draw storage; "
        f"events {'enabled' if settings.events_enabled else 'disabled'}"
    )
    return DrawService(
        TeamRepository(Session),
        build_draw_repository(settings, Session),
        build_publisher(settings),
        teams_per_group=settings.teams_per_group,
    )
