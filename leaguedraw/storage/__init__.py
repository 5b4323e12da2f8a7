"""Draw persistence backends and the team roster store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import DrawRepository
from .sql import SqlDrawRepository, TeamRepository

if TYPE_CHECKING:
    from sqlalchemy.orm import Session, sessionmaker

    from ..config import Settings


def build_draw_repository(
    settings: "Settings", session_factory: "sessionmaker[Session]"
) -> DrawRepository:
    """Return the draw repository selected by ``settings.storage_backend``.

    The Redis and Elasticsearch client libraries are only imported when the
    corresponding backend is selected.
    """

    backend = settings.storage_backend
    if backend == "sql":
        return SqlDrawRepository(session_factory)
    if backend == "redis":
        from redis import Redis

        from .redis_backend import RedisDrawRepository

        return RedisDrawRepository(
            Redis.from_url(settings.redis_url), prefix=settings.redis_prefix
        )
    if backend == "elasticsearch":
        from elasticsearch import Elasticsearch

        from .elasticsearch_backend import ElasticsearchDrawRepository

        return ElasticsearchDrawRepository(
            Elasticsearch(settings.elasticsearch_url),
            index=settings.elasticsearch_index,
        )
    raise ValueError(f"Unknown storage backend {backend!r}")


__all__ = [
    "DrawRepository",
    "SqlDrawRepository",
    "TeamRepository",
    "build_draw_repository",
]
