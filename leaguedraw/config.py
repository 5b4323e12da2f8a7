"""Runtime configuration read from the environment (and an optional ``.env``)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from .db.engine import ROOT_DIR
from .db.utils import resolve_sqlite_url

STORAGE_BACKENDS = ("sql", "elasticsearch", "redis")

_TRUTHY = {"1", "true", "yes", "on"}


def _as_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUTHY


def _as_optional_int(name: str, value: Optional[str]) -> Optional[int]:
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(f"Environment variable '{name}' must be an integer") from e


@dataclass(frozen=True)
class Settings:
    db_url: str = "sqlite:///./dev.db"
    sql_echo: bool = False
    storage_backend: str = "sql"
    redis_url: str = "redis://localhost:6379/0"
    redis_prefix: str = "leaguedraw"
    elasticsearch_url: str = "http://localhost:9200"
    elasticsearch_index: str = "draws"
    events_enabled: bool = True
    event_channel_prefix: str = "operation.events"
    teams_per_group: Optional[int] = None
    log_level: str = "INFO"
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    def __post_init__(self) -> None:
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"Unknown storage backend {self.storage_backend!r}; "
                f"expected one of {', '.join(STORAGE_BACKENDS)}"
            )
        if self.teams_per_group is not None and self.teams_per_group <= 0:
            raise ValueError("teams_per_group must be positive")
        if not 0 < self.api_port < 65536:
            raise ValueError("api_port must be between 1 and 65535")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (``os.environ`` after loading ``.env``)."""

        if environ is None:
            load_dotenv()
            environ = os.environ

        api_port = _as_optional_int("API_PORT", environ.get("API_PORT"))
        return cls(
            db_url=resolve_sqlite_url(
                environ.get("DB_URL", cls.db_url), ROOT_DIR
            ),
            sql_echo=_as_bool(environ.get("SQL_ECHO"), False),
            storage_backend=environ.get("DRAW_STORAGE_BACKEND", cls.storage_backend)
            .strip()
            .lower(),
            redis_url=environ.get("REDIS_URL", cls.redis_url),
            redis_prefix=environ.get("REDIS_PREFIX", cls.redis_prefix),
            elasticsearch_url=environ.get("ELASTICSEARCH_URL", cls.elasticsearch_url),
            elasticsearch_index=environ.get(
                "ELASTICSEARCH_INDEX", cls.elasticsearch_index
            ),
            events_enabled=_as_bool(environ.get("EVENTS_ENABLED"), True),
            event_channel_prefix=environ.get(
                "EVENT_CHANNEL_PREFIX", cls.event_channel_prefix
            ),
            teams_per_group=_as_optional_int(
                "DRAW_TEAMS_PER_GROUP", environ.get("DRAW_TEAMS_PER_GROUP")
            ),
            log_level=environ.get("LOG_LEVEL", cls.log_level).upper(),
            api_host=environ.get("API_HOST", cls.api_host),
            api_port=cls.api_port if api_port is None else api_port,
        )
