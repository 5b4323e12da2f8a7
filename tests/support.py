"""Shared fixtures for the test suites: rosters, dummy backends, publishers."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from leaguedraw.errors import StorageError
from leaguedraw.events import EventPublisher, OperationEvent
from leaguedraw.models import Base
from leaguedraw.results import DrawResult, GroupResult, TeamResult
from leaguedraw.storage import DrawRepository
from leaguedraw.storage.seed import seed_rows


def make_roster(size: int = 32, countries: int = 8) -> list[TeamResult]:
    """``Team1``..``TeamN`` spread round-robin over ``Country0``..``CountryK``."""
    return [
        TeamResult(name=f"Team{i}", country=f"Country{i % countries}", city=f"City{i}")
        for i in range(1, size + 1)
    ]


def seed_roster() -> list[TeamResult]:
    return [TeamResult(name, country, city) for name, country, city in seed_rows()]


def sample_draw(
    drawn_by: str = "Alice",
    created_at: Optional[datetime] = None,
    group_count: int = 4,
) -> DrawResult:
    """A draw over the seed roster; team order follows the seed, round-robin."""
    roster = seed_roster()
    names = "ABCDEFGH"[:group_count]
    groups = tuple(
        GroupResult(name, tuple(roster[i::group_count][:32 // group_count]))
        for i, name in enumerate(names)
    )
    return DrawResult(
        drawn_by=drawn_by,
        created_at=created_at or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        groups=groups,
    )


def memory_sessionmaker():
    """In-memory SQLite shared across threads (needed by the FastAPI client)."""
    engine = create_engine(
        "sqlite+pysqlite://",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine, sessionmaker(bind=engine, future=True, expire_on_commit=False)


class RecordingPublisher(EventPublisher):
    """Keeps every published event in memory."""

    def __init__(self) -> None:
        super().__init__()
        self.events: list[OperationEvent] = []

    def _send(self, event: OperationEvent, routing_key: str) -> None:
        self.events.append(event)

    def statuses(self, operation_name: Optional[str] = None) -> list[str]:
        return [
            e.status
            for e in self.events
            if operation_name is None or e.operation_name == operation_name
        ]


class BrokenPublisher(EventPublisher):
    """Fails every delivery, like a broker that is down."""

    def _send(self, event: OperationEvent, routing_key: str) -> None:
        raise ConnectionError("broker unreachable")


class DummyTeamRepository:
    def __init__(self, roster: list[TeamResult]):
        self.roster = roster
        self.ensure_calls = 0
        self.load_calls = 0

    def ensure_teams_exist(self) -> bool:
        self.ensure_calls += 1
        return False

    def get_all_teams(self) -> list[TeamResult]:
        self.load_calls += 1
        return list(self.roster)


class DummyDrawRepository(DrawRepository):
    def __init__(self) -> None:
        self.saved: list[tuple[DrawResult, int]] = []

    def save(self, result: DrawResult, number_of_groups: int) -> DrawResult:
        stored = result.with_id(len(self.saved) + 1, number_of_groups)
        self.saved.append((stored, number_of_groups))
        return stored

    def get_all(self) -> list[DrawResult]:
        return [draw for draw, _ in reversed(self.saved)]

    def get_by_id(self, draw_id: int) -> Optional[DrawResult]:
        for draw, _ in self.saved:
            if draw.id == draw_id:
                return draw
        return None


class FailingDrawRepository(DrawRepository):
    def save(self, result: DrawResult, number_of_groups: int) -> DrawResult:
        raise StorageError("database is down")

    def get_all(self) -> list[DrawResult]:
        raise StorageError("database is down")

    def get_by_id(self, draw_id: int) -> Optional[DrawResult]:
        raise StorageError("database is down")


class DummyResponse(dict):
    """Stands in for the client's ObjectApiResponse (mapping + ``body``)."""

    @property
    def body(self) -> dict:
        return self


class _DummyIndices:
    def __init__(self, owner: "DummyElasticsearch"):
        self._owner = owner

    def exists(self, index: str) -> bool:
        return index in self._owner.mappings

    def create(self, index: str, mappings=None) -> DummyResponse:
        self._owner.mappings[index] = mappings
        return DummyResponse(acknowledged=True, index=index)


class DummyElasticsearch:
    """In-process double covering the calls the draw repository makes."""

    def __init__(self) -> None:
        self.mappings: dict[str, dict] = {}
        self.docs: dict[str, dict[str, dict]] = {}
        self.indices = _DummyIndices(self)
        self.ignored_statuses: list = []

    def options(self, ignore_status=None) -> "DummyElasticsearch":
        self.ignored_statuses.append(ignore_status)
        return self

    def count(self, index: str) -> DummyResponse:
        return DummyResponse(count=len(self.docs.get(index, {})))

    def index(self, index, id, document, op_type="index", refresh=False):
        docs = self.docs.setdefault(index, {})
        if op_type == "create" and id in docs:
            return DummyResponse(status=409, error={"type": "version_conflict"})
        docs[id] = json.loads(json.dumps(document))
        return DummyResponse(result="created", _id=id)

    def get(self, index, id):
        doc = self.docs.get(index, {}).get(id)
        if doc is None:
            return DummyResponse(found=False, _id=id)
        return DummyResponse(found=True, _id=id, _source=doc)

    def search(self, index, query=None, sort=None, size=10):
        docs = list(self.docs.get(index, {}).values())
        docs.sort(
            key=lambda d: (datetime.fromisoformat(d["createdAt"]), d["id"]),
            reverse=True,
        )
        return DummyResponse(hits={"hits": [{"_source": d} for d in docs[:size]]})
