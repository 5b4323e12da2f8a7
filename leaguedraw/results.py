"""Immutable projections of draws returned to callers.

These value objects are independent from the storage representation: the
SQL backend builds them from ORM rows, the document and key-value backends
(de)serialize them through :meth:`DrawResult.to_json` /
:meth:`DrawResult.from_json`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Mapping, Optional

from .db.utils import as_utc, dt_iso, parse_iso


@dataclass(frozen=True)
class TeamResult:
    name: str
    country: Optional[str] = None
    city: Optional[str] = None

    def to_json(self) -> dict[str, Any]:
        return {"name": self.name, "country": self.country, "city": self.city}

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "TeamResult":
        return cls(
            name=data["name"],
            country=data.get("country"),
            city=data.get("city"),
        )


@dataclass(frozen=True)
class GroupResult:
    group_name: str
    teams: tuple[TeamResult, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "teams", tuple(self.teams))

    def to_json(self) -> dict[str, Any]:
        return {
            "groupName": self.group_name,
            "teams": [team.to_json() for team in self.teams],
        }

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "GroupResult":
        return cls(
            group_name=data["groupName"],
            teams=tuple(TeamResult.from_json(t) for t in data.get("teams", [])),
        )


@dataclass(frozen=True)
class DrawResult:
    """Outcome of a draw as seen by callers of the service.

    Attributes
    ----------
    drawn_by : str
        Name of the person who requested the draw.
    created_at : datetime
        UTC timestamp of the draw.
    groups : tuple[GroupResult, ...]
        Groups in creation order ("A" first).
    id : Optional[int]
        Storage identifier; ``None`` until the draw has been saved.
    number_of_groups : Optional[int]
        Requested group count; ``None`` when the backend did not record it.
    """

    drawn_by: str
    created_at: datetime
    groups: tuple[GroupResult, ...] = ()
    id: Optional[int] = None
    number_of_groups: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "created_at", as_utc(self.created_at))
        object.__setattr__(self, "groups", tuple(self.groups))

    def with_id(self, draw_id: int, number_of_groups: Optional[int] = None) -> "DrawResult":
        """Return a copy carrying the storage id (and group count)."""

        if number_of_groups is None:
            number_of_groups = self.number_of_groups
        return replace(self, id=draw_id, number_of_groups=number_of_groups)

    @property
    def teams(self) -> list[TeamResult]:
        """All member teams across groups, in group order."""

        return [team for group in self.groups for team in group.teams]

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "drawnBy": self.drawn_by,
            "createdAt": dt_iso(self.created_at),
            "numberOfGroups": self.number_of_groups,
            "groups": [group.to_json() for group in self.groups],
        }

    def to_json_str(self) -> str:
        return json.dumps(self.to_json(), ensure_ascii=False)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "DrawResult":
        created_at = parse_iso(data["createdAt"])
        if created_at is None:
            raise ValueError("createdAt must not be null")
        return cls(
            drawn_by=data["drawnBy"],
            created_at=created_at,
            groups=tuple(GroupResult.from_json(g) for g in data.get("groups", [])),
            id=data.get("id"),
            number_of_groups=data.get("numberOfGroups"),
        )

    @classmethod
    def from_json_str(cls, payload: str | bytes) -> "DrawResult":
        return cls.from_json(json.loads(payload))


__all__ = ["DrawResult", "GroupResult", "TeamResult"]
