"""Database models for persisted draws."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .team import Team


class Draw(Base):
    """One invocation of the group draw, owning its groups."""

    __tablename__ = "draws"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    """Primary key."""

    drawn_by: Mapped[str] = mapped_column(String(255), nullable=False)
    """Name of the person who requested the draw."""

    number_of_groups: Mapped[int] = mapped_column(Integer, nullable=False)
    """Requested group count (4 or 8)."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    """Timestamp of the draw; listings are ordered newest first on it."""

    groups: Mapped[list["Group"]] = relationship(
        back_populates="draw",
        cascade="all, delete-orphan",
        order_by="Group.position",
    )

    __table_args__ = (
        CheckConstraint("number_of_groups IN (4, 8)", name="number_of_groups"),
    )

    def __init__(
        self,
        drawn_by: str,
        number_of_groups: int,
        created_at: Optional[datetime] = None,
        groups: Optional[list["Group"]] = None,
    ) -> None:
        self.drawn_by = drawn_by
        self.number_of_groups = number_of_groups
        if created_at is not None:
            self.created_at = created_at
        if groups is not None:
            self.groups = groups

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return "<Draw(id={id}, drawn_by={by}, groups={n})>".format(
            id=self.id,
            by=self.drawn_by,
            n=self.number_of_groups,
        )


class Group(Base):
    """A named group ("A".."H") belonging to a single draw."""

    __tablename__ = "draw_groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    draw_id: Mapped[int] = mapped_column(
        ForeignKey("draws.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(1), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    """Creation order inside the draw."""

    draw: Mapped["Draw"] = relationship(back_populates="groups")
    group_teams: Mapped[list["GroupTeam"]] = relationship(
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="GroupTeam.position",
    )

    __table_args__ = (
        UniqueConstraint("draw_id", "name", name="draw_groups_draw_id_name_key"),
    )

    def __init__(self, name: str, position: int = 0) -> None:
        self.name = name
        self.position = position

    def add_team(self, team: "Team") -> "GroupTeam":
        """Attach ``team`` as the next member of this group."""

        link = GroupTeam(team=team, position=len(self.group_teams))
        self.group_teams.append(link)
        return link

    @property
    def teams(self) -> list["Team"]:
        return [link.team for link in self.group_teams]


class GroupTeam(Base):
    """Association between a group and one of its member teams."""

    __tablename__ = "group_teams"

    group_id: Mapped[int] = mapped_column(
        ForeignKey("draw_groups.id", ondelete="CASCADE"), primary_key=True
    )
    team_id: Mapped[int] = mapped_column(
        ForeignKey("teams.id", ondelete="RESTRICT"), primary_key=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    """Order in which the team was drawn into the group."""

    group: Mapped["Group"] = relationship(back_populates="group_teams")
    team: Mapped["Team"] = relationship()

    def __init__(self, team: "Team", position: int = 0) -> None:
        self.team = team
        self.position = position
