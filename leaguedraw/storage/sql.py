"""Relational storage backed by SQLAlchemy (the primary backend)."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload, sessionmaker

from ..draw.assignment import validate_group_count
from ..errors import StorageError
from ..models import Draw, Group, GroupTeam, Team
from ..results import DrawResult, GroupResult, TeamResult
from .base import DrawRepository
from .seed import seed_rows

logger = logging.getLogger(__name__)


def team_result(team: Team) -> TeamResult:
    return TeamResult(name=team.name, country=team.country, city=team.city)


def draw_result(draw: Draw) -> DrawResult:
    """Project a loaded :class:`Draw` row onto a :class:`DrawResult`."""

    return DrawResult(
        drawn_by=draw.drawn_by,
        created_at=draw.created_at,
        groups=tuple(
            GroupResult(
                group_name=group.name,
                teams=tuple(team_result(team) for team in group.teams),
            )
            for group in draw.groups
        ),
        id=draw.id,
        number_of_groups=draw.number_of_groups,
    )


def _with_members(stmt):
    return stmt.options(
        selectinload(Draw.groups)
        .selectinload(Group.group_teams)
        .selectinload(GroupTeam.team)
    )


class SqlDrawRepository(DrawRepository):
    """Stores draws in the ``draws`` / ``draw_groups`` / ``group_teams`` tables.

    A draw, its groups and every group-team association are written in one
    transaction; any failure rolls the whole draw back.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._Session = session_factory

    def save(self, result: DrawResult, number_of_groups: int) -> DrawResult:
        validate_group_count(number_of_groups)
        names = {team.name for team in result.teams}
        try:
            with self._Session.begin() as session:
                teams = {
                    team.name: team
                    for team in session.scalars(
                        select(Team).where(Team.name.in_(names))
                    )
                }
                missing = sorted(names - teams.keys())
                if missing:
                    raise StorageError(
                        f"Cannot save draw, unknown teams: {', '.join(missing)}"
                    )

                draw = Draw(
                    drawn_by=result.drawn_by,
                    number_of_groups=number_of_groups,
                    created_at=result.created_at,
                )
                for position, group_result in enumerate(result.groups):
                    group = Group(group_result.group_name, position=position)
                    for member in group_result.teams:
                        group.add_team(teams[member.name])
                    draw.groups.append(group)

                session.add(draw)
                session.flush()
                stored = draw_result(draw)
        except SQLAlchemyError as e:
            logger.error(f"Failed to save draw by {result.drawn_by}: {e}")
            raise StorageError(f"Failed to save draw: {e}") from e

        logger.debug(f"Saved draw {stored.id} with {len(stored.groups)} groups")
        return stored

    def get_all(self) -> list[DrawResult]:
        stmt = _with_members(select(Draw)).order_by(
            Draw.created_at.desc(), Draw.id.desc()
        )
        try:
            with self._Session() as session:
                return [draw_result(draw) for draw in session.scalars(stmt)]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load draws: {e}") from e

    def get_by_id(self, draw_id: int) -> Optional[DrawResult]:
        stmt = _with_members(select(Draw)).where(Draw.id == draw_id)
        try:
            with self._Session() as session:
                draw = session.scalar(stmt)
                return draw_result(draw) if draw is not None else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load draw {draw_id}: {e}") from e


class TeamRepository:
    """Read access to the team roster plus one-time seeding."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._Session = session_factory

    def ensure_teams_exist(self) -> bool:
        """Seed the default roster when the ``teams`` table is empty.

        Returns
        -------
        bool
            ``True`` if this call inserted the roster.
        """

        try:
            with self._Session.begin() as session:
                if session.scalar(select(func.count(Team.id))):
                    return False
                session.add_all(
                    [Team(name, country, city) for name, country, city in seed_rows()]
                )
        except IntegrityError:
            # Another process seeded the roster between our count and insert.
            logger.info("Team roster was seeded concurrently; using existing rows")
            return False
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to seed teams: {e}") from e

        logger.info(f"Seeded {len(seed_rows())} teams")
        return True

    def get_all_teams(self) -> list[TeamResult]:
        try:
            with self._Session() as session:
                teams = session.scalars(select(Team).order_by(Team.id))
                return [team_result(team) for team in teams]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load teams: {e}") from e

    def get_teams_by_country(self, country: str) -> list[TeamResult]:
        stmt = select(Team).where(Team.country == country).order_by(Team.id)
        try:
            with self._Session() as session:
                return [team_result(team) for team in session.scalars(stmt)]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load teams for {country}: {e}") from e
