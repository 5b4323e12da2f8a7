"""Random assignment of teams to groups with at most one team per country."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, TypeVar

from ..errors import DrawError, InvalidArgumentError
from .random_source import RandomSource

GROUP_NAMES = "ABCDEFGH"
SUPPORTED_GROUP_COUNTS = (4, 8)
MAX_DRAW_ATTEMPTS = 50

logger = logging.getLogger(__name__)


class TeamLike(Protocol):
    @property
    def name(self) -> str: ...

    @property
    def country(self) -> str: ...


T = TypeVar("T", bound=TeamLike)


@dataclass(frozen=True)
class GroupAssignment:
    """A named group and the teams drawn into it, in draw order."""

    name: str
    teams: tuple


@dataclass(frozen=True)
class DrawAssignment:
    """Value object produced by :func:`assign_groups`.

    Attributes
    ----------
    groups : tuple[GroupAssignment, ...]
        Groups in creation order.
    unassigned : tuple
        Roster entries that no group could take because every group still
        short of teams already holds their country. This can happen even
        for a balanced roster; :func:`assign_all_teams` retries until it is
        empty.
    """

    groups: tuple[GroupAssignment, ...]
    unassigned: tuple = ()

    @property
    def assigned_count(self) -> int:
        return sum(len(group.teams) for group in self.groups)


def validate_group_count(group_count: int) -> int:
    """Return ``group_count`` if it is supported, else raise."""

    if isinstance(group_count, bool) or group_count not in SUPPORTED_GROUP_COUNTS:
        raise InvalidArgumentError("Number of groups must be 4 or 8")
    return group_count


def _country_pools(roster: Sequence[TeamLike]) -> dict[str, list[int]]:
    """Map each country to the roster indexes of its teams.

    Countries keep the order of their first appearance in the roster.
    """

    pools: dict[str, list[int]] = {}
    for index, team in enumerate(roster):
        pools.setdefault(team.country, []).append(index)
    return pools


def assign_groups(
    group_count: int,
    roster: Sequence[T],
    random_source: RandomSource,
    *,
    teams_per_group: Optional[int] = None,
) -> DrawAssignment:
    """Draw ``roster`` into ``group_count`` groups.

    The draw runs ``teams_per_group`` rounds. In each round every group, in
    creation order, receives one team: a country is chosen uniformly among
    those that still have undrawn teams and are not yet represented in the
    group, then a team is chosen uniformly among that country's remaining
    teams. A group with no eligible country is skipped for that round.

    Parameters
    ----------
    group_count : int
        Number of groups, 4 or 8.
    roster : Sequence
        Teams to draw. Items need ``name`` and ``country`` attributes. The
        sequence is not modified.
    random_source : RandomSource
        Source of all random choices.
    teams_per_group : Optional[int], default: None
        Number of rounds. Defaults to ``ceil(len(roster) / group_count)`` so
        that a balanced roster is consumed entirely.

    Returns
    -------
    DrawAssignment
        Groups plus any roster entries that could not be placed.

    Raises
    ------
    InvalidArgumentError
        If ``group_count`` is not 4 or 8, or ``teams_per_group`` is not
        positive.
    """

    validate_group_count(group_count)
    if teams_per_group is None:
        teams_per_group = math.ceil(len(roster) / group_count)
    elif teams_per_group <= 0:
        raise InvalidArgumentError("teams_per_group must be positive")

    pools = _country_pools(roster)
    countries = list(pools)
    members: list[list[int]] = [[] for _ in range(group_count)]
    represented: list[set[str]] = [set() for _ in range(group_count)]

    for _round in range(teams_per_group):
        for group_index in range(group_count):
            eligible = [
                country
                for country in countries
                if pools[country] and country not in represented[group_index]
            ]
            if not eligible:
                continue

            country = eligible[random_source.next(len(eligible))]
            pool = pools[country]
            team_index = pool.pop(random_source.next(len(pool)))

            members[group_index].append(team_index)
            represented[group_index].add(country)

    groups = tuple(
        GroupAssignment(
            name=GROUP_NAMES[group_index],
            teams=tuple(roster[i] for i in members[group_index]),
        )
        for group_index in range(group_count)
    )
    leftover = sorted(i for pool in pools.values() for i in pool)
    return DrawAssignment(groups=groups, unassigned=tuple(roster[i] for i in leftover))


def assign_all_teams(
    group_count: int,
    roster: Sequence[T],
    random_source: RandomSource,
    *,
    teams_per_group: Optional[int] = None,
    max_attempts: int = MAX_DRAW_ATTEMPTS,
) -> DrawAssignment:
    """Run :func:`assign_groups` until every roster entry is placed.

    The round-by-round draw can paint itself into a corner: in the last
    rounds the only undrawn teams may come from countries the remaining
    groups already hold. Such attempts are discarded and the draw is rerun
    with the same random source, so each individual choice stays uniform.

    Raises
    ------
    InvalidArgumentError
        As :func:`assign_groups`, or if ``max_attempts`` is not positive.
    DrawError
        If the groups cannot hold the roster, or no complete draw was found
        within ``max_attempts`` tries.
    """

    validate_group_count(group_count)
    if max_attempts <= 0:
        raise InvalidArgumentError("max_attempts must be positive")
    if teams_per_group is not None and teams_per_group * group_count < len(roster):
        raise DrawError(
            f"{group_count} groups of {teams_per_group} cannot hold "
            f"{len(roster)} teams"
        )

    for attempt in range(1, max_attempts + 1):
        assignment = assign_groups(
            group_count, roster, random_source, teams_per_group=teams_per_group
        )
        if not assignment.unassigned:
            if attempt > 1:
                logger.debug(f"Complete draw found on attempt {attempt}")
            return assignment

    raise DrawError(
        f"Could not place all {len(roster)} teams into {group_count} groups "
        f"after {max_attempts} attempts"
    )


__all__ = [
    "DrawAssignment",
    "GROUP_NAMES",
    "GroupAssignment",
    "MAX_DRAW_ATTEMPTS",
    "SUPPORTED_GROUP_COUNTS",
    "assign_all_teams",
    "assign_groups",
    "validate_group_count",
]
