"""Draw orchestration: roster loading, the draw itself, persistence, events."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from .draw import RandomSource, SystemRandomSource, assign_all_teams, validate_group_count
from .events import EventPublisher, EventStatus
from .results import DrawResult, GroupResult, TeamResult
from .storage import DrawRepository, TeamRepository

logger = logging.getLogger(__name__)

CREATE_DRAW = "CreateDraw"
GET_ALL_DRAWS = "GetAllDraws"
GET_DRAW_BY_ID = "GetDrawById"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DrawService:
    """Public operations of the league draw.

    Every operation publishes exactly one ``Started`` event and one terminal
    event (``Completed``, ``NotFound`` or ``Failed``). Errors from the
    roster, the draw or storage are re-raised unchanged after the ``Failed``
    event; the publisher itself never raises.

    Parameters
    ----------
    team_repository : TeamRepository
        Roster source; seeded on demand.
    draw_repository : DrawRepository
        Any draw storage backend.
    publisher : EventPublisher
        Lifecycle event sink.
    random_source : Optional[RandomSource], default: None
        Source for the draw; an unseeded :class:`SystemRandomSource` if
        omitted.
    teams_per_group : Optional[int], default: None
        Number of draw rounds. Derived from the roster size when omitted.
    clock : Callable[[], datetime], default: UTC now
        Timestamp provider for new draws.
    """

    def __init__(
        self,
        team_repository: TeamRepository,
        draw_repository: DrawRepository,
        publisher: EventPublisher,
        *,
        random_source: Optional[RandomSource] = None,
        teams_per_group: Optional[int] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._teams = team_repository
        self._draws = draw_repository
        self._publisher = publisher
        self._random = random_source or SystemRandomSource()
        self._teams_per_group = teams_per_group
        self._clock = clock

    def create_draw(self, drawn_by: str, number_of_groups: int) -> DrawResult:
        """Draw the roster into ``number_of_groups`` groups and store it.

        Raises
        ------
        InvalidArgumentError
            If ``number_of_groups`` is not 4 or 8. Nothing is stored.
        DrawError
            If no draw placing every team was found. Nothing is stored.
        StorageError
            If the roster cannot be loaded or the draw cannot be saved.
        """
        operation_id = uuid.uuid4().hex[:8]
        args = [drawn_by, str(number_of_groups), operation_id]
        self._publisher.publish(CREATE_DRAW, EventStatus.STARTED, *args)

        try:
            logger.info(
                f"Starting draw creation {operation_id} by {drawn_by} "
                f"for {number_of_groups} groups"
            )
            validate_group_count(number_of_groups)

            self._teams.ensure_teams_exist()
            roster = self._teams.get_all_teams()

            assignment = assign_all_teams(
                number_of_groups,
                roster,
                self._random,
                teams_per_group=self._teams_per_group,
            )

            result = DrawResult(
                drawn_by=drawn_by,
                created_at=self._clock(),
                groups=tuple(
                    GroupResult(
                        group_name=group.name,
                        teams=tuple(
                            TeamResult(t.name, t.country, getattr(t, "city", None))
                            for t in group.teams
                        ),
                    )
                    for group in assignment.groups
                ),
                number_of_groups=number_of_groups,
            )
            stored = self._draws.save(result, number_of_groups)
        except Exception as e:
            logger.exception(f"Error in draw creation {operation_id}")
            self._publisher.publish(CREATE_DRAW, EventStatus.FAILED, *args, str(e))
            raise

        self._publisher.publish(CREATE_DRAW, EventStatus.COMPLETED, *args, str(stored.id))
        logger.info(f"Draw {operation_id} created successfully as id {stored.id}")
        return stored

    def list_draws(self) -> list[DrawResult]:
        self._publisher.publish(GET_ALL_DRAWS, EventStatus.STARTED)
        try:
            draws = self._draws.get_all()
        except Exception as e:
            logger.exception("Error getting all draws")
            self._publisher.publish(GET_ALL_DRAWS, EventStatus.FAILED, str(e))
            raise

        self._publisher.publish(GET_ALL_DRAWS, EventStatus.COMPLETED, str(len(draws)))
        return draws

    def get_draw(self, draw_id: int) -> Optional[DrawResult]:
        """Return the draw with ``draw_id``, or ``None`` when it does not exist."""
        self._publisher.publish(GET_DRAW_BY_ID, EventStatus.STARTED, str(draw_id))
        try:
            draw = self._draws.get_by_id(draw_id)
        except Exception as e:
            logger.exception(f"Error getting draw by ID: {draw_id}")
            self._publisher.publish(GET_DRAW_BY_ID, EventStatus.FAILED, str(draw_id), str(e))
            raise

        status = EventStatus.COMPLETED if draw is not None else EventStatus.NOT_FOUND
        self._publisher.publish(GET_DRAW_BY_ID, status, str(draw_id))
        return draw
