"""Key-value storage: draws serialized as JSON values in Redis."""

from __future__ import annotations

import logging
from typing import Optional

from redis import Redis, RedisError

from ..draw.assignment import validate_group_count
from ..errors import StorageError
from ..results import DrawResult
from .base import DrawRepository

logger = logging.getLogger(__name__)


class RedisDrawRepository(DrawRepository):
    """Stores each draw as one JSON value plus an entry in a recency index.

    Keys (with the default prefix)::

        leaguedraw:draw:next_id     INCR counter for new ids
        leaguedraw:draw:<id>        JSON payload of the draw
        leaguedraw:draws:recent     sorted set, member id, score created_at

    The payload and the index entry are written in one MULTI/EXEC block, so
    a draw is either fully visible or not at all.
    """

    def __init__(self, client: Redis, prefix: str = "leaguedraw") -> None:
        self._client = client
        self._prefix = prefix

    @property
    def _next_id_key(self) -> str:
        return f"{self._prefix}:draw:next_id"

    @property
    def _recent_key(self) -> str:
        return f"{self._prefix}:draws:recent"

    def _draw_key(self, draw_id: int) -> str:
        return f"{self._prefix}:draw:{draw_id}"

    def save(self, result: DrawResult, number_of_groups: int) -> DrawResult:
        validate_group_count(number_of_groups)
        try:
            draw_id = int(self._client.incr(self._next_id_key))
            stored = result.with_id(draw_id, number_of_groups)
            pipe = self._client.pipeline(transaction=True)
            pipe.set(self._draw_key(draw_id), stored.to_json_str())
            pipe.zadd(self._recent_key, {str(draw_id): stored.created_at.timestamp()})
            pipe.execute()
        except RedisError as e:
            raise StorageError(f"Error saving draw to Redis: {e}") from e

        logger.debug(f"Saved draw {draw_id} under {self._draw_key(draw_id)}")
        return stored

    def get_all(self) -> list[DrawResult]:
        try:
            members = self._client.zrevrange(self._recent_key, 0, -1)
            if not members:
                return []
            payloads = self._client.mget([self._draw_key(int(m)) for m in members])
        except RedisError as e:
            raise StorageError(f"Error retrieving draws from Redis: {e}") from e

        draws = [DrawResult.from_json_str(p) for p in payloads if p is not None]
        # Equal scores come back in member order; make ties newest-id first.
        draws.sort(key=lambda d: (d.created_at, d.id or 0), reverse=True)
        return draws

    def get_by_id(self, draw_id: int) -> Optional[DrawResult]:
        try:
            payload = self._client.get(self._draw_key(draw_id))
        except RedisError as e:
            raise StorageError(f"Error retrieving draw {draw_id} from Redis: {e}") from e

        if payload is None:
            return None
        return DrawResult.from_json_str(payload)
