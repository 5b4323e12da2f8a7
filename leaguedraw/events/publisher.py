"""Best-effort publication of operation lifecycle events.

Events are broadcast on a topic derived from the operation name
(``operation.events.createdraw``) so any number of subscribers can follow
them with a wildcard pattern. Publishing never raises: a failure is logged
and counted, and the calling operation carries on.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    from redis import Redis

    from ..config import Settings

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL_PREFIX = "operation.events"


class EventStatus:
    STARTED = "Started"
    COMPLETED = "Completed"
    FAILED = "Failed"
    NOT_FOUND = "NotFound"

    ALL = (STARTED, COMPLETED, FAILED, NOT_FOUND)


@dataclass(frozen=True)
class OperationEvent:
    operation_name: str
    status: str
    args: tuple[str, ...] = ()

    def routing_key(self, prefix: str = DEFAULT_CHANNEL_PREFIX) -> str:
        return f"{prefix}.{self.operation_name.lower()}"

    def to_json(self) -> dict[str, Any]:
        return {
            "operationName": self.operation_name,
            "status": self.status,
            "args": list(self.args),
        }

    def to_json_str(self) -> str:
        return json.dumps(self.to_json(), ensure_ascii=False)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "OperationEvent":
        return cls(
            operation_name=str(data["operationName"]),
            status=str(data["status"]),
            args=tuple(str(a) for a in data.get("args") or ()),
        )

    @classmethod
    def from_json_str(cls, payload: str | bytes) -> "OperationEvent":
        return cls.from_json(json.loads(payload))


class EventPublisher:
    """Base publisher. Subclasses deliver events in :meth:`_send`.

    ``published`` and ``failed`` count delivery outcomes; they are the only
    place a delivery failure is visible besides the log.
    """

    def __init__(self, prefix: str = DEFAULT_CHANNEL_PREFIX) -> None:
        self.prefix = prefix
        self.published = 0
        self.failed = 0

    def publish(self, operation_name: str, status: str, *args: object) -> bool:
        """Publish one event; return whether delivery succeeded."""

        event = OperationEvent(operation_name, status, tuple(str(a) for a in args))
        routing_key = event.routing_key(self.prefix)
        try:
            self._send(event, routing_key)
        except Exception as e:
            self.failed += 1
            logger.error(
                f"Failed to publish operation event: {operation_name} - {status}: {e}"
            )
            return False

        self.published += 1
        logger.info(f"Published event: {operation_name} - {status} -> {routing_key}")
        return True

    def _send(self, event: OperationEvent, routing_key: str) -> None:  # pragma: no cover - abstract
        raise NotImplementedError


class RedisEventPublisher(EventPublisher):
    """Publishes events with Redis ``PUBLISH`` on the event's routing key."""

    def __init__(self, client: "Redis", prefix: str = DEFAULT_CHANNEL_PREFIX) -> None:
        super().__init__(prefix)
        self._client = client

    def _send(self, event: OperationEvent, routing_key: str) -> None:
        receivers = self._client.publish(routing_key, event.to_json_str())
        logger.debug(f"{routing_key} delivered to {receivers} subscriber(s)")


class LoggingEventPublisher(EventPublisher):
    """Writes events to the log only; used when no broker is configured."""

    def _send(self, event: OperationEvent, routing_key: str) -> None:
        logger.debug(f"Event {routing_key}: {event.to_json_str()}")


def build_publisher(settings: "Settings") -> EventPublisher:
    if not settings.events_enabled:
        return LoggingEventPublisher(settings.event_channel_prefix)

    from redis import Redis

    return RedisEventPublisher(
        Redis.from_url(settings.redis_url), prefix=settings.event_channel_prefix
    )
