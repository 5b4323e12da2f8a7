"""Operation lifecycle events: publishing and monitoring."""

from .publisher import (
    DEFAULT_CHANNEL_PREFIX,
    EventPublisher,
    EventStatus,
    LoggingEventPublisher,
    OperationEvent,
    RedisEventPublisher,
    build_publisher,
)

__all__ = [
    "DEFAULT_CHANNEL_PREFIX",
    "EventPublisher",
    "EventStatus",
    "LoggingEventPublisher",
    "OperationEvent",
    "RedisEventPublisher",
    "build_publisher",
]
