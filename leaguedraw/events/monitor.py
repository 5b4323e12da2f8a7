"""Console monitor printing every published operation event.

Run with ``leaguedraw-monitor`` (or ``python -m leaguedraw.events.monitor``).
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Optional, TextIO

from .publisher import DEFAULT_CHANNEL_PREFIX, OperationEvent

if TYPE_CHECKING:
    from redis import Redis

logger = logging.getLogger(__name__)

_STATUS_ICONS = {
    "started": "🚀",
    "completed": "✅",
    "failed": "❌",
    "notfound": "❓",
}


def status_icon(status: str) -> str:
    return _STATUS_ICONS.get(status.lower(), "ℹ️")


def render_event(event: OperationEvent, count: int, now: datetime) -> str:
    """Render one event as the multi-line block printed by the monitor."""

    return "\n".join(
        [
            f"[{now:%H:%M:%S}] 📨 EVENT #{count}:",
            f"├─ Operation: {event.operation_name}",
            f"├─ Status: {status_icon(event.status)} {event.status}",
            f"└─ Args: [{', '.join(event.args)}]",
        ]
    )


class EventMonitor:
    """Pattern-subscribes to the event channels and prints what arrives.

    The monitor keeps no state beyond the number of events it has shown.
    """

    def __init__(
        self,
        client: "Redis",
        pattern: str = f"{DEFAULT_CHANNEL_PREFIX}.*",
        out: Optional[TextIO] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._client = client
        self.pattern = pattern
        self._out = out or sys.stdout
        self._clock = clock
        self.count = 0

    def handle(self, payload: str | bytes) -> Optional[OperationEvent]:
        """Decode and print one message body; undecodable bodies are skipped."""

        try:
            event = OperationEvent.from_json_str(payload)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Skipping undecodable event payload {payload!r}: {e}")
            return None

        self.count += 1
        self._out.write("\n" + render_event(event, self.count, self._clock()) + "\n")
        self._out.flush()
        return event

    def run(self) -> None:
        """Block and print events until interrupted."""

        pubsub = self._client.pubsub(ignore_subscribe_messages=True)
        pubsub.psubscribe(self.pattern)
        try:
            for message in pubsub.listen():
                if message.get("type") != "pmessage":
                    continue
                self.handle(message["data"])
        finally:
            pubsub.close()


def main() -> None:
    from redis import Redis

    from ..config import Settings
    from ..log import setup_logging

    settings = Settings.from_env()
    setup_logging(settings.log_level)
    pattern = f"{settings.event_channel_prefix}.*"

    print("🎯 EVENT MONITOR STARTING...")
    print(f"Broker: {settings.redis_url}")
    print(f"Pattern: {pattern}")
    print("\n✅ EVENT MONITOR READY - Press CTRL+C to quit\n")
    print("=" * 50)

    monitor = EventMonitor(Redis.from_url(settings.redis_url), pattern=pattern)
    try:
        monitor.run()
    except KeyboardInterrupt:
        print(f"\nStopped after {monitor.count} event(s).")


if __name__ == "__main__":
    main()
