from __future__ import annotations

import io
import json
import unittest
from datetime import datetime

import fakeredis
from redis import ConnectionError as RedisConnectionError

from leaguedraw.config import Settings
from leaguedraw.events import (
    EventStatus,
    LoggingEventPublisher,
    OperationEvent,
    RedisEventPublisher,
    build_publisher,
)
from leaguedraw.events.monitor import EventMonitor, render_event, status_icon


class DownRedis:
    def publish(self, channel, message):
        raise RedisConnectionError("Error 111 connecting to localhost:6379")


class DummyPubSub:
    def __init__(self, messages):
        self.messages = messages
        self.patterns = []
        self.closed = False

    def psubscribe(self, pattern):
        self.patterns.append(pattern)

    def listen(self):
        yield from self.messages

    def close(self):
        self.closed = True


class DummyRedis:
    def __init__(self, messages):
        self.pubsub_obj = DummyPubSub(messages)

    def pubsub(self, ignore_subscribe_messages=False):
        return self.pubsub_obj


class OperationEventTests(unittest.TestCase):
    def test_routing_key_and_wire_shape(self):
        event = OperationEvent("CreateDraw", EventStatus.STARTED, ("Alice", "4"))
        self.assertEqual(event.routing_key(), "operation.events.createdraw")
        self.assertEqual(event.routing_key("league"), "league.createdraw")
        self.assertEqual(
            json.loads(event.to_json_str()),
            {"operationName": "CreateDraw", "status": "Started", "args": ["Alice", "4"]},
        )
        self.assertEqual(OperationEvent.from_json_str(event.to_json_str()), event)

    def test_statuses(self):
        self.assertEqual(EventStatus.ALL, ("Started", "Completed", "Failed", "NotFound"))


class RedisEventPublisherTests(unittest.TestCase):
    def setUp(self):
        self.client = fakeredis.FakeRedis()
        self.subscriber = self.client.pubsub(ignore_subscribe_messages=True)
        self.subscriber.psubscribe("operation.events.*")
        self.subscriber.get_message(timeout=1)

    def tearDown(self):
        self.subscriber.close()

    def test_publish_reaches_wildcard_subscriber(self):
        publisher = RedisEventPublisher(self.client)
        self.assertTrue(publisher.publish("GetDrawById", EventStatus.NOT_FOUND, 7))

        message = self.subscriber.get_message(timeout=1)
        self.assertEqual(message["channel"], b"operation.events.getdrawbyid")
        event = OperationEvent.from_json_str(message["data"])
        self.assertEqual(event, OperationEvent("GetDrawById", "NotFound", ("7",)))
        self.assertEqual(publisher.published, 1)
        self.assertEqual(publisher.failed, 0)

    def test_delivery_failure_is_swallowed_and_counted(self):
        publisher = RedisEventPublisher(DownRedis())
        with self.assertLogs("leaguedraw.events.publisher", level="ERROR") as logs:
            self.assertFalse(publisher.publish("CreateDraw", EventStatus.FAILED, "x"))
        self.assertEqual(publisher.failed, 1)
        self.assertIn("CreateDraw - Failed", logs.output[0])


class BuildPublisherTests(unittest.TestCase):
    def test_disabled_events_only_log(self):
        publisher = build_publisher(Settings(events_enabled=False))
        self.assertIsInstance(publisher, LoggingEventPublisher)
        self.assertTrue(publisher.publish("GetAllDraws", EventStatus.STARTED))

    def test_enabled_events_use_redis(self):
        publisher = build_publisher(Settings(event_channel_prefix="league.events"))
        self.assertIsInstance(publisher, RedisEventPublisher)
        self.assertEqual(publisher.prefix, "league.events")


class EventMonitorTests(unittest.TestCase):
    NOW = datetime(2024, 6, 1, 14, 5, 9)

    def test_status_icons(self):
        self.assertEqual(status_icon("Started"), "🚀")
        self.assertEqual(status_icon("NotFound"), "❓")
        self.assertEqual(status_icon("Unknown"), "ℹ️")

    def test_render_event(self):
        event = OperationEvent("CreateDraw", "Completed", ("Alice", "4"))
        self.assertEqual(
            render_event(event, 3, self.NOW).splitlines(),
            [
                "[14:05:09] 📨 EVENT #3:",
                "├─ Operation: CreateDraw",
                "├─ Status: ✅ Completed",
                "└─ Args: [Alice, 4]",
            ],
        )

    def test_run_prints_pattern_messages_and_skips_garbage(self):
        good = OperationEvent("GetAllDraws", "Started").to_json_str().encode()
        client = DummyRedis(
            [
                {"type": "psubscribe", "data": 1},
                {"type": "pmessage", "data": good},
                {"type": "pmessage", "data": b"not json"},
                {"type": "pmessage", "data": good},
            ]
        )
        out = io.StringIO()
        monitor = EventMonitor(client, out=out, clock=lambda: self.NOW)

        with self.assertLogs("leaguedraw.events.monitor", level="WARNING"):
            monitor.run()

        self.assertEqual(client.pubsub_obj.patterns, ["operation.events.*"])
        self.assertTrue(client.pubsub_obj.closed)
        self.assertEqual(monitor.count, 2)
        self.assertIn("EVENT #1:", out.getvalue())
        self.assertIn("EVENT #2:", out.getvalue())
        self.assertIn("├─ Operation: GetAllDraws", out.getvalue())


if __name__ == "__main__":
    unittest.main()
