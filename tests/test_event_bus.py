"""Tests for the async EventBus."""

from __future__ import annotations

import logging

import pytest

from projnav.shared.core.event_bus import EventBus


class TestEventBus:
    @pytest.mark.asyncio
    async def test_publish_reaches_each_subscriber(self) -> None:
        bus = EventBus()
        seen = []

        async def first(payload):
            seen.append(("first", payload["n"]))

        async def second(payload):
            seen.append(("second", payload["n"]))

        await bus.subscribe("topic", first)
        await bus.subscribe("topic", second)
        await bus.subscribe("topic", first)
        assert bus.subscriber_count("topic") == 2

        await bus.publish("topic", {"n": 1})
        assert await bus.wait_until_idle()

        assert sorted(seen) == [("first", 1), ("second", 1)]

    @pytest.mark.asyncio
    async def test_unsubscribe(self) -> None:
        bus = EventBus()
        seen = []

        async def handler(payload):
            seen.append(payload)

        await bus.subscribe("topic", handler)
        await bus.unsubscribe("topic", handler)
        await bus.publish("topic", {})
        assert await bus.wait_until_idle()

        assert seen == []
        assert bus.subscriber_count("topic") == 0

    @pytest.mark.asyncio
    async def test_failing_handler_is_logged_and_isolated(self, caplog) -> None:
        bus = EventBus()
        seen = []

        async def broken(payload):
            raise ValueError("bad payload")

        async def healthy(payload):
            seen.append(payload)

        await bus.subscribe("topic", broken)
        await bus.subscribe("topic", healthy)

        with caplog.at_level(logging.ERROR):
            await bus.publish("topic", {"ok": True})
            assert await bus.wait_until_idle()

        assert seen == [{"ok": True}]
        assert "broken" in caplog.text

    @pytest.mark.asyncio
    async def test_publish_nowait_schedules_delivery(self) -> None:
        bus = EventBus()
        seen = []

        async def handler(payload):
            seen.append(payload)

        await bus.subscribe("topic", handler)
        task = bus.publish_nowait("topic", {"n": 2})

        assert task is not None
        assert seen == []
        assert await bus.wait_until_idle()
        assert seen == [{"n": 2}]

    def test_publish_nowait_without_loop_returns_none(self) -> None:
        assert EventBus().publish_nowait("topic", {}) is None

    @pytest.mark.asyncio
    async def test_clear_removes_subscriptions(self) -> None:
        bus = EventBus()

        async def handler(payload):
            pass

        await bus.subscribe("topic", handler)
        bus.clear()

        assert bus.subscriber_count("topic") == 0
