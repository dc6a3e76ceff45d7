"""Tests for analytics sinks and swipe classification."""

from __future__ import annotations

import asyncio
import logging

import pytest

from projnav.navigator.state.project_navigator import ProjectNavigatorViewModel
from projnav.shared.core import events
from projnav.shared.core.configuration import AnalyticsConfig
from projnav.shared.core.event_bus import EventBus
from projnav.shared.domain.analytics import (
    AnalyticsSink,
    EventBusAnalyticsSink,
    LoggingAnalyticsSink,
    NullAnalyticsSink,
    RecordingAnalyticsSink,
    build_analytics_sink,
    swipe_direction,
)
from projnav.shared.domain.models import GestureType, RefTag, SwipeDirection


class TestSwipeDirection:
    @pytest.mark.parametrize("current,previous,expected", [
        (5, 2, SwipeDirection.NEXT),
        (2, 5, SwipeDirection.PREVIOUS),
        (3, 3, SwipeDirection.PREVIOUS),
        (1, None, SwipeDirection.NEXT),
        (None, 1, SwipeDirection.PREVIOUS),
        (None, None, SwipeDirection.PREVIOUS),
    ])
    def test_classification(self, current, previous, expected) -> None:
        assert swipe_direction(current, previous) == expected


class TestSinks:
    """Tests for the synchronous sink implementations."""

    def test_all_sinks_satisfy_protocol(self) -> None:
        for sink in (NullAnalyticsSink(), LoggingAnalyticsSink(), RecordingAnalyticsSink(),
                     EventBusAnalyticsSink(EventBus())):
            assert isinstance(sink, AnalyticsSink)

    def test_recording_sink_keeps_call_order(self, project_a, project_b) -> None:
        sink = RecordingAnalyticsSink()
        sink.track_swiped_project(project_a, RefTag.category(), SwipeDirection.NEXT)
        sink.track_closed_project_page(project_b, RefTag.category(), GestureType.SWIPE)

        assert sink.names() == ["Swiped Project", "Closed Project Page"]
        assert sink.events[1].project == project_b
        assert sink.events[1].properties == {"gesture_type": "swipe"}

        sink.clear()
        assert sink.events == []

    def test_logging_sink_writes_info(self, project_a, caplog) -> None:
        sink = LoggingAnalyticsSink()

        with caplog.at_level(logging.INFO, logger="projnav.shared.domain.analytics"):
            sink.track_swiped_project(project_a, RefTag.search(), SwipeDirection.PREVIOUS)
            sink.track_closed_project_page(project_a, RefTag.search(), GestureType.TAP)

        assert "Swiped Project: project=1 ref_tag=search type=previous" in caplog.text
        assert "gesture_type=tap" in caplog.text


class TestBuildAnalyticsSink:
    def test_disabled_gives_null_sink(self) -> None:
        sink = build_analytics_sink(AnalyticsConfig(enabled=False, sink="logging"))
        assert isinstance(sink, NullAnalyticsSink)

    def test_named_sinks(self) -> None:
        assert isinstance(build_analytics_sink(AnalyticsConfig(sink="logging")), LoggingAnalyticsSink)
        assert isinstance(build_analytics_sink(AnalyticsConfig(sink="recording")), RecordingAnalyticsSink)
        assert isinstance(build_analytics_sink(AnalyticsConfig(sink="null")), NullAnalyticsSink)

    def test_event_bus_sink_needs_bus(self) -> None:
        bus = EventBus()
        assert isinstance(build_analytics_sink(AnalyticsConfig(sink="event_bus"), bus), EventBusAnalyticsSink)
        assert isinstance(build_analytics_sink(AnalyticsConfig(sink="event_bus")), LoggingAnalyticsSink)


class TestEventBusAnalyticsSink:
    """Tests for publishing analytics through the async EventBus."""

    @pytest.mark.asyncio
    async def test_events_reach_subscribers(self, project_a) -> None:
        bus = EventBus()
        received = []

        async def on_swiped(payload):
            received.append(("swiped", payload))

        async def on_closed(payload):
            received.append(("closed", payload))

        await bus.subscribe(events.TOPIC_PROJECT_SWIPED, on_swiped)
        await bus.subscribe(events.TOPIC_PROJECT_PAGE_CLOSED, on_closed)

        sink = EventBusAnalyticsSink(bus)
        sink.track_swiped_project(project_a, RefTag.discovery(), SwipeDirection.NEXT)
        sink.track_closed_project_page(project_a, RefTag.discovery(), GestureType.SWIPE)

        assert await bus.wait_until_idle()
        kinds = sorted(kind for kind, _ in received)
        assert kinds == ["closed", "swiped"]
        payloads = dict(received)
        assert payloads["swiped"]["type"] == "next"
        assert payloads["swiped"]["project_id"] == 1
        assert payloads["closed"]["gesture_type"] == "swipe"
        assert payloads["closed"]["ref_tag"] == "discovery"

    def test_without_running_loop_event_is_dropped(self, project_a, caplog) -> None:
        sink = EventBusAnalyticsSink(EventBus())

        with caplog.at_level(logging.WARNING):
            sink.track_swiped_project(project_a, RefTag.discovery(), SwipeDirection.NEXT)

        assert "No running event loop" in caplog.text

    @pytest.mark.asyncio
    async def test_navigator_swipe_is_published(self, config, project_b) -> None:
        bus = EventBus()
        received = asyncio.Queue()

        async def on_swiped(payload):
            await received.put(payload)

        await bus.subscribe(events.TOPIC_PROJECT_SWIPED, on_swiped)
        view_model = ProjectNavigatorViewModel(analytics=EventBusAnalyticsSink(bus))
        view_model.inputs.configure_with(config)
        view_model.inputs.view_did_load()
        view_model.inputs.will_transition(project_b, 4)
        view_model.inputs.page_transition(True, 3)

        payload = await asyncio.wait_for(received.get(), timeout=1.0)
        assert payload["project_id"] == project_b.id
        assert payload["type"] == "next"
