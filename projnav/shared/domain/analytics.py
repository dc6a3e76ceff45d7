"""Analytics collaborators for the project navigator.

The navigator reports two events: a swipe to a neighbouring project and the
project page being closed by the dismissal gesture. Delivery is the sink's
business; the navigator only calls it and moves on.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from projnav.shared.core import events
from projnav.shared.core.configuration import AnalyticsConfig
from projnav.shared.core.event_bus import EventBus
from projnav.shared.domain.models import GestureType, Project, RefTag, SwipeDirection

logger = logging.getLogger(__name__)

EVENT_SWIPED_PROJECT = "Swiped Project"
EVENT_CLOSED_PROJECT_PAGE = "Closed Project Page"


def swipe_direction(current_index: Optional[int], previous_index: Optional[int]) -> SwipeDirection:
    """Classify a page swipe. Missing indices count as 0."""
    if (current_index or 0) > (previous_index or 0):
        return SwipeDirection.NEXT
    return SwipeDirection.PREVIOUS


@runtime_checkable
class AnalyticsSink(Protocol):
    def track_swiped_project(
        self, project: Project, ref_tag: RefTag, direction: SwipeDirection
    ) -> None: ...

    def track_closed_project_page(
        self, project: Project, ref_tag: RefTag, gesture_type: GestureType
    ) -> None: ...


class NullAnalyticsSink:
    """Discards every event."""

    def track_swiped_project(self, project: Project, ref_tag: RefTag, direction: SwipeDirection) -> None:
        pass

    def track_closed_project_page(self, project: Project, ref_tag: RefTag, gesture_type: GestureType) -> None:
        pass


class LoggingAnalyticsSink:
    """Writes each event to the log at INFO."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._log = log or logger

    def track_swiped_project(self, project: Project, ref_tag: RefTag, direction: SwipeDirection) -> None:
        self._log.info(
            f"{EVENT_SWIPED_PROJECT}: project={project.id} ref_tag={ref_tag.code} type={direction.value}"
        )

    def track_closed_project_page(self, project: Project, ref_tag: RefTag, gesture_type: GestureType) -> None:
        self._log.info(
            f"{EVENT_CLOSED_PROJECT_PAGE}: project={project.id} ref_tag={ref_tag.code} "
            f"gesture_type={gesture_type.value}"
        )


class TrackedEvent(BaseModel):
    """One analytics call captured by ``RecordingAnalyticsSink``."""
    model_config = ConfigDict(frozen=True)

    name: str
    project: Project
    ref_tag: RefTag
    properties: Dict[str, str] = Field(default_factory=dict)


class RecordingAnalyticsSink:
    """Keeps every event in memory, in call order."""

    def __init__(self) -> None:
        self.events: List[TrackedEvent] = []

    def track_swiped_project(self, project: Project, ref_tag: RefTag, direction: SwipeDirection) -> None:
        self.events.append(TrackedEvent(
            name=EVENT_SWIPED_PROJECT,
            project=project,
            ref_tag=ref_tag,
            properties={"type": direction.value},
        ))

    def track_closed_project_page(self, project: Project, ref_tag: RefTag, gesture_type: GestureType) -> None:
        self.events.append(TrackedEvent(
            name=EVENT_CLOSED_PROJECT_PAGE,
            project=project,
            ref_tag=ref_tag,
            properties={"gesture_type": gesture_type.value},
        ))

    def names(self) -> List[str]:
        return [event.name for event in self.events]

    def clear(self) -> None:
        self.events.clear()


class EventBusAnalyticsSink:
    """Publishes analytics payloads on the async ``EventBus`` without waiting."""

    def __init__(self, event_bus: EventBus) -> None:
        self.event_bus = event_bus

    def track_swiped_project(self, project: Project, ref_tag: RefTag, direction: SwipeDirection) -> None:
        self.event_bus.publish_nowait(
            events.TOPIC_PROJECT_SWIPED,
            events.create_project_swiped_event(project, ref_tag, direction),
        )

    def track_closed_project_page(self, project: Project, ref_tag: RefTag, gesture_type: GestureType) -> None:
        self.event_bus.publish_nowait(
            events.TOPIC_PROJECT_PAGE_CLOSED,
            events.create_project_page_closed_event(project, ref_tag, gesture_type),
        )


def build_analytics_sink(config: AnalyticsConfig, event_bus: Optional[EventBus] = None) -> AnalyticsSink:
    """Pick the sink described by ``config``.

    The ``event_bus`` sink needs a bus; without one it falls back to logging.
    """
    if not config.enabled or config.sink == "null":
        return NullAnalyticsSink()
    if config.sink == "recording":
        return RecordingAnalyticsSink()
    if config.sink == "event_bus":
        if event_bus is not None:
            return EventBusAnalyticsSink(event_bus)
        logger.warning("Analytics sink 'event_bus' requested without an EventBus; using logging")
    return LoggingAnalyticsSink()
