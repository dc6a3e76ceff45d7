"""Canonical event topics and payload builders for ProjectNavigator."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from .event_bus import EventPayload

if TYPE_CHECKING:
    from projnav.shared.domain.models import GestureType, Project, RefTag, SwipeDirection

# Analytics topics
TOPIC_PROJECT_SWIPED = "analytics.project.swiped"
TOPIC_PROJECT_PAGE_CLOSED = "analytics.project_page.closed"


def _project_fields(project: "Project", ref_tag: "RefTag") -> EventPayload:
    return {
        "project_id": project.id,
        "project_name": project.name,
        "ref_tag": ref_tag.code,
    }


def create_project_swiped_event(
    project: "Project",
    ref_tag: "RefTag",
    direction: "SwipeDirection",
) -> EventPayload:
    """Create a project swiped event (user paged to a neighbouring project)."""
    event = _project_fields(project, ref_tag)
    event["type"] = direction.value
    event["ts"] = time.time()
    return event


def create_project_page_closed_event(
    project: "Project",
    ref_tag: "RefTag",
    gesture_type: "GestureType",
) -> EventPayload:
    """Create a project page closed event.

    Args:
        project: Project visible when the page was closed
        ref_tag: Reference tag the navigator was configured with
        gesture_type: Gesture that closed the page
    """
    event = _project_fields(project, ref_tag)
    event["gesture_type"] = gesture_type.value
    event["ts"] = time.time()
    return event
