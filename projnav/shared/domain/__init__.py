"""
Shared Domain Module
====================

Navigator value types, the dismissal state machine and analytics sinks.
"""

# Models
from projnav.shared.domain.models import (
    GestureType,
    NavigatorConfigData,
    PanningData,
    Point,
    Project,
    RefTag,
    SwipeDirection,
    SwipeTarget,
    TransitionPhase,
)

# Transition
from projnav.shared.domain.transition import PhaseChange, PhaseTracker, is_active, next_phase

# Analytics
from projnav.shared.domain.analytics import (
    AnalyticsSink,
    EventBusAnalyticsSink,
    LoggingAnalyticsSink,
    NullAnalyticsSink,
    RecordingAnalyticsSink,
    TrackedEvent,
    build_analytics_sink,
    swipe_direction,
)

__all__ = [
    # Models
    "GestureType",
    "NavigatorConfigData",
    "PanningData",
    "Point",
    "Project",
    "RefTag",
    "SwipeDirection",
    "SwipeTarget",
    "TransitionPhase",
    # Transition
    "PhaseChange",
    "PhaseTracker",
    "is_active",
    "next_phase",
    # Analytics
    "AnalyticsSink",
    "EventBusAnalyticsSink",
    "LoggingAnalyticsSink",
    "NullAnalyticsSink",
    "RecordingAnalyticsSink",
    "TrackedEvent",
    "build_analytics_sink",
    "swipe_direction",
]
