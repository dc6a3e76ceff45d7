"""ProjectNavigator package."""

from .navigator.state import ProjectNavigatorViewModel
from .shared.core.event_bus import EventBus

__all__ = ["ProjectNavigatorViewModel", "EventBus"]
