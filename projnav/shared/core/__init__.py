"""
Shared Core Module
==================

Signal primitives, event system, configuration and logging.
"""

# Signals
from .signal import (
    CompositeDisposable,
    Disposable,
    MutableProperty,
    Signal,
    combine_latest,
    merge,
    zip_signals,
)

# Event System
from .event_bus import EventBus, EventPayload
from . import events

# Errors
from .errors import ConfigurationError, NavigatorError, ReplayScriptError

# Configuration
from .configuration import (
    AnalyticsConfig,
    ConfigManager,
    LoggingConfig,
    SystemConfig,
    TransitionConfig,
    ValidationLevel,
    get_config,
    get_config_manager,
)
from .logging_config import configure_logging

__all__ = [
    # Signals
    "CompositeDisposable",
    "Disposable",
    "MutableProperty",
    "Signal",
    "combine_latest",
    "merge",
    "zip_signals",
    # Event System
    "EventBus",
    "EventPayload",
    "events",
    # Errors
    "ConfigurationError",
    "NavigatorError",
    "ReplayScriptError",
    # Configuration
    "AnalyticsConfig",
    "ConfigManager",
    "LoggingConfig",
    "SystemConfig",
    "TransitionConfig",
    "ValidationLevel",
    "get_config",
    "get_config_manager",
    "configure_logging",
]
