"""
ProjectNavigator Shared Kernel
==============================

Host-independent building blocks for the navigator.

Architecture:
- core: signals, EventBus, configuration, logging, errors
- domain: value types, transition state machine, analytics sinks
"""

__version__ = "0.3.0"

__all__ = []
