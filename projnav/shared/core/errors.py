"""Exception types raised at the edges of the navigator (settings, replay).

The reactive core itself never raises: missing data is dropped or defaulted.
"""

from __future__ import annotations


class NavigatorError(Exception):
    """Base class for all ProjectNavigator errors."""


class ConfigurationError(NavigatorError, ValueError):
    """Settings failed validation in strict mode."""


class ReplayScriptError(NavigatorError):
    """A replay script step could not be understood."""

    def __init__(self, message: str, step_number: int | None = None) -> None:
        self.step_number = step_number
        if step_number is not None:
            message = f"step {step_number}: {message}"
        super().__init__(message)
