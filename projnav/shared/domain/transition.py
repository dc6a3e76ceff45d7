"""Interactive dismissal state machine.

``next_phase`` is a pure step function over ``PanningData`` samples. The
navigator folds it over the gesture stream; ``PhaseTracker`` does the same
fold outside of any signal graph.

There is no transition back to ``NONE`` once a gesture has been canceled or
finished. A later sample with a positive content offset keeps the machine in
``CANCELING``; a fresh downward drag still enters ``STARTED`` because neither
``CANCELING`` nor ``FINISHING`` is active.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from projnav.shared.domain.models import PanningData, TransitionPhase

logger = logging.getLogger(__name__)


def is_active(phase: TransitionPhase) -> bool:
    """True while the dismissal animation is being driven by the finger."""
    return phase.active


def next_phase(phase: TransitionPhase, data: PanningData) -> TransitionPhase:
    """Compute the phase that follows ``phase`` after one gesture sample."""
    active = is_active(phase)
    dragging = data.is_dragging
    translation_y = data.translation.y

    if data.content_offset.y > 0:
        return TransitionPhase.NONE if phase == TransitionPhase.NONE else TransitionPhase.CANCELING
    if dragging and translation_y > 0 and not active:
        return TransitionPhase.STARTED
    if dragging and translation_y > 0 and active:
        return TransitionPhase.UPDATING
    if dragging and translation_y < 0 and active:
        return TransitionPhase.CANCELING
    if not dragging and translation_y > 0 and active:
        return TransitionPhase.FINISHING if data.velocity.y > 0 else TransitionPhase.CANCELING
    return phase


class PhaseChange(NamedTuple):
    previous: TransitionPhase
    current: TransitionPhase

    @property
    def changed(self) -> bool:
        return self.previous != self.current

    @property
    def entered(self) -> TransitionPhase | None:
        """The phase that was entered, or None if nothing changed."""
        return self.current if self.changed else None


class PhaseTracker:
    """Holds the current phase and reports each step as a ``PhaseChange``."""

    def __init__(self, initial: TransitionPhase = TransitionPhase.NONE) -> None:
        self._phase = initial

    @property
    def phase(self) -> TransitionPhase:
        return self._phase

    @property
    def active(self) -> bool:
        return is_active(self._phase)

    def advance(self, data: PanningData) -> PhaseChange:
        change = PhaseChange(self._phase, next_phase(self._phase, data))
        if change.changed:
            logger.debug(f"Transition phase {change.previous.value} -> {change.current.value}")
        self._phase = change.current
        return change
