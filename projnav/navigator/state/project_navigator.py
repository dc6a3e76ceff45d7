"""Project Navigator State.

Reactive view model behind the paged project viewer. It turns the host
screen's raw callbacks (view loaded, pan samples, page transitions) into
commands for the pager, the dismissal animator and the delegate, and reports
swipe/close analytics.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, Tuple

from projnav.shared.core.signal import MutableProperty, Signal, combine_latest, merge, zip_signals
from projnav.shared.domain.analytics import AnalyticsSink, NullAnalyticsSink, swipe_direction
from projnav.shared.domain.models import (
    GestureType,
    NavigatorConfigData,
    PanningData,
    Point,
    Project,
    SwipeTarget,
    TransitionPhase,
)
from projnav.shared.domain.transition import is_active, next_phase

logger = logging.getLogger(__name__)


class ProjectNavigatorInputs(Protocol):
    def configure_with(self, config: NavigatorConfigData) -> None:
        """Call with the config data to give to the view."""

    def page_transition(self, completed: bool, from_index: Optional[int]) -> None:
        """Call when the pager finishes transitioning, with the previous index."""

    def panning(self, content_offset: Point, translation: Point, velocity: Point, is_dragging: bool) -> None:
        """Call with each pan gesture sample."""

    def view_did_load(self) -> None:
        """Call when the view loads."""

    def will_transition(self, project: Project, index: Optional[int]) -> None:
        """Call when the pager begins a transition to ``project`` at ``index``."""


class ProjectNavigatorOutputs(Protocol):
    cancel_interactive_transition: Signal[None]
    dismiss_view_controller: Signal[None]
    finish_interactive_transition: Signal[None]
    notify_delegate_transitioned_to_project_index: Signal[int]
    set_initial_pager_view_controller: Signal[None]
    set_needs_status_bar_appearance_update: Signal[None]
    set_transition_animator_is_in_flight: Signal[bool]
    update_interactive_transition: Signal[float]


OUTPUT_NAMES: Tuple[str, ...] = (
    "cancel_interactive_transition",
    "dismiss_view_controller",
    "finish_interactive_transition",
    "notify_delegate_transitioned_to_project_index",
    "set_initial_pager_view_controller",
    "set_needs_status_bar_appearance_update",
    "set_transition_animator_is_in_flight",
    "update_interactive_transition",
)


def _entered(phases: Signal[TransitionPhase], target: TransitionPhase) -> Signal[None]:
    """Fire once each time ``phases`` moves into ``target``."""
    return (
        phases
        .map(lambda phase: phase == target)
        .skip_repeats()
        .filter(bool)
        .ignore_values()
    )


class ProjectNavigatorViewModel:
    """Reactive state for the project navigator screen.

    Every input overwrites a latest-value slot; all outputs are derived from
    those slots when the graph is built in ``__init__``. Nothing else is
    stored.

    Usage:
        vm = ProjectNavigatorViewModel(analytics=LoggingAnalyticsSink())
        vm.outputs.dismiss_view_controller.observe(lambda _: screen.dismiss())
        vm.inputs.configure_with(config)
        vm.inputs.view_did_load()
    """

    def __init__(self, analytics: Optional[AnalyticsSink] = None, trace_phases: bool = False) -> None:
        """Build the event graph.

        Args:
            analytics: Sink for swipe/close events; events are discarded when omitted
            trace_phases: Log every transition phase change at DEBUG
        """
        self.analytics: AnalyticsSink = analytics or NullAnalyticsSink()

        # Input slots
        self._config_data: MutableProperty[Optional[NavigatorConfigData]] = MutableProperty(None, "config_data")
        self._page_transition_completed_from_index: MutableProperty[Optional[Tuple[bool, Optional[int]]]] = (
            MutableProperty(None, "page_transition")
        )
        self._view_did_load: MutableProperty[None] = MutableProperty(None, "view_did_load")
        self._will_transition_to_project_at_index: MutableProperty[Optional[Tuple[Project, Optional[int]]]] = (
            MutableProperty(None, "will_transition")
        )
        self._panning_data: MutableProperty[Optional[PanningData]] = MutableProperty(None, "panning_data")

        # Configuration gate
        self.current_config: Signal[NavigatorConfigData] = combine_latest(
            self._config_data.signal.skip_nil(),
            self._view_did_load.signal,
        ).map(lambda pair: pair[0])

        # Target/completion correlator
        will_transition = self._will_transition_to_project_at_index.signal.skip_nil()
        completed_transitions = (
            self._page_transition_completed_from_index.signal
            .skip_nil()
            .filter(lambda completion: completion[0])
        )

        swiped_to_project_at_index = will_transition.take_when(completed_transitions)

        swiped_to_project_at_index_from_index: Signal[SwipeTarget] = (
            will_transition
            .take_pair_when(completed_transitions.map(lambda completion: completion[1]))
            .map(lambda pair: SwipeTarget(
                project=pair[0][0],
                current_index=pair[0][1],
                previous_index=pair[1],
            ))
        )

        self.current_project: Signal[Project] = merge(
            self.current_config.map(lambda config: config.project),
            swiped_to_project_at_index.map(lambda target: target[0]),
        )

        self.set_needs_status_bar_appearance_update: Signal[None] = swiped_to_project_at_index.ignore_values()

        self.notify_delegate_transitioned_to_project_index: Signal[int] = (
            swiped_to_project_at_index_from_index
            .map(lambda target: target.current_index)
            .skip_nil()
        )

        # Transition phase state machine
        panning_data = self._panning_data.signal.skip_nil()
        self.transition_phase: Signal[TransitionPhase] = panning_data.scan(TransitionPhase.NONE, next_phase)

        self.set_initial_pager_view_controller: Signal[None] = self._view_did_load.signal

        self.dismiss_view_controller: Signal[None] = _entered(self.transition_phase, TransitionPhase.STARTED)
        self.cancel_interactive_transition: Signal[None] = _entered(self.transition_phase, TransitionPhase.CANCELING)

        self.update_interactive_transition: Signal[float] = (
            zip_signals(panning_data, self.transition_phase)
            .filter(lambda pair: pair[1] in (TransitionPhase.UPDATING, TransitionPhase.STARTED))
            .map(lambda pair: pair[0].translation.y)
        )

        self.finish_interactive_transition: Signal[None] = _entered(self.transition_phase, TransitionPhase.FINISHING)

        self.set_transition_animator_is_in_flight: Signal[bool] = (
            self.transition_phase.map(is_active).skip_repeats()
        )

        if trace_phases:
            self.transition_phase.skip_repeats().observe(
                lambda phase: logger.debug(f"Navigator transition phase -> {phase.value}")
            )

        # Analytics taps
        self.current_config.take_pair_when(swiped_to_project_at_index_from_index).observe_values(
            self._track_swipe
        )
        combine_latest(self.current_config, self.current_project).take_when(
            self.finish_interactive_transition
        ).observe_values(self._track_close)

    @property
    def inputs(self) -> ProjectNavigatorInputs:
        return self

    @property
    def outputs(self) -> ProjectNavigatorOutputs:
        return self

    # --- Public Actions ---

    def configure_with(self, config: NavigatorConfigData) -> None:
        """Call with the config data to give to the view."""
        self._config_data.value = config

    def page_transition(self, completed: bool, from_index: Optional[int]) -> None:
        """Call when the pager finishes transitioning, with the previous index."""
        logger.debug(f"Page transition completed={completed} from_index={from_index}")
        self._page_transition_completed_from_index.value = (completed, from_index)

    def panning(self, content_offset: Point, translation: Point, velocity: Point, is_dragging: bool) -> None:
        """Call with each pan gesture sample.

        Not reentrant: do not call from inside an output observer.
        """
        self._panning_data.value = PanningData(
            content_offset=content_offset,
            translation=translation,
            velocity=velocity,
            is_dragging=is_dragging,
        )

    def view_did_load(self) -> None:
        """Call when the view loads."""
        self._view_did_load.value = None

    def will_transition(self, project: Project, index: Optional[int]) -> None:
        """Call when the pager begins a transition to ``project`` at ``index``."""
        logger.debug(f"Will transition to project {project.id} at index {index}")
        self._will_transition_to_project_at_index.value = (project, index)

    # --- Analytics Taps ---

    def _track_swipe(self, pair: Tuple[NavigatorConfigData, SwipeTarget]) -> None:
        config, target = pair
        direction = swipe_direction(target.current_index, target.previous_index)
        logger.debug(
            f"Swiped to project {target.project.id} "
            f"({target.previous_index} -> {target.current_index}, {direction.value})"
        )
        self.analytics.track_swiped_project(target.project, config.ref_tag, direction)

    def _track_close(self, pair: Tuple[Any, ...]) -> None:
        config, project = pair
        logger.debug(f"Closed project page {project.id} via swipe")
        self.analytics.track_closed_project_page(project, config.ref_tag, GestureType.SWIPE)
