"""Replay recorded navigator input scripts.

A script is a YAML list of single-key steps, each naming one navigator input:

    - configure: {project: {id: 1, name: Alpha}, ref_tag: discovery, index: 0}
    - view_did_load: {}
    - will_transition: {project: {id: 2, name: Beta}, index: 1}
    - page_transition: {completed: true, from_index: 0}
    - panning: {translation: [0, 12], velocity: [0, 3], is_dragging: true}

Points are written as ``[x, y]`` or ``{x: .., y: ..}``; omitted points are
zero. Replaying feeds every step to a fresh view model and records the
outputs and analytics calls it triggers, tagged with the step number.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Literal, Mapping, Optional

import yaml
from pydantic import BaseModel, TypeAdapter, ValidationError

from projnav.navigator.state.project_navigator import OUTPUT_NAMES, ProjectNavigatorViewModel
from projnav.shared.core.errors import ReplayScriptError
from projnav.shared.core.signal import CompositeDisposable
from projnav.shared.domain.analytics import AnalyticsSink, RecordingAnalyticsSink, TrackedEvent
from projnav.shared.domain.models import (
    GestureType,
    NavigatorConfigData,
    PanningData,
    Point,
    Project,
    RefTag,
    SwipeDirection,
    TransitionPhase,
)

logger = logging.getLogger(__name__)

STEP_KINDS = ("configure", "view_did_load", "will_transition", "page_transition", "panning")

_INDEX = TypeAdapter(Optional[int])


class ReplayRecord(BaseModel):
    """Something the navigator did in response to a script step."""

    step: int
    kind: Literal["output", "analytics", "phase"]
    name: str
    value: Any = None


def load_script(path: Path) -> List[Dict[str, Any]]:
    """Read a replay script. Accepts a bare list or a mapping with ``steps``."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ReplayScriptError(f"invalid YAML in {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("steps")
    if not isinstance(data, list):
        raise ReplayScriptError(f"{path} must contain a list of steps")
    return data


def _parse_point(value: Any, step_number: int, field: str) -> Point:
    if value is None:
        return Point()
    if isinstance(value, (list, tuple)):
        if len(value) != 2:
            raise ReplayScriptError(f"'{field}' needs exactly two coordinates", step_number)
        value = {"x": value[0], "y": value[1]}
    try:
        return Point.model_validate(value)
    except ValidationError as e:
        raise ReplayScriptError(f"bad point for '{field}': {e}", step_number) from e


def _parse_index(value: Any, step_number: int, field: str) -> Optional[int]:
    try:
        return _INDEX.validate_python(value)
    except ValidationError as e:
        raise ReplayScriptError(f"'{field}' must be a whole number or null, got {value!r}", step_number) from e


def _parse_flag(value: Any, step_number: int, field: str) -> bool:
    if not isinstance(value, bool):
        raise ReplayScriptError(f"'{field}' must be true or false", step_number)
    return value


def _parse_ref_tag(value: Any) -> RefTag:
    if isinstance(value, str):
        return RefTag(code=value)
    return RefTag.model_validate(value)


class _SessionAnalyticsSink(RecordingAnalyticsSink):
    """Recording sink that reports each event to the session log.

    Events are also handed on to ``forward`` when one is given, so the
    configured analytics sink sees what a live navigator would send it.
    """

    def __init__(self, on_event: Callable[[TrackedEvent], None], forward: Optional[AnalyticsSink] = None) -> None:
        super().__init__()
        self._on_event = on_event
        self._forward = forward

    def track_swiped_project(self, project: Project, ref_tag: RefTag, direction: SwipeDirection) -> None:
        super().track_swiped_project(project, ref_tag, direction)
        self._on_event(self.events[-1])
        if self._forward is not None:
            self._forward.track_swiped_project(project, ref_tag, direction)

    def track_closed_project_page(self, project: Project, ref_tag: RefTag, gesture_type: GestureType) -> None:
        super().track_closed_project_page(project, ref_tag, gesture_type)
        self._on_event(self.events[-1])
        if self._forward is not None:
            self._forward.track_closed_project_page(project, ref_tag, gesture_type)


class ReplaySession:
    """Feeds script steps to a view model and records what comes out."""

    def __init__(self, trace_phases: bool = False, analytics: Optional[AnalyticsSink] = None) -> None:
        self.records: List[ReplayRecord] = []
        self.analytics = _SessionAnalyticsSink(self._record_analytics, forward=analytics)
        self.view_model = ProjectNavigatorViewModel(analytics=self.analytics, trace_phases=trace_phases)
        self.phase = TransitionPhase.NONE
        self._step = 0
        self._subscriptions = CompositeDisposable()

        self._subscriptions.add(self.view_model.transition_phase.skip_repeats().observe(self._record_phase))
        for name in OUTPUT_NAMES:
            signal = getattr(self.view_model.outputs, name)
            self._subscriptions.add(signal.observe(self._output_recorder(name)))

    def _record_phase(self, phase: TransitionPhase) -> None:
        previous, self.phase = self.phase, phase
        if phase != previous:
            self.records.append(ReplayRecord(step=self._step, kind="phase", name=phase.value, value=previous.value))

    def _output_recorder(self, name: str) -> Callable[[Any], None]:
        def record(value: Any) -> None:
            self.records.append(ReplayRecord(step=self._step, kind="output", name=name, value=value))

        return record

    def _record_analytics(self, event: TrackedEvent) -> None:
        self.records.append(ReplayRecord(
            step=self._step,
            kind="analytics",
            name=event.name,
            value={"project_id": event.project.id, "ref_tag": event.ref_tag.code, **event.properties},
        ))

    def run(self, steps: List[Any]) -> List[ReplayRecord]:
        """Apply every step in order and return the accumulated records."""
        for number, step in enumerate(steps, start=1):
            self.apply(step, number)
        logger.info(f"Replayed {len(steps)} steps, {len(self.records)} records")
        return self.records

    def apply(self, step: Any, step_number: int) -> None:
        if not isinstance(step, Mapping) or len(step) != 1:
            raise ReplayScriptError("each step must be a mapping with exactly one key", step_number)

        kind, args = next(iter(step.items()))
        if kind not in STEP_KINDS:
            raise ReplayScriptError(f"unknown step '{kind}'", step_number)
        args = args or {}
        if not isinstance(args, Mapping):
            raise ReplayScriptError(f"arguments of '{kind}' must be a mapping", step_number)

        self._step = step_number
        try:
            getattr(self, f"_apply_{kind}")(dict(args), step_number)
        except ValidationError as e:
            raise ReplayScriptError(f"invalid '{kind}' arguments: {e}", step_number) from e

    def close(self) -> None:
        self._subscriptions.dispose()

    # --- Step handlers ---

    def _apply_configure(self, args: Dict[str, Any], step_number: int) -> None:
        if "ref_tag" not in args or "project" not in args:
            raise ReplayScriptError("'configure' needs 'project' and 'ref_tag'", step_number)
        self.view_model.inputs.configure_with(NavigatorConfigData(
            index=args.get("index"),
            project=Project.model_validate(args["project"]),
            ref_tag=_parse_ref_tag(args["ref_tag"]),
        ))

    def _apply_view_did_load(self, args: Dict[str, Any], step_number: int) -> None:
        self.view_model.inputs.view_did_load()

    def _apply_will_transition(self, args: Dict[str, Any], step_number: int) -> None:
        if "project" not in args:
            raise ReplayScriptError("'will_transition' needs 'project'", step_number)
        project = Project.model_validate(args["project"])
        index = _parse_index(args.get("index"), step_number, "index")
        self.view_model.inputs.will_transition(project, index)

    def _apply_page_transition(self, args: Dict[str, Any], step_number: int) -> None:
        completed = _parse_flag(args.get("completed", True), step_number, "completed")
        from_index = _parse_index(args.get("from_index"), step_number, "from_index")
        self.view_model.inputs.page_transition(completed, from_index)

    def _apply_panning(self, args: Dict[str, Any], step_number: int) -> None:
        sample = PanningData(
            content_offset=_parse_point(args.get("content_offset"), step_number, "content_offset"),
            translation=_parse_point(args.get("translation"), step_number, "translation"),
            velocity=_parse_point(args.get("velocity"), step_number, "velocity"),
            is_dragging=_parse_flag(args.get("is_dragging", False), step_number, "is_dragging"),
        )
        self.view_model.inputs.panning(
            sample.content_offset, sample.translation, sample.velocity, sample.is_dragging
        )


def replay_file(
    path: Path, trace_phases: bool = False, analytics: Optional[AnalyticsSink] = None
) -> List[ReplayRecord]:
    """Load ``path`` and replay it through a fresh navigator."""
    session = ReplaySession(trace_phases=trace_phases, analytics=analytics)
    try:
        return session.run(load_script(path))
    finally:
        session.close()


def summarize(records: List[ReplayRecord]) -> Dict[str, int]:
    """Count records per output/analytics name."""
    counts: Dict[str, int] = {}
    for record in records:
        if record.kind == "phase":
            continue
        counts[record.name] = counts.get(record.name, 0) + 1
    return counts


def format_value(value: Optional[Any]) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return f"{value:g}"
    if isinstance(value, dict):
        return " ".join(f"{key}={item}" for key, item in value.items())
    return str(value)
