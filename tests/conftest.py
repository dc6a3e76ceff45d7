"""
Shared pytest fixtures for ProjectNavigator tests.

Fixture Organization
--------------------
- **projects / ref tags / config**: immutable sample payloads
- **analytics**: RecordingAnalyticsSink
- **view_model**: navigator wired to the recording sink
- **outputs**: per-output event recorder for the view model
- **pan**: helper that sends one gesture sample
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List

import pytest

from projnav.navigator.state.project_navigator import OUTPUT_NAMES, ProjectNavigatorViewModel
from projnav.shared.core.signal import Signal
from projnav.shared.domain.analytics import RecordingAnalyticsSink
from projnav.shared.domain.models import NavigatorConfigData, Point, Project, RefTag


class SignalRecorder:
    """Collects every value sent on a signal."""

    def __init__(self, signal: Signal[Any]) -> None:
        self.values: List[Any] = []
        signal.observe(self.values.append)

    @property
    def count(self) -> int:
        return len(self.values)

    def clear(self) -> None:
        self.values.clear()


@pytest.fixture
def record() -> Callable[[Signal[Any]], SignalRecorder]:
    return SignalRecorder


@pytest.fixture
def project_a() -> Project:
    return Project(id=1, name="Alpha", slug="alpha")


@pytest.fixture
def project_b() -> Project:
    return Project(id=2, name="Beta", slug="beta")


@pytest.fixture
def project_c() -> Project:
    return Project(id=3, name="Gamma")


@pytest.fixture
def config(project_a: Project) -> NavigatorConfigData:
    return NavigatorConfigData(index=0, project=project_a, ref_tag=RefTag.discovery())


@pytest.fixture
def analytics() -> RecordingAnalyticsSink:
    return RecordingAnalyticsSink()


@pytest.fixture
def view_model(analytics: RecordingAnalyticsSink) -> ProjectNavigatorViewModel:
    return ProjectNavigatorViewModel(analytics=analytics)


@pytest.fixture
def outputs(view_model: ProjectNavigatorViewModel) -> Dict[str, SignalRecorder]:
    return {name: SignalRecorder(getattr(view_model.outputs, name)) for name in OUTPUT_NAMES}


@pytest.fixture
def pan(view_model: ProjectNavigatorViewModel) -> Callable[..., None]:
    """Send one gesture sample: pan(translation_y, velocity_y, dragging, offset_y)."""

    def send(translation_y: float, velocity_y: float = 0.0, dragging: bool = True, offset_y: float = 0.0) -> None:
        view_model.inputs.panning(
            content_offset=Point(x=0, y=offset_y),
            translation=Point(x=0, y=translation_y),
            velocity=Point(x=0, y=velocity_y),
            is_dragging=dragging,
        )

    return send
