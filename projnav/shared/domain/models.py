"""Value types exchanged between the host screen and the navigator."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Point(BaseModel):
    """2D point in view coordinates."""
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0


class Project(BaseModel):
    """Project shown on one page of the navigator. Opaque to the core."""
    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Project identifier")
    name: str = Field(default="", description="Display name")
    slug: Optional[str] = Field(default=None, description="URL slug")


class RefTag(BaseModel):
    """Where the user came from when the navigator was opened."""
    model_config = ConfigDict(frozen=True)

    code: str = Field(description="Analytics reference code")

    @classmethod
    def discovery(cls) -> "RefTag":
        return cls(code="discovery")

    @classmethod
    def category(cls) -> "RefTag":
        return cls(code="category")

    @classmethod
    def search(cls) -> "RefTag":
        return cls(code="search")

    @classmethod
    def activity(cls) -> "RefTag":
        return cls(code="activity")

    @classmethod
    def recommended(cls) -> "RefTag":
        return cls(code="recommended")


class NavigatorConfigData(BaseModel):
    """Configuration handed to the navigator by the presenting screen."""
    model_config = ConfigDict(frozen=True)

    index: Optional[int] = Field(default=None, description="Initial page index")
    project: Project
    ref_tag: RefTag


class PanningData(BaseModel):
    """One sampled frame of the pan gesture."""
    model_config = ConfigDict(frozen=True)

    content_offset: Point = Field(default_factory=Point)
    translation: Point = Field(default_factory=Point)
    velocity: Point = Field(default_factory=Point)
    is_dragging: bool = False


class SwipeTarget(BaseModel):
    """Project/index pair captured by a completed page transition."""
    model_config = ConfigDict(frozen=True)

    project: Project
    current_index: Optional[int] = None
    previous_index: Optional[int] = None


class TransitionPhase(Enum):
    """Phase of the interactive dismissal transition."""
    NONE = "none"
    STARTED = "started"
    UPDATING = "updating"
    CANCELING = "canceling"
    FINISHING = "finishing"

    @property
    def active(self) -> bool:
        return self in (TransitionPhase.STARTED, TransitionPhase.UPDATING)


class SwipeDirection(Enum):
    NEXT = "next"
    PREVIOUS = "previous"


class GestureType(Enum):
    """How a project page was closed."""
    SWIPE = "swipe"
    TAP = "tap"
