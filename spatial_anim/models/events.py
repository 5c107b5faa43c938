from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class LayoutDeclared:
    nodes: List[Dict[str, Any]]
    edges: List[Dict[str, Any]] = field(default_factory=list)
    kind: str = "tree"
    t: Optional[float] = None


@dataclass(frozen=True)
class TransitionStarted:
    start: Dict[str, float]
    target: Dict[str, float]
    t: Optional[float] = None


@dataclass(frozen=True)
class CameraFrame:
    frame_index: int
    azimuth: float
    polar: float
    radius: float
    progress: float
    t: Optional[float] = None


@dataclass(frozen=True)
class TransitionFinished:
    t: Optional[float] = None


@dataclass(frozen=True)
class TransitionCancelled:
    t: Optional[float] = None
    reason: str = ""


@dataclass(frozen=True)
class RunMetadata:
    key: str
    value: Any


Event = Union[
    LayoutDeclared,
    TransitionStarted,
    CameraFrame,
    TransitionFinished,
    TransitionCancelled,
    RunMetadata,
]


@dataclass(frozen=True)
class SceneStep:
    idx: int
    duration: float
    events: List[Event]
