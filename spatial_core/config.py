"""
Configuration objects for the layout engine and camera choreographer.

Exposes tunable distances, pattern constants and camera timing so that
experiences can reshape the scene without editing core logic. Defaults match
the behaviour of the mind-map and library experiences.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Tuple

import yaml

from .enums import Easing, RetriggerPolicy


@dataclass
class LayoutConfig:
    """
    Configuration for `TreeLayoutEngine`, `PatternArranger` and `ConnectionBuilder`.
    """

    # Tree layout
    level_distance: float = 12.0
    level_height: float = 2.0
    level_offset: float = -4.0
    max_depth: int = 64

    # When disabled, descendants below an invisible node are left out of the map
    layout_hidden_subtrees: bool = True

    # Pattern arrangement
    radius: float = 30.0
    constellation_jitter: float = 0.3
    galaxy_arms: int = 3
    spiral_tightness: float = 0.3
    galaxy_vertical_jitter: float = 3.0
    timeline_polarity_scale: float = 5.0
    timeline_depth_jitter: float = 5.0
    cluster_ring_ratio: float = 0.6
    cluster_spacing: float = 2.0
    cluster_vertical_jitter: float = 3.0
    default_cluster_key: str = "uncategorized"
    helix_sweep: float = 8 * math.pi
    helix_radius_ratio: float = 0.3

    # Connections
    show_connections: bool = True
    connection_strength: float = 0.5


@dataclass
class CameraConfig:
    """
    Configuration for `CameraChoreographer`.

    The default target faces forward with a level horizon; the polar range keeps
    the camera away from the poles.
    """

    transition_duration: float = 1.5
    target_azimuth: float = 0.0
    target_polar: float = math.pi / 2
    min_polar: float = math.pi * 0.15
    max_polar: float = math.pi * 0.85
    easing: Easing = Easing.EASE_OUT
    retrigger_policy: RetriggerPolicy = RetriggerPolicy.IGNORE

    # Mode names that start or cancel a transition via `on_mode_change`
    trigger_modes: Tuple[str, ...] = ("COUNTDOWN",)
    cancel_modes: Tuple[str, ...] = ("IDLE", "GAME_OVER", "STARTING")

    @property
    def rate(self) -> float:
        """Progress gained per second of elapsed time."""
        return 1.0 / self.transition_duration if self.transition_duration > 0 else math.inf


@dataclass
class EngineSettings:
    """Bundle of layout and camera configuration loaded together."""

    layout: LayoutConfig = field(default_factory=LayoutConfig)
    camera: CameraConfig = field(default_factory=CameraConfig)


def _apply_overrides(target: Any, overrides: Dict[str, Any], section: str) -> None:
    known = {f.name: f for f in fields(target)}
    for key, value in (overrides or {}).items():
        if key not in known:
            raise ValueError(f"Unknown {section} setting: {key!r}")
        current = getattr(target, key)
        if isinstance(current, (Easing, RetriggerPolicy)) and not isinstance(value, type(current)):
            try:
                value = type(current)[str(value).upper()]
            except KeyError:
                raise ValueError(f"Unknown {section} {key}: {value!r}") from None
        elif isinstance(current, tuple):
            value = tuple(value)
        elif isinstance(current, bool):
            value = bool(value)
        elif isinstance(current, (int, float)):
            value = type(current)(value)
        setattr(target, key, value)


def settings_from_dict(data: Dict[str, Any]) -> EngineSettings:
    """
    Build `EngineSettings` from a parsed mapping with ``layout`` and ``camera`` sections.

    Raises:
        ValueError: If a section holds an unknown key or an unknown enum value
    """
    settings = EngineSettings()
    _apply_overrides(settings.layout, data.get("layout") or {}, "layout")
    _apply_overrides(settings.camera, data.get("camera") or {}, "camera")
    return settings


def load_config(path: str) -> EngineSettings:
    """Load `EngineSettings` from a YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f.read()) or {}
    return settings_from_dict(data)
