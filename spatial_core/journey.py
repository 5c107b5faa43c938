"""
Fly-to camera journeys between points of interest.

Where `CameraChoreographer` rotates the camera around a fixed target, a
`CameraJourney` moves both the camera position and its look-at target: the
camera ends `distance` units from the new target along its current viewing
direction. When no journey is in flight an optional auto-orbit slowly circles
the current target.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from .camera import ease
from .enums import Easing

Vec3 = Tuple[float, float, float]


@dataclass(frozen=True)
class CameraPose:
    position: Vec3
    look_at: Vec3


CAMERA_PRESETS: Dict[str, CameraPose] = {
    "overview": CameraPose(position=(0.0, 30.0, 40.0), look_at=(0.0, 0.0, 0.0)),
    "closeup": CameraPose(position=(0.0, 2.0, 8.0), look_at=(0.0, 0.0, 0.0)),
    "side": CameraPose(position=(30.0, 10.0, 0.0), look_at=(0.0, 0.0, 0.0)),
    "top": CameraPose(position=(0.0, 50.0, 0.1), look_at=(0.0, 0.0, 0.0)),
    "cinematic": CameraPose(position=(20.0, 15.0, 25.0), look_at=(0.0, 0.0, 0.0)),
}


def _lerp3(a: Vec3, b: Vec3, t: float) -> Vec3:
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t, a[2] + (b[2] - a[2]) * t)


def _sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _norm(v: Vec3) -> float:
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


class CameraJourney:
    """
    Eased flight of camera position and look-at target.

    Attributes:
        pose: Current camera pose
        distance: Distance kept from each new target on arrival
        duration: Seconds per flight
        easing: Easing applied to flight progress
        auto_orbit: Circle the target when idle
        orbit_speed: Radians per second for auto-orbit
        on_arrival: Called once when a flight completes
    """

    def __init__(
        self,
        pose: CameraPose | None = None,
        distance: float = 15.0,
        duration: float = 1.5,
        easing: Easing = Easing.EASE_IN_OUT,
        auto_orbit: bool = False,
        orbit_speed: float = 0.1,
        on_arrival: Optional[Callable[[], None]] = None,
    ):
        self.pose = pose or CAMERA_PRESETS["overview"]
        self.distance = distance
        self.duration = duration
        self.easing = easing
        self.auto_orbit = auto_orbit
        self.orbit_speed = orbit_speed
        self.on_arrival = on_arrival

        self.is_transitioning = False
        self.progress = 0.0
        self._start = self.pose
        self._end = self.pose

    def end_position_for(self, target: Vec3) -> Vec3:
        """Position `distance` away from `target` along the current view direction."""
        direction = _sub(self.pose.position, target)
        length = _norm(direction)
        if length == 0:
            direction, length = (0.0, 0.0, 1.0), 1.0
        scale = self.distance / length
        return (
            target[0] + direction[0] * scale,
            target[1] + direction[1] * scale,
            target[2] + direction[2] * scale,
        )

    def fly_to(self, target: Vec3) -> CameraPose:
        """Start a flight toward `target`; returns the destination pose."""
        target = (float(target[0]), float(target[1]), float(target[2]))
        self._start = self.pose
        self._end = CameraPose(position=self.end_position_for(target), look_at=target)
        self.progress = 0.0
        self.is_transitioning = True
        return self._end

    def fly_to_preset(self, name: str) -> CameraPose:
        """Fly to one of `CAMERA_PRESETS` keeping the preset's exact position."""
        preset = CAMERA_PRESETS[name]
        self._start = self.pose
        self._end = preset
        self.progress = 0.0
        self.is_transitioning = True
        return preset

    def advance(self, delta_time: float) -> CameraPose:
        """Advance the flight (or the idle auto-orbit) by `delta_time` seconds."""
        dt = max(0.0, float(delta_time))
        if self.is_transitioning:
            self.progress = min(1.0, self.progress + (dt / self.duration if self.duration > 0 else 1.0))
            t = ease(self.easing, self.progress)
            self.pose = CameraPose(
                position=_lerp3(self._start.position, self._end.position, t),
                look_at=_lerp3(self._start.look_at, self._end.look_at, t),
            )
            if self.progress >= 1.0:
                self.pose = self._end
                self.is_transitioning = False
                if self.on_arrival is not None:
                    self.on_arrival()
        elif self.auto_orbit and dt > 0:
            self.pose = self._orbit(dt)
        return self.pose

    def _orbit(self, dt: float) -> CameraPose:
        cx, cy, cz = self.pose.look_at
        px, py, pz = self.pose.position
        radius = math.hypot(px - cx, pz - cz)
        angle = math.atan2(px - cx, pz - cz) + self.orbit_speed * dt
        return CameraPose(
            position=(cx + math.sin(angle) * radius, py, cz + math.cos(angle) * radius),
            look_at=self.pose.look_at,
        )
