"""
Spherical-coordinate camera choreography.

The camera orbits a fixed look-at target. Its viewpoint is an
`OrbitConfiguration` (azimuth, polar angle, radius). A `CameraChoreographer`
turns a discrete trigger (e.g. a mode change) into a time-stepped `Transition`
that eases the azimuth and polar angle from the current configuration toward a
target configuration:

1. ``trigger()`` captures the current configuration from the orbit controls
2. ``advance(dt)`` moves progress forward by ``dt * CameraConfig.rate``
3. Eased progress interpolates the azimuth along the shortest angular path and
   the polar angle linearly; the radius is read unchanged from the controls
4. At progress 1 the exact target is emitted and the choreographer goes idle

Choreography is cosmetic: if the orbit controls are missing or not ready the
choreographer does nothing for that step.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterable, Optional, Tuple

from .config import CameraConfig
from .enums import ChoreographerState, Easing, RetriggerPolicy

logger = logging.getLogger(__name__)

Vec3 = Tuple[float, float, float]

TWO_PI = 2 * math.pi


# ----- angle helpers -----
def wrap_angle(angle: float) -> float:
    """Wrap an angle into (-pi, pi]."""
    wrapped = math.fmod(angle + math.pi, TWO_PI)
    if wrapped <= 0:
        wrapped += TWO_PI
    return wrapped - math.pi


def shortest_angle_delta(start: float, target: float) -> float:
    """Signed delta from `start` to `target` along the shorter arc, in (-pi, pi]."""
    return wrap_angle(target - start)


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


# ----- easing -----
def _elastic(t: float) -> float:
    if t <= 0:
        return 0.0
    if t >= 1:
        return 1.0
    c4 = TWO_PI / 3
    return math.pow(2, -10 * t) * math.sin((t * 10 - 0.75) * c4) + 1


EASINGS: Dict[Easing, Callable[[float], float]] = {
    Easing.LINEAR: lambda t: t,
    Easing.EASE_IN: lambda t: t * t * t,
    Easing.EASE_OUT: lambda t: 1 - math.pow(1 - t, 3),
    Easing.EASE_IN_OUT: lambda t: 4 * t * t * t if t < 0.5 else 1 - math.pow(-2 * t + 2, 3) / 2,
    Easing.ELASTIC: _elastic,
}


def ease(easing: Easing, t: float) -> float:
    """Apply `easing` to progress `t` (clamped to [0, 1])."""
    return EASINGS[easing](clamp(t, 0.0, 1.0))


# ----- orbit configuration -----
@dataclass(frozen=True)
class OrbitConfiguration:
    """
    Camera viewpoint around a fixed look-at target.

    Attributes:
        azimuth: Radians around the vertical axis (0 faces forward)
        polar: Radians from straight up (0) to straight down (pi)
        radius: Distance from the target, must be positive
    """

    azimuth: float
    polar: float
    radius: float

    def __post_init__(self):
        if not self.radius > 0:
            raise ValueError(f"Orbit radius must be positive, got {self.radius}")

    def wrapped(self) -> "OrbitConfiguration":
        """Return a copy with azimuth wrapped into (-pi, pi]."""
        return replace(self, azimuth=wrap_angle(self.azimuth))

    def clamped(self, min_polar: float, max_polar: float) -> "OrbitConfiguration":
        """Return a copy with the polar angle clamped into [min_polar, max_polar]."""
        return replace(self, polar=clamp(self.polar, min_polar, max_polar))

    def to_cartesian(self, target: Iterable[float] = (0.0, 0.0, 0.0)) -> Vec3:
        """Camera position for this configuration around `target`."""
        tx, ty, tz = target
        sin_polar = math.sin(self.polar)
        return (
            tx + self.radius * sin_polar * math.sin(self.azimuth),
            ty + self.radius * math.cos(self.polar),
            tz + self.radius * sin_polar * math.cos(self.azimuth),
        )

    @classmethod
    def from_cartesian(cls, position: Iterable[float], target: Iterable[float] = (0.0, 0.0, 0.0)) -> "OrbitConfiguration":
        """Inverse of `to_cartesian`."""
        px, py, pz = position
        tx, ty, tz = target
        dx, dy, dz = px - tx, py - ty, pz - tz
        radius = math.sqrt(dx * dx + dy * dy + dz * dz)
        if radius == 0:
            raise ValueError("Camera position coincides with its target")
        polar = math.acos(clamp(dy / radius, -1.0, 1.0))
        azimuth = math.atan2(dx, dz)
        return cls(azimuth=wrap_angle(azimuth), polar=polar, radius=radius)

    def as_dict(self) -> Dict[str, float]:
        return {"azimuth": self.azimuth, "polar": self.polar, "radius": self.radius}


# ----- orbit controls -----
class OrbitControlSource(ABC):
    """The orbit-control abstraction a choreographer reads from."""

    def is_ready(self) -> bool:
        return True

    @abstractmethod
    def get_azimuthal_angle(self) -> float:
        ...

    @abstractmethod
    def get_polar_angle(self) -> float:
        ...

    @abstractmethod
    def get_distance(self) -> float:
        ...

    def current(self) -> OrbitConfiguration:
        return OrbitConfiguration(
            azimuth=wrap_angle(float(self.get_azimuthal_angle())),
            polar=float(self.get_polar_angle()),
            radius=float(self.get_distance()),
        )


class StaticOrbitControls(OrbitControlSource):
    """
    In-memory orbit controls holding a configuration and a look-at target.

    Stands in for a renderer's controls in tests, the CLI and the service;
    `apply` writes an emitted configuration back, as a renderer would.
    """

    def __init__(
        self,
        orbit: OrbitConfiguration | None = None,
        target: Vec3 = (0.0, 0.0, 0.0),
        ready: bool = True,
    ):
        self.orbit = orbit or OrbitConfiguration(azimuth=0.0, polar=math.pi / 2, radius=10.0)
        self.target = target
        self.ready = ready

    def is_ready(self) -> bool:
        return self.ready

    def get_azimuthal_angle(self) -> float:
        return self.orbit.azimuth

    def get_polar_angle(self) -> float:
        return self.orbit.polar

    def get_distance(self) -> float:
        return self.orbit.radius

    def apply(self, orbit: OrbitConfiguration) -> None:
        self.orbit = orbit

    def camera_position(self) -> Vec3:
        return self.orbit.to_cartesian(self.target)


# ----- transition -----
@dataclass
class Transition:
    """
    An in-flight interpolation between two orbit configurations.

    Attributes:
        start: Configuration captured when the transition began
        target: Configuration the transition eases toward
        rate: Progress gained per second (inf completes on the next step)
        easing: Easing curve applied to progress
        min_polar: Lower polar clamp
        max_polar: Upper polar clamp
        progress: Linear progress in [0, 1]
    """

    start: OrbitConfiguration
    target: OrbitConfiguration
    rate: float = 1.0 / 1.5
    easing: Easing = Easing.EASE_OUT
    min_polar: float = 0.0
    max_polar: float = math.pi
    progress: float = 0.0

    @property
    def done(self) -> bool:
        return self.progress >= 1.0

    @property
    def duration(self) -> float:
        """Seconds from progress 0 to 1."""
        return 1.0 / self.rate if math.isfinite(self.rate) and self.rate > 0 else 0.0

    def sample(self, radius: float) -> OrbitConfiguration:
        """Configuration at the current progress, using `radius` unchanged."""
        if self.done:
            return OrbitConfiguration(
                azimuth=wrap_angle(self.target.azimuth),
                polar=clamp(self.target.polar, self.min_polar, self.max_polar),
                radius=radius,
            )
        t = ease(self.easing, self.progress)
        delta = shortest_angle_delta(self.start.azimuth, self.target.azimuth)
        azimuth = wrap_angle(self.start.azimuth + delta * t)
        polar = clamp(lerp(self.start.polar, self.target.polar, t), self.min_polar, self.max_polar)
        return OrbitConfiguration(azimuth=azimuth, polar=polar, radius=radius)

    def advance(self, delta_time: float, radius: float) -> OrbitConfiguration:
        """Advance progress by ``delta_time * rate`` and sample."""
        step = max(0.0, float(delta_time))
        if math.isfinite(self.rate):
            self.progress = min(1.0, self.progress + step * self.rate)
        else:
            self.progress = 1.0
        return self.sample(radius)


# ----- choreographer -----
class CameraChoreographer:
    """
    Time-stepped state machine easing the camera between orbit configurations.

    States are IDLE and TRANSITIONING. At most one transition is in flight. A
    trigger received while transitioning is ignored or re-targets the camera,
    depending on `CameraConfig.retrigger_policy`.

    Attributes:
        controls: Orbit-control source (may be None until the renderer is ready)
        config: Timing, target and clamp settings
        last_emitted: Most recent configuration returned by `advance`
    """

    def __init__(self, controls: OrbitControlSource | None = None, config: CameraConfig | None = None):
        self.controls = controls
        self.config = config or CameraConfig()
        self.last_emitted: Optional[OrbitConfiguration] = None
        self._transition: Optional[Transition] = None

    # ----- state -----
    @property
    def state(self) -> ChoreographerState:
        return ChoreographerState.TRANSITIONING if self._transition is not None else ChoreographerState.IDLE

    @property
    def transition(self) -> Optional[Transition]:
        return self._transition

    @property
    def progress(self) -> float:
        return self._transition.progress if self._transition is not None else 0.0

    def attach(self, controls: OrbitControlSource | None) -> None:
        """Attach (or detach with None) the orbit controls."""
        self.controls = controls

    def _controls_ready(self) -> bool:
        if self.controls is None:
            return False
        try:
            return bool(self.controls.is_ready()) and float(self.controls.get_distance()) > 0
        except (AttributeError, TypeError, ValueError):
            return False

    def default_target(self, radius: float) -> OrbitConfiguration:
        return OrbitConfiguration(
            azimuth=self.config.target_azimuth,
            polar=self.config.target_polar,
            radius=radius,
        )

    # ----- transitions -----
    def trigger(self, target: OrbitConfiguration | None = None) -> bool:
        """
        Start a transition toward `target` (default: the configured target).

        Returns:
            True if a transition started or was re-targeted, False if the
            trigger was ignored (busy under IGNORE policy, or controls not ready)
        """
        if not self._controls_ready():
            logger.debug("Orbit controls not ready; ignoring camera trigger")
            return False

        radius = float(self.controls.get_distance())
        goal = target if target is not None else self.default_target(radius)

        if self._transition is not None:
            if self.config.retrigger_policy is RetriggerPolicy.IGNORE:
                logger.debug("Transition in flight; ignoring trigger")
                return False
            start = self._transition.sample(radius)
        else:
            start = self.controls.current()

        self._transition = Transition(
            start=start,
            target=goal,
            rate=self.config.rate,
            easing=self.config.easing,
            min_polar=self.config.min_polar,
            max_polar=self.config.max_polar,
        )
        logger.debug(
            "Camera transition: azimuth %.3f -> %.3f, polar %.3f -> %.3f",
            start.azimuth,
            goal.azimuth,
            start.polar,
            goal.polar,
        )
        return True

    def cancel(self) -> None:
        """Drop any in-flight transition and return to IDLE."""
        self._transition = None

    def on_mode_change(self, mode: str) -> bool:
        """
        React to an application mode change.

        Trigger modes start a transition; cancel modes stop one.

        Returns:
            True if a transition was started
        """
        if mode in self.config.trigger_modes:
            return self.trigger()
        if mode in self.config.cancel_modes:
            self.cancel()
        return False

    def advance(self, delta_time: float) -> Optional[OrbitConfiguration]:
        """
        Advance the in-flight transition by `delta_time` seconds.

        Returns:
            The interpolated configuration, or None when idle or when the
            orbit controls are not ready
        """
        if self._transition is None:
            return None
        if not self._controls_ready():
            return None

        pose = self._transition.advance(delta_time, float(self.controls.get_distance()))
        if self._transition.done:
            self._transition = None
        self.last_emitted = pose
        return pose
