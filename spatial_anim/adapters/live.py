from __future__ import annotations

import logging
import math
from typing import Iterator, Optional

from spatial_core.camera import CameraChoreographer, OrbitConfiguration, StaticOrbitControls, Transition
from spatial_core.config import CameraConfig
from spatial_core.enums import ChoreographerState

from spatial_anim.adapters.base import CameraStepper
from spatial_anim.models.events import (
    CameraFrame,
    Event,
    TransitionCancelled,
    TransitionFinished,
    TransitionStarted,
)

logger = logging.getLogger(__name__)


class ChoreographerStepper(CameraStepper):
    """Drive a `CameraChoreographer` at a fixed frame delta, acting as the renderer.

    Each emitted configuration is written back onto the controls, so the next
    trigger starts from where the camera actually is.

    `max_frames` is a floor on the per-transition frame budget; the budget grows
    to cover the whole transition. A transition that still outlasts it (for
    instance one retargeted from outside the stream) is cancelled with a
    `TransitionCancelled(reason="max_frames")` event.
    """

    def __init__(
        self,
        controls: StaticOrbitControls | None = None,
        config: CameraConfig | None = None,
        frame_dt: float = 1.0 / 60.0,
        max_frames: int = 600,
    ):
        self.controls = controls or StaticOrbitControls()
        self.config = config or CameraConfig()
        self.choreographer = CameraChoreographer(self.controls, self.config)
        self.frame_dt = frame_dt
        self.max_frames = max_frames
        self.t = 0.0
        self.frame_index = 0

    def reset(self) -> None:
        self.choreographer.cancel()
        self.t = 0.0
        self.frame_index = 0

    def step(self, n: int = 1) -> Optional[OrbitConfiguration]:
        pose = None
        for _ in range(n):
            self.t += self.frame_dt
            self.frame_index += 1
            emitted = self.choreographer.advance(self.frame_dt)
            if emitted is not None:
                self.controls.apply(emitted)
                pose = emitted
        return pose

    def frame_budget(self, transition: Transition) -> int:
        """Frames needed to finish `transition`, never fewer than `max_frames`."""
        if transition.duration <= 0.0 or self.frame_dt <= 0.0:
            return max(self.max_frames, 1)
        needed = math.ceil((1.0 - transition.progress) * transition.duration / self.frame_dt) + 1
        return max(self.max_frames, needed)

    def stream_events(self, target: OrbitConfiguration | None = None) -> Iterator[Event]:
        # Start a transition unless one is already running
        if self.choreographer.state is ChoreographerState.IDLE:
            if not self.choreographer.trigger(target):
                return
        transition = self.choreographer.transition
        yield TransitionStarted(
            start=transition.start.as_dict(),
            target=transition.target.as_dict(),
            t=float(self.t),
        )

        budget = self.frame_budget(transition)
        for _ in range(budget):
            self.t += self.frame_dt
            self.frame_index += 1
            pose = self.choreographer.advance(self.frame_dt)
            if pose is None:
                return
            self.controls.apply(pose)
            done = self.choreographer.state is ChoreographerState.IDLE
            yield CameraFrame(
                frame_index=self.frame_index,
                azimuth=pose.azimuth,
                polar=pose.polar,
                radius=pose.radius,
                progress=1.0 if done else self.choreographer.progress,
                t=float(self.t),
            )
            if done:
                yield TransitionFinished(t=float(self.t))
                return

        if self.choreographer.state is ChoreographerState.TRANSITIONING:
            logger.warning(
                "Transition cut after %d frames at progress %.3f", budget, self.choreographer.progress
            )
            self.choreographer.cancel()
            yield TransitionCancelled(t=float(self.t), reason="max_frames")
