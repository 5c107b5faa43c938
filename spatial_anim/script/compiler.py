from __future__ import annotations

from typing import Iterable, List

from spatial_anim.models.events import (
    Event,
    SceneStep,
    TransitionCancelled,
    TransitionFinished,
    TransitionStarted,
)


def compile_events_to_steps(events: Iterable[Event], default_step_duration: float = 0.5) -> List[SceneStep]:
    """Group an event stream into one `SceneStep` per camera transition.

    Events outside any transition (layout declarations, metadata) form their
    own steps with `default_step_duration`.
    """
    steps: List[SceneStep] = []
    current_events: List[Event] = []
    current_start_t = None
    last_t = None
    in_transition = False

    def flush(duration: float) -> None:
        nonlocal current_events
        if current_events:
            steps.append(SceneStep(idx=len(steps), duration=float(max(0.0, duration)), events=current_events))
            current_events = []

    for ev in events:
        t = getattr(ev, "t", None)
        if isinstance(ev, TransitionStarted):
            # close whatever preceded this transition
            if in_transition:
                duration = (last_t - current_start_t) if (last_t is not None and current_start_t is not None) else default_step_duration
                flush(duration)
            else:
                flush(default_step_duration)
            in_transition = True
            current_start_t = t
            last_t = t
            current_events.append(ev)
        elif isinstance(ev, (TransitionFinished, TransitionCancelled)) and in_transition:
            current_events.append(ev)
            end_t = t if t is not None else last_t
            duration = (end_t - current_start_t) if (end_t is not None and current_start_t is not None) else default_step_duration
            flush(duration)
            in_transition = False
            current_start_t = None
            last_t = end_t
        else:
            current_events.append(ev)
            if t is not None:
                last_t = t

    if current_events:
        # flush tail
        if in_transition and last_t is not None and current_start_t is not None:
            flush(last_t - current_start_t)
        else:
            flush(default_step_duration)

    return steps
