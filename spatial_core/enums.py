"""
Core enumerations for the spatial layout and camera choreography engine.

This module defines the named layout patterns, the camera choreographer states,
the easing curves available to camera transitions, and the policy applied when
a transition is triggered while another one is still running.
"""

from enum import Enum, auto


class UnknownPatternError(ValueError):
    """Raised when a layout pattern name does not match any known pattern."""


class LayoutPattern(Enum):
    """
    Point-distribution strategies for flat item collections.

    - CONSTELLATION: equal-area sphere spacing with organic jitter
    - GALAXY: round-robin spiral arms
    - TIMELINE: linear along x, polarity along y
    - CLUSTERS: one sunflower cluster per categorical tag
    - SPHERE: deterministic golden-ratio (Fibonacci) sphere
    - HELIX: double helix split by polarity sign
    """

    CONSTELLATION = "constellation"
    """Items as a loosely perturbed star sphere."""

    GALAXY = "galaxy"
    """Spiral arrangement with items dealt onto arms."""

    TIMELINE = "timeline"
    """Linear, caller-ordered arrangement."""

    CLUSTERS = "clusters"
    """Tag-based clustering around a ring."""

    SPHERE = "sphere"
    """Even distribution on a sphere surface."""

    HELIX = "helix"
    """Two strands of contrasting polarity."""

    @classmethod
    def parse(cls, name: "str | LayoutPattern") -> "LayoutPattern":
        """
        Resolve a pattern name (case-insensitive) to a `LayoutPattern`.

        Args:
            name: Pattern name such as ``"galaxy"`` or an existing member

        Returns:
            The matching `LayoutPattern`

        Raises:
            UnknownPatternError: If the name matches no pattern
        """
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower()
        for member in cls:
            if member.value == key:
                return member
        known = ", ".join(m.value for m in cls)
        raise UnknownPatternError(f"Unknown layout pattern {name!r} (expected one of: {known})")


class ChoreographerState(Enum):
    """
    States of the camera choreographer.

    - IDLE: no transition in flight, per-frame updates are no-ops
    - TRANSITIONING: a transition is advancing toward its target
    """

    IDLE = auto()
    """No transition is running."""

    TRANSITIONING = auto()
    """A transition is in flight."""


class Easing(Enum):
    """Easing curves mapping linear progress in [0, 1] to eased progress."""

    LINEAR = auto()
    EASE_IN = auto()
    EASE_OUT = auto()
    EASE_IN_OUT = auto()
    ELASTIC = auto()


class RetriggerPolicy(Enum):
    """
    What a choreographer does with a trigger that arrives mid-transition.

    - IGNORE: keep the in-flight transition untouched
    - RETARGET: restart from the current interpolated pose toward the new target
    """

    IGNORE = auto()
    RETARGET = auto()
