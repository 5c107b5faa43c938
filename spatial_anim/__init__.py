"""
Camera and layout event streaming package.

This package provides:
- Event protocol describing layout snapshots and camera transition frames
- Adapters: a live stepper driving a `CameraChoreographer`, JSONL record/replay
- A script compiler grouping frame streams into per-transition steps
- Utilities for value normalization used by presentation layers
"""

__all__ = [
    # Subpackages will be imported lazily by users
]
