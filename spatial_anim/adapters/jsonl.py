from __future__ import annotations

import json
from dataclasses import asdict
from typing import Iterable, Iterator

from spatial_anim.adapters.base import CameraEventSource
from spatial_anim.models.events import (
    CameraFrame,
    Event,
    LayoutDeclared,
    RunMetadata,
    TransitionCancelled,
    TransitionFinished,
    TransitionStarted,
)


_TYPE_MAP = {
    "LayoutDeclared": LayoutDeclared,
    "TransitionStarted": TransitionStarted,
    "CameraFrame": CameraFrame,
    "TransitionFinished": TransitionFinished,
    "TransitionCancelled": TransitionCancelled,
    "RunMetadata": RunMetadata,
}


class JsonlEventSource(CameraEventSource):
    def __init__(self, path: str):
        self.path = path

    def stream_events(self) -> Iterator[Event]:
        with open(self.path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                obj = json.loads(line)
                typ = obj.pop("type", None)
                cls = _TYPE_MAP.get(typ)
                if cls is None:
                    continue
                yield cls(**obj)


def write_events_jsonl(path: str, events: Iterable[Event]) -> int:
    """Write events one JSON object per line; returns the number written."""
    count = 0
    with open(path, "w", encoding="utf-8") as f:
        for ev in events:
            obj = {"type": type(ev).__name__, **asdict(ev)}
            f.write(json.dumps(obj) + "\n")
            count += 1
    return count
