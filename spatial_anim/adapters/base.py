from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, Optional

from spatial_anim.models.events import Event
from spatial_core.camera import OrbitConfiguration


class CameraEventSource(ABC):
    @abstractmethod
    def stream_events(self) -> Iterator[Event]:
        ...


class CameraStepper(ABC):
    @abstractmethod
    def reset(self) -> None:
        ...

    @abstractmethod
    def step(self, n: int = 1) -> Optional[OrbitConfiguration]:
        ...

    @abstractmethod
    def stream_events(self) -> Iterator[Event]:
        ...
