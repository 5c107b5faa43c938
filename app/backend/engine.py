from __future__ import annotations

import asyncio
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Set

import numpy as np

from spatial_core.camera import CameraChoreographer, OrbitConfiguration, StaticOrbitControls
from spatial_core.compiler import compile_items_from_list, compile_tree_from_dict
from spatial_core.config import CameraConfig, LayoutConfig
from spatial_core.connections import ConnectionBuilder, FlatItem
from spatial_core.enums import ChoreographerState, LayoutPattern
from spatial_core.hierarchy import CategoryTree
from spatial_core.patterns import PatternArranger
from spatial_core.tree_layout import TreeLayoutEngine, toggle_expansion


@dataclass
class CameraState:
    frame: int = 0
    state: str = ChoreographerState.IDLE.name
    progress: float = 0.0
    orbit: Dict[str, float] = field(default_factory=dict)
    position: List[float] = field(default_factory=list)


class InMemorySceneEngine:
    """
    One scene per process: a category tree, an item collection and one camera.

    - tree_layout()/toggle(): radial layout under the current expansion state
    - item_layout(): pattern arrangement plus connections
    - trigger(): start a camera transition and run the frame loop
    - tick(): advance the camera by one frame
    - subscribe(): returns an asyncio.Queue receiving camera states
    """

    def __init__(
        self,
        tree: CategoryTree | None = None,
        items: List[FlatItem] | None = None,
        layout_config: LayoutConfig | None = None,
        camera_config: CameraConfig | None = None,
    ) -> None:
        self.layout_config = layout_config or LayoutConfig()
        self.camera_config = camera_config or CameraConfig()
        self._tree = tree if tree is not None else self._build_default_tree()
        self._items = items if items is not None else self._build_default_items()
        root = self._tree.root_id
        self._expanded: FrozenSet[str] = frozenset({root}) if root else frozenset()

        self._layout_engine = TreeLayoutEngine(self.layout_config)
        self._connections = ConnectionBuilder(self.layout_config.connection_strength)

        self.controls = StaticOrbitControls(OrbitConfiguration(azimuth=2.5, polar=1.0, radius=40.0))
        self.choreographer = CameraChoreographer(self.controls, self.camera_config)
        self._state = self._snapshot(frame=0)

        self._lock = asyncio.Lock()
        self._running = False
        self._runner_task: Optional[asyncio.Task] = None
        self._subscribers: Set[asyncio.Queue] = set()

    # --- data --------------------------------------------------------------
    @staticmethod
    def _build_default_tree() -> CategoryTree:
        return compile_tree_from_dict(
            {
                "id": "ai-dev-landscape",
                "label": "AI Development Landscape",
                "children": [
                    {
                        "id": "ai-coding-assistants",
                        "color": "#00d4ff",
                        "children": [{"id": "ide-based-tools"}, {"id": "agentic-cli-tools"}, {"id": "web-prototyping-tools"}],
                    },
                    {
                        "id": "infrastructure-data",
                        "color": "#a78bfa",
                        "children": [{"id": "vector-databases"}, {"id": "local-llm-execution"}],
                    },
                    {
                        "id": "hardware-performance",
                        "color": "#f59e0b",
                        "children": [{"id": "nvidia-gpu-ecosystem"}, {"id": "apple-unified-memory"}],
                    },
                    {"id": "development-frameworks", "color": "#22c55e"},
                ],
            }
        )

    @staticmethod
    def _build_default_items() -> List[FlatItem]:
        return compile_items_from_list(
            [
                {"id": "a1", "polarity": 0.6, "tag": "today", "related": ["a2", "a4"]},
                {"id": "a2", "polarity": -0.4, "tag": "today", "related": ["a1"]},
                {"id": "a3", "polarity": 0.0, "tag": "week", "related": ["a5"]},
                {"id": "a4", "polarity": 0.2, "tag": "week"},
                {"id": "a5", "polarity": -0.8, "tag": "older", "related": ["a3", "missing"]},
                {"id": "a6", "polarity": 0.9, "tag": "older"},
            ]
        )

    @property
    def tree(self) -> CategoryTree:
        return self._tree

    @property
    def expanded(self) -> FrozenSet[str]:
        return self._expanded

    def tree_layout(self) -> Dict[str, Any]:
        layout = self._layout_engine.layout(self._tree, self._expanded, self._tree.root_id)
        return {
            "root": self._tree.root_id,
            "expanded": sorted(self._expanded),
            "nodes": [asdict(p) for p in layout.values()],
        }

    async def toggle(self, node_id: str) -> Dict[str, Any]:
        if node_id not in self._tree:
            raise KeyError(node_id)
        async with self._lock:
            self._expanded = toggle_expansion(self._expanded, node_id)
        return self.tree_layout()

    def item_layout(self, pattern: str, radius: float | None = None, seed: int | None = None) -> Dict[str, Any]:
        arranger = PatternArranger(self.layout_config, np.random.default_rng(seed))
        positions = arranger.arrange(self._items, pattern, radius)
        connections = self._connections.build(self._items, positions) if self.layout_config.show_connections else []
        return {
            "pattern": LayoutPattern.parse(pattern).value,
            "positions": {k: list(v) for k, v in positions.items()},
            "connections": [asdict(c) for c in connections],
        }

    # --- camera ------------------------------------------------------------
    def _snapshot(self, frame: int) -> CameraState:
        return CameraState(
            frame=frame,
            state=self.choreographer.state.name,
            progress=self.choreographer.progress,
            orbit=self.controls.orbit.as_dict(),
            position=list(self.controls.camera_position()),
        )

    def state(self) -> CameraState:
        return self._state

    def is_done(self) -> bool:
        return self.choreographer.state is ChoreographerState.IDLE

    async def trigger(self, target: OrbitConfiguration | None = None, autoplay: bool = True, interval_ms: int = 16) -> bool:
        async with self._lock:
            started = self.choreographer.trigger(target)
            self._state = self._snapshot(frame=self._state.frame)
        if started and autoplay:
            await self.run(interval_ms)
        return started

    async def tick(self, delta_time: float) -> CameraState:
        async with self._lock:
            pose = self.choreographer.advance(delta_time)
            if pose is not None:
                self.controls.apply(pose)
            self._state = self._snapshot(frame=self._state.frame + 1)
        await self._broadcast()
        return self._state

    # --- pubsub ------------------------------------------------------------
    def subscribe(self) -> asyncio.Queue:
        q: asyncio.Queue = asyncio.Queue()
        self._subscribers.add(q)
        return q

    def unsubscribe(self, q: asyncio.Queue) -> None:
        self._subscribers.discard(q)

    async def _broadcast(self) -> None:
        # Non-blocking fan-out; drop if queues are full
        for q in list(self._subscribers):
            try:
                q.put_nowait(self._state)
            except asyncio.QueueFull:
                pass

    # --- lifecycle ---------------------------------------------------------
    async def cancel(self) -> None:
        async with self._lock:
            self.choreographer.cancel()
            self._state = self._snapshot(frame=self._state.frame)
        await self.pause()
        await self._broadcast()

    async def reset(self) -> None:
        await self.pause()
        async with self._lock:
            self.choreographer.cancel()
            self.controls.apply(OrbitConfiguration(azimuth=2.5, polar=1.0, radius=40.0))
            root = self._tree.root_id
            self._expanded = frozenset({root}) if root else frozenset()
            self._state = self._snapshot(frame=0)
        await self._broadcast()

    async def pause(self) -> None:
        self._running = False
        if self._runner_task and not self._runner_task.done():
            # Let the loop observe _running = False
            await asyncio.sleep(0)

    async def run(self, interval_ms: int = 16) -> None:
        if self._running:
            return
        self._running = True
        dt = max(interval_ms, 1) / 1000

        async def _loop() -> None:
            try:
                while self._running:
                    await self.tick(dt)
                    if self.is_done():
                        break
                    await asyncio.sleep(dt)
            finally:
                self._running = False

        self._runner_task = asyncio.create_task(_loop())


def orbit_from_fields(azimuth: float | None, polar: float | None, radius: float | None, fallback: OrbitConfiguration) -> OrbitConfiguration:
    """Fill missing orbit fields from `fallback`; raises ValueError on a non-positive radius."""
    return OrbitConfiguration(
        azimuth=fallback.azimuth if azimuth is None else float(azimuth),
        polar=fallback.polar if polar is None else float(polar),
        radius=fallback.radius if radius is None else float(radius),
    )
