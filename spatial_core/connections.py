"""
Undirected, deduplicated edges between positioned items.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Sequence, Set, Tuple

logger = logging.getLogger(__name__)

Vec3 = Tuple[float, float, float]


@dataclass(frozen=True)
class FlatItem:
    """
    An entity with no inherent hierarchy, e.g. an article.

    Attributes:
        id: Unique identifier
        polarity: Optional sentiment axis value, roughly -1..1
        tag: Optional categorical key (e.g. a recency bucket)
        related_ids: Identifiers of related items
    """

    id: str
    polarity: Optional[float] = None
    tag: Optional[str] = None
    related_ids: Tuple[str, ...] = ()

    def __post_init__(self):
        if not isinstance(self.related_ids, tuple):
            object.__setattr__(self, "related_ids", tuple(self.related_ids or ()))


@dataclass(frozen=True)
class Connection:
    """
    An undirected edge between two item positions.

    Attributes:
        source: Position of the item that declared the relation
        target: Position of the related item
        strength: 0..1, consumed by renderers as opacity/thickness
        source_id: Id of the declaring item
        target_id: Id of the related item
    """

    source: Vec3
    target: Vec3
    strength: float = 0.5
    source_id: Optional[str] = None
    target_id: Optional[str] = None


def _pair_key(a: Vec3, b: Vec3) -> Tuple[Vec3, Vec3]:
    return (a, b) if a <= b else (b, a)


class ConnectionBuilder:
    """
    Build connections from items' related-id references.

    Missing endpoints are skipped silently. Two relations that join the same
    unordered pair of positions produce a single connection.
    """

    def __init__(self, strength: float = 0.5):
        self.strength = strength

    def build(self, items: Iterable[FlatItem], positions: Mapping[str, Sequence[float]]) -> List[Connection]:
        """
        Args:
            items: Items carrying `related_ids`
            positions: Item id -> (x, y, z), typically from `PatternArranger.arrange`

        Returns:
            Connections in first-seen order
        """
        connections: List[Connection] = []
        seen: Set[Tuple[Vec3, Vec3]] = set()

        for item in items:
            if not item.related_ids:
                continue
            from_pos = positions.get(item.id)
            if from_pos is None:
                continue
            from_pos = tuple(float(c) for c in from_pos)

            for related_id in item.related_ids:
                to_pos = positions.get(related_id)
                if to_pos is None:
                    logger.debug("Related item '%s' of '%s' has no position; skipping", related_id, item.id)
                    continue
                to_pos = tuple(float(c) for c in to_pos)
                if to_pos == from_pos:
                    continue

                key = _pair_key(from_pos, to_pos)
                if key in seen:
                    continue
                seen.add(key)
                connections.append(
                    Connection(
                        source=from_pos,
                        target=to_pos,
                        strength=self.strength,
                        source_id=item.id,
                        target_id=related_id,
                    )
                )

        return connections
