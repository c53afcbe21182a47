"""Session-scoped identity cache.

Maps ``(class name, identity)`` to the node instance last hydrated or saved
for that identity, so one logical record has one object per session.
"""

import logging

import typing as t
from dataclasses import dataclass

logger = logging.getLogger(__name__)

NodeKey = tuple[str, t.Any]


def class_key(node_class: type[t.Any] | str) -> str:
    if isinstance(node_class, str):
        return node_class
    return f"{node_class.__module__}.{node_class.__qualname__}"


@dataclass
class CacheMetrics:
    """Cache performance metrics."""

    hits: int = 0
    misses: int = 0
    writes: int = 0
    evictions: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0


class IdentityCache(t.Protocol):
    def get(self, node_class: type[t.Any] | str, node_id: t.Any) -> t.Any | None: ...

    def put(self, node_class: type[t.Any] | str, node_id: t.Any, node: t.Any) -> None: ...

    def remove(self, node_class: type[t.Any] | str, node_id: t.Any) -> None: ...


class NodesCache:
    """In-memory identity map.

    Not synchronised: callers sharing one cache across tasks must keep a
    single writer per identity.
    """

    def __init__(self) -> None:
        self._nodes: dict[NodeKey, t.Any] = {}
        self.metrics = CacheMetrics()

    def get(self, node_class: type[t.Any] | str, node_id: t.Any) -> t.Any | None:
        node = self._nodes.get((class_key(node_class), node_id))
        if node is None:
            self.metrics.misses += 1
        else:
            self.metrics.hits += 1
        return node

    def put(self, node_class: type[t.Any] | str, node_id: t.Any, node: t.Any) -> None:
        if node_id is None:
            msg = "Cannot cache a node without identity"
            raise ValueError(msg)
        self._nodes[(class_key(node_class), node_id)] = node
        self.metrics.writes += 1

    def remove(self, node_class: type[t.Any] | str, node_id: t.Any) -> None:
        if self._nodes.pop((class_key(node_class), node_id), None) is not None:
            self.metrics.evictions += 1

    def clear(self, node_class: type[t.Any] | str | None = None) -> int:
        """Drop every entry, or only those of ``node_class``. Returns the count."""
        if node_class is None:
            dropped = len(self._nodes)
            self._nodes.clear()
        else:
            name = class_key(node_class)
            keys = [k for k in self._nodes if k[0] == name]
            for key in keys:
                del self._nodes[key]
            dropped = len(keys)
        self.metrics.evictions += dropped
        logger.debug("Cleared %d cached nodes", dropped)
        return dropped

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        return (class_key(key[0]), key[1]) in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)
