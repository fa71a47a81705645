"""
Identity map ensuring a single in-memory instance per row, with load-time snapshots.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from ..core.metadata import MetadataRegistry


@dataclass(frozen=True)
class EntityKey:
    """
    Value identity of a cached entity: equal when type and id are equal.
    """

    entity_type: type
    identity: Any


def _values_differ(current: Any, snapshot: Any) -> bool:
    if type(current) is not type(snapshot):
        return True
    return bool(current != snapshot)


class IdentityMap:
    """
    Stores entity instances keyed by :class:`EntityKey` together with a snapshot
    of their column values taken when they entered the map.

    Not synchronized: a map belongs to exactly one session.
    """

    def __init__(self, registry: MetadataRegistry) -> None:
        self.registry = registry
        self._store: Dict[EntityKey, Any] = {}
        self._snapshots: Dict[EntityKey, Tuple[Any, ...]] = {}

    def cache(self, entity_type: type, identity: Any, instance: Any) -> Any:
        """
        Store ``instance`` and replace its snapshot with its current values.
        """
        key = EntityKey(entity_type, identity)
        self._store[key] = instance
        self._snapshots[key] = self.registry.get(entity_type).snapshot_of(instance)
        return instance

    def get(self, entity_type: type, identity: Any) -> Any | None:
        return self._store.get(EntityKey(entity_type, identity))

    def has_changes(self, key: EntityKey) -> bool:
        instance = self._store[key]
        current = self.registry.get(key.entity_type).snapshot_of(instance)
        stored = self._snapshots[key]
        if len(current) != len(stored):
            return True
        return any(_values_differ(now, then) for now, then in zip(current, stored))

    def affected_entities(self) -> List[Any]:
        """
        Cached entities whose values differ from their snapshot, in insertion order.
        """
        return [self._store[key] for key in self._store if self.has_changes(key)]

    def evict(self, entity_type: type, identity: Any) -> Any | None:
        key = EntityKey(entity_type, identity)
        self._snapshots.pop(key, None)
        return self._store.pop(key, None)

    def clear(self) -> None:
        self._store.clear()
        self._snapshots.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)
