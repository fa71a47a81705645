"""
Write intents queued by a session and executed on flush.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Iterator, List, Tuple

from ..core.metadata import EntityMetadata, NullPolicy
from ..query.compiler import StatementCompiler


class ActionKind(enum.Enum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


# Inserts run before updates, updates before deletes, whatever the queue order.
FLUSH_ORDER: Tuple[ActionKind, ...] = (ActionKind.INSERT, ActionKind.UPDATE, ActionKind.DELETE)


@dataclass(frozen=True)
class Action:
    """
    One parameterized statement waiting to be executed.
    """

    kind: ActionKind
    sql: str
    params: Tuple[Any, ...] = ()


class ActionQueue:
    """
    Pending actions in creation order.
    """

    def __init__(self) -> None:
        self._actions: List[Action] = []

    def append(self, action: Action) -> None:
        self._actions.append(action)

    def in_flush_order(self) -> List[Action]:
        return [
            action for kind in FLUSH_ORDER for action in self._actions if action.kind is kind
        ]

    def clear(self) -> None:
        self._actions.clear()

    def __iter__(self) -> Iterator[Action]:
        return iter(list(self._actions))

    def __len__(self) -> int:
        return len(self._actions)

    def __bool__(self) -> bool:
        return bool(self._actions)


class ActionBuilder:
    """
    Turn entities into actions using a compiler and a null policy.
    """

    def __init__(self, compiler: StatementCompiler, null_policy: NullPolicy = NullPolicy.OMIT) -> None:
        self.compiler = compiler
        self.null_policy = null_policy

    def insert(self, metadata: EntityMetadata, entity: Any) -> Action:
        values = metadata.columns_of(entity, self.null_policy)
        sql = self.compiler.insert(metadata, list(values))
        return Action(ActionKind.INSERT, sql, tuple(values.values()))

    def update(self, metadata: EntityMetadata, entity: Any) -> Action | None:
        """
        Return ``None`` when the null policy leaves no column to assign.
        """
        values = metadata.columns_of(entity, self.null_policy)
        if not values:
            return None
        sql = self.compiler.update(metadata, list(values))
        params = (*values.values(), metadata.identity_value_of(entity))
        return Action(ActionKind.UPDATE, sql, params)

    def delete(self, metadata: EntityMetadata, entity: Any) -> Action:
        identity_value = metadata.identity_value_of(entity)
        if identity_value is None:
            raise ValueError(
                f"Cannot remove {metadata.entity_type.__name__} without an identity value."
            )
        return Action(ActionKind.DELETE, self.compiler.delete(metadata), (identity_value,))
