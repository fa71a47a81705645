"""
Session management coordinating the adapter, identity map and action queue.
"""

from __future__ import annotations

import enum
from typing import Any, Iterable, List, Optional, Tuple, Type, TypeVar

from ..adapters.base import ConnectionConfig, DatabaseAdapter
from ..core.metadata import MetadataRegistry, NullPolicy, RowParseError, default_registry
from ..query.compiler import StatementCompiler
from ..utils import get_logger, redact_params, resolve_slow_query_ms, time_call
from .actions import Action, ActionBuilder, ActionQueue
from .identity_map import IdentityMap

E = TypeVar("E")

_UNSET: Any = object()


class SessionError(RuntimeError):
    """Base error for session lifecycle failures."""


class SessionClosedError(SessionError):
    """Raised when a closed session is used."""


class AmbiguousResultError(RowParseError):
    """Raised when a lookup by identity matches more than one row."""


class SessionState(enum.Enum):
    OPEN = "open"
    FLUSHING = "flushing"
    CLOSED = "closed"


class Session:
    """
    Unit of work bound to one connection and one transaction.

    Reads populate the identity map; ``persist`` and ``remove`` queue actions;
    changes made to loaded entities are detected on ``close`` by comparing
    them with their load-time snapshot. Not safe for concurrent use.
    """

    def __init__(
        self,
        adapter: DatabaseAdapter,
        *,
        connection_config: Optional[ConnectionConfig] = None,
        registry: Optional[MetadataRegistry] = None,
        null_policy: NullPolicy = NullPolicy.OMIT,
        slow_query_ms: int | None = None,
    ) -> None:
        self.adapter = adapter
        self.connection_config = connection_config or ConnectionConfig(url="sqlite:///:memory:")
        self.registry = registry if registry is not None else default_registry
        self.null_policy = null_policy
        self.identity_map = IdentityMap(self.registry)
        self.action_queue = ActionQueue()
        self.compiler = StatementCompiler(adapter.dialect)
        self.actions = ActionBuilder(self.compiler, null_policy)
        self.logger = get_logger("persistence.session")
        self.slow_query_ms = resolve_slow_query_ms(default=200, override=slow_query_ms)

        self.adapter.connect(self.connection_config)
        try:
            self.adapter.begin()
        except Exception:
            self.adapter.close()
            raise
        self._state = SessionState.OPEN
        self.logger.debug("Session opened on %s", self.connection_config.descriptive_label())

    # ------------------------------------------------------------------ #
    # Context management
    # ------------------------------------------------------------------ #
    def __enter__(self) -> "Session":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
            return
        if self._state is SessionState.CLOSED:
            return
        try:
            self.action_queue.clear()
            self._rollback()
        finally:
            self._release()

    # ------------------------------------------------------------------ #
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_closed(self) -> bool:
        return self._state is SessionState.CLOSED

    @property
    def pending_actions(self) -> Tuple[Action, ...]:
        return tuple(self.action_queue)

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #
    def find(self, entity_type: Type[E], identity: Any = _UNSET) -> Any:
        """
        ``find(Type)`` returns every row of the table; ``find(Type, id)`` returns
        the entity with that identity or ``None``.

        Pending actions are flushed first so reads observe earlier writes.
        """
        if identity is _UNSET:
            return self._find_all(entity_type)
        return self._find_one(entity_type, identity)

    def _find_all(self, entity_type: Type[E]) -> List[E]:
        self._ensure_open()
        self.flush()
        metadata = self.registry.get(entity_type)
        rows = self._query(self.compiler.select_all(metadata), ())
        result = [metadata.parse(row) for row in rows]
        # Collection reads replace whatever the map held for these ids.
        for instance in result:
            self.identity_map.cache(entity_type, metadata.identity_value_of(instance), instance)
        return result

    def _find_one(self, entity_type: Type[E], identity: Any) -> Optional[E]:
        self._ensure_open()
        self.flush()
        cached = self.identity_map.get(entity_type, identity)
        if cached is not None:
            return cached

        metadata = self.registry.get(entity_type)
        rows = self._query(self.compiler.select_by_identity(metadata), (identity,))
        if not rows:
            return None
        if len(rows) > 1:
            raise AmbiguousResultError(
                f"{len(rows)} rows in '{metadata.table_name}' match "
                f"{metadata.identity_column}={identity!r}"
            )
        instance = metadata.parse(rows[0])
        # Keyed by the stored identity so collection reads hit the same entry.
        return self.identity_map.cache(
            entity_type, metadata.identity_value_of(instance), instance
        )

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #
    def persist(self, entity: Any) -> None:
        """
        Queue an INSERT for ``entity``. Generated identities are not read back.
        """
        self._ensure_open()
        metadata = self.registry.get(type(entity))
        self.action_queue.append(self.actions.insert(metadata, entity))

    def remove(self, entity: Any) -> None:
        """
        Queue a DELETE for ``entity`` and evict it from the identity map.
        """
        self._ensure_open()
        metadata = self.registry.get(type(entity))
        action = self.actions.delete(metadata, entity)
        self.action_queue.append(action)
        self.identity_map.evict(type(entity), metadata.identity_value_of(entity))

    # ------------------------------------------------------------------ #
    def flush(self) -> None:
        """
        Execute queued inserts, then updates, then deletes. The queue is
        emptied even when a statement fails.
        """
        self._ensure_open()
        if not self.action_queue:
            return
        self._state = SessionState.FLUSHING
        try:
            for action in self.action_queue.in_flush_order():
                affected = self._execute(action.sql, action.params)
                self.logger.debug("%s affected %s row(s)", action.kind.name, affected)
        finally:
            self.action_queue.clear()
            self._state = SessionState.OPEN

    def close(self) -> None:
        """
        Queue updates for dirty entities, flush, commit and release the
        connection. On failure the transaction is rolled back and the error
        re-raised; the connection is released either way.
        """
        if self._state is SessionState.CLOSED:
            return
        try:
            try:
                self._queue_dirty_updates()
                self.flush()
                self.adapter.commit()
            except Exception:
                self.logger.warning("Session close failed; rolling back", exc_info=True)
                self._rollback()
                raise
        finally:
            self._release()

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _queue_dirty_updates(self) -> None:
        for entity in self.identity_map.affected_entities():
            metadata = self.registry.get(type(entity))
            action = self.actions.update(metadata, entity)
            if action is None:
                self.logger.warning(
                    "Skipping update of %s %r: no columns to write under %s",
                    metadata.entity_type.__name__,
                    metadata.identity_value_of(entity),
                    self.null_policy,
                )
                continue
            self.action_queue.append(action)

    def _query(self, sql: str, params: Iterable[Any]) -> List[Any]:
        param_list = list(params)
        self._log_statement(sql, param_list)
        with time_call("session.query", self.logger, sql=sql, threshold_ms=self.slow_query_ms):
            return self.adapter.query(sql, param_list)

    def _execute(self, sql: str, params: Iterable[Any]) -> int:
        param_list = list(params)
        self._log_statement(sql, param_list)
        with time_call("session.execute", self.logger, sql=sql, threshold_ms=self.slow_query_ms):
            return self.adapter.execute(sql, param_list)

    def _log_statement(self, sql: str, params: List[Any]) -> None:
        self.logger.debug("SQL: %s", sql, extra={"sql": sql, "params": redact_params(params)})

    def _rollback(self) -> None:
        try:
            self.adapter.rollback()
        except Exception:
            self.logger.exception("Rollback failed")

    def _release(self) -> None:
        try:
            self.adapter.close()
        finally:
            self._state = SessionState.CLOSED
            self.identity_map.clear()
            self.action_queue.clear()
            self.logger.debug("Session closed")

    def _ensure_open(self) -> None:
        if self._state is SessionState.CLOSED:
            raise SessionClosedError("Session is closed.")
