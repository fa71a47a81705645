"""
SQLite database adapter implementation.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Any, List, Sequence

from ..dialects import SQLITE
from ..utils import get_logger
from .base import AdapterConnectionError, AdapterExecutionError, ConnectionConfig, DatabaseAdapter


@dataclass(slots=True)
class SQLiteConnectionState:
    connection: sqlite3.Connection


class SQLiteAdapter(DatabaseAdapter):
    """
    Adapter wrapping the Python stdlib sqlite3 module.
    """

    def __init__(self) -> None:
        self.dialect = SQLITE
        self._state: SQLiteConnectionState | None = None
        self.logger = get_logger("adapters.sqlite")

    # ------------------------------------------------------------------ #
    # Connection management
    # ------------------------------------------------------------------ #
    def connect(self, config: ConnectionConfig) -> sqlite3.Connection:
        path = self._normalize_path(config.base_url)
        timeout = config.timeout if config.timeout is not None else 5.0

        try:
            connection = sqlite3.connect(
                path,
                isolation_level="",
                timeout=timeout,
                detect_types=sqlite3.PARSE_DECLTYPES,
            )
        except sqlite3.Error as exc:
            raise AdapterConnectionError(f"Failed to open SQLite database {path!r}.") from exc
        connection.row_factory = sqlite3.Row

        if config.isolation_level:
            connection.isolation_level = config.isolation_level

        self.logger.debug("Opened SQLite database %s", path)
        self._state = SQLiteConnectionState(connection)
        return connection

    def close(self) -> None:
        if self._state:
            try:
                self._state.connection.close()
            finally:
                self._state = None

    def _ensure_connection(self) -> sqlite3.Connection:
        if not self._state:
            raise AdapterConnectionError("SQLiteAdapter is not connected.")
        return self._state.connection

    # ------------------------------------------------------------------ #
    # Execution helpers
    # ------------------------------------------------------------------ #
    def query(self, sql: str, params: Sequence[Any] | None = None) -> List[sqlite3.Row]:
        cursor = self._run(sql, params)
        return cursor.fetchall()

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> int:
        cursor = self._run(sql, params)
        return cursor.rowcount

    def _run(self, sql: str, params: Sequence[Any] | None) -> sqlite3.Cursor:
        connection = self._ensure_connection()
        try:
            return connection.execute(sql, tuple(params or ()))
        except sqlite3.Error as exc:
            raise AdapterExecutionError(f"SQLite rejected statement: {exc}") from exc

    # ------------------------------------------------------------------ #
    # Transactions
    # ------------------------------------------------------------------ #
    def begin(self) -> None:
        connection = self._ensure_connection()
        if not connection.in_transaction:
            connection.execute("BEGIN")

    def commit(self) -> None:
        self._ensure_connection().commit()

    def rollback(self) -> None:
        self._ensure_connection().rollback()

    @staticmethod
    def _normalize_path(url: str) -> str:
        if url in ("sqlite://", "sqlite:///:memory:"):
            return ":memory:"
        prefix = "sqlite:///"
        if url.startswith(prefix):
            return url[len(prefix) :]
        return url
