"""
PostgreSQL database adapter implementation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from ..dialects import POSTGRES
from ..utils import get_logger
from .base import (
    AdapterConfigurationError,
    AdapterConnectionError,
    AdapterExecutionError,
    ConnectionConfig,
    DatabaseAdapter,
)


def _load_driver():
    try:
        import psycopg

        return psycopg
    except ImportError:
        return None


@dataclass
class PostgresConnectionState:
    connection: Any
    config: ConnectionConfig
    driver: Any


class PostgresAdapter(DatabaseAdapter):
    """
    Adapter wrapping the psycopg PostgreSQL driver.
    """

    def __init__(self) -> None:
        self.dialect = POSTGRES
        self._state: PostgresConnectionState | None = None
        self.logger = get_logger("adapters.postgres")

    def connect(self, config: ConnectionConfig) -> Any:
        driver = _load_driver()
        if driver is None:
            raise AdapterConfigurationError("psycopg is required to use PostgresAdapter.")

        options = dict(config.options or {})
        if config.timeout and "connect_timeout" not in options:
            options["connect_timeout"] = int(config.timeout)

        self.logger.info("Connecting to PostgreSQL %s", config.descriptive_label())

        try:
            connection = driver.connect(config.base_url, **options)
        except Exception as exc:
            raise AdapterConnectionError("Failed to connect to PostgreSQL.") from exc
        connection.autocommit = False
        if config.isolation_level:
            setattr(connection, "isolation_level", config.isolation_level)

        self._state = PostgresConnectionState(connection, config, driver)
        return connection

    def close(self) -> None:
        if self._state:
            try:
                self._state.connection.close()
            finally:
                self._state = None

    def _ensure_connection(self):
        if not self._state:
            raise AdapterConnectionError("PostgresAdapter is not connected.")
        connection = self._state.connection
        if getattr(connection, "closed", False):
            raise AdapterConnectionError("PostgreSQL connection was closed.")
        return connection

    def query(self, sql: str, params: Sequence[Any] | None = None) -> List[Dict[str, Any]]:
        cursor = self._run(sql, params)
        names = [description[0] for description in cursor.description or ()]
        return [dict(zip(names, row)) for row in cursor.fetchall()]

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> int:
        return self._run(sql, params).rowcount

    def _run(self, sql: str, params: Sequence[Any] | None):
        connection = self._ensure_connection()
        params = tuple(params or ())
        self._validate_params(sql, params)
        cursor = connection.cursor()
        try:
            cursor.execute(sql, params)
        except Exception as exc:
            raise AdapterExecutionError(f"PostgreSQL rejected statement: {exc}") from exc
        return cursor

    def begin(self) -> None:
        # psycopg opens the transaction implicitly on the first statement.
        self._ensure_connection()

    def commit(self) -> None:
        self._ensure_connection().commit()

    def rollback(self) -> None:
        self._ensure_connection().rollback()

    @staticmethod
    def _count_placeholders(sql: str) -> int:
        count = 0
        idx = 0
        while idx < len(sql) - 1:
            if sql[idx] == "%" and sql[idx + 1] == "s":
                count += 1
                idx += 2
                continue
            if sql[idx] == "%" and sql[idx + 1] == "%":
                idx += 2
                continue
            idx += 1
        return count

    def _validate_params(self, sql: str, params: Sequence[Any]) -> None:
        expected = self._count_placeholders(sql)
        if expected != len(params):
            raise AdapterExecutionError(
                f"Parameter count mismatch: expected {expected}, received {len(params)}."
            )
