"""
Storage adapters, chosen per connection by DSN scheme.
"""

from typing import Callable, Dict

from .base import (
    AdapterConfigurationError,
    AdapterConnectionError,
    AdapterError,
    AdapterExecutionError,
    ConnectionConfig,
    DatabaseAdapter,
)
from .postgres import PostgresAdapter
from .sqlite import SQLiteAdapter

AdapterFactory = Callable[[], DatabaseAdapter]

ADAPTERS_BY_SCHEME: Dict[str, AdapterFactory] = {
    "sqlite": SQLiteAdapter,
    "postgres": PostgresAdapter,
    "postgresql": PostgresAdapter,
}


def adapter_factory_for(config: ConnectionConfig) -> AdapterFactory:
    try:
        return ADAPTERS_BY_SCHEME[config.scheme]
    except KeyError as exc:
        raise AdapterConfigurationError(
            f"No adapter registered for scheme '{config.scheme}' ({config.redacted_dsn()})"
        ) from exc


__all__ = [
    "ADAPTERS_BY_SCHEME",
    "AdapterFactory",
    "adapter_factory_for",
    "ConnectionConfig",
    "DatabaseAdapter",
    "AdapterError",
    "AdapterConfigurationError",
    "AdapterConnectionError",
    "AdapterExecutionError",
    "SQLiteAdapter",
    "PostgresAdapter",
]
