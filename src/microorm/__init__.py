"""
microorm public package initialization.

A small object-relational mapper: dataclass entities, a per-session identity
map with snapshot dirty-checking, and a unit of work flushed in one transaction.
"""

from .adapters import ConnectionConfig, PostgresAdapter, SQLiteAdapter  # noqa: F401
from .core import (  # noqa: F401
    EntityConfigurationError,
    EntityMetadata,
    MetadataRegistry,
    MissingIdentityError,
    NullPolicy,
    RowParseError,
    column,
    entity,
    identity,
)
from .persistence import (  # noqa: F401
    AmbiguousResultError,
    Session,
    SessionClosedError,
    SessionFactory,
)

__version__ = "0.1.0"

__all__ = [
    "AmbiguousResultError",
    "ConnectionConfig",
    "EntityConfigurationError",
    "EntityMetadata",
    "MetadataRegistry",
    "MissingIdentityError",
    "NullPolicy",
    "PostgresAdapter",
    "RowParseError",
    "SQLiteAdapter",
    "Session",
    "SessionClosedError",
    "SessionFactory",
    "column",
    "entity",
    "identity",
]
