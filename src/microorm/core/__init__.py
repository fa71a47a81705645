"""
Entity declaration and metadata for microorm.
"""

from .mapping import column, entity, identity
from .metadata import (
    ColumnMapping,
    EntityConfigurationError,
    EntityMetadata,
    MetadataRegistry,
    MissingIdentityError,
    NullPolicy,
    RowParseError,
    default_registry,
)

__all__ = [
    "ColumnMapping",
    "EntityConfigurationError",
    "EntityMetadata",
    "MetadataRegistry",
    "MissingIdentityError",
    "NullPolicy",
    "RowParseError",
    "column",
    "default_registry",
    "entity",
    "identity",
]
