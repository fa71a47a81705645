"""
Render the fixed set of statements a session issues for an entity type.
"""

from __future__ import annotations

from typing import Sequence

from ..core.metadata import EntityMetadata
from ..dialects import Dialect

SELECT_ALL = "SELECT * FROM {table}"
SELECT_BY_IDENTITY = "SELECT * FROM {table} WHERE {identity} = {placeholder}"
INSERT = "INSERT INTO {table} ({columns}) VALUES ({placeholders})"
INSERT_DEFAULTS = "INSERT INTO {table} DEFAULT VALUES"
UPDATE = "UPDATE {table} SET {assignments} WHERE {identity} = {placeholder}"
DELETE = "DELETE FROM {table} WHERE {identity} = {placeholder}"


class StatementCompiler:
    """
    Build SQL text for entity reads and writes using the dialect's placeholder.
    """

    def __init__(self, dialect: Dialect) -> None:
        self.dialect = dialect

    @property
    def placeholder(self) -> str:
        return self.dialect.parameter_placeholder()

    def select_all(self, metadata: EntityMetadata) -> str:
        return SELECT_ALL.format(table=metadata.table_name)

    def select_by_identity(self, metadata: EntityMetadata) -> str:
        return SELECT_BY_IDENTITY.format(
            table=metadata.table_name,
            identity=metadata.identity_column,
            placeholder=self.placeholder,
        )

    def insert(self, metadata: EntityMetadata, columns: Sequence[str]) -> str:
        if not columns:
            return INSERT_DEFAULTS.format(table=metadata.table_name)
        return INSERT.format(
            table=metadata.table_name,
            columns=", ".join(columns),
            placeholders=", ".join(self.placeholder for _ in columns),
        )

    def update(self, metadata: EntityMetadata, columns: Sequence[str]) -> str:
        if not columns:
            raise ValueError(f"UPDATE on '{metadata.table_name}' requires at least one column")
        assignments = ", ".join(f"{name} = {self.placeholder}" for name in columns)
        return UPDATE.format(
            table=metadata.table_name,
            assignments=assignments,
            identity=metadata.identity_column,
            placeholder=self.placeholder,
        )

    def delete(self, metadata: EntityMetadata) -> str:
        return DELETE.format(
            table=metadata.table_name,
            identity=metadata.identity_column,
            placeholder=self.placeholder,
        )
