"""
Entity metadata derived once per record type and cached in a registry.
"""

from __future__ import annotations

import dataclasses
import enum
from collections import OrderedDict
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple, Type

IDENTITY_KEY = "microorm.identity"
COLUMN_KEY = "microorm.column"
TABLE_ATTR = "__entity_table__"


class EntityConfigurationError(Exception):
    """Raised when a record type cannot be mapped to a table."""


class MissingIdentityError(EntityConfigurationError):
    """Raised when a mapped type declares no identity field."""


class RowParseError(Exception):
    """Raised when a storage row cannot be turned into an entity."""


class NullPolicy(enum.Enum):
    """
    How ``None``-valued fields are treated when building INSERT/UPDATE columns.

    ``OMIT`` leaves them out of the statement entirely, so a column can never be
    cleared through an update. ``INCLUDE`` sends them as SQL NULL.
    """

    OMIT = "omit"
    INCLUDE = "include"


@dataclass(frozen=True)
class ColumnMapping:
    """
    Accessor pair binding one column to one attribute of the record type.
    """

    column: str
    attribute: str

    def get(self, entity: Any) -> Any:
        return getattr(entity, self.attribute)

    def set(self, entity: Any, value: Any) -> None:
        setattr(entity, self.attribute, value)


class EntityMetadata:
    """
    Table name, identity column and column mapping of a record type.
    """

    def __init__(
        self,
        entity_type: type,
        table_name: str,
        identity: ColumnMapping,
        columns: "OrderedDict[str, ColumnMapping]",
    ) -> None:
        self.entity_type = entity_type
        self.table_name = table_name
        self.identity = identity
        self.columns: Mapping[str, ColumnMapping] = MappingProxyType(columns)
        # Snapshot order is by column name and must never change after derivation.
        self.snapshot_mappings: Tuple[ColumnMapping, ...] = tuple(
            sorted((identity, *columns.values()), key=lambda mapping: mapping.column)
        )

    def __repr__(self) -> str:
        return (
            f"<EntityMetadata {self.entity_type.__name__} table={self.table_name!r} "
            f"identity={self.identity_column!r} columns={list(self.columns)!r}>"
        )

    @property
    def identity_column(self) -> str:
        return self.identity.column

    @property
    def column_names(self) -> Tuple[str, ...]:
        return tuple(self.columns)

    # ------------------------------------------------------------------ #
    # Derivation
    # ------------------------------------------------------------------ #
    @classmethod
    def from_type(cls, entity_type: type) -> "EntityMetadata":
        if not isinstance(entity_type, type) or not dataclasses.is_dataclass(entity_type):
            raise EntityConfigurationError(
                f"{entity_type!r} is not a dataclass; declare it with @entity or @dataclass."
            )
        if entity_type.__dataclass_params__.frozen:
            raise EntityConfigurationError(
                f"Entity '{entity_type.__name__}' is frozen; loaded fields must be assignable."
            )

        identity: ColumnMapping | None = None
        columns: "OrderedDict[str, ColumnMapping]" = OrderedDict()
        seen: Dict[str, str] = {}

        for field_obj in dataclasses.fields(entity_type):
            column_name = field_obj.metadata.get(COLUMN_KEY) or field_obj.name
            if column_name in seen:
                raise EntityConfigurationError(
                    f"Fields '{seen[column_name]}' and '{field_obj.name}' of "
                    f"'{entity_type.__name__}' both map to column '{column_name}'"
                )
            seen[column_name] = field_obj.name
            mapping = ColumnMapping(column=column_name, attribute=field_obj.name)

            if field_obj.metadata.get(IDENTITY_KEY):
                if identity is not None:
                    raise EntityConfigurationError(
                        f"Entity '{entity_type.__name__}' declares more than one identity field"
                    )
                identity = mapping
                continue
            columns[column_name] = mapping

        if identity is None:
            raise MissingIdentityError(
                f"Entity {entity_type.__name__} does not declare an identity field"
            )

        table_name = entity_type.__dict__.get(TABLE_ATTR) or entity_type.__name__
        return cls(entity_type, table_name, identity, columns)

    # ------------------------------------------------------------------ #
    # Entity access
    # ------------------------------------------------------------------ #
    def columns_of(self, entity: Any, null_policy: NullPolicy = NullPolicy.OMIT) -> Dict[str, Any]:
        """
        Return the persisted non-identity values of ``entity`` in declaration order.

        Under ``NullPolicy.OMIT`` a field holding ``None`` is left out rather than
        sent as NULL.
        """
        values: Dict[str, Any] = {}
        for name, mapping in self.columns.items():
            value = mapping.get(entity)
            if value is None and null_policy is NullPolicy.OMIT:
                continue
            values[name] = value
        return values

    def identity_value_of(self, entity: Any) -> Any:
        return self.identity.get(entity)

    def snapshot_of(self, entity: Any) -> Tuple[Any, ...]:
        return tuple(mapping.get(entity) for mapping in self.snapshot_mappings)

    def parse(self, row: Any) -> Any:
        """
        Build a new instance from a row supporting ``keys()`` and ``row[column]``.
        """
        try:
            available = set(row.keys())
        except AttributeError as exc:
            raise RowParseError(
                f"Row for table '{self.table_name}' does not support named column access"
            ) from exc

        mappings = (self.identity, *self.columns.values())
        for mapping in mappings:
            if mapping.column not in available:
                raise RowParseError(
                    f"Column '{mapping.column}' missing from row for table '{self.table_name}'"
                )

        # Bypass __init__ so fields declared with init=False are assigned too.
        instance = self.entity_type.__new__(self.entity_type)
        for mapping in mappings:
            mapping.set(instance, row[mapping.column])
        return instance


class MetadataRegistry:
    """
    Per-type metadata cache. Entries are written once and only read afterwards.
    """

    def __init__(self) -> None:
        self._metadata: Dict[type, EntityMetadata] = {}

    def get(self, entity_type: Type[Any]) -> EntityMetadata:
        cached = self._metadata.get(entity_type)
        if cached is not None:
            return cached
        return self._metadata.setdefault(entity_type, EntityMetadata.from_type(entity_type))

    def __contains__(self, entity_type: object) -> bool:
        return entity_type in self._metadata


default_registry = MetadataRegistry()
