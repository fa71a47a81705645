"""
Declaration helpers turning dataclasses into mapped entities.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, Optional, TypeVar, overload

from .metadata import (
    COLUMN_KEY,
    IDENTITY_KEY,
    TABLE_ATTR,
    MetadataRegistry,
    default_registry,
)

T = TypeVar("T", bound=type)


def identity(name: Optional[str] = None, *, default: Any = None) -> Any:
    """
    Mark a dataclass field as the identity column, optionally renaming it.
    """
    return dataclasses.field(default=default, metadata={IDENTITY_KEY: True, COLUMN_KEY: name})


def column(name: Optional[str] = None, *, default: Any = None) -> Any:
    """
    Map a dataclass field to an explicitly named column.
    """
    return dataclasses.field(default=default, metadata={COLUMN_KEY: name})


@overload
def entity(cls: T) -> T: ...


@overload
def entity(
    cls: None = None, *, table: Optional[str] = None, registry: Optional[MetadataRegistry] = None
) -> Callable[[T], T]: ...


def entity(cls=None, *, table=None, registry=None):
    """
    Class decorator declaring a mapped entity.

    Usage::

        @entity(table="persons")
        class Person:
            id: int | None = identity()
            first_name: str | None = column("first_name")

    The class is turned into a dataclass when it is not one already, and its
    metadata is derived and registered immediately, so configuration errors
    surface at import time.
    """

    def wrap(target: T) -> T:
        if not dataclasses.is_dataclass(target):
            target = dataclasses.dataclass(target)
        if table:
            setattr(target, TABLE_ATTR, table)
        (registry if registry is not None else default_registry).get(target)
        return target

    if cls is not None:
        return wrap(cls)
    return wrap
