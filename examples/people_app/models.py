"""
Data models for the microorm people example.
"""

from __future__ import annotations

from typing import Optional

from microorm import column, entity, identity


@entity(table="persons")
class Person:
    id: Optional[int] = identity()
    first_name: Optional[str] = column("first_name")
    last_name: Optional[str] = column("last_name")
