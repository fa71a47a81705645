"""
Placeholder conventions of the supported backends.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Dialect:
    """
    Name and DB-API parameter style of a backend.

    Only the positional placeholder differs between backends; identifiers
    are rendered as declared.
    """

    name: str
    param_style: str
    placeholder: str

    def parameter_placeholder(self, position: int | None = None) -> str:
        return self.placeholder


SQLITE = Dialect(name="sqlite", param_style="qmark", placeholder="?")
POSTGRES = Dialect(name="postgresql", param_style="format", placeholder="%s")
