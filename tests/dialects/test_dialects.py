import dataclasses

import pytest

from microorm.adapters import PostgresAdapter, SQLiteAdapter
from microorm.dialects import POSTGRES, SQLITE


def test_sqlite_dialect_uses_qmark():
    assert SQLITE.name == "sqlite"
    assert SQLITE.param_style == "qmark"
    assert SQLITE.parameter_placeholder() == "?"


def test_postgres_dialect_uses_percent_placeholder():
    assert POSTGRES.name == "postgresql"
    assert POSTGRES.param_style == "format"
    assert POSTGRES.parameter_placeholder(3) == "%s"


def test_adapters_carry_their_dialect():
    assert SQLiteAdapter().dialect is SQLITE
    assert PostgresAdapter().dialect is POSTGRES


def test_dialects_are_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        SQLITE.placeholder = "%s"
