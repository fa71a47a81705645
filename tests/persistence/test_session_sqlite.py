from typing import Optional

import pytest

from microorm.adapters import AdapterExecutionError, ConnectionConfig, SQLiteAdapter
from microorm.core import MetadataRegistry, column, entity, identity
from microorm.persistence import SessionFactory

registry = MetadataRegistry()


@entity(table="persons", registry=registry)
class Person:
    id: Optional[int] = identity()
    first_name: Optional[str] = column("first_name")
    last_name: Optional[str] = column("last_name")


def create_table(url: str, *rows) -> None:
    adapter = SQLiteAdapter()
    adapter.connect(ConnectionConfig(url=url))
    adapter.execute(
        "CREATE TABLE persons (id INTEGER PRIMARY KEY AUTOINCREMENT, "
        "first_name TEXT, last_name TEXT UNIQUE)"
    )
    for first_name, last_name in rows:
        adapter.execute(
            "INSERT INTO persons (first_name, last_name) VALUES (?, ?)", (first_name, last_name)
        )
    adapter.commit()
    adapter.close()


@pytest.fixture
def factory(tmp_path):
    url = f"sqlite:///{tmp_path / 'people.db'}"
    create_table(url, ("Ada", "Lovelace"), ("Alan", "Turing"))
    return SessionFactory.from_dsn(url, registry=registry)


def names(factory):
    with factory.create_session() as session:
        return sorted((p.id, p.first_name, p.last_name) for p in session.find(Person))


def test_persist_and_close_commits_insert(factory):
    session = factory.create_session()
    session.persist(Person(first_name="Grace", last_name="Hopper"))
    session.close()
    assert names(factory) == [
        (1, "Ada", "Lovelace"),
        (2, "Alan", "Turing"),
        (3, "Grace", "Hopper"),
    ]


def test_find_by_id_twice_returns_same_instance(factory):
    with factory.create_session() as session:
        first = session.find(Person, 2)
        second = session.find(Person, 2)
        assert first is second
        assert first.last_name == "Turing"
        assert session.find(Person, 99) is None


def test_mutating_loaded_entity_updates_row(factory):
    session = factory.create_session()
    person = session.find(Person, 2)
    person.last_name = "Church"
    session.close()
    assert names(factory)[1] == (2, "Alan", "Church")


def test_remove_deletes_row(factory):
    with factory.create_session() as session:
        people = session.find(Person)
        session.remove(people[-1])
    assert names(factory) == [(1, "Ada", "Lovelace")]


def test_reads_observe_pending_writes(factory):
    with factory.create_session() as session:
        session.persist(Person(first_name="Grace", last_name="Hopper"))
        people = session.find(Person)
        assert [p.last_name for p in people] == ["Lovelace", "Turing", "Hopper"]


def test_failed_close_rolls_back_earlier_statements(factory):
    session = factory.create_session()
    session.persist(Person(first_name="Grace", last_name="Hopper"))
    session.find(Person)
    session.persist(Person(first_name="Other", last_name="Lovelace"))
    with pytest.raises(AdapterExecutionError):
        session.close()
    assert session.is_closed
    assert names(factory) == [(1, "Ada", "Lovelace"), (2, "Alan", "Turing")]
