"""
People example: seed a table, then list, remove and rename through sessions.
"""

from __future__ import annotations

from typing import List

from microorm import Session, SessionFactory

from .models import Person

SCHEMA = (
    "CREATE TABLE IF NOT EXISTS persons ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT, first_name TEXT, last_name TEXT)"
)

SAMPLE_PEOPLE = [
    ("Ada", "Lovelace"),
    ("Alan", "Turing"),
    ("Grace", "Hopper"),
]


def ensure_schema(session: Session) -> None:
    session.adapter.execute(SCHEMA)


def seed_sample_data(factory: SessionFactory) -> None:
    with factory.create_session() as session:
        ensure_schema(session)
        for first_name, last_name in SAMPLE_PEOPLE:
            session.persist(Person(first_name=first_name, last_name=last_name))


def rename_and_prune(factory: SessionFactory, *, person_id: int, last_name: str) -> None:
    with factory.create_session() as session:
        people = session.find(Person)
        if people:
            session.remove(people[-1])
        person = session.find(Person, person_id)
        if person is not None:
            person.last_name = last_name


def list_people(factory: SessionFactory) -> List[str]:
    with factory.create_session() as session:
        return [f"{person.first_name} {person.last_name}" for person in session.find(Person)]


def run_demo(dsn: str = "sqlite:///people_demo.db") -> List[str]:
    """
    Run the demo against a file database; every step opens its own session.
    """
    factory = SessionFactory.from_dsn(dsn)
    seed_sample_data(factory)
    rename_and_prune(factory, person_id=2, last_name="Renamed")
    return list_people(factory)


if __name__ == "__main__":
    for name in run_demo():
        print(name)
