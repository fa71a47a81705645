from typing import Optional

import pytest

from microorm.core import MetadataRegistry, NullPolicy, column, entity, identity
from microorm.dialects import SQLITE
from microorm.persistence import Action, ActionBuilder, ActionKind, ActionQueue
from microorm.query import StatementCompiler

registry = MetadataRegistry()


@entity(table="persons", registry=registry)
class Person:
    id: Optional[int] = identity()
    first_name: Optional[str] = column("first_name")
    last_name: Optional[str] = column("last_name")


@pytest.fixture
def builder():
    return ActionBuilder(StatementCompiler(SQLITE))


def test_action_is_immutable():
    action = Action(ActionKind.INSERT, "INSERT INTO t DEFAULT VALUES")
    with pytest.raises(AttributeError):
        action.sql = "DELETE FROM t"


def test_queue_orders_by_kind_and_keeps_creation_order_within_kind():
    queue = ActionQueue()
    delete = Action(ActionKind.DELETE, "DELETE FROM persons WHERE id = ?", (3,))
    update = Action(ActionKind.UPDATE, "UPDATE persons SET first_name = ? WHERE id = ?", ("x", 2))
    first_insert = Action(ActionKind.INSERT, "INSERT INTO persons (first_name) VALUES (?)", ("a",))
    second_insert = Action(ActionKind.INSERT, "INSERT INTO persons (first_name) VALUES (?)", ("b",))
    for action in (delete, update, first_insert, second_insert):
        queue.append(action)

    assert list(queue) == [delete, update, first_insert, second_insert]
    assert queue.in_flush_order() == [first_insert, second_insert, update, delete]
    queue.clear()
    assert not queue
    assert len(queue) == 0


def test_insert_action_omits_none_columns(builder):
    action = builder.insert(registry.get(Person), Person(first_name="A"))
    assert action.kind is ActionKind.INSERT
    assert action.sql == "INSERT INTO persons (first_name) VALUES (?)"
    assert action.params == ("A",)


def test_insert_action_with_include_policy_sends_nulls():
    builder = ActionBuilder(StatementCompiler(SQLITE), NullPolicy.INCLUDE)
    action = builder.insert(registry.get(Person), Person(first_name="A"))
    assert action.sql == "INSERT INTO persons (first_name, last_name) VALUES (?, ?)"
    assert action.params == ("A", None)


def test_update_action_appends_identity(builder):
    action = builder.update(registry.get(Person), Person(id=2, first_name="A", last_name="B"))
    assert action.sql == "UPDATE persons SET first_name = ?, last_name = ? WHERE id = ?"
    assert action.params == ("A", "B", 2)


def test_update_action_without_columns_returns_none(builder):
    assert builder.update(registry.get(Person), Person(id=2)) is None


def test_delete_action_requires_identity(builder):
    action = builder.delete(registry.get(Person), Person(id=4))
    assert action.sql == "DELETE FROM persons WHERE id = ?"
    assert action.params == (4,)
    with pytest.raises(ValueError):
        builder.delete(registry.get(Person), Person(first_name="nobody"))
