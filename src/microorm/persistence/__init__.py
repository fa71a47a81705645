"""
Persistence layer components: sessions, actions, identity map.
"""

from .actions import Action, ActionBuilder, ActionKind, ActionQueue
from .factory import SessionFactory
from .identity_map import EntityKey, IdentityMap
from .session import (
    AmbiguousResultError,
    Session,
    SessionClosedError,
    SessionError,
    SessionState,
)

__all__ = [
    "Action",
    "ActionBuilder",
    "ActionKind",
    "ActionQueue",
    "AmbiguousResultError",
    "EntityKey",
    "IdentityMap",
    "Session",
    "SessionClosedError",
    "SessionError",
    "SessionFactory",
    "SessionState",
]
