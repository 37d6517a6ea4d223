"""Table engine and state management."""

from core.game.engine import TableMachine, new_table
from core.game.errors import NotFoundError, TableError, ValidationError
from core.game.events import EventType, TableEvent
from core.game.state import Phase
from core.game.table import Player, TableState, Turn
from core.game.view import TableView, project

__all__ = [
    "TableMachine",
    "new_table",
    "TableError",
    "ValidationError",
    "NotFoundError",
    "EventType",
    "TableEvent",
    "Phase",
    "Player",
    "TableState",
    "Turn",
    "TableView",
    "project",
]
