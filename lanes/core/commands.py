"""
FILE: lanes/core/commands.py
PURPOSE: Mutation commands applied to the in-memory board collection
EXPORTS:
  - Change (dataclass describing what a command did)
  - Command (base class)
  - CreateBoard, UpdateBoard, DeleteBoard
  - AddColumn, UpdateColumn, DeleteColumn
  - AddTask, UpdateTask, DeleteTask, MoveTask
  - new_id() -> str
DEPENDENCIES:
  - dataclasses (stdlib)
  - uuid (stdlib)
  - lanes.core.models (Board, Column, Task)
NOTES:
  - apply() mutates the collection and returns a Change, or None when an id
    is unknown (not-found is a silent no-op)
  - Commands never touch Board.updated_at or persistence; the store's
    dispatcher does both after a successful apply()
  - Ids are generated when the command is built, so apply() is repeatable
    in tests with fixed ids
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .constants import DEFAULT_PRIORITY, SEED_COLUMNS
from .models import Board, Column, Task


# Change kinds
BOARD_CREATED = "board_created"
BOARD_UPDATED = "board_updated"
BOARD_DELETED = "board_deleted"
COLUMN_ADDED = "column_added"
COLUMN_UPDATED = "column_updated"
COLUMN_DELETED = "column_deleted"
TASK_ADDED = "task_added"
TASK_UPDATED = "task_updated"
TASK_DELETED = "task_deleted"
TASK_MOVED = "task_moved"

# Fields a patch may touch, per entity
BOARD_FIELDS = ("name", "description")
COLUMN_FIELDS = ("title",)
TASK_FIELDS = ("title", "description", "priority")


def new_id() -> str:
    """Fresh, never-reused entity id."""
    return uuid.uuid4().hex


@dataclass
class Change:
    """
    Description of a mutation that was applied.

    Attributes:
        kind: One of the *_CREATED / *_UPDATED / ... constants
        board_id: Board that owns the changed entity
        entity_id: Id of the board, column, or task that changed
        entity: The changed object itself (the removed one for deletions)
        touches_board: Whether the owning board's updated_at must be refreshed
    """
    kind: str
    board_id: str
    entity_id: Optional[str] = None
    entity: Any = None
    touches_board: bool = True


def _find_board(boards: List[Board], board_id: str) -> Optional[Board]:
    for board in boards:
        if board.id == board_id:
            return board
    return None


def _find_column(boards: List[Board], board_id: str, column_id: str):
    board = _find_board(boards, board_id)
    if board is None:
        return None, None
    return board, board.get_column(column_id)


def _merge(target: Any, patch: Dict[str, Any], allowed) -> None:
    for key, value in patch.items():
        if key in allowed:
            setattr(target, key, value)


class Command:
    """Base class for board mutations."""

    def apply(self, boards: List[Board], now: str) -> Optional[Change]:
        raise NotImplementedError


# --- Board Commands ---


@dataclass
class CreateBoard(Command):
    name: str
    description: str = ""
    board_id: str = field(default_factory=new_id)

    def apply(self, boards: List[Board], now: str) -> Optional[Change]:
        board = Board(
            id=self.board_id,
            name=self.name,
            description=self.description,
            columns=[Column(id=new_id(), title=title) for title in SEED_COLUMNS],
            created_at=now,
            updated_at=now,
        )
        boards.append(board)
        return Change(BOARD_CREATED, board.id, board.id, board)


@dataclass
class UpdateBoard(Command):
    board_id: str
    patch: Dict[str, Any]

    def apply(self, boards: List[Board], now: str) -> Optional[Change]:
        board = _find_board(boards, self.board_id)
        if board is None:
            return None
        _merge(board, self.patch, BOARD_FIELDS)
        return Change(BOARD_UPDATED, board.id, board.id, board)


@dataclass
class DeleteBoard(Command):
    board_id: str

    def apply(self, boards: List[Board], now: str) -> Optional[Change]:
        board = _find_board(boards, self.board_id)
        if board is None:
            return None
        boards.remove(board)
        return Change(BOARD_DELETED, board.id, board.id, board, touches_board=False)


# --- Column Commands ---


@dataclass
class AddColumn(Command):
    board_id: str
    title: str
    column_id: str = field(default_factory=new_id)

    def apply(self, boards: List[Board], now: str) -> Optional[Change]:
        board = _find_board(boards, self.board_id)
        if board is None:
            return None
        column = Column(id=self.column_id, title=self.title)
        board.columns.append(column)
        return Change(COLUMN_ADDED, board.id, column.id, column)


@dataclass
class UpdateColumn(Command):
    board_id: str
    column_id: str
    patch: Dict[str, Any]

    def apply(self, boards: List[Board], now: str) -> Optional[Change]:
        board, column = _find_column(boards, self.board_id, self.column_id)
        if column is None:
            return None
        _merge(column, self.patch, COLUMN_FIELDS)
        return Change(COLUMN_UPDATED, board.id, column.id, column)


@dataclass
class DeleteColumn(Command):
    board_id: str
    column_id: str

    def apply(self, boards: List[Board], now: str) -> Optional[Change]:
        board, column = _find_column(boards, self.board_id, self.column_id)
        if column is None:
            return None
        # Tasks go with the column
        board.columns.remove(column)
        return Change(COLUMN_DELETED, board.id, column.id, column)


# --- Task Commands ---


@dataclass
class AddTask(Command):
    board_id: str
    column_id: str
    title: str
    description: str = ""
    priority: str = DEFAULT_PRIORITY
    task_id: str = field(default_factory=new_id)

    def apply(self, boards: List[Board], now: str) -> Optional[Change]:
        board, column = _find_column(boards, self.board_id, self.column_id)
        if column is None:
            return None
        task = Task(
            id=self.task_id,
            title=self.title,
            description=self.description,
            priority=self.priority,
            created_at=now,
            updated_at=now,
        )
        column.tasks.append(task)
        return Change(TASK_ADDED, board.id, task.id, task)


@dataclass
class UpdateTask(Command):
    board_id: str
    column_id: str
    task_id: str
    patch: Dict[str, Any]

    def apply(self, boards: List[Board], now: str) -> Optional[Change]:
        board, column = _find_column(boards, self.board_id, self.column_id)
        if column is None:
            return None
        task = column.get_task(self.task_id)
        if task is None:
            return None
        _merge(task, self.patch, TASK_FIELDS)
        task.updated_at = now
        return Change(TASK_UPDATED, board.id, task.id, task)


@dataclass
class DeleteTask(Command):
    board_id: str
    column_id: str
    task_id: str

    def apply(self, boards: List[Board], now: str) -> Optional[Change]:
        board, column = _find_column(boards, self.board_id, self.column_id)
        if column is None:
            return None
        index = column.index_of(self.task_id)
        if index == -1:
            return None
        task = column.tasks.pop(index)
        return Change(TASK_DELETED, board.id, task.id, task)


@dataclass
class MoveTask(Command):
    """
    Atomic transfer of a task between (or within) columns.

    dest_index is read against the destination sequence *after* the task
    has been removed from its source, and is clamped to [0, len(dest)].
    """
    board_id: str
    source_column_id: str
    dest_column_id: str
    task_id: str
    dest_index: int

    def apply(self, boards: List[Board], now: str) -> Optional[Change]:
        board = _find_board(boards, self.board_id)
        if board is None:
            return None
        source = board.get_column(self.source_column_id)
        dest = board.get_column(self.dest_column_id)
        if source is None or dest is None:
            return None

        index = source.index_of(self.task_id)
        if index == -1:
            return None

        task = source.tasks.pop(index)
        task.updated_at = now
        insert_at = max(0, min(self.dest_index, len(dest.tasks)))
        dest.tasks.insert(insert_at, task)
        return Change(TASK_MOVED, board.id, task.id, task)
