"""
Test suite for the board store

Tests CRUD, the move transaction, dispatcher bookkeeping, and lookups:
- Boards seeded with TODO/DOING/DONE
- Unknown ids are silent no-ops
- updated_at refresh on every mutation
- Task conservation and id uniqueness under add/delete/move
"""

import asyncio
import random
from datetime import datetime

import pytest

from lanes.core import commands
from lanes.core.exceptions import (
    BoardNotFoundError,
    ColumnNotFoundError,
    InvalidInputError,
    TaskNotFoundError,
)
from lanes.core.store import BoardStore


def titles(column):
    return [t.title for t in column.tasks]


@pytest.fixture
def board(store):
    return store.create_board("Sprint 1", "First sprint")


@pytest.fixture
def todo(board):
    return board.columns[0]


@pytest.fixture
def doing(board):
    return board.columns[1]


# --- Boards ---

def test_create_board_seeds_columns(store):
    """Test new boards start with TODO, DOING, DONE and matching timestamps."""
    board = store.create_board("  Sprint 1  ", "First sprint")

    assert board.name == "Sprint 1"
    assert board.description == "First sprint"
    assert [c.title for c in board.columns] == ["TODO", "DOING", "DONE"]
    assert all(c.tasks == [] for c in board.columns)
    assert board.created_at == board.updated_at
    assert store.boards == [board]


def test_create_board_ids_are_unique(store):
    """Test board and column ids are never shared."""
    first = store.create_board("A")
    second = store.create_board("B")

    assert first.id != second.id
    column_ids = [c.id for b in store.boards for c in b.columns]
    assert len(column_ids) == len(set(column_ids))


def test_create_board_empty_name_rejected(store):
    """Test whitespace-only board names raise InvalidInputError."""
    with pytest.raises(InvalidInputError):
        store.create_board("   ")
    assert store.boards == []


def test_update_board_merges_fields(store, board):
    """Test update_board changes only the given fields."""
    store.update_board(board.id, name="Sprint 2")

    assert board.name == "Sprint 2"
    assert board.description == "First sprint"


def test_update_board_unknown_field_rejected(store, board):
    """Test patches can't overwrite structural fields."""
    with pytest.raises(InvalidInputError):
        store.update_board(board.id, columns=[])


def test_delete_board_clears_selection(store, board):
    """Test deleting the selected board clears current_board."""
    store.select_board(board.id)

    store.delete_board(board.id)

    assert store.boards == []
    assert store.current_board is None


def test_delete_board_keeps_other_selection(store, board):
    """Test deleting another board leaves the selection alone."""
    other = store.create_board("Other")
    store.select_board(board.id)

    store.delete_board(other.id)

    assert store.current_board is board


def test_delete_board_unknown_is_noop(store, board):
    """Test deleting a missing board does nothing."""
    store.delete_board("missing")

    assert store.boards == [board]


def test_select_board(store, board):
    """Test selecting by id, and None for unknown ids."""
    assert store.select_board(board.id) is board
    assert store.current_board is board

    assert store.select_board("missing") is None
    assert store.current_board is None


# --- Columns ---

def test_add_column_appends(store, board):
    """Test new columns go to the right end with no tasks."""
    column = store.add_column(board.id, "REVIEW")

    assert board.columns[-1] is column
    assert column.tasks == []


def test_add_column_unknown_board(store):
    """Test adding to a missing board returns None."""
    assert store.add_column("missing", "REVIEW") is None


def test_update_column_title(store, board, doing):
    """Test renaming a column."""
    store.update_column(board.id, doing.id, title="IN PROGRESS")

    assert doing.title == "IN PROGRESS"


def test_delete_column_cascades(store, board, todo):
    """Test deleting a column drops its tasks."""
    store.add_task(board.id, todo.id, "A")

    store.delete_column(board.id, todo.id)

    assert todo not in board.columns
    assert board.task_count() == 0


def test_delete_column_twice_is_safe(store, board, todo):
    """Test a second delete of the same column is a no-op."""
    store.delete_column(board.id, todo.id)
    store.delete_column(board.id, todo.id)

    assert [c.title for c in board.columns] == ["DOING", "DONE"]


# --- Tasks ---

def test_add_task_defaults(store, board, todo):
    """Test new tasks get medium priority, empty description, timestamps."""
    task = store.add_task(board.id, todo.id, "Write docs")

    assert todo.tasks == [task]
    assert task.priority == "medium"
    assert task.description == ""
    assert task.created_at == task.updated_at is not None


def test_add_task_priority_validated(store, board, todo):
    """Test priorities outside low/medium/high are rejected."""
    with pytest.raises(InvalidInputError):
        store.add_task(board.id, todo.id, "A", priority="urgent")

    task = store.add_task(board.id, todo.id, "B", priority="HIGH")
    assert task.priority == "high"


def test_add_task_unknown_column(store, board):
    """Test adding to a missing column returns None and changes nothing."""
    before = board.updated_at

    assert store.add_task(board.id, "missing", "A") is None
    assert board.updated_at == before


def test_update_task_refreshes_timestamp(store, board, todo):
    """Test update_task merges fields and bumps task.updated_at."""
    task = store.add_task(board.id, todo.id, "A")
    created = task.updated_at

    store.update_task(board.id, todo.id, task.id, title="A2", priority="low")

    assert task.title == "A2"
    assert task.priority == "low"
    assert task.updated_at > created


def test_update_task_wrong_column_is_noop(store, board, todo, doing):
    """Test tasks are located within the given column only."""
    task = store.add_task(board.id, todo.id, "A")

    store.update_task(board.id, doing.id, task.id, title="changed")

    assert task.title == "A"


def test_delete_task_twice_is_safe(store, board, todo):
    """Test a second delete of the same task is a no-op."""
    a = store.add_task(board.id, todo.id, "A")
    store.add_task(board.id, todo.id, "B")

    store.delete_task(board.id, todo.id, a.id)
    store.delete_task(board.id, todo.id, a.id)

    assert titles(todo) == ["B"]


# --- Move ---

def test_move_across_columns(store, board, todo, doing):
    """Test B from TODO to DOING at index 0."""
    for title in "ABC":
        store.add_task(board.id, todo.id, title)
    b = todo.tasks[1]
    before = board.updated_at

    store.move_task(board.id, todo.id, doing.id, b.id, 0)

    assert titles(todo) == ["A", "C"]
    assert titles(doing) == ["B"]
    assert board.updated_at > before
    assert b.updated_at == board.updated_at


def test_move_same_column_uses_post_removal_index(store, board, todo):
    """Test moving A to index 1 of [B, C] yields [B, A, C]."""
    for title in "ABC":
        store.add_task(board.id, todo.id, title)
    a = todo.tasks[0]

    store.move_task(board.id, todo.id, todo.id, a.id, 1)

    assert titles(todo) == ["B", "A", "C"]


def test_move_index_is_clamped(store, board, todo, doing):
    """Test out-of-range destination indices clamp to the ends."""
    a = store.add_task(board.id, todo.id, "A")
    b = store.add_task(board.id, todo.id, "B")
    store.add_task(board.id, doing.id, "X")

    store.move_task(board.id, todo.id, doing.id, a.id, 99)
    store.move_task(board.id, todo.id, doing.id, b.id, -5)

    assert titles(doing) == ["B", "X", "A"]


def test_move_missing_task_is_noop(store, board, todo, doing):
    """Test moving an absent task changes nothing."""
    store.add_task(board.id, todo.id, "A")
    before = board.updated_at

    store.move_task(board.id, doing.id, todo.id, todo.tasks[0].id, 0)

    assert titles(todo) == ["A"]
    assert board.updated_at == before


def test_move_to_missing_column_keeps_task(store, board, todo):
    """Test an unknown destination doesn't remove the task from its source."""
    a = store.add_task(board.id, todo.id, "A")

    store.move_task(board.id, todo.id, "missing", a.id, 0)

    assert todo.tasks == [a]


def test_random_operations_conserve_tasks(store, board):
    """Test ids stay unique and moves never create or destroy tasks."""
    rng = random.Random(7)
    columns = board.columns
    live = []

    for step in range(300):
        op = rng.choice(["add", "add", "move", "move", "delete"])
        if op == "add" or not live:
            column = rng.choice(columns)
            task = store.add_task(board.id, column.id, f"T{step}")
            live.append(task.id)
        elif op == "move":
            task_id = rng.choice(live)
            source = next(c for c in columns if c.index_of(task_id) != -1)
            dest = rng.choice(columns)
            before = board.task_count()
            store.move_task(board.id, source.id, dest.id, task_id, rng.randint(-1, 10))
            assert board.task_count() == before
            assert dest.index_of(task_id) != -1
        else:
            task_id = rng.choice(live)
            source = next(c for c in columns if c.index_of(task_id) != -1)
            store.delete_task(board.id, source.id, task_id)
            live.remove(task_id)

        ids = [t.id for c in columns for t in c.tasks]
        assert len(ids) == len(set(ids))
        assert sorted(ids) == sorted(live)


# --- Dispatcher ---

def test_every_mutation_refreshes_board_updated_at(store, board, todo):
    """Test column and task mutations bump the board timestamp."""
    stamps = [board.updated_at]

    column = store.add_column(board.id, "REVIEW")
    stamps.append(board.updated_at)
    task = store.add_task(board.id, todo.id, "A")
    stamps.append(board.updated_at)
    store.update_task(board.id, todo.id, task.id, title="B")
    stamps.append(board.updated_at)
    store.move_task(board.id, todo.id, column.id, task.id, 0)
    stamps.append(board.updated_at)
    store.delete_task(board.id, column.id, task.id)
    stamps.append(board.updated_at)
    store.delete_column(board.id, column.id)
    stamps.append(board.updated_at)

    assert stamps == sorted(stamps)
    assert len(set(stamps)) == len(stamps)


def test_timestamps_strictly_increase_with_frozen_clock(memory):
    """Test a clock that never moves still yields increasing stamps."""
    frozen = datetime(2025, 1, 1, 12, 0, 0)
    store = BoardStore(memory, clock=lambda: frozen)
    board = store.create_board("B")
    created = board.updated_at

    store.add_column(board.id, "X")

    assert board.updated_at > created
    assert board.created_at == "2025-01-01T12:00:00.000000"


def test_clock_behind_loaded_snapshot_never_moves_backwards(memory):
    """Test a later session with an earlier clock still stamps forwards."""
    first = BoardStore(memory, clock=lambda: datetime(2026, 11, 1, 1, 30))
    saved = first.create_board("B")

    second = BoardStore(memory, clock=lambda: datetime(2026, 11, 1, 1, 10))
    asyncio.run(second.load())
    board = second.get_board(saved.id)
    second.add_task(board.id, board.columns[0].id, "A")

    assert board.updated_at > saved.updated_at
    assert board.updated_at == "2026-11-01T01:30:00.000001"


def test_default_clock_is_utc(store):
    """Test default stamps carry an explicit UTC offset."""
    board = store.create_board("B")

    assert board.created_at.endswith("+00:00")


def test_last_change_and_subscribers(store, board, todo):
    """Test listeners get a Change per applied mutation only."""
    seen = []
    unsubscribe = store.subscribe(seen.append)

    task = store.add_task(board.id, todo.id, "A")
    store.delete_task(board.id, todo.id, "missing")

    assert [c.kind for c in seen] == [commands.TASK_ADDED]
    assert seen[0].entity is task
    assert store.last_change is seen[0]

    unsubscribe()
    store.delete_task(board.id, todo.id, task.id)
    assert len(seen) == 1
    assert store.last_change.kind == commands.TASK_DELETED


def test_mutation_saves_snapshot(store, memory, board, todo):
    """Test each mutation writes the snapshot when no loop is running."""
    store.add_task(board.id, todo.id, "A")

    assert '"A"' in memory.get("kanban_data")


def test_select_board_does_not_save(memory):
    """Test read-only selection doesn't write."""
    store = BoardStore(memory)
    board = store.create_board("B")
    memory.data.clear()

    store.select_board(board.id)

    assert memory.data == {}


def test_apply_command_directly():
    """Test commands are plain objects usable without a store."""
    boards = []
    change = commands.CreateBoard(name="X", board_id="b1").apply(boards, "2025-01-01T00:00:00")

    assert change.kind == commands.BOARD_CREATED
    assert boards[0].id == "b1"
    assert commands.DeleteColumn("b1", "missing").apply(boards, "now") is None


# --- Lookups ---

def test_find_board_by_name_id_and_prefix(store, board):
    """Test find_board accepts id, case-insensitive name, or id prefix."""
    assert store.find_board(board.id) is board
    assert store.find_board("sprint 1") is board
    assert store.find_board(board.id[:6]) is board

    with pytest.raises(BoardNotFoundError):
        store.find_board("nope")


def test_find_column_and_task(store, board, doing):
    """Test column by title and task by id prefix."""
    task = store.add_task(board.id, doing.id, "A")

    assert store.find_column(board, "doing") is doing
    assert store.find_task(board, task.id[:8]) == (doing, task)

    with pytest.raises(ColumnNotFoundError):
        store.find_column(board, "BLOCKED")
    with pytest.raises(TaskNotFoundError):
        store.find_task(board, "zzzz")
