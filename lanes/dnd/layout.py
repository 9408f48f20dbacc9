"""
FILE: lanes/dnd/layout.py
PURPOSE: Deterministic board layout for headless drags (CLI, tests)
EXPORTS:
  - layout_column(registry, column, position) -> None
  - layout_board(registry, board) -> None
  - task_center(board, column_id, task_id) -> Point
  - drop_point(board, column_id, slot) -> Point
NOTES:
  - Columns sit side by side, tasks stack top to bottom in fixed rows
  - Stands in for real layout measurements when there is no screen
"""

from .geometry import Point, Rect
from .registry import SpatialRegistry


COLUMN_WIDTH = 300
COLUMN_GAP = 20
HEADER_HEIGHT = 40
ROW_HEIGHT = 60
FOOTER_HEIGHT = 60


def _column_x(position: int) -> float:
    return position * (COLUMN_WIDTH + COLUMN_GAP)


def layout_column(registry: SpatialRegistry, column, position: int) -> None:
    """Register column as the position-th column from the left."""
    x = _column_x(position)
    task_rects = {
        task.id: Rect(x, HEADER_HEIGHT + i * ROW_HEIGHT, COLUMN_WIDTH, ROW_HEIGHT)
        for i, task in enumerate(column.tasks)
    }
    height = HEADER_HEIGHT + len(column.tasks) * ROW_HEIGHT + FOOTER_HEIGHT
    registry.register_column(
        column.id,
        column.tasks,
        rect=Rect(x, 0, COLUMN_WIDTH, height),
        task_rects=task_rects,
    )


def layout_board(registry: SpatialRegistry, board) -> None:
    for position, column in enumerate(board.columns):
        layout_column(registry, column, position)


def _position_of(board, column_id: str) -> int:
    for position, column in enumerate(board.columns):
        if column.id == column_id:
            return position
    raise ValueError(f"Column {column_id} is not on board {board.id}")


def task_center(board, column_id: str, task_id: str) -> Point:
    """Where a pointer grabbing the task would be."""
    position = _position_of(board, column_id)
    column = board.columns[position]
    row = column.index_of(task_id)
    if row == -1:
        raise ValueError(f"Task {task_id} is not in column {column_id}")
    return Point(
        _column_x(position) + COLUMN_WIDTH / 2,
        HEADER_HEIGHT + row * ROW_HEIGHT + ROW_HEIGHT / 2,
    )


def drop_point(board, column_id: str, slot: int) -> Point:
    """
    A point that resolves to insertion index `slot` in the column.

    The row boundary sits below the midpoint of every task before the slot
    and above the midpoint of every task after it.
    """
    position = _position_of(board, column_id)
    column = board.columns[position]
    slot = max(0, min(slot, len(column.tasks)))
    return Point(_column_x(position) + COLUMN_WIDTH / 2, HEADER_HEIGHT + slot * ROW_HEIGHT)
