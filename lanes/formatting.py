"""
FILE: lanes/formatting.py
PURPOSE: Shared formatting utilities for CLI output
EXPORTS:
  - BoardFormatter: Class for formatting boards and tasks
  - short_id: Abbreviate an entity id for display
DEPENDENCIES:
  - rich (for table formatting)
  - json (for JSON serialization)
  - typing (type hints)
  - lanes.core.models (Board, Task)
NOTES:
  - Centralized formatting logic for consistency
  - Ids are shown shortened; the CLI accepts any unique prefix
"""

import json
from typing import List

from rich.table import Table

from .core.models import Board, Task


SHORT_ID_LENGTH = 8

PRIORITY_STYLES = {
    "high": "red",
    "medium": "yellow",
    "low": "green",
}


def short_id(entity_id: str) -> str:
    return entity_id[:SHORT_ID_LENGTH]


class BoardFormatter:
    """Centralized board display formatting."""

    @staticmethod
    def create_boards_table(boards: List[Board], title: str = "Boards") -> Table:
        """Overview table: one row per board with column and task counts."""
        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Columns", justify="right")
        table.add_column("Tasks", justify="right")
        table.add_column("Updated", style="dim")

        for board in boards:
            updated = board.updated_at.split("T")[0] if board.updated_at else ""
            table.add_row(
                short_id(board.id),
                board.name,
                str(len(board.columns)),
                str(board.task_count()),
                updated,
            )

        return table

    @staticmethod
    def create_board_table(board: Board) -> Table:
        """
        Kanban view of a board: one table column per board column.

        Row i holds the i-th task of every column, so vertical order on
        screen is the sequence order.
        """
        table = Table(title=board.name, caption=board.description or None, show_lines=False)
        for column in board.columns:
            table.add_column(
                f"{column.title} [dim]({len(column.tasks)})[/dim]",
                header_style="bold cyan",
                overflow="fold",
            )

        depth = max((len(c.tasks) for c in board.columns), default=0)
        for row in range(depth):
            cells = []
            for column in board.columns:
                if row < len(column.tasks):
                    cells.append(BoardFormatter.task_cell(column.tasks[row]))
                else:
                    cells.append("")
            table.add_row(*cells)

        return table

    @staticmethod
    def task_cell(task: Task) -> str:
        style = PRIORITY_STYLES.get(task.priority, "white")
        return f"[{style}]●[/{style}] {task.title} [dim]{short_id(task.id)}[/dim]"

    @staticmethod
    def to_json_array(boards: List[Board]) -> str:
        return json.dumps([b.to_dict() for b in boards], indent=2)

    @staticmethod
    def to_raw_lines(board: Board) -> List[str]:
        """
        Plain text lines, one per column header and one per task.

        Args:
            board: Board to format

        Returns:
            List of formatted strings
        """
        lines = []
        for column in board.columns:
            lines.append(f"{column.title} ({short_id(column.id)})")
            for index, task in enumerate(column.tasks):
                lines.append(f"  {index}: {task.id} [{task.priority}] {task.title}")
        return lines
