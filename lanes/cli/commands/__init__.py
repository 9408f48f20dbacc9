"""
FILE: lanes/cli/commands/__init__.py
PURPOSE: CLI command modules
"""

# Export all command handlers for easy importing
from .boards import (
    board_add,
    board_ls,
    board_show,
    board_rename,
    board_rm,
)
from .columns import (
    column_add,
    column_rename,
    column_rm,
)
from .tasks import (
    task_add,
    task_edit,
    task_rm,
    task_mv,
    drag,
)
from .system import (
    version,
)

__all__ = [
    "board_add",
    "board_ls",
    "board_show",
    "board_rename",
    "board_rm",
    "column_add",
    "column_rename",
    "column_rm",
    "task_add",
    "task_edit",
    "task_rm",
    "task_mv",
    "drag",
    "version",
]
