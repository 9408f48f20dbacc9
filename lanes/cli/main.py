"""
FILE: lanes/cli/main.py
PURPOSE: Typer-based CLI for one-shot board management commands
EXPORTS:
  - app (Typer application)
  - board_app, column_app, task_app (sub-command groups)
  - main() (entry point)
  - get_store() -> BoardStore loaded from disk
  - check_saved(store) -> None (exit 1 if the last save failed)
  - print_json(text) / print_plain(text)
DEPENDENCIES:
  - typer (CLI framework)
  - rich (formatted output)
  - lanes.core.store (BoardStore)
  - lanes.logging_setup (RichHandler logging)
NOTES:
  - Listing/creation commands support --json and --raw flags
  - Error messages go to stderr
  - Exit codes: 0=success, 1=error
  - Boards, columns, and tasks can be referenced by id or unique id prefix;
    boards and columns also by name/title (case-insensitive)
"""

import sys

# Fix Windows console encoding for Unicode characters
if sys.platform == "win32":
    import io
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

import typer
from rich.console import Console

from ..core.store import BoardStore
from ..logging_setup import setup_logging

# Typer app setup
app = typer.Typer(
    name="lanes",
    help="Kanban boards with ordered columns and drag-and-drop moves",
    add_completion=False,
)

board_app = typer.Typer(name="board", help="Board management commands")
column_app = typer.Typer(name="column", help="Column management commands")
task_app = typer.Typer(name="task", help="Task management commands")
app.add_typer(board_app, name="board")
app.add_typer(column_app, name="column")
app.add_typer(task_app, name="task")

# Rich console for formatted output
console = Console()
error_console = Console(stderr=True)

# Version
__version__ = "0.1.0"


@app.callback(invoke_without_command=True)
def default_command(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """
    Configure logging; show help when no command is given.
    """
    setup_logging(verbose)
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help(), markup=False, highlight=False)


def get_store() -> BoardStore:
    """Load the board collection from the default data file."""
    store = BoardStore.open()
    if store.error:
        error_console.print(f"[yellow]Warning:[/yellow] {store.error}")
    return store


def check_saved(store: BoardStore) -> None:
    """Report a failed save. The change itself is not undone."""
    if store.error:
        error_console.print(f"[red]Error:[/red] {store.error}")
        raise typer.Exit(1)


def print_json(text: str) -> None:
    console.print_json(text)


def print_plain(text: str) -> None:
    # User text may contain [brackets]; never treat it as markup
    console.print(text, markup=False, highlight=False, soft_wrap=True)


# Import command modules to register commands with the apps
# Commands are decorated with @app.command() etc. in their modules
from .commands import (
    # System commands
    version,
    # Board commands
    board_add,
    board_ls,
    board_show,
    board_rename,
    board_rm,
    # Column commands
    column_add,
    column_rename,
    column_rm,
    # Task commands
    task_add,
    task_edit,
    task_rm,
    task_mv,
    drag,
)


def main():
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
