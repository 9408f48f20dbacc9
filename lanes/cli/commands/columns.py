"""
FILE: lanes/cli/commands/columns.py
PURPOSE: Column management commands (column add, rename, rm)
"""

import typer

from ..main import column_app, console, error_console, get_store, check_saved, print_json, print_plain
from ...core.exceptions import LanesError
from ...formatting import short_id


@column_app.command("add")
def column_add(
    board_ref: str = typer.Argument(..., help="Board id, id prefix, or name"),
    title: str = typer.Argument(..., help="Column title"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Append a column to the right end of a board.

    Example:
        lanes column add "Sprint 1" "REVIEW"
    """
    try:
        store = get_store()
        board = store.find_board(board_ref)
        column = store.add_column(board.id, title)
        check_saved(store)

        if json_output:
            print_json(column.to_json())
        elif raw:
            print_plain(f"{column.id}: {column.title}")
        else:
            console.print(f"[green]✓ Added column [bold]{short_id(column.id)}[/bold]:[/green] {column.title}")

    except LanesError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@column_app.command("rename")
def column_rename(
    board_ref: str = typer.Argument(..., help="Board id, id prefix, or name"),
    column_ref: str = typer.Argument(..., help="Column id, id prefix, or title"),
    title: str = typer.Argument(..., help="New column title"),
):
    """
    Rename a column.

    Example:
        lanes column rename "Sprint 1" DOING "IN PROGRESS"
    """
    try:
        store = get_store()
        board = store.find_board(board_ref)
        column = store.find_column(board, column_ref)
        store.update_column(board.id, column.id, title=title)
        check_saved(store)
        console.print(f"[green]✓ Renamed column {short_id(column.id)}:[/green] {column.title}")

    except LanesError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@column_app.command("rm")
def column_rm(
    board_ref: str = typer.Argument(..., help="Board id, id prefix, or name"),
    column_ref: str = typer.Argument(..., help="Column id, id prefix, or title"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
):
    """
    Delete a column and every task in it.

    Example:
        lanes column rm "Sprint 1" DONE --yes
    """
    try:
        store = get_store()
        board = store.find_board(board_ref)
        column = store.find_column(board, column_ref)

        if not yes:
            confirm = typer.confirm(
                f"Delete column '{column.title}' and its {len(column.tasks)} task(s)?"
            )
            if not confirm:
                console.print("[yellow]Cancelled[/yellow]")
                return

        store.delete_column(board.id, column.id)
        check_saved(store)
        console.print(f"[green]✓ Deleted column:[/green] {column.title}")

    except LanesError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
