"""
FILE: lanes/cli/commands/boards.py
PURPOSE: Board management commands (board add, ls, show, rename, rm)
"""

from typing import Optional

import typer

from ..main import board_app, console, error_console, get_store, check_saved, print_json, print_plain
from ...core.exceptions import LanesError, InvalidInputError
from ...formatting import BoardFormatter, short_id


@board_app.command("add")
def board_add(
    name: str = typer.Argument(..., help="Board name"),
    description: Optional[str] = typer.Option(None, "--desc", "-d", help="Board description"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Create a board with TODO, DOING, and DONE columns.

    Example:
        lanes board add "Sprint 1"
        lanes board add "Home" --desc "Chores and errands"
    """
    try:
        store = get_store()
        board = store.create_board(name, description)
        check_saved(store)

        if json_output:
            print_json(board.to_json())
        elif raw:
            print_plain(f"{board.id}: {board.name}")
        else:
            console.print(f"[green]✓ Created board [bold]{short_id(board.id)}[/bold]:[/green] {board.name}")

    except InvalidInputError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except LanesError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@board_app.command("ls")
def board_ls(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List all boards.

    Example:
        lanes board ls
        lanes board ls --json
    """
    store = get_store()
    boards = store.boards

    if json_output:
        print_json(BoardFormatter.to_json_array(boards))
    elif raw:
        for board in boards:
            print_plain(f"{board.id}: {board.name}")
    else:
        if not boards:
            console.print("[dim]No boards found[/dim]")
            return
        console.print(BoardFormatter.create_boards_table(boards))
        console.print(f"\n[dim]Total: {len(boards)} board(s)[/dim]")


@board_app.command("show")
def board_show(
    board_ref: str = typer.Argument(..., help="Board id, id prefix, or name"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Show a board's columns and tasks.

    Example:
        lanes board show "Sprint 1"
    """
    try:
        store = get_store()
        board = store.find_board(board_ref)

        if json_output:
            print_json(board.to_json())
        elif raw:
            for line in BoardFormatter.to_raw_lines(board):
                print_plain(line)
        else:
            console.print(BoardFormatter.create_board_table(board))

    except LanesError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@board_app.command("rename")
def board_rename(
    board_ref: str = typer.Argument(..., help="Board id, id prefix, or name"),
    name: str = typer.Argument(..., help="New board name"),
    description: Optional[str] = typer.Option(None, "--desc", "-d", help="New description"),
):
    """
    Rename a board (and optionally replace its description).

    Example:
        lanes board rename "Sprint 1" "Sprint 2"
    """
    try:
        store = get_store()
        board = store.find_board(board_ref)
        patch = {"name": name}
        if description is not None:
            patch["description"] = description
        store.update_board(board.id, **patch)
        check_saved(store)
        console.print(f"[green]✓ Renamed board {short_id(board.id)}:[/green] {board.name}")

    except LanesError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@board_app.command("rm")
def board_rm(
    board_ref: str = typer.Argument(..., help="Board id, id prefix, or name"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
):
    """
    Delete a board with all of its columns and tasks.

    Example:
        lanes board rm "Sprint 1"
        lanes board rm 3f2a --yes
    """
    try:
        store = get_store()
        board = store.find_board(board_ref)

        if not yes:
            confirm = typer.confirm(
                f"Delete board '{board.name}' and its {board.task_count()} task(s)?"
            )
            if not confirm:
                console.print("[yellow]Cancelled[/yellow]")
                return

        store.delete_board(board.id)
        check_saved(store)
        console.print(f"[green]✓ Deleted board:[/green] {board.name}")

    except LanesError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
