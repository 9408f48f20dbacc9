"""
FILE: lanes/cli/commands/tasks.py
PURPOSE: Task management commands (task add, edit, rm, mv) and drag replay
"""

from typing import Optional

import typer

from ..main import app, task_app, console, error_console, get_store, check_saved, print_json, print_plain
from ...core.exceptions import LanesError
from ...dnd import DragCoordinator, SpatialRegistry, drop_point, layout_board, task_center
from ...formatting import short_id


@task_app.command("add")
def task_add(
    board_ref: str = typer.Argument(..., help="Board id, id prefix, or name"),
    column_ref: str = typer.Argument(..., help="Column id, id prefix, or title"),
    title: str = typer.Argument(..., help="Task title"),
    description: Optional[str] = typer.Option(None, "--desc", "-d", help="Task description"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="low, medium, or high"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Append a task to the bottom of a column.

    Example:
        lanes task add "Sprint 1" TODO "Write docs"
        lanes task add "Sprint 1" TODO "Fix login" --priority high
    """
    try:
        store = get_store()
        board = store.find_board(board_ref)
        column = store.find_column(board, column_ref)
        task = store.add_task(board.id, column.id, title, description, priority)
        check_saved(store)

        if json_output:
            print_json(task.to_json())
        elif raw:
            print_plain(f"{task.id}: {task.title}")
        else:
            console.print(f"[green]✓ Created task [bold]{short_id(task.id)}[/bold]:[/green] {task.title}")

    except LanesError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@task_app.command("edit")
def task_edit(
    board_ref: str = typer.Argument(..., help="Board id, id prefix, or name"),
    task_ref: str = typer.Argument(..., help="Task id or id prefix"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title"),
    description: Optional[str] = typer.Option(None, "--desc", "-d", help="New description"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="low, medium, or high"),
):
    """
    Change a task's title, description, or priority.

    Example:
        lanes task edit "Sprint 1" 9c1e --priority low
    """
    patch = {}
    if title is not None:
        patch["title"] = title
    if description is not None:
        patch["description"] = description
    if priority is not None:
        patch["priority"] = priority
    if not patch:
        error_console.print("[red]Error:[/red] Nothing to change (use --title, --desc, or --priority)")
        raise typer.Exit(1)

    try:
        store = get_store()
        board = store.find_board(board_ref)
        column, task = store.find_task(board, task_ref)
        store.update_task(board.id, column.id, task.id, **patch)
        check_saved(store)
        console.print(f"[green]✓ Updated task {short_id(task.id)}:[/green] {task.title}")

    except LanesError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@task_app.command("rm")
def task_rm(
    board_ref: str = typer.Argument(..., help="Board id, id prefix, or name"),
    task_ref: str = typer.Argument(..., help="Task id or id prefix"),
):
    """
    Delete a task.

    Example:
        lanes task rm "Sprint 1" 9c1e
    """
    try:
        store = get_store()
        board = store.find_board(board_ref)
        column, task = store.find_task(board, task_ref)
        store.delete_task(board.id, column.id, task.id)
        check_saved(store)
        console.print(f"[green]✓ Deleted task:[/green] {task.title}")

    except LanesError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@task_app.command("mv")
def task_mv(
    board_ref: str = typer.Argument(..., help="Board id, id prefix, or name"),
    task_ref: str = typer.Argument(..., help="Task id or id prefix"),
    column_ref: str = typer.Argument(..., help="Destination column id, id prefix, or title"),
    index: Optional[int] = typer.Option(
        None, "--index", "-i",
        help="Position in the destination after the task is taken out (default: bottom)",
    ),
):
    """
    Move a task to a column, optionally at a given position.

    Example:
        lanes task mv "Sprint 1" 9c1e DOING
        lanes task mv "Sprint 1" 9c1e TODO --index 0
    """
    try:
        store = get_store()
        board = store.find_board(board_ref)
        source, task = store.find_task(board, task_ref)
        dest = store.find_column(board, column_ref)
        dest_index = index if index is not None else len(dest.tasks)
        store.move_task(board.id, source.id, dest.id, task.id, dest_index)
        check_saved(store)
        console.print(
            f"[green]✓ Moved task {short_id(task.id)}[/green] to {dest.title} "
            f"at position {dest.index_of(task.id)}"
        )

    except LanesError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def drag(
    board_ref: str = typer.Argument(..., help="Board id, id prefix, or name"),
    task_ref: str = typer.Argument(..., help="Task id or id prefix"),
    column_ref: str = typer.Argument(..., help="Column to drop into"),
    slot: int = typer.Option(
        ..., "--slot", "-s",
        help="Gap to drop into, counted on the column as it looks now (0 = top)",
    ),
):
    """
    Replay a pointer drag of a task onto a column gap.

    Unlike 'task mv', the drop goes through the drag coordinator, so drops
    right in front of or behind the task itself are ignored.

    Example:
        lanes drag "Sprint 1" 9c1e DOING --slot 0
    """
    try:
        store = get_store()
        board = store.find_board(board_ref)
        source, task = store.find_task(board, task_ref)
        target = store.find_column(board, column_ref)

        registry = SpatialRegistry()
        layout_board(registry, board)
        coordinator = DragCoordinator(registry)

        grab = task_center(board, source.id, task.id)
        release = drop_point(board, target.id, slot)
        coordinator.start(task, source.id, grab.x, grab.y)
        coordinator.move(release.x, release.y)
        moved = coordinator.end(release.x, release.y, store.move_handler(board.id))

        if not moved:
            console.print("[dim]Drop ignored: task would stay where it is[/dim]")
            return
        check_saved(store)
        console.print(
            f"[green]✓ Dropped task {short_id(task.id)}[/green] in {target.title} "
            f"at position {target.index_of(task.id)}"
        )

    except LanesError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
