"""
FILE: lanes/core/store.py
PURPOSE: Board store - owns all board state, applies mutations, persists them
EXPORTS:
  - BoardStore (class)
    - create_board(name, description) -> Board
    - update_board(board_id, **patch) -> Board | None
    - delete_board(board_id) -> None
    - select_board(board_id) -> Board | None
    - add_column(board_id, title) -> Column | None
    - update_column(board_id, column_id, **patch) -> None
    - delete_column(board_id, column_id) -> None
    - add_task(board_id, column_id, title, description, priority) -> Task | None
    - update_task(board_id, column_id, task_id, **patch) -> None
    - delete_task(board_id, column_id, task_id) -> None
    - move_task(board_id, source_column_id, dest_column_id, task_id, dest_index) -> None
    - move_handler(board_id) -> callable for DragCoordinator.end()
    - load() / save() / flush() (coroutines)
    - get_board / find_board / find_column / find_task (lookups)
    - subscribe(listener) -> unsubscribe callable
DEPENDENCIES:
  - asyncio (stdlib)
  - json (stdlib)
  - logging (stdlib)
  - lanes.core.commands (mutation commands)
  - lanes.core.storage (key-value persistence)
NOTES:
  - Unknown ids passed to mutations are silent no-ops
  - Every applied mutation refreshes the owning board's updated_at and
    schedules a full-snapshot save without awaiting it
  - Save failures set `error` and do NOT roll back the in-memory change
  - Validation (empty titles, bad priorities) raises InvalidInputError
  - Timestamps are UTC and never fall behind the loaded snapshot
  - Storage I/O runs in a worker thread (asyncio.to_thread), one call at a time
"""

import asyncio
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from . import commands
from .commands import Change, Command
from .constants import (
    DEFAULT_PRIORITY,
    LOAD_ERROR_MESSAGE,
    PRIORITIES,
    SAVE_ERROR_MESSAGE,
    STORAGE_KEY,
)
from .exceptions import (
    BoardNotFoundError,
    ColumnNotFoundError,
    InvalidInputError,
    StorageError,
    TaskNotFoundError,
)
from .models import Board, Column, Task
from .storage import JsonFileStorage, KeyValueStorage


logger = logging.getLogger(__name__)

Listener = Callable[[Change], None]


def _clean_text(value: Optional[str], what: str) -> str:
    """Strip a required title/name, rejecting empty values."""
    value = (value or "").strip()
    if not value:
        raise InvalidInputError(f"{what} cannot be empty")
    return value


def _clean_priority(priority: Optional[str]) -> str:
    if priority is None:
        return DEFAULT_PRIORITY
    priority = priority.strip().lower()
    if priority not in PRIORITIES:
        raise InvalidInputError(
            f"Invalid priority '{priority}'. Must be one of: {', '.join(PRIORITIES)}"
        )
    return priority


def _clean_patch(patch: Dict[str, Any], allowed: Tuple[str, ...]) -> Dict[str, Any]:
    unknown = sorted(set(patch) - set(allowed))
    if unknown:
        raise InvalidInputError(
            f"Cannot update field(s): {', '.join(unknown)}. Allowed: {', '.join(allowed)}"
        )
    cleaned = {}
    for key, value in patch.items():
        if key in ("title", "name"):
            cleaned[key] = _clean_text(value, key.capitalize())
        elif key == "priority":
            cleaned[key] = _clean_priority(value)
        elif key == "description":
            cleaned[key] = (value or "").strip()
        else:
            cleaned[key] = value
    return cleaned


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(stamp: datetime) -> datetime:
    """Naive datetimes are read as UTC."""
    if stamp.tzinfo is None:
        return stamp.replace(tzinfo=timezone.utc)
    return stamp.astimezone(timezone.utc)


def _parse_stamp(text: Any) -> Optional[datetime]:
    if not isinstance(text, str):
        return None
    try:
        return _as_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        return None


def _latest_stamp(boards: List[Board]) -> Optional[datetime]:
    """Newest created/updated timestamp anywhere in the collection."""
    stamps = []
    for board in boards:
        stamps += [board.created_at, board.updated_at]
        for column in board.columns:
            for task in column.tasks:
                stamps += [task.created_at, task.updated_at]
    parsed = [s for s in map(_parse_stamp, stamps) if s is not None]
    return max(parsed) if parsed else None


class BoardStore:
    """
    In-memory board collection backed by a key-value storage.

    All mutations go through _dispatch(), which is the only place that
    stamps updated_at and triggers persistence.
    """

    def __init__(
        self,
        storage: Optional[KeyValueStorage] = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.storage = storage if storage is not None else JsonFileStorage()
        self.boards: List[Board] = []
        self.current_board: Optional[Board] = None
        self.loading = False
        self.error: Optional[str] = None
        self.last_change: Optional[Change] = None
        self.pending_saves: Set[asyncio.Task] = set()
        self._clock = clock
        self._last_stamp: Optional[datetime] = None
        self._listeners: List[Listener] = []
        self._io_lock: Optional[asyncio.Lock] = None
        self._io_lock_loop: Optional[asyncio.AbstractEventLoop] = None

    @classmethod
    def open(cls, storage: Optional[KeyValueStorage] = None) -> "BoardStore":
        """Create a store and load its snapshot (for callers without a loop)."""
        store = cls(storage)
        asyncio.run(store.load())
        return store

    # --- Dispatch ---

    def _now(self) -> str:
        """Current timestamp, strictly later than any issued or loaded."""
        now = self._clock()
        stamp = _as_utc(now)
        if self._last_stamp is not None and stamp <= self._last_stamp:
            stamp = self._last_stamp + timedelta(microseconds=1)
        self._last_stamp = stamp
        if now.tzinfo is None:
            stamp = stamp.replace(tzinfo=None)
        return stamp.isoformat(timespec="microseconds")

    def _seed_clock(self, boards: List[Board]) -> None:
        latest = _latest_stamp(boards)
        if latest is not None and (self._last_stamp is None or latest > self._last_stamp):
            self._last_stamp = latest

    def _dispatch(self, command: Command) -> Optional[Change]:
        now = self._now()
        change = command.apply(self.boards, now)
        if change is None:
            logger.debug("%s ignored: target not found", type(command).__name__)
            return None

        if change.touches_board:
            board = self.get_board(change.board_id)
            if board is not None:
                board.updated_at = now

        self.last_change = change
        for listener in list(self._listeners):
            listener(change)
        self._schedule_save()
        return change

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener(change) after every applied mutation."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- Board Operations ---

    def create_board(self, name: str, description: Optional[str] = None) -> Board:
        """
        Create a board seeded with TODO, DOING, and DONE columns.

        Raises:
            InvalidInputError: If name is empty or whitespace-only
        """
        command = commands.CreateBoard(
            name=_clean_text(name, "Board name"),
            description=(description or "").strip(),
        )
        return self._dispatch(command).entity

    def update_board(self, board_id: str, **patch: Any) -> Optional[Board]:
        patch = _clean_patch(patch, commands.BOARD_FIELDS)
        change = self._dispatch(commands.UpdateBoard(board_id, patch))
        return change.entity if change else None

    def delete_board(self, board_id: str) -> None:
        change = self._dispatch(commands.DeleteBoard(board_id))
        if change and self.current_board is not None and self.current_board.id == board_id:
            self.current_board = None

    def select_board(self, board_id: str) -> Optional[Board]:
        self.current_board = self.get_board(board_id)
        return self.current_board

    # --- Column Operations ---

    def add_column(self, board_id: str, title: str) -> Optional[Column]:
        command = commands.AddColumn(board_id, _clean_text(title, "Column title"))
        change = self._dispatch(command)
        return change.entity if change else None

    def update_column(self, board_id: str, column_id: str, **patch: Any) -> None:
        patch = _clean_patch(patch, commands.COLUMN_FIELDS)
        self._dispatch(commands.UpdateColumn(board_id, column_id, patch))

    def delete_column(self, board_id: str, column_id: str) -> None:
        self._dispatch(commands.DeleteColumn(board_id, column_id))

    # --- Task Operations ---

    def add_task(
        self,
        board_id: str,
        column_id: str,
        title: str,
        description: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> Optional[Task]:
        """
        Append a task to the end of a column.

        Returns:
            The new Task, or None if the board or column doesn't exist

        Raises:
            InvalidInputError: If title is empty or priority is not low/medium/high
        """
        command = commands.AddTask(
            board_id=board_id,
            column_id=column_id,
            title=_clean_text(title, "Task title"),
            description=(description or "").strip(),
            priority=_clean_priority(priority),
        )
        change = self._dispatch(command)
        return change.entity if change else None

    def update_task(self, board_id: str, column_id: str, task_id: str, **patch: Any) -> None:
        patch = _clean_patch(patch, commands.TASK_FIELDS)
        self._dispatch(commands.UpdateTask(board_id, column_id, task_id, patch))

    def delete_task(self, board_id: str, column_id: str, task_id: str) -> None:
        self._dispatch(commands.DeleteTask(board_id, column_id, task_id))

    def move_task(
        self,
        board_id: str,
        source_column_id: str,
        dest_column_id: str,
        task_id: str,
        dest_index: int,
    ) -> None:
        """
        Move a task to dest_index in the destination column.

        dest_index refers to the destination sequence after the task has
        been taken out of its source. For a same-column reorder, callers
        must account for the shift of every slot past the old position.
        """
        self._dispatch(
            commands.MoveTask(board_id, source_column_id, dest_column_id, task_id, dest_index)
        )

    def move_handler(self, board_id: str) -> Callable[[Any], None]:
        """
        Adapter turning a drag MoveRequest into move_task() on this board.

        A drag reports the gap it was dropped on, counted with the task still
        in place. For a downward same-column move that gap is one past the
        post-removal index move_task() expects.
        """

        def on_move(request) -> None:
            dest_index = request.insert_index
            if request.source_column_id == request.target_column_id:
                board = self.get_board(board_id)
                column = board.get_column(request.source_column_id) if board else None
                current = column.index_of(request.task.id) if column else -1
                if current != -1 and current < dest_index:
                    dest_index -= 1
            self.move_task(
                board_id,
                request.source_column_id,
                request.target_column_id,
                request.task.id,
                dest_index,
            )

        return on_move

    # --- Lookups ---

    def get_board(self, board_id: str) -> Optional[Board]:
        for board in self.boards:
            if board.id == board_id:
                return board
        return None

    def find_board(self, ref: str) -> Board:
        """
        Resolve a board by id, case-insensitive name, or unique id prefix.

        Raises:
            BoardNotFoundError: If nothing matches
            InvalidInputError: If an id prefix matches several boards
        """
        board = self.get_board(ref)
        if board is not None:
            return board
        for board in self.boards:
            if board.name.lower() == ref.strip().lower():
                return board
        return _by_prefix(self.boards, ref, BoardNotFoundError, "board")

    def find_column(self, board: Board, ref: str) -> Column:
        """Resolve a column of board by id, case-insensitive title, or id prefix."""
        column = board.get_column(ref)
        if column is not None:
            return column
        for column in board.columns:
            if column.title.lower() == ref.strip().lower():
                return column
        return _by_prefix(board.columns, ref, ColumnNotFoundError, "column")

    def find_task(self, board: Board, ref: str) -> Tuple[Column, Task]:
        """Resolve a task of board by id or unique id prefix."""
        matches = []
        for column in board.columns:
            for task in column.tasks:
                if task.id == ref:
                    return column, task
                if task.id.startswith(ref):
                    matches.append((column, task))
        if not matches:
            raise TaskNotFoundError(ref)
        if len(matches) > 1:
            raise InvalidInputError(f"Task id prefix '{ref}' is ambiguous")
        return matches[0]

    # --- Persistence ---

    def _schedule_save(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop (CLI, plain scripts): save right away
            asyncio.run(self.save())
            return
        task = loop.create_task(self.save())
        self.pending_saves.add(task)
        task.add_done_callback(self.pending_saves.discard)

    def _lock(self) -> asyncio.Lock:
        """Storage lock for the running loop; writes land in the order taken."""
        loop = asyncio.get_running_loop()
        if self._io_lock is None or self._io_lock_loop is not loop:
            self._io_lock = asyncio.Lock()
            self._io_lock_loop = loop
        return self._io_lock

    async def save(self) -> None:
        """
        Write the whole board collection as one snapshot.

        The snapshot is taken before the first await. Storage I/O runs in a
        worker thread so the loop keeps going while the file is written.
        """
        try:
            payload = json.dumps([b.to_dict() for b in self.boards], ensure_ascii=False)
            async with self._lock():
                await asyncio.to_thread(self.storage.set, STORAGE_KEY, payload)
        except (StorageError, TypeError, ValueError) as e:
            self.error = SAVE_ERROR_MESSAGE
            logger.error("Save error: %s", e)
            return
        if self.error == SAVE_ERROR_MESSAGE:
            self.error = None

    async def load(self) -> None:
        """
        Replace the board collection with the stored snapshot.

        A missing snapshot leaves the collection empty. A corrupt one also
        leaves it empty and sets the error flag.
        """
        self.loading = True
        try:
            async with self._lock():
                stored = await asyncio.to_thread(self.storage.get, STORAGE_KEY)
            boards: List[Board] = []
            if stored:
                raw = json.loads(stored)
                if not isinstance(raw, list):
                    raise ValueError("snapshot is not a list of boards")
                boards = [Board.from_dict(item) for item in raw]
            self.boards = boards
            self.error = None
            self._seed_clock(boards)
        except (StorageError, ValueError, KeyError, TypeError, AttributeError) as e:
            self.boards = []
            self.error = LOAD_ERROR_MESSAGE
            logger.error("Load error: %s", e)
        finally:
            self.loading = False

        if self.current_board is not None:
            self.current_board = self.get_board(self.current_board.id)

    async def flush(self) -> None:
        """Wait for every scheduled save to finish."""
        while self.pending_saves:
            await asyncio.gather(*list(self.pending_saves))


def _by_prefix(items, ref: str, not_found, what: str):
    matches = [item for item in items if ref and item.id.startswith(ref)]
    if not matches:
        raise not_found(ref)
    if len(matches) > 1:
        raise InvalidInputError(f"{what.capitalize()} id prefix '{ref}' is ambiguous")
    return matches[0]
