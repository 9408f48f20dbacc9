"""
FILE: lanes/dnd/registry.py
PURPOSE: Spatial registry - cache of measured column/task rectangles for hit-testing
EXPORTS:
  - ColumnEntry (dataclass)
  - SpatialRegistry (class)
    - register_column(column_id, tasks, rect, task_rects) -> None
    - unregister_column(column_id) -> None
    - measure_column(column_id, rect) -> None
    - measure_task(column_id, task_id, rect) -> None
    - contains_point(column_id, x, y) -> bool
    - insertion_index(column_id, x, y) -> int
    - column_at(x, y) -> str | None
    - index_of(column_id, task_id) -> int
DEPENDENCIES:
  - logging (stdlib)
  - lanes.dnd.geometry (Rect)
NOTES:
  - Entries are keyed by column id; nothing holds a reference to a UI object
  - Registration order is query order (column_at returns the first hit)
  - The registry owns no tasks; `tasks` is the column's live sequence
  - Tasks without a measured rect are skipped by insertion_index()
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .geometry import Rect


logger = logging.getLogger(__name__)


@dataclass
class ColumnEntry:
    """Latest known layout of one visible column."""

    column_id: str
    tasks: Sequence
    rect: Optional[Rect] = None
    task_rects: Dict[str, Rect] = field(default_factory=dict)


class SpatialRegistry:
    """
    Derived cache of layout measurements, shared by the columns that write it
    and the drag coordinator that reads it.

    Columns must re-register (or re-measure) whenever their rectangle or task
    list changes; the registry never recomputes layout on its own.
    """

    def __init__(self):
        self._entries: Dict[str, ColumnEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, column_id: str) -> bool:
        return column_id in self._entries

    # --- Lifecycle ---

    def register_column(
        self,
        column_id: str,
        tasks: Sequence,
        rect: Optional[Rect] = None,
        task_rects: Optional[Dict[str, Rect]] = None,
    ) -> None:
        """
        Register a column, or refresh an existing registration.

        Re-registering keeps the column's query position and the rectangles
        already measured for tasks still in it, unless new ones are passed in.
        """
        entry = self._entries.get(column_id)
        if entry is None:
            self._entries[column_id] = ColumnEntry(
                column_id=column_id,
                tasks=tasks,
                rect=rect,
                task_rects=dict(task_rects or {}),
            )
            return

        entry.tasks = tasks
        if rect is not None:
            entry.rect = rect
        if task_rects is not None:
            entry.task_rects = dict(task_rects)
        else:
            present = {task.id for task in tasks}
            entry.task_rects = {
                task_id: task_rect
                for task_id, task_rect in entry.task_rects.items()
                if task_id in present
            }

    def unregister_column(self, column_id: str) -> None:
        self._entries.pop(column_id, None)

    def clear(self) -> None:
        self._entries.clear()

    def measure_column(self, column_id: str, rect: Rect) -> None:
        entry = self._entries.get(column_id)
        if entry is None:
            logger.debug("Measurement for unregistered column %s dropped", column_id)
            return
        entry.rect = rect

    def measure_task(self, column_id: str, task_id: str, rect: Rect) -> None:
        entry = self._entries.get(column_id)
        if entry is None:
            logger.debug("Measurement for unregistered column %s dropped", column_id)
            return
        entry.task_rects[task_id] = rect

    # --- Queries ---

    def column_ids(self) -> List[str]:
        return list(self._entries)

    def tasks_of(self, column_id: str) -> Sequence:
        entry = self._entries.get(column_id)
        return entry.tasks if entry is not None else ()

    def index_of(self, column_id: str, task_id: str) -> int:
        """Position of task_id in the column's registered sequence, or -1."""
        for i, task in enumerate(self.tasks_of(column_id)):
            if task.id == task_id:
                return i
        return -1

    def contains_point(self, column_id: str, x: float, y: float) -> bool:
        entry = self._entries.get(column_id)
        if entry is None or entry.rect is None:
            return False
        return entry.rect.contains(x, y)

    def insertion_index(self, column_id: str, x: float, y: float) -> int:
        """
        Slot a task dropped at (x, y) should land in, or -1 if outside.

        Every measured task whose vertical midpoint lies above y pushes the
        slot down by one. Unmeasured tasks are skipped.
        """
        if not self.contains_point(column_id, x, y):
            return -1

        entry = self._entries[column_id]
        index = 0
        for task in entry.tasks:
            rect = entry.task_rects.get(task.id)
            if rect is None:
                continue
            if y > rect.mid_y:
                index += 1
        return index

    def column_at(self, x: float, y: float) -> Optional[str]:
        """First registered column whose rectangle contains the point."""
        for column_id in self._entries:
            if self.contains_point(column_id, x, y):
                return column_id
        return None
