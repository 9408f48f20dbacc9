"""
FILE: lanes/dnd/coordinator.py
PURPOSE: Drag coordinator - turns pointer start/move/end into move decisions
EXPORTS:
  - Idle, Dragging (drag states)
  - MoveRequest (dataclass passed to the move callback)
  - DragInfo (read-only snapshot for visual feedback)
  - DragCoordinator (class)
    - start(task, source_column_id, x, y) -> bool
    - move(x, y) -> None
    - end(x, y, on_move) -> bool
    - reset() -> None
    - is_drop_target(column_id) -> bool
    - snapshot() -> DragInfo
DEPENDENCIES:
  - logging (stdlib)
  - time (stdlib)
  - lanes.dnd.registry (SpatialRegistry)
  - lanes.core.constants (drag thresholds)
NOTES:
  - Exactly one drag at a time; start() while dragging is ignored
  - move() only updates advisory hover state, it never mutates boards
  - end() always returns to Idle, even when on_move raises
  - The insertion index handed to on_move is the registry's, unadjusted
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from ..core.constants import MIN_DRAG_DISTANCE, MIN_DRAG_DURATION_MS
from .geometry import Point
from .registry import SpatialRegistry


logger = logging.getLogger(__name__)


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


@dataclass(frozen=True)
class Idle:
    """No drag in progress."""


@dataclass
class Dragging:
    """A drag in progress and everything needed to resolve its drop."""

    task: Any
    source_column_id: str
    start: Point
    start_time: float
    current: Point
    hovered_column_id: Optional[str] = None


DragState = Union[Idle, Dragging]

IDLE = Idle()


@dataclass(frozen=True)
class MoveRequest:
    task: Any
    source_column_id: str
    target_column_id: str
    insert_index: int


@dataclass(frozen=True)
class DragInfo:
    is_drag_active: bool
    dragged_task: Any = None
    dragged_column_id: Optional[str] = None
    current_position: Optional[Point] = None
    hovered_column_id: Optional[str] = None


class DragCoordinator:
    """
    Two-state machine (Idle / Dragging) over a SpatialRegistry.

    A drop is committed only if it lands inside a registered column, clears
    the intent threshold (distance or duration), and actually changes the
    task's position.
    """

    def __init__(
        self,
        registry: SpatialRegistry,
        clock: Callable[[], float] = _monotonic_ms,
        min_distance: float = MIN_DRAG_DISTANCE,
        min_duration_ms: float = MIN_DRAG_DURATION_MS,
    ):
        self.registry = registry
        self.state: DragState = IDLE
        self.min_distance = min_distance
        self.min_duration_ms = min_duration_ms
        self._clock = clock

    @property
    def is_dragging(self) -> bool:
        return isinstance(self.state, Dragging)

    def start(self, task: Any, source_column_id: str, x: float, y: float) -> bool:
        """Begin dragging task out of source_column_id. Returns False if already dragging."""
        if isinstance(self.state, Dragging):
            logger.debug("Drag start ignored: %s is already being dragged", self.state.task.id)
            return False

        origin = Point(x, y)
        self.state = Dragging(
            task=task,
            source_column_id=source_column_id,
            start=origin,
            start_time=self._clock(),
            current=origin,
        )
        logger.debug("Drag started: task=%s column=%s at (%s, %s)", task.id, source_column_id, x, y)
        return True

    def move(self, x: float, y: float) -> None:
        state = self.state
        if not isinstance(state, Dragging):
            return
        state.current = Point(x, y)
        state.hovered_column_id = self.registry.column_at(x, y)

    def end(self, x: float, y: float, on_move: Callable[[MoveRequest], Any]) -> bool:
        """
        Finish the drag at (x, y).

        Args:
            x, y: Pointer release position
            on_move: Called with a MoveRequest if the drop is valid

        Returns:
            True if on_move was invoked, False for invalid/redundant drops
            or when no drag was in progress
        """
        state = self.state
        if not isinstance(state, Dragging):
            return False

        try:
            request = self._resolve_drop(state, Point(x, y))
            if request is None:
                return False
            logger.debug(
                "Valid drop: task=%s %s -> %s at %d",
                request.task.id,
                request.source_column_id,
                request.target_column_id,
                request.insert_index,
            )
            on_move(request)
            return True
        finally:
            self.reset()

    def reset(self) -> None:
        """Force back to Idle, dropping all drag fields."""
        self.state = IDLE

    def _resolve_drop(self, state: Dragging, end: Point) -> Optional[MoveRequest]:
        duration = self._clock() - state.start_time
        distance = state.start.distance_to(end)

        # 1. Must land inside a column at a real slot
        target_column_id = self.registry.column_at(end.x, end.y)
        if target_column_id is None:
            logger.debug("Invalid drop: no column under (%s, %s)", end.x, end.y)
            return None
        insert_index = self.registry.insertion_index(target_column_id, end.x, end.y)
        if insert_index == -1:
            logger.debug("Invalid drop: no insertion slot in %s", target_column_id)
            return None

        # 2. Reject taps and jitter
        if distance < self.min_distance and duration < self.min_duration_ms:
            logger.debug(
                "Invalid drop: below threshold (distance=%.1f, duration=%.0fms)",
                distance,
                duration,
            )
            return None

        # 3. Landing directly before or after itself is not a move
        if target_column_id == state.source_column_id:
            current_index = self.registry.index_of(state.source_column_id, state.task.id)
            if current_index != -1 and current_index in (insert_index, insert_index - 1):
                logger.debug("Same position drop, skipping")
                return None

        return MoveRequest(
            task=state.task,
            source_column_id=state.source_column_id,
            target_column_id=target_column_id,
            insert_index=insert_index,
        )

    # --- Visual feedback helpers ---

    def is_drop_target(self, column_id: str) -> bool:
        state = self.state
        return isinstance(state, Dragging) and state.hovered_column_id == column_id

    def snapshot(self) -> DragInfo:
        state = self.state
        if not isinstance(state, Dragging):
            return DragInfo(is_drag_active=False)
        return DragInfo(
            is_drag_active=True,
            dragged_task=state.task,
            dragged_column_id=state.source_column_id,
            current_position=state.current,
            hovered_column_id=state.hovered_column_id,
        )
