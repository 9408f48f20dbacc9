"""
FILE: lanes/dnd/__init__.py
PURPOSE: Drag-and-drop package: spatial registry and drag coordinator
EXPORTS:
  - Point, Rect (from dnd.geometry)
  - SpatialRegistry (from dnd.registry)
  - DragCoordinator, MoveRequest, DragInfo, Idle, Dragging (from dnd.coordinator)
  - layout_board(), layout_column(), task_center(), drop_point() (from dnd.layout)
"""

from .geometry import Point, Rect
from .registry import SpatialRegistry
from .coordinator import DragCoordinator, DragInfo, Dragging, Idle, MoveRequest
from .layout import drop_point, layout_board, layout_column, task_center

__all__ = [
    "Point",
    "Rect",
    "SpatialRegistry",
    "DragCoordinator",
    "DragInfo",
    "Dragging",
    "Idle",
    "MoveRequest",
    "layout_board",
    "layout_column",
    "task_center",
    "drop_point",
]
