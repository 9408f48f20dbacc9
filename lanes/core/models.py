"""
FILE: lanes/core/models.py
PURPOSE: Domain models for boards, columns, and tasks
EXPORTS:
  - Task (dataclass)
  - Column (dataclass)
  - Board (dataclass)
DEPENDENCIES:
  - dataclasses (stdlib)
  - json (stdlib)
  - typing (stdlib)
NOTES:
  - All models have from_dict() for snapshot conversion
  - All models have to_dict() / to_json() for serialization
  - Snapshot keys use camelCase timestamps (createdAt, updatedAt)
  - Timestamps stored as ISO-8601 strings
  - List order is the only ordering; there is no rank field
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import json

from .constants import DEFAULT_PRIORITY


@dataclass
class Task:
    """A unit of work living in exactly one column."""

    id: str
    title: str
    description: str = ""
    priority: str = DEFAULT_PRIORITY
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """Convert a snapshot record to a Task object."""
        return cls(
            id=str(data["id"]),
            title=data["title"],
            description=data.get("description") or "",
            priority=data.get("priority") or DEFAULT_PRIORITY,
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    def to_json(self) -> str:
        """Serialize task to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


@dataclass
class Column:
    """An ordered lane of tasks (e.g., TODO, DOING, DONE)."""

    id: str
    title: str
    tasks: List[Task] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Column":
        """Convert a snapshot record to a Column object."""
        return cls(
            id=str(data["id"]),
            title=data["title"],
            tasks=[Task.from_dict(t) for t in data.get("tasks") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "tasks": [t.to_dict() for t in self.tasks],
        }

    def to_json(self) -> str:
        """Serialize column (with its tasks) to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    def index_of(self, task_id: str) -> int:
        """Position of a task in this column, or -1."""
        for i, task in enumerate(self.tasks):
            if task.id == task_id:
                return i
        return -1

    def get_task(self, task_id: str) -> Optional[Task]:
        index = self.index_of(task_id)
        return self.tasks[index] if index != -1 else None


@dataclass
class Board:
    """A kanban workspace holding ordered columns."""

    id: str
    name: str
    description: str = ""
    columns: List[Column] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Board":
        """Convert a snapshot record to a Board object."""
        return cls(
            id=str(data["id"]),
            name=data["name"],
            description=data.get("description") or "",
            columns=[Column.from_dict(c) for c in data.get("columns") or []],
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "columns": [c.to_dict() for c in self.columns],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    def to_json(self) -> str:
        """Serialize board (with columns and tasks) to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    def get_column(self, column_id: str) -> Optional[Column]:
        for column in self.columns:
            if column.id == column_id:
                return column
        return None

    def task_count(self) -> int:
        """Total number of tasks across all columns."""
        return sum(len(c.tasks) for c in self.columns)
