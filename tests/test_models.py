"""
Tests for domain models: snapshot conversion and helpers.
"""

import json

from lanes.core.models import Board, Column, Task


def test_task_defaults():
    """Test a bare task gets medium priority and empty description."""
    task = Task(id="t1", title="Write docs")

    assert task.priority == "medium"
    assert task.description == ""


def test_task_from_dict_tolerates_missing_optional_fields():
    """Test records without description/priority still load."""
    task = Task.from_dict({"id": "t1", "title": "Old task"})

    assert task.description == ""
    assert task.priority == "medium"
    assert task.created_at is None


def test_snapshot_keys_are_camel_case():
    """Test timestamps use createdAt/updatedAt on the wire."""
    task = Task(id="t1", title="A", created_at="2025-01-01T00:00:00", updated_at="2025-01-02T00:00:00")

    data = task.to_dict()

    assert data["createdAt"] == "2025-01-01T00:00:00"
    assert data["updatedAt"] == "2025-01-02T00:00:00"
    assert "created_at" not in data


def test_board_from_legacy_snapshot():
    """Test a snapshot with timestamp ids and camelCase keys loads."""
    raw = {
        "id": "1718000000000",
        "name": "Sprint 1",
        "description": "",
        "columns": [
            {"id": "1", "title": "TODO", "tasks": [
                {"id": "1718000000001", "title": "A", "description": "", "priority": "high",
                 "createdAt": "2024-06-10T06:13:20.000Z", "updatedAt": "2024-06-10T06:13:20.000Z"},
            ]},
            {"id": "2", "title": "DOING", "tasks": []},
            {"id": "3", "title": "DONE", "tasks": []},
        ],
        "createdAt": "2024-06-10T06:13:20.000Z",
        "updatedAt": "2024-06-10T06:13:20.000Z",
    }

    board = Board.from_dict(raw)

    assert [c.title for c in board.columns] == ["TODO", "DOING", "DONE"]
    assert board.columns[0].tasks[0].priority == "high"
    assert board.to_dict() == raw


def test_board_to_json_is_valid_json():
    """Test to_json() output parses back to the same dict."""
    board = Board(id="b1", name="Home", columns=[Column(id="c1", title="TODO")])

    assert json.loads(board.to_json()) == board.to_dict()


def test_column_index_of_and_get_task():
    """Test positional lookup inside a column."""
    column = Column(id="c1", title="TODO", tasks=[Task(id="a", title="A"), Task(id="b", title="B")])

    assert column.index_of("b") == 1
    assert column.index_of("zzz") == -1
    assert column.get_task("a").title == "A"
    assert column.get_task("zzz") is None


def test_board_task_count():
    """Test task_count sums over columns."""
    board = Board(id="b1", name="X", columns=[
        Column(id="c1", title="TODO", tasks=[Task(id="a", title="A")]),
        Column(id="c2", title="DONE", tasks=[Task(id="b", title="B"), Task(id="c", title="C")]),
    ])

    assert board.task_count() == 3
