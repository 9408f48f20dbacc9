"""Shared pytest configuration and fixtures for tests."""

import sys
import io
from pathlib import Path

import pytest

# Fix Windows console encoding
if sys.platform == "win32":
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from lanes.core import storage
from lanes.core.storage import MemoryStorage
from lanes.core.store import BoardStore


@pytest.fixture(autouse=True)
def temp_data(monkeypatch, tmp_path):
    """Never touch the real ~/.lanes data file."""
    data_path = tmp_path / "lanes.json"
    monkeypatch.setattr(storage, "DATA_PATH", data_path)
    monkeypatch.setattr(storage, "DATA_DIR", tmp_path)
    yield data_path


@pytest.fixture
def memory():
    return MemoryStorage()


@pytest.fixture
def store(memory):
    """Empty store over in-memory storage."""
    return BoardStore(memory)


class FakeClock:
    """Millisecond clock the test moves by hand."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()
