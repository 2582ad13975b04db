import sys
from pathlib import Path

import pytest

# Ensure src is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))


@pytest.fixture
def memory_path(tmp_path):
    return tmp_path / "memory.txt"


@pytest.fixture
def memory(memory_path):
    """Empty memory store backed by a temp file."""
    from memory import MemoryStore
    return MemoryStore.from_file(memory_path)
