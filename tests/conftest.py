"""Pytest configuration for filedrop tests."""
import sys
from pathlib import Path

# Add src/back to path for src-layout imports
_PROJECT_ROOT = Path(__file__).parent.parent
_SRC_BACK = _PROJECT_ROOT / 'src' / 'back'
if str(_SRC_BACK) not in sys.path:
    sys.path.insert(0, str(_SRC_BACK))

import pytest


@pytest.fixture
def storage_root(tmp_path):
    """Create a temporary storage root for testing."""
    root = tmp_path / 'uploads'
    root.mkdir()
    return root


@pytest.fixture
def fixed_clock():
    """Millisecond clock that returns 1000, 1001, 1002, ..."""
    ticks = iter(range(1000, 100000))
    return lambda: next(ticks)
