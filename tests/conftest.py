import os

os.environ.setdefault("MPLBACKEND", "Agg")

from pathlib import Path

import pytest

MAPS_DIR = Path(__file__).resolve().parent.parent / "maps"


@pytest.fixture
def maps_dir() -> Path:
    return MAPS_DIR
