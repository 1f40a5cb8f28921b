import sys
from pathlib import Path

import pytest

# Ensure 'src' directory is on sys.path for tests
PROJECT_ROOT = Path(__file__).resolve().parent
SRC_DIR = PROJECT_ROOT / 'src'
if SRC_DIR.exists() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


@pytest.fixture
def datadir(tmp_path: Path) -> Path:
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def args(datadir: Path):
    from tests.utils import make_manager

    return make_manager(datadir)
