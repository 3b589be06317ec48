import pytest
from fastapi.testclient import TestClient

from hexmap.server import main
from hex_test_utils import filled_grid


@pytest.fixture
def open_grid():
    """6x6 grid, every cell populated, nothing opaque."""
    return filled_grid(6, 6)


@pytest.fixture
def walled_row():
    """Five tiles in storage row 0 with the middle one (col 2) opaque."""
    return filled_grid(5, 1, opaque={(2, 0)})


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(main, "MAP_DIR", str(tmp_path))
    main.sessions.clear()
    yield TestClient(main.app)
    main.sessions.clear()
