import pytest
from fastapi.testclient import TestClient

from main import create_app

# ---------- TEST FIXTURES ----------

@pytest.fixture(scope="function")
def database_url(tmp_path):
    """A fresh SQLite file per test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'reservations.db'}"


@pytest.fixture(scope="function")
def app(database_url):
    return create_app(database_url)


@pytest.fixture(scope="function")
def client(app):
    # Entering the client runs the lifespan, which creates the table
    with TestClient(app) as client:
        yield client
