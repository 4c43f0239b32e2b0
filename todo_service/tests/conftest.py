import pytest
from fastapi.testclient import TestClient

from src.todo_api import db as db_module
from src.todo_api.db import Database
from src.todo_api.main import app


@pytest.fixture
def database_url(tmp_path, monkeypatch):
    """Point the service at a fresh SQLite file for each test."""
    url = f"sqlite:///{tmp_path / 'todos.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.setenv("DB_CONNECT_RETRY_SECONDS", "0.05")
    db_module.reset_database()
    yield url
    db_module.reset_database()


@pytest.fixture
def client(database_url):
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def unreachable_database(tmp_path):
    """A Database whose SQLite file lives in a directory that does not exist."""
    database = Database(f"sqlite:///{tmp_path / 'missing' / 'todos.db'}", retry_delay=0)
    yield database
    database.dispose()
