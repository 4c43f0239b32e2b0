import threading
import time

import pytest
from sqlalchemy import inspect

from src.todo_api.db import Database
from src.todo_api.errors import DatabaseError
from src.todo_api.repositories import TodoRepository


@pytest.fixture
def database(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'todos.db'}", retry_delay=0)
    assert database.initialize() is True
    yield database
    database.dispose()


class TestDatabase:
    def test_initialize_creates_table(self, database):
        assert database.ready is True
        columns = {c["name"] for c in inspect(database.engine).get_columns("todos")}
        assert columns == {"id", "title", "completed", "created_at"}

    def test_initialize_is_idempotent(self, database):
        TodoRepository(database).create("Survives")
        assert database.initialize() is True
        assert len(TodoRepository(database).list_all()) == 1

    def test_ping(self, database, unreachable_database):
        assert database.ping() is True
        assert unreachable_database.ping() is False

    def test_connect_wraps_errors(self, unreachable_database):
        with pytest.raises(DatabaseError):
            with unreachable_database.connect():
                pass


class TestConnectWithRetry:
    def test_gives_up_after_max_attempts(self, unreachable_database, monkeypatch):
        calls = []
        original = unreachable_database.initialize

        def counting_initialize():
            calls.append(1)
            return original()

        monkeypatch.setattr(unreachable_database, "initialize", counting_initialize)
        assert unreachable_database.connect_with_retry(max_attempts=3) is False
        assert len(calls) == 3
        assert unreachable_database.ready is False

    def test_succeeds_after_failures(self, unreachable_database, monkeypatch):
        outcomes = iter([False, False, True])
        monkeypatch.setattr(unreachable_database, "initialize", lambda: next(outcomes))
        assert unreachable_database.connect_with_retry() is True

    def test_stop_event_ends_loop(self, unreachable_database):
        stop = threading.Event()
        stop.set()
        assert unreachable_database.connect_with_retry(stop_event=stop) is False

    def test_waits_fixed_delay_between_attempts(self, unreachable_database, monkeypatch):
        unreachable_database.retry_delay = 0.2
        stamps = []
        original = unreachable_database.initialize

        def stamped_initialize():
            stamps.append(time.monotonic())
            return original()

        monkeypatch.setattr(unreachable_database, "initialize", stamped_initialize)
        started = time.monotonic()
        assert unreachable_database.connect_with_retry(max_attempts=3, delay_first=True) is False

        assert len(stamps) == 3
        gaps = [stamps[0] - started] + [b - a for a, b in zip(stamps, stamps[1:])]
        assert all(gap >= 0.15 for gap in gaps), gaps

    def test_stop_during_first_delay_skips_attempts(self, unreachable_database, monkeypatch):
        unreachable_database.retry_delay = 5
        calls = []
        monkeypatch.setattr(unreachable_database, "initialize", lambda: calls.append(1) or False)
        stop = threading.Event()
        threading.Timer(0.1, stop.set).start()

        started = time.monotonic()
        assert unreachable_database.connect_with_retry(stop_event=stop, delay_first=True) is False
        assert time.monotonic() - started < 2
        assert calls == []

    def test_reachable_on_first_try(self, tmp_path):
        database = Database(f"sqlite:///{tmp_path / 'ok.db'}", retry_delay=0)
        try:
            assert database.connect_with_retry(max_attempts=1) is True
            assert database.ready is True
        finally:
            database.dispose()


class TestTodoRepository:
    def test_create_assigns_defaults(self, database):
        repo = TodoRepository(database)
        new_id = repo.create("Walk dog")
        (todo,) = repo.list_all()
        assert todo["id"] == new_id
        assert todo["title"] == "Walk dog"
        assert todo["completed"] is False
        assert todo["created_at"] is not None

    def test_set_completed_and_delete_report_missing_rows(self, database):
        repo = TodoRepository(database)
        assert repo.set_completed(12345, True) is False
        assert repo.delete(12345) is False

        new_id = repo.create("Exists")
        assert repo.set_completed(new_id, True) is True
        assert repo.list_all()[0]["completed"] is True
        assert repo.delete(new_id) is True
        assert repo.list_all() == []
