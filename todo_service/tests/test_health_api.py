import time

from fastapi.testclient import TestClient

from src.todo_api import db as db_module
from src.todo_api.db import Database, get_database
from src.todo_api.main import app


class TestHealth:
    def test_root_banner(self, client):
        res = client.get("/")
        assert res.status_code == 200
        assert res.headers["content-type"].startswith("text/plain")
        assert res.text == "Todo service is running"

    def test_health_check(self, client):
        res = client.get("/health")
        assert res.status_code == 200
        assert res.text == "OK"

    def test_dbactive_connected(self, client):
        res = client.get("/dbactive")
        assert res.status_code == 200
        assert res.json() == {"status": "healthy", "database": "connected"}

    def test_dbactive_unreachable(self, client, unreachable_database):
        app.dependency_overrides[get_database] = lambda: unreachable_database
        res = client.get("/dbactive")
        assert res.status_code == 503
        assert res.json() == {"status": "unhealthy", "database": "disconnected"}

    def test_health_ignores_database_state(self, client, unreachable_database):
        app.dependency_overrides[get_database] = lambda: unreachable_database
        res = client.get("/health")
        assert res.status_code == 200
        assert res.text == "OK"


class TestStartupRetry:
    def test_serves_probes_while_database_is_down(self, tmp_path, monkeypatch):
        late_dir = tmp_path / "late"
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{late_dir / 'todos.db'}")
        monkeypatch.setenv("DB_CONNECT_RETRY_SECONDS", "0.05")
        db_module.reset_database()

        with TestClient(app) as client:
            assert client.get("/health").status_code == 200
            assert client.get("/dbactive").status_code == 503
            assert get_database().ready is False

            # The background loop picks the database up once it becomes reachable
            late_dir.mkdir()
            deadline = time.monotonic() + 5
            while not get_database().ready and time.monotonic() < deadline:
                time.sleep(0.05)
            assert get_database().ready is True
            assert client.post("/api/todos", json={"title": "After retry"}).status_code == 201
            assert client.get("/dbactive").status_code == 200

        db_module.reset_database()

    def test_first_background_retry_waits_fixed_delay(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'never' / 'todos.db'}")
        monkeypatch.setenv("DB_CONNECT_RETRY_SECONDS", "0.5")
        db_module.reset_database()

        stamps = []
        original = Database.initialize

        def stamped_initialize(self):
            stamps.append(time.monotonic())
            return original(self)

        monkeypatch.setattr(Database, "initialize", stamped_initialize)
        with TestClient(app):
            deadline = time.monotonic() + 5
            while len(stamps) < 2 and time.monotonic() < deadline:
                time.sleep(0.05)

        assert len(stamps) >= 2
        assert stamps[1] - stamps[0] >= 0.4

    def test_shutdown_stops_retry_loop(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'never' / 'todos.db'}")
        monkeypatch.setenv("DB_CONNECT_RETRY_SECONDS", "0.05")
        db_module.reset_database()

        started = time.monotonic()
        with TestClient(app) as client:
            assert client.get("/health").status_code == 200
        # Leaving the context runs shutdown, which must not hang on the retry loop
        assert time.monotonic() - started < 5
        assert db_module._database is None
