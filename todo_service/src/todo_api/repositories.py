from __future__ import annotations

from typing import List

from fastapi import Depends
from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import RowMapping

from .db import Database, get_database, todos
from .models import TodoEntity


# PUBLIC_INTERFACE
class TodoRepository:
    """
    SQL-backed repository for the todos table. Every method issues a single
    parameterized statement on a pooled connection.
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    @staticmethod
    def _row_to_entity(row: RowMapping) -> TodoEntity:
        return {
            "id": int(row["id"]),
            "title": str(row["title"]),
            "completed": bool(row["completed"]),
            "created_at": row["created_at"],
        }

    def list_all(self) -> List[TodoEntity]:
        """Return every todo, newest first."""
        stmt = select(todos).order_by(todos.c.created_at.desc(), todos.c.id.desc())
        with self._db.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [self._row_to_entity(r) for r in rows]

    def create(self, title: str) -> int:
        """Insert a todo with the given title and return its new id."""
        with self._db.connect() as conn:
            result = conn.execute(insert(todos).values(title=title))
            return int(result.inserted_primary_key[0])

    def set_completed(self, todo_id: int, completed: bool) -> bool:
        """Update the completion flag. Return False if no row matched."""
        stmt = update(todos).where(todos.c.id == todo_id).values(completed=completed)
        with self._db.connect() as conn:
            return conn.execute(stmt).rowcount > 0

    def delete(self, todo_id: int) -> bool:
        """Delete a todo. Return False if no row matched."""
        with self._db.connect() as conn:
            return conn.execute(delete(todos).where(todos.c.id == todo_id)).rowcount > 0


# PUBLIC_INTERFACE
def get_repository(database: Database = Depends(get_database)) -> TodoRepository:
    """FastAPI dependency returning a repository bound to the shared pool."""
    return TodoRepository(database)
