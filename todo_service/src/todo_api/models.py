from __future__ import annotations

from datetime import datetime
from typing import TypedDict


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A row of the todos table as returned by the repository.

    Fields:
    - id: Unique integer identifier, assigned by the database
    - title: Non-empty title (trimmed on input via schemas)
    - completed: Boolean completion flag, false on creation
    - created_at: Server-assigned creation timestamp
    """

    id: int
    title: str
    completed: bool
    created_at: datetime
