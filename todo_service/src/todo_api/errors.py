from __future__ import annotations


class TodoServiceError(Exception):
    """Base error carrying the HTTP status and error code it is reported with."""

    code: str = "TodoServiceError"
    http_status: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"error": self.code, "message": self.message}


class DatabaseError(TodoServiceError):
    """A statement or connection failed; details stay in the logs."""

    code = "DatabaseError"
    http_status = 500

    def __init__(self, message: str = "Database operation failed") -> None:
        super().__init__(message)
