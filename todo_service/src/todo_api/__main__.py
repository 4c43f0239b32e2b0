"""
Run the service with uvicorn.

Usage:
    python -m src.todo_api

uvicorn traps SIGINT/SIGTERM, stops accepting connections, and runs the
application lifespan shutdown, which closes the database pool.
"""
from __future__ import annotations

import uvicorn

from .settings import get_settings


# PUBLIC_INTERFACE
def main() -> None:
    """Serve the API on HOST:PORT from settings."""
    settings = get_settings()
    uvicorn.run(
        "src.todo_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
