"""
FastAPI Todo Service package.

The ASGI application lives in ``src.todo_api.main:app``; ``python -m src.todo_api``
serves it with uvicorn.
"""
