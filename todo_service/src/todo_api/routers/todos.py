from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ..repositories import TodoRepository, get_repository
from ..schemas import MessageOut, TodoCreate, TodoOut, TodoUpdate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/todos",
    tags=["todos"],
)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description="Return every Todo item, newest first.",
    responses={
        200: {"description": "List retrieved successfully"},
        500: {"description": "Database error"},
    },
)
def list_todos(repo: TodoRepository = Depends(get_repository)) -> List[TodoOut]:
    """
    List all todos ordered by creation time, descending.
    """
    return [TodoOut(**it) for it in repo.list_all()]  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=MessageOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item. The body only carries the title.",
    responses={
        201: {"description": "Todo created successfully"},
        400: {"description": "Missing or empty title"},
        500: {"description": "Database error"},
    },
)
def create_todo(payload: TodoCreate, repo: TodoRepository = Depends(get_repository)) -> MessageOut:
    todo_id = repo.create(payload.title)
    logger.info("Todo created", extra={"todo_id": todo_id})
    return MessageOut(message="Todo added")


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=MessageOut,
    summary="Update Todo",
    description="Set the completion flag of a Todo item.",
    responses={
        200: {"description": "Todo updated"},
        400: {"description": "Missing completed field"},
        404: {"description": "Todo not found"},
        500: {"description": "Database error"},
    },
)
def update_todo(
    todo_id: int, payload: TodoUpdate, repo: TodoRepository = Depends(get_repository)
) -> MessageOut:
    """
    Update only the completed field; 404 if no row has this id.
    """
    if not repo.set_completed(todo_id, payload.completed):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo not found")
    return MessageOut(message="Todo updated")


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    response_model=MessageOut,
    summary="Delete Todo",
    description="Delete a Todo item by ID.",
    responses={
        200: {"description": "Todo deleted"},
        404: {"description": "Todo not found"},
        500: {"description": "Database error"},
    },
)
def delete_todo(todo_id: int, repo: TodoRepository = Depends(get_repository)) -> MessageOut:
    if not repo.delete(todo_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo not found")
    return MessageOut(message="Todo deleted")
