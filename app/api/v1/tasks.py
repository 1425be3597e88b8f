"""Tasks API endpoints."""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from app.core.exceptions import NotFoundError
from app.dependencies import raise_board_failure, require_authenticated_board
from app.schemas.task import Task, TaskFilter, TaskForm, TaskResponse
from app.services.board_service import BoardStats, TaskBoard

router = APIRouter()


class TaskListResponse(BaseModel):
    """Filtered board view."""

    items: List[TaskResponse]
    stats: BoardStats
    filter: TaskFilter
    category_id: str
    state: str


def to_response(board: TaskBoard, task: Task) -> TaskResponse:
    category = board.get_category(task.category_id) if task.category_id else None
    return TaskResponse(
        **task.model_dump(),
        category_name=category.name if category else None,
        category_color=category.color if category else None,
    )


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    filter: Optional[TaskFilter] = Query(default=None, description="all, completed, pending, today or overdue"),
    category_id: Optional[str] = Query(default=None, description="Restrict to one category; empty for all"),
    board: TaskBoard = Depends(require_authenticated_board),
):
    """List tasks for the current filter and category selection."""
    if filter is not None:
        board.filter_mode = filter
    if category_id is not None:
        board.selected_category = category_id
    return TaskListResponse(
        items=[to_response(board, task) for task in board.filtered_tasks()],
        stats=board.stats,
        filter=board.filter_mode,
        category_id=board.selected_category,
        state=board.tasks_state.value,
    )


@router.get("/search", response_model=List[TaskResponse])
async def search_tasks(
    q: str = Query(..., min_length=1, description="Search by title or description"),
    board: TaskBoard = Depends(require_authenticated_board),
):
    """Search tasks in the record store."""
    return [to_response(board, task) for task in await board.search_tasks(q)]


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    form: TaskForm,
    board: TaskBoard = Depends(require_authenticated_board),
):
    """Create a task."""
    task = await board.create_task(form)
    if task is None:
        raise_board_failure(board)
    return to_response(board, task)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    form: TaskForm,
    board: TaskBoard = Depends(require_authenticated_board),
):
    """Edit a task."""
    if board.get_task(task_id) is None:
        raise NotFoundError("Task not found")
    board.start_edit(task_id)
    task = await board.edit_task(task_id, form)
    if task is None:
        raise_board_failure(board)
    return to_response(board, task)


@router.post("/{task_id}/toggle", response_model=TaskResponse)
async def toggle_task(
    task_id: str,
    board: TaskBoard = Depends(require_authenticated_board),
):
    """Toggle task completion."""
    if board.get_task(task_id) is None:
        raise NotFoundError("Task not found")
    task = await board.toggle_completion(task_id)
    if task is None:
        raise_board_failure(board)
    return to_response(board, task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: str,
    board: TaskBoard = Depends(require_authenticated_board),
):
    """Delete a task."""
    if board.get_task(task_id) is None:
        raise NotFoundError("Task not found")
    if not await board.delete_task(task_id):
        raise_board_failure(board)
