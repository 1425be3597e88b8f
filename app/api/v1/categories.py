"""Categories API endpoints."""
from typing import List
from fastapi import APIRouter, Depends, status
from app.core.exceptions import NotFoundError
from app.dependencies import raise_board_failure, require_authenticated_board
from app.schemas.category import Category, CategoryCreate
from app.services.board_service import TaskBoard

router = APIRouter()


@router.get("", response_model=List[Category])
async def list_categories(board: TaskBoard = Depends(require_authenticated_board)):
    """List categories with their open task counts."""
    return list(board.categories)


@router.post("", response_model=Category, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: CategoryCreate,
    board: TaskBoard = Depends(require_authenticated_board),
):
    """Create a category."""
    category = await board.create_category(payload)
    if category is None:
        raise_board_failure(board)
    return category


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str,
    board: TaskBoard = Depends(require_authenticated_board),
):
    """Delete a category. Tasks pointing at it keep the reference."""
    if board.get_category(category_id) is None:
        raise NotFoundError("Category not found")
    if not await board.delete_category(category_id):
        raise_board_failure(board)
