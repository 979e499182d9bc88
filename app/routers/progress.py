"""Routes for logging chapters read and reporting streaks."""
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from app.auth import get_current_user_dependency
from app.models.schemas import BookProgressResponse, ProgressResponse, ReadingLogRequest
from app.services.reading_progress_service import (
    ReadingProgressService,
    get_reading_progress_service,
)

router = APIRouter(prefix="/api/progress", tags=["progress"])

CurrentUser = Annotated[dict, Depends(get_current_user_dependency)]
ProgressService = Annotated[ReadingProgressService, Depends(get_reading_progress_service)]


@router.post("", response_model=ProgressResponse, status_code=status.HTTP_201_CREATED)
async def log_reading(
    payload: ReadingLogRequest,
    current_user: CurrentUser,
    service: ProgressService,
):
    """Mark a chapter as read and advance the daily streak."""
    return service.log_reading(
        user_id=current_user["id"],
        book_id=payload.book_id,
        chapter=payload.chapter,
    )


@router.get("", response_model=ProgressResponse)
async def get_progress(current_user: CurrentUser, service: ProgressService):
    return service.get_progress(user_id=current_user["id"])


@router.get("/books/{book_id}", response_model=BookProgressResponse)
async def get_book_progress(
    current_user: CurrentUser,
    service: ProgressService,
    book_id: str = Path(..., min_length=1),
):
    return service.get_book_progress(user_id=current_user["id"], book_id=book_id)
