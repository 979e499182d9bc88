"""Bookmark routes for saving verse ranges."""
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from app.auth import get_current_user_dependency
from app.models.schemas import BookmarkCreate, BookmarkResponse, BookmarkUpdate
from app.services.annotation_service import VerseAnnotationService, get_bookmark_service

router = APIRouter(prefix="/api/bookmarks", tags=["bookmarks"])

CurrentUser = Annotated[dict, Depends(get_current_user_dependency)]
BookmarkService = Annotated[VerseAnnotationService, Depends(get_bookmark_service)]


@router.get("", response_model=List[BookmarkResponse])
async def list_bookmarks(
    current_user: CurrentUser,
    service: BookmarkService,
    book_id: Optional[str] = Query(default=None, alias="bookId"),
    chapter: Optional[int] = Query(default=None, ge=1),
    limit: int = Query(default=100, ge=1, le=500),
):
    """List the caller's bookmarks, newest first."""
    return service.list_items(
        current_user["id"], {"book_id": book_id, "chapter": chapter}, limit=limit
    )


@router.get("/{bookmark_id}", response_model=BookmarkResponse)
async def get_bookmark(
    current_user: CurrentUser,
    service: BookmarkService,
    bookmark_id: int = Path(..., ge=1),
):
    return service.get_item(current_user["id"], bookmark_id)


@router.post("", response_model=BookmarkResponse, status_code=status.HTTP_201_CREATED)
async def create_bookmark(
    payload: BookmarkCreate,
    current_user: CurrentUser,
    service: BookmarkService,
):
    return service.create_item(current_user["id"], payload.model_dump())


@router.put("/{bookmark_id}", response_model=BookmarkResponse)
async def update_bookmark(
    payload: BookmarkUpdate,
    current_user: CurrentUser,
    service: BookmarkService,
    bookmark_id: int = Path(..., ge=1),
):
    return service.update_item(current_user["id"], bookmark_id, payload.model_dump(exclude_none=True))


@router.delete("/{bookmark_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bookmark(
    current_user: CurrentUser,
    service: BookmarkService,
    bookmark_id: int = Path(..., ge=1),
):
    service.delete_item(current_user["id"], bookmark_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
