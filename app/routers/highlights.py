"""Highlight routes for colouring verse ranges."""
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from app.auth import get_current_user_dependency
from app.models.schemas import HighlightCreate, HighlightResponse, HighlightUpdate
from app.services.annotation_service import VerseAnnotationService, get_highlight_service

router = APIRouter(prefix="/api/highlights", tags=["highlights"])

CurrentUser = Annotated[dict, Depends(get_current_user_dependency)]
HighlightService = Annotated[VerseAnnotationService, Depends(get_highlight_service)]


@router.get("", response_model=List[HighlightResponse])
async def list_highlights(
    current_user: CurrentUser,
    service: HighlightService,
    book_id: Optional[str] = Query(default=None, alias="bookId"),
    chapter: Optional[int] = Query(default=None, ge=1),
    color: Optional[str] = Query(default=None),
    limit: int = Query(default=100, ge=1, le=500),
):
    filters = {"book_id": book_id, "chapter": chapter, "color": color.lower() if color else None}
    return service.list_items(current_user["id"], filters, limit=limit)


@router.get("/{highlight_id}", response_model=HighlightResponse)
async def get_highlight(
    current_user: CurrentUser,
    service: HighlightService,
    highlight_id: int = Path(..., ge=1),
):
    return service.get_item(current_user["id"], highlight_id)


@router.post("", response_model=HighlightResponse, status_code=status.HTTP_201_CREATED)
async def create_highlight(
    payload: HighlightCreate,
    current_user: CurrentUser,
    service: HighlightService,
):
    return service.create_item(current_user["id"], payload.model_dump())


@router.put("/{highlight_id}", response_model=HighlightResponse)
async def update_highlight(
    payload: HighlightUpdate,
    current_user: CurrentUser,
    service: HighlightService,
    highlight_id: int = Path(..., ge=1),
):
    return service.update_item(current_user["id"], highlight_id, payload.model_dump(exclude_none=True))


@router.delete("/{highlight_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_highlight(
    current_user: CurrentUser,
    service: HighlightService,
    highlight_id: int = Path(..., ge=1),
):
    service.delete_item(current_user["id"], highlight_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
