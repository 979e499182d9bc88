"""Routes for topical verse collections."""
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from app.auth import get_current_user_dependency
from app.models.schemas import (
    TopicCreate,
    TopicRename,
    TopicResponse,
    TopicStatsResponse,
    TopicVersesChangeResponse,
    TopicVersesRequest,
)
from app.services.topic_service import TopicService, get_topic_service

router = APIRouter(prefix="/api/topics", tags=["topics"])

CurrentUser = Annotated[dict, Depends(get_current_user_dependency)]
Topics = Annotated[TopicService, Depends(get_topic_service)]


@router.post("", response_model=TopicResponse, status_code=status.HTTP_201_CREATED)
async def create_topic(payload: TopicCreate, current_user: CurrentUser, service: Topics):
    return service.create_topic(
        user_id=current_user["id"],
        name=payload.name,
        verses=[verse.model_dump() for verse in payload.verses],
    )


@router.get("", response_model=List[TopicResponse])
async def list_topics(
    current_user: CurrentUser,
    service: Topics,
    search: Optional[str] = Query(default=None, max_length=100),
    limit: int = Query(default=50, ge=1, le=200),
):
    return service.list_topics(user_id=current_user["id"], search=search, limit=limit)


@router.get("/stats", response_model=TopicStatsResponse)
async def get_topic_stats(current_user: CurrentUser, service: Topics):
    return service.get_stats(user_id=current_user["id"])


@router.get("/verse", response_model=List[TopicResponse])
async def get_topics_by_verse(
    current_user: CurrentUser,
    service: Topics,
    book_id: str = Query(..., alias="bookId", min_length=1),
    chapter: int = Query(..., ge=1),
    verse_start: int = Query(..., alias="verseStart", ge=1),
    verse_end: Optional[int] = Query(default=None, alias="verseEnd", ge=1),
):
    """Topics containing any verse of the given span."""
    return service.topics_for_verse(
        user_id=current_user["id"],
        book_id=book_id,
        chapter=chapter,
        verse_start=verse_start,
        verse_end=verse_end,
    )


@router.get("/{topic_id}", response_model=TopicResponse)
async def get_topic(current_user: CurrentUser, service: Topics, topic_id: int = Path(..., ge=1)):
    return service.get_topic(user_id=current_user["id"], topic_id=topic_id)


@router.put("/{topic_id}", response_model=TopicResponse)
async def rename_topic(
    payload: TopicRename,
    current_user: CurrentUser,
    service: Topics,
    topic_id: int = Path(..., ge=1),
):
    return service.rename_topic(user_id=current_user["id"], topic_id=topic_id, name=payload.name)


@router.delete("/{topic_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_topic(current_user: CurrentUser, service: Topics, topic_id: int = Path(..., ge=1)):
    service.delete_topic(user_id=current_user["id"], topic_id=topic_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{topic_id}/verses", response_model=TopicVersesChangeResponse)
async def add_topic_verses(
    payload: TopicVersesRequest,
    current_user: CurrentUser,
    service: Topics,
    topic_id: int = Path(..., ge=1),
):
    return service.add_verses(
        user_id=current_user["id"],
        topic_id=topic_id,
        verses=[verse.model_dump() for verse in payload.verses],
    )


@router.delete("/{topic_id}/verses", response_model=TopicVersesChangeResponse)
async def remove_topic_verses(
    payload: TopicVersesRequest,
    current_user: CurrentUser,
    service: Topics,
    topic_id: int = Path(..., ge=1),
):
    return service.remove_verses(
        user_id=current_user["id"],
        topic_id=topic_id,
        verses=[verse.model_dump() for verse in payload.verses],
    )
