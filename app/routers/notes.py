"""Study note routes."""
from typing import Annotated, List, Literal, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from app.auth import get_current_user_dependency
from app.models.schemas import (
    NoteCreate,
    NoteResponse,
    NoteUpdate,
    PublicNoteResponse,
    PublicNotesByVerseResponse,
)
from app.services.annotation_service import NoteService, get_note_service

router = APIRouter(prefix="/api/notes", tags=["notes"])

CurrentUser = Annotated[dict, Depends(get_current_user_dependency)]
Notes = Annotated[NoteService, Depends(get_note_service)]


@router.get("", response_model=List[NoteResponse])
async def list_notes(
    current_user: CurrentUser,
    service: Notes,
    book_id: Optional[str] = Query(default=None, alias="bookId"),
    chapter: Optional[int] = Query(default=None, ge=1),
    visibility: Optional[Literal["private", "public"]] = Query(default=None),
    limit: int = Query(default=50, ge=1, le=500),
):
    filters = {"book_id": book_id, "chapter": chapter, "visibility": visibility}
    return service.list_items(current_user["id"], filters, limit=limit)


# Public notes are readable without authentication.
@router.get("/public", response_model=List[PublicNoteResponse])
async def list_public_notes(
    service: Notes,
    book_id: Optional[str] = Query(default=None, alias="bookId"),
    chapter: Optional[int] = Query(default=None, ge=1),
    limit: int = Query(default=10, ge=1, le=50),
):
    return service.list_public_notes(book_id=book_id, chapter=chapter, limit=limit)


@router.get("/public/verse", response_model=PublicNotesByVerseResponse)
async def get_public_notes_by_verse(
    service: Notes,
    book_id: str = Query(..., alias="bookId", min_length=1),
    chapter: int = Query(..., ge=1),
    verse_start: int = Query(..., alias="verseStart", ge=1),
    verse_end: int = Query(..., alias="verseEnd", ge=1),
):
    return service.public_notes_for_verse(book_id, chapter, verse_start, verse_end)


@router.get("/public/{note_id}", response_model=PublicNoteResponse)
async def get_public_note(service: Notes, note_id: int = Path(..., ge=1)):
    return service.get_public_note(note_id)


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    current_user: CurrentUser,
    service: Notes,
    note_id: int = Path(..., ge=1),
):
    return service.get_item(current_user["id"], note_id)


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    payload: NoteCreate,
    current_user: CurrentUser,
    service: Notes,
):
    return service.create_item(current_user["id"], payload.model_dump())


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    payload: NoteUpdate,
    current_user: CurrentUser,
    service: Notes,
    note_id: int = Path(..., ge=1),
):
    return service.update_item(current_user["id"], note_id, payload.model_dump(exclude_none=True))


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    current_user: CurrentUser,
    service: Notes,
    note_id: int = Path(..., ge=1),
):
    service.delete_item(current_user["id"], note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
