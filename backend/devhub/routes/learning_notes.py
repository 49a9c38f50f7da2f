"""
DevHub Backend — Learning Note Route Handlers
===============================================

What:  CRUD and filters for learning notes under /api/learning-notes.
How:   Same shape as the portfolio routes; notes list newest first by `date`.
"""

from typing import List

from fastapi import APIRouter, Depends, Response

from devhub.dependencies import get_learning_note_repository
from devhub.exceptions import NotFoundError
from devhub.schemas.common import CreatedResponse, ErrorResponse
from devhub.schemas.learning_note import LearningNote
from devhub.services.lookup import Found
from devhub.services.repository import LearningNoteRepository

router = APIRouter(prefix="/api/learning-notes", tags=["Learning Notes"])

ERROR_RESPONSES = {
    400: {"description": "Invalid record", "model": ErrorResponse},
    500: {"description": "Store unavailable", "model": ErrorResponse},
}


@router.get("", response_model=List[LearningNote], summary="List learning notes, newest first")
async def list_notes(
    repo: LearningNoteRepository = Depends(get_learning_note_repository),
) -> List[LearningNote]:
    return await repo.list()


@router.get(
    "/category/{category}",
    response_model=List[LearningNote],
    summary="List learning notes of one category",
)
async def list_notes_by_category(
    category: str,
    repo: LearningNoteRepository = Depends(get_learning_note_repository),
) -> List[LearningNote]:
    return await repo.by_category(category)


@router.get("/tag/{tag}", response_model=List[LearningNote], summary="List learning notes with a tag")
async def list_notes_by_tag(
    tag: str,
    repo: LearningNoteRepository = Depends(get_learning_note_repository),
) -> List[LearningNote]:
    return await repo.by_tag(tag)


@router.get(
    "/{note_id}",
    response_model=LearningNote,
    responses={404: {"description": "Note not found", "model": ErrorResponse}},
    summary="Get a learning note",
)
async def get_note(
    note_id: str,
    repo: LearningNoteRepository = Depends(get_learning_note_repository),
) -> LearningNote:
    result = await repo.get_by_id(note_id)
    if isinstance(result, Found):
        return result.record
    raise NotFoundError(resource="learning note", resource_id=note_id)


@router.post(
    "",
    status_code=201,
    response_model=CreatedResponse,
    responses=ERROR_RESPONSES,
    summary="Create a learning note",
)
async def create_note(
    note: LearningNote,
    repo: LearningNoteRepository = Depends(get_learning_note_repository),
) -> CreatedResponse:
    return CreatedResponse(id=await repo.create(note))


@router.put(
    "/{note_id}",
    response_model=LearningNote,
    responses=ERROR_RESPONSES,
    summary="Replace a learning note",
)
async def update_note(
    note_id: str,
    note: LearningNote,
    repo: LearningNoteRepository = Depends(get_learning_note_repository),
) -> LearningNote:
    return await repo.update(note_id, note)


@router.delete("/{note_id}", status_code=204, summary="Delete a learning note")
async def delete_note(
    note_id: str,
    repo: LearningNoteRepository = Depends(get_learning_note_repository),
) -> Response:
    await repo.delete(note_id)
    return Response(status_code=204)
