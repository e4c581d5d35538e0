"""
NeuroNotes Backend: Notes Route Handlers
==========================================

What:  User-scoped CRUD for notes under /api/notes.
How:   Resolves the caller from the bearer token, delegates to NoteService,
       returns JSON. Errors are formatted by the global handlers in main.py.
Who:   Called by the headless client's NotesBackend (neuronotes.client).

Caching:
    Responses are private, user-specific data and are never cached
    (Cache-Control: no-store).
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from neuronotes.database import get_db_session
from neuronotes.dependencies import get_current_user
from neuronotes.schemas.note import (
    ErrorResponse,
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
)
from neuronotes.services.auth_service import AuthenticatedUser
from neuronotes.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Notes"])

COMMON_ERRORS = {
    401: {"description": "Missing or invalid session", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.get(
    "/notes",
    response_model=NoteListResponse,
    responses=COMMON_ERRORS,
    summary="List the current user's notes, newest first",
)
async def list_notes(
    response: Response,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteListResponse:
    result = await note_service.list_notes(db=db, user_id=user.id)
    response.headers["X-Total-Count"] = str(result.total_count)
    response.headers["Cache-Control"] = "no-store"
    return result


@router.post(
    "/notes",
    status_code=201,
    response_model=NoteResponse,
    responses={**COMMON_ERRORS, 422: {"description": "Invalid note fields"}},
    summary="Create a note",
    description=(
        "Creates a note owned by the caller. Any field left out gets its default: "
        "placeholder title, empty content, no tags, not a favorite."
    ),
)
async def create_note(
    data: Optional[NoteCreate] = Body(default=None),
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create_note(db=db, user_id=user.id, data=data or NoteCreate())


@router.get(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={**COMMON_ERRORS, 404: {"description": "Note not found", "model": ErrorResponse}},
    summary="Get a single note",
)
async def get_note(
    note_id: UUID,
    response: Response,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    result = await note_service.get_note(db=db, user_id=user.id, note_id=note_id)
    response.headers["Cache-Control"] = "no-store"
    return result


@router.patch(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={
        **COMMON_ERRORS,
        400: {"description": "Empty patch", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    summary="Partially update a note",
    description="Only the fields present in the body are changed. Tags are lowercased and deduplicated.",
)
async def update_note(
    note_id: UUID,
    patch: NoteUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.update_note(db=db, user_id=user.id, note_id=note_id, patch=patch)


@router.delete(
    "/notes/{note_id}",
    status_code=204,
    responses={**COMMON_ERRORS, 404: {"description": "Note not found", "model": ErrorResponse}},
    summary="Delete a note",
)
async def delete_note(
    note_id: UUID,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await note_service.delete_note(db=db, user_id=user.id, note_id=note_id)
    return Response(status_code=204)
