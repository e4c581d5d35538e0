"""
NeuroNotes Backend: Note Service (Business Logic)
===================================================

What:  User-scoped CRUD for notes.
How:   Every query filters on BOTH user_id and id, so a note owned by another
       user is indistinguishable from a missing one (NotFoundError).
Who:   Called by the notes route handlers.
When:  Once per notes API request, inside the request's DB session
       (commit/rollback happen in get_db_session).

Error Handling:
    NotFoundError / ValidationError propagate unchanged. Anything else is
    logged with its type and re-raised as DatabaseError, whose message
    never carries SQL or driver details.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from neuronotes.config import settings
from neuronotes.exceptions import DatabaseError, NeuroNotesError, NotFoundError, ValidationError
from neuronotes.models.note import Note
from neuronotes.schemas.note import NoteCreate, NoteListResponse, NoteResponse, NoteUpdate

logger = logging.getLogger(__name__)


class NoteService:
    """
    Stateless business logic for note operations.

    Responsibilities:
        - list_notes():  the user's notes, newest first
        - create_note(): insert with defaults for anything not supplied
        - get_note():    single owned note
        - update_note(): apply a partial patch, refresh updated_at
        - delete_note(): remove an owned note
    """

    async def list_notes(self, db: AsyncSession, user_id: uuid.UUID) -> NoteListResponse:
        """
        Query plan:
            SELECT * FROM notes WHERE user_id = :uid ORDER BY created_at DESC
            → idx_notes_user_created_at
        """
        try:
            result = await db.execute(
                select(Note)
                .where(Note.user_id == user_id)
                .order_by(desc(Note.created_at))
            )
            notes: List[Note] = list(result.scalars().all())
        except Exception as e:
            logger.error("Database error listing notes for %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return NoteListResponse(
            notes=[NoteResponse.model_validate(note) for note in notes],
            total_count=len(notes),
        )

    async def create_note(
        self, db: AsyncSession, user_id: uuid.UUID, data: NoteCreate
    ) -> NoteResponse:
        now = datetime.now(timezone.utc)
        note = Note(
            id=uuid.uuid4(),
            user_id=user_id,
            title=data.title if data.title is not None else settings.default_note_title,
            content=data.content,
            tags=list(data.tags),
            favorite=data.favorite,
            created_at=now,
            updated_at=now,
        )
        try:
            db.add(note)
            await db.flush()
        except Exception as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the note. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Note created: %s (user=%s)", note.id, user_id)
        return NoteResponse.model_validate(note)

    async def get_note(
        self, db: AsyncSession, user_id: uuid.UUID, note_id: uuid.UUID
    ) -> NoteResponse:
        note = await self._get_owned(db, user_id, note_id)
        return NoteResponse.model_validate(note)

    async def update_note(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        note_id: uuid.UUID,
        patch: NoteUpdate,
    ) -> NoteResponse:
        """
        Apply only the fields present in the patch.

        Raises:
            ValidationError: The patch carries no fields.
            NotFoundError:   No such note for this user.
        """
        changes = patch.changes()
        if not changes:
            raise ValidationError(message="No fields to update")

        note = await self._get_owned(db, user_id, note_id)
        try:
            for field, value in changes.items():
                setattr(note, field, value)
            note.updated_at = datetime.now(timezone.utc)
            await db.flush()
        except Exception as e:
            logger.error("Database error updating note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the note. Please try again.",
                context={"note_id": str(note_id), "error_type": type(e).__name__},
            )

        logger.info("Note %s updated: %s", note_id, ", ".join(sorted(changes)))
        return NoteResponse.model_validate(note)

    async def delete_note(
        self, db: AsyncSession, user_id: uuid.UUID, note_id: uuid.UUID
    ) -> None:
        note = await self._get_owned(db, user_id, note_id)
        try:
            await db.delete(note)
            await db.flush()
        except Exception as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the note. Please try again.",
                context={"note_id": str(note_id), "error_type": type(e).__name__},
            )
        logger.info("Note deleted: %s (user=%s)", note_id, user_id)

    async def _get_owned(
        self, db: AsyncSession, user_id: uuid.UUID, note_id: uuid.UUID
    ) -> Note:
        try:
            result = await db.execute(
                select(Note).where(Note.id == note_id, Note.user_id == user_id)
            )
            note = result.scalar_one_or_none()
        except NeuroNotesError:
            raise
        except Exception as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": str(note_id)},
            )

        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return note


note_service = NoteService()
