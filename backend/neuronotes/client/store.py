"""
Client-side note collection with search and favorites filtering.

The store mirrors the server: every mutation goes to the backend first and
local state changes only after it succeeds, so a failed call leaves the
list and the selection exactly as they were.
"""

import logging
from typing import Any, Awaitable, Callable, Iterable, List, Optional
from uuid import UUID

from neuronotes.client.backend import BackendError, NotesBackend
from neuronotes.client.notify import Notifier
from neuronotes.schemas.note import NoteResponse

logger = logging.getLogger(__name__)

DEFAULT_NOTE_TITLE = "Untitled Note"

ConfirmDelete = Callable[[NoteResponse], Awaitable[bool]]


def matches_filter(note: NoteResponse, search: str, favorites_only: bool) -> bool:
    """Case-insensitive substring match on title or content."""
    if favorites_only and not note.favorite:
        return False
    needle = search.lower()
    if not needle:
        return True
    return needle in note.title.lower() or needle in note.content.lower()


def filter_notes(
    notes: Iterable[NoteResponse], search: str = "", favorites_only: bool = False
) -> List[NoteResponse]:
    return [note for note in notes if matches_filter(note, search, favorites_only)]


class NoteStore:
    def __init__(self, backend: NotesBackend, notifier: Notifier):
        self._backend = backend
        self._notifier = notifier
        self.notes: List[NoteResponse] = []
        self.selected: Optional[NoteResponse] = None
        self.search = ""
        self.favorites_only = False
        self.loading = False

    @property
    def visible_notes(self) -> List[NoteResponse]:
        return filter_notes(self.notes, self.search, self.favorites_only)

    def select(self, note_id: Optional[UUID]) -> Optional[NoteResponse]:
        if note_id is None:
            self.selected = None
            return None
        self.selected = next((n for n in self.notes if n.id == note_id), None)
        return self.selected

    async def load(self) -> bool:
        self.loading = True
        try:
            notes = await self._backend.list_notes()
        except BackendError as e:
            logger.warning("Loading notes failed: %s", e.message)
            self._notifier.notify("Error loading notes", e.message, error=True)
            return False
        finally:
            self.loading = False

        self.notes = sorted(notes, key=lambda n: n.created_at, reverse=True)
        if self.selected is not None:
            self.select(self.selected.id)
        logger.info("Loaded %d notes", len(self.notes))
        return True

    async def create(self) -> Optional[NoteResponse]:
        try:
            note = await self._backend.create_note(title=DEFAULT_NOTE_TITLE, content="", tags=[])
        except BackendError as e:
            self._notifier.notify("Error creating note", e.message, error=True)
            return None

        self.notes.insert(0, note)
        self.selected = note
        self._notifier.notify("Note created", "Your new note is ready")
        return note

    async def update(self, **patch: Any) -> Optional[NoteResponse]:
        """Persist `patch` on the selected note and merge the saved row back."""
        if self.selected is None:
            return None
        return await self.update_note(self.selected.id, **patch)

    async def update_note(self, note_id: UUID, **patch: Any) -> Optional[NoteResponse]:
        """
        Persist `patch` on the note with `note_id`.

        The saved row replaces the list entry, and the selection only when it
        is still that note.
        """
        if not patch:
            return None
        try:
            saved = await self._backend.update_note(note_id, patch)
        except BackendError as e:
            self._notifier.notify("Error updating note", e.message, error=True)
            return None

        self.notes = [saved if n.id == note_id else n for n in self.notes]
        if self.selected is not None and self.selected.id == note_id:
            self.selected = saved
        return saved

    async def delete(self, confirm: ConfirmDelete) -> bool:
        if self.selected is None:
            return False
        note = self.selected
        if not await confirm(note):
            return False
        try:
            await self._backend.delete_note(note.id)
        except BackendError as e:
            self._notifier.notify("Error deleting note", e.message, error=True)
            return False

        self.notes = [n for n in self.notes if n.id != note.id]
        self.selected = None
        self._notifier.notify("Note deleted", "Your note has been deleted")
        return True
