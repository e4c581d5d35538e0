"""
Dashboard view-model: the single authenticated screen of the app.

Use it as an async context manager so the auth subscription lives exactly
as long as the view:

    async with Dashboard(auth, store, functions, navigator, notifier, confirm) as view:
        await view.create_note()
        await view.update_note(content="# Groceries")
        await view.generate_tags()

Entering checks the session (redirecting to /auth when there is none),
subscribes to session changes and loads the notes. Leaving always
unsubscribes.
"""

import logging
from typing import Any, List, Optional, Protocol
from uuid import UUID

from neuronotes.client.actions import AIAction
from neuronotes.client.auth import AuthCallback, AuthEvent, Session, Subscription
from neuronotes.client.backend import FunctionError, FunctionsClient
from neuronotes.client.notify import Navigator, Notifier
from neuronotes.client.store import ConfirmDelete, NoteStore
from neuronotes.client.tags import TagManager
from neuronotes.schemas.note import NoteResponse

logger = logging.getLogger(__name__)

AUTH_PATH = "/auth"


class SessionProvider(Protocol):
    def get_session(self) -> Optional[Session]:
        ...

    def on_auth_state_change(self, callback: AuthCallback) -> Subscription:
        ...


class Dashboard:
    def __init__(
        self,
        auth: SessionProvider,
        store: NoteStore,
        functions: FunctionsClient,
        navigator: Navigator,
        notifier: Notifier,
        confirm: ConfirmDelete,
    ):
        self._auth = auth
        self._functions = functions
        self._navigator = navigator
        self._notifier = notifier
        self._confirm = confirm
        self._subscription: Optional[Subscription] = None

        self.store = store
        self.tags = TagManager(functions, notifier, on_change=self._persist_tags)
        self.summarize_action: AIAction[str] = AIAction("summarize-note")
        self.summary: Optional[str] = None
        self.authenticated = False

    async def __aenter__(self) -> "Dashboard":
        self.authenticated = self._auth.get_session() is not None
        self._subscription = self._auth.on_auth_state_change(self._on_auth_event)
        if not self.authenticated:
            self._navigator.redirect(AUTH_PATH)
            return self
        await self.store.load()
        self._sync_selection()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    @property
    def selected(self) -> Optional[NoteResponse]:
        return self.store.selected

    @property
    def visible_notes(self) -> List[NoteResponse]:
        return self.store.visible_notes

    def _on_auth_event(self, event: AuthEvent, session: Optional[Session]) -> None:
        if event is AuthEvent.SIGNED_OUT or session is None:
            logger.info("Session ended, leaving dashboard")
            self.authenticated = False
            self._navigator.redirect(AUTH_PATH)
        else:
            self.authenticated = True

    def _require_session(self) -> bool:
        if self._auth.get_session() is None:
            self.authenticated = False
            self._navigator.redirect(AUTH_PATH)
            return False
        return True

    def _sync_selection(self) -> None:
        note = self.store.selected
        self.tags.reset(note.tags if note else [])
        self.summary = None
        self.summarize_action.reset()

    # Selection and filtering

    def select_note(self, note_id: Optional[UUID]) -> Optional[NoteResponse]:
        note = self.store.select(note_id)
        self._sync_selection()
        return note

    def set_search(self, text: str) -> None:
        self.store.search = text

    def toggle_favorites_filter(self) -> bool:
        self.store.favorites_only = not self.store.favorites_only
        return self.store.favorites_only

    # Note mutations

    async def create_note(self) -> Optional[NoteResponse]:
        if not self._require_session():
            return None
        note = await self.store.create()
        if note is not None:
            self._sync_selection()
        return note

    async def update_note(self, **patch: Any) -> Optional[NoteResponse]:
        if not self._require_session():
            return None
        return await self.store.update(**patch)

    async def toggle_favorite(self) -> Optional[NoteResponse]:
        if self.store.selected is None:
            return None
        return await self.update_note(favorite=not self.store.selected.favorite)

    async def delete_note(self) -> bool:
        if not self._require_session():
            return False
        deleted = await self.store.delete(self._confirm)
        if deleted:
            self._sync_selection()
        return deleted

    # Tags

    async def add_tag(self, raw: str) -> bool:
        if self.store.selected is None:
            return False
        return await self.tags.add(raw)

    async def remove_tag(self, tag: str) -> bool:
        if self.store.selected is None:
            return False
        return await self.tags.remove(tag)

    async def generate_tags(self) -> Optional[List[str]]:
        note = self.store.selected
        if note is None or not self._require_session():
            return None
        # The selection may change while the suggestion is in flight
        suggested = await self.tags.suggest(note.title, note.content)
        if suggested is None:
            return None
        await self._save_tags(note.id, suggested)
        return suggested

    async def _persist_tags(self, tags: List[str]) -> None:
        note = self.store.selected
        if note is None:
            return
        await self._save_tags(note.id, tags)

    async def _save_tags(self, note_id: UUID, tags: List[str]) -> None:
        if not self._require_session():
            return
        await self.store.update_note(note_id, tags=tags)
        # Mirror whatever the store holds now; a failed save rolls the tags back
        note = self.store.selected
        if note is not None and note.id == note_id:
            self.tags.reset(note.tags)

    # Summary

    async def summarize(self) -> Optional[str]:
        note = self.store.selected
        if note is None or not self._require_session():
            return None
        try:
            summary = await self.summarize_action.run(
                lambda: self._functions.summarize_note(note.content)
            )
        except FunctionError as e:
            logger.warning("Summary failed: %s", e.message)
            self._notifier.notify("Failed to generate summary", e.message, error=True)
            return None
        if summary is None:
            return None
        current = self.store.selected
        if current is None or current.id != note.id:
            logger.info("Discarding summary for note %s; selection changed", note.id)
            return None
        self.summary = summary
        self._notifier.notify("Summary generated", "AI has summarized your note")
        return summary
