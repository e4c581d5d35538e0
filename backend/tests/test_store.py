"""
NeuroNotes: Client NoteStore Tests
====================================

What:  Filtering and the load/create/update/delete synchronization flow.
How:   NotesBackend is an AsyncMock; local state is inspected after each call.

What we test:
    ✅ Filter matches title or content, case-insensitively; favorites gate
    ✅ Filtering twice gives the same result as filtering once
    ✅ Mutations change local state only after the backend succeeds
    ✅ Cancelled delete leaves list and selection untouched
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import httpx
import pytest

from neuronotes.client.backend import BackendError, NotesBackend
from neuronotes.client.config import ClientSettings
from neuronotes.client.store import NoteStore, filter_notes, matches_filter
from neuronotes.schemas.note import NoteResponse


@pytest.fixture
def make(note_payload):
    def _make(**overrides):
        return NoteResponse.model_validate(note_payload(**overrides))

    return _make


@pytest.fixture
def backend():
    return AsyncMock(spec=NotesBackend)


@pytest.fixture
def notifier():
    return MagicMock()


@pytest.fixture
def store(backend, notifier):
    return NoteStore(backend, notifier)


class TestFiltering:

    def test_matches_title_or_content(self, make):
        note = make(title="Groceries", content="Milk and EGGS")

        assert matches_filter(note, "grocer", False)
        assert matches_filter(note, "eggs", False)
        assert not matches_filter(note, "bread", False)

    def test_tags_are_not_searched(self, make):
        note = make(title="x", content="y", tags=["food"])

        assert not matches_filter(note, "food", False)

    def test_empty_search_matches_everything(self, make):
        assert matches_filter(make(), "", False)

    def test_whitespace_search_is_literal(self, make):
        spaced = make(title="Work plan", content="")
        solid = make(title="Groceries", content="milk")

        assert filter_notes([spaced, solid], " ") == [spaced]
        assert filter_notes([spaced, solid], "  ") == []

    def test_favorites_only(self, make):
        fav = make(title="a", favorite=True)
        plain = make(title="a", favorite=False)

        assert filter_notes([fav, plain], "", True) == [fav]
        assert filter_notes([fav, plain], "a", True) == [fav]
        assert filter_notes([fav, plain], "b", True) == []

    def test_filter_is_idempotent(self, make):
        notes = [make(title="Work plan"), make(title="Holiday"), make(content="work log")]

        once = filter_notes(notes, "work")
        twice = filter_notes(once, "work")

        assert once == twice
        assert len(once) == 2

    def test_visible_notes_never_touch_backend(self, store, backend, make):
        store.notes = [make(title="Work", favorite=True), make(title="Play")]
        store.search = "WORK"
        store.favorites_only = True

        assert [n.title for n in store.visible_notes] == ["Work"]
        assert backend.mock_calls == []


class TestLoad:

    @pytest.mark.asyncio
    async def test_load_orders_newest_first(self, store, backend, make):
        older = make(title="old", created_at="2025-01-01T00:00:00Z")
        newer = make(title="new", created_at="2025-02-01T00:00:00Z")
        backend.list_notes.return_value = [older, newer]

        assert await store.load() is True

        assert [n.title for n in store.notes] == ["new", "old"]
        assert store.loading is False

    @pytest.mark.asyncio
    async def test_load_failure_keeps_state(self, store, backend, notifier, make):
        existing = make()
        store.notes = [existing]
        backend.list_notes.side_effect = BackendError("Could not reach the server")

        assert await store.load() is False

        assert store.notes == [existing]
        notifier.notify.assert_called_once_with(
            "Error loading notes", "Could not reach the server", error=True
        )

    @pytest.mark.asyncio
    async def test_load_unparseable_reply_is_reported(self, notifier, make):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"unexpected": True}))
        settings = ClientSettings(api_url="http://api.test", request_timeout=5)
        store = NoteStore(NotesBackend(lambda: "tok", settings, transport), notifier)
        existing = make()
        store.notes = [existing]

        assert await store.load() is False

        assert store.notes == [existing]
        assert store.loading is False
        notifier.notify.assert_called_once_with(
            "Error loading notes", "Unexpected response from server", error=True
        )


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_prepends_and_selects(self, store, backend, make):
        existing = make(title="existing")
        store.notes = [existing]
        created = make()
        backend.create_note.return_value = created

        result = await store.create()

        assert result == created
        assert store.notes == [created, existing]
        assert store.selected == created
        backend.create_note.assert_awaited_once_with(title="Untitled Note", content="", tags=[])

    @pytest.mark.asyncio
    async def test_create_failure(self, store, backend, notifier):
        backend.create_note.side_effect = BackendError("boom", status_code=500)

        assert await store.create() is None

        assert store.notes == []
        assert store.selected is None
        assert notifier.notify.call_args.kwargs == {"error": True}


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_without_selection_is_noop(self, store, backend):
        assert await store.update(title="x") is None
        backend.update_note.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_merges_saved_note(self, store, backend, make):
        note = make(title="Old")
        other = make(title="Other")
        store.notes = [note, other]
        store.select(note.id)
        saved = note.model_copy(
            update={"title": "New", "updated_at": datetime(2025, 3, 1, tzinfo=timezone.utc)}
        )
        backend.update_note.return_value = saved

        result = await store.update(title="New")

        assert result == saved
        assert store.selected.title == "New"
        assert store.notes[0].title == "New"
        assert store.notes[1] == other
        backend.update_note.assert_awaited_once_with(note.id, {"title": "New"})

    @pytest.mark.asyncio
    async def test_update_failure_keeps_state(self, store, backend, notifier, make):
        note = make(title="Old")
        store.notes = [note]
        store.select(note.id)
        backend.update_note.side_effect = BackendError("nope")

        assert await store.update(title="New") is None

        assert store.selected.title == "Old"
        assert store.notes == [note]
        notifier.notify.assert_called_once_with("Error updating note", "nope", error=True)

    @pytest.mark.asyncio
    async def test_update_note_by_id_leaves_other_selection(self, store, backend, make):
        first = make(title="First")
        second = make(title="Second")
        store.notes = [first, second]
        store.select(second.id)
        saved = first.model_copy(update={"tags": ["food"]})
        backend.update_note.return_value = saved

        result = await store.update_note(first.id, tags=["food"])

        assert result == saved
        assert store.notes == [saved, second]
        assert store.selected == second
        backend.update_note.assert_awaited_once_with(first.id, {"tags": ["food"]})


class TestDelete:

    @pytest.mark.asyncio
    async def test_cancelled_delete_changes_nothing(self, store, backend, make):
        note = make()
        store.notes = [note]
        store.select(note.id)

        deleted = await store.delete(AsyncMock(return_value=False))

        assert deleted is False
        assert store.notes == [note]
        assert store.selected == note
        backend.delete_note.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_confirmed_delete(self, store, backend, make):
        note, other = make(), make()
        store.notes = [note, other]
        store.select(note.id)
        confirm = AsyncMock(return_value=True)

        assert await store.delete(confirm) is True

        confirm.assert_awaited_once_with(note)
        backend.delete_note.assert_awaited_once_with(note.id)
        assert store.notes == [other]
        assert store.selected is None

    @pytest.mark.asyncio
    async def test_delete_failure_keeps_note(self, store, backend, make):
        note = make()
        store.notes = [note]
        store.select(note.id)
        backend.delete_note.side_effect = BackendError("nope")

        assert await store.delete(AsyncMock(return_value=True)) is False

        assert store.notes == [note]
        assert store.selected == note

    def test_select_unknown_id(self, store, make):
        store.notes = [make()]

        assert store.select(uuid4()) is None
        assert store.selected is None
