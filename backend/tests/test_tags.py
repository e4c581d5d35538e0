"""
NeuroNotes: Tag Normalization and TagManager Tests
====================================================

What:  Shared normalization plus the client tag manager's add/remove/generate.
How:   FunctionsClient is an AsyncMock; the notifier is a MagicMock.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from neuronotes.client.actions import ActionState
from neuronotes.client.backend import FunctionError, FunctionsClient
from neuronotes.client.tags import TagManager
from neuronotes.tags import normalize_tag, normalize_tags


class TestNormalize:

    def test_normalize_tag(self):
        assert normalize_tag("  Work ") == "work"
        assert normalize_tag("   ") == ""

    def test_normalize_tags_keeps_first_occurrence(self):
        assert normalize_tags(["Work", "ideas", "WORK", " ", "Ideas", "todo"]) == [
            "work",
            "ideas",
            "todo",
        ]


@pytest.fixture
def functions():
    return AsyncMock(spec=FunctionsClient)


@pytest.fixture
def notifier():
    return MagicMock()


class TestManualEditing:

    @pytest.mark.asyncio
    async def test_add_normalizes(self, functions, notifier):
        manager = TagManager(functions, notifier)

        assert await manager.add("  Work ") is True
        assert manager.tags == ["work"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", ["work", "WORK", "  Work  "])
    async def test_add_duplicate_leaves_sequence_unchanged(self, functions, notifier, raw):
        on_change = AsyncMock()
        manager = TagManager(functions, notifier, tags=["work", "ideas"], on_change=on_change)

        assert await manager.add(raw) is False
        assert manager.tags == ["work", "ideas"]
        on_change.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_add_empty_rejected(self, functions, notifier):
        manager = TagManager(functions, notifier, tags=["work"])

        assert await manager.add("   ") is False
        assert manager.tags == ["work"]

    @pytest.mark.asyncio
    async def test_remove_present_tag(self, functions, notifier):
        on_change = AsyncMock()
        manager = TagManager(functions, notifier, tags=["work", "ideas", "todo"], on_change=on_change)

        assert await manager.remove("ideas") is True
        assert manager.tags == ["work", "todo"]
        on_change.assert_awaited_once_with(["work", "todo"])

    @pytest.mark.asyncio
    async def test_remove_absent_tag(self, functions, notifier):
        on_change = AsyncMock()
        manager = TagManager(functions, notifier, tags=["work"], on_change=on_change)

        assert await manager.remove("play") is False
        assert manager.tags == ["work"]
        on_change.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_add_reports_full_sequence(self, functions, notifier):
        on_change = AsyncMock()
        manager = TagManager(functions, notifier, tags=["work"], on_change=on_change)

        await manager.add("Ideas")

        on_change.assert_awaited_once_with(["work", "ideas"])

    def test_reset_does_not_report(self, functions, notifier):
        on_change = AsyncMock()
        manager = TagManager(functions, notifier, on_change=on_change)

        manager.reset(["A", "a", "b"])

        assert manager.tags == ["a", "b"]
        on_change.assert_not_called()


class TestGenerate:

    @pytest.mark.asyncio
    async def test_generate_replaces_tags(self, functions, notifier):
        functions.suggest_tags.return_value = ["food", "shopping", "list"]
        on_change = AsyncMock()
        manager = TagManager(functions, notifier, tags=["old"], on_change=on_change)

        result = await manager.generate("Groceries", "milk, eggs, bread")

        assert result == ["food", "shopping", "list"]
        assert manager.tags == ["food", "shopping", "list"]
        assert manager.action.state is ActionState.DONE
        functions.suggest_tags.assert_awaited_once_with("Groceries", "milk, eggs, bread")
        on_change.assert_awaited_once_with(["food", "shopping", "list"])

    @pytest.mark.asyncio
    async def test_suggest_leaves_tags_alone(self, functions, notifier):
        functions.suggest_tags.return_value = [" Food ", "Shopping", "list"]
        on_change = AsyncMock()
        manager = TagManager(functions, notifier, tags=["old"], on_change=on_change)

        result = await manager.suggest("Groceries", "milk")

        assert result == ["food", "shopping", "list"]
        assert manager.tags == ["old"]
        on_change.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_generate_failure_keeps_tags(self, functions, notifier):
        functions.suggest_tags.side_effect = FunctionError(
            "Rate limit exceeded. Please try again later.", status_code=429
        )
        manager = TagManager(functions, notifier, tags=["work"])

        result = await manager.generate("t", "c")

        assert result is None
        assert manager.tags == ["work"]
        assert manager.action.state is ActionState.FAILED
        notifier.notify.assert_called_once_with(
            "Failed to generate tags",
            "Rate limit exceeded. Please try again later.",
            error=True,
        )

    @pytest.mark.asyncio
    async def test_second_trigger_while_pending_is_ignored(self, functions, notifier):
        release = asyncio.Event()

        async def slow_suggest(title, content):
            await release.wait()
            return ["a", "b", "c"]

        functions.suggest_tags.side_effect = slow_suggest
        manager = TagManager(functions, notifier)

        first = asyncio.create_task(manager.generate("t", "c"))
        await asyncio.sleep(0)
        assert manager.generating is True

        second = await manager.generate("t", "c")
        release.set()
        await first

        assert second is None
        assert functions.suggest_tags.await_count == 1
        assert manager.generating is False
