"""
Tag editing for the selected note: manual add/remove plus AI generation.
"""

import logging
from typing import Any, Awaitable, Callable, Iterable, List, Optional

from neuronotes.client.actions import AIAction
from neuronotes.client.backend import FunctionError, FunctionsClient
from neuronotes.client.notify import Notifier
from neuronotes.tags import normalize_tag, normalize_tags

logger = logging.getLogger(__name__)

TagsChanged = Callable[[List[str]], Awaitable[Any]]


class TagManager:
    """
    Small ordered set of normalized tags.

    Every change is handed to `on_change` with the full new sequence, which
    is how the dashboard persists it.
    """

    def __init__(
        self,
        functions: FunctionsClient,
        notifier: Notifier,
        tags: Iterable[str] = (),
        on_change: Optional[TagsChanged] = None,
    ):
        self._functions = functions
        self._notifier = notifier
        self._tags: List[str] = normalize_tags(tags)
        self.on_change = on_change
        self.action: AIAction[List[str]] = AIAction("generate-tags")

    @property
    def tags(self) -> List[str]:
        return list(self._tags)

    @property
    def generating(self) -> bool:
        return self.action.disabled

    def reset(self, tags: Iterable[str]) -> None:
        """Load another note's tags without reporting a change."""
        self._tags = normalize_tags(tags)

    async def add(self, raw: str) -> bool:
        tag = normalize_tag(raw)
        if not tag or tag in self._tags:
            return False
        self._tags.append(tag)
        await self._changed()
        return True

    async def remove(self, tag: str) -> bool:
        if tag not in self._tags:
            return False
        self._tags = [t for t in self._tags if t != tag]
        await self._changed()
        return True

    async def suggest(self, title: str, content: str) -> Optional[List[str]]:
        """
        Ask the AI for tags without touching the current ones.

        Returns the normalized suggestions, or None when generation failed or
        another generation was already running.
        """
        try:
            suggested = await self.action.run(lambda: self._functions.suggest_tags(title, content))
        except FunctionError as e:
            logger.warning("Tag generation failed: %s", e.message)
            self._notifier.notify("Failed to generate tags", e.message, error=True)
            return None
        if suggested is None:
            return None
        self._notifier.notify("Tags generated", "AI has suggested tags for your note")
        return normalize_tags(suggested)

    async def generate(self, title: str, content: str) -> Optional[List[str]]:
        """Replace the tags with AI suggestions. Tags are left untouched on failure."""
        suggested = await self.suggest(title, content)
        if suggested is None:
            return None
        self._tags = suggested
        await self._changed()
        return self.tags

    async def _changed(self) -> None:
        if self.on_change is not None:
            await self.on_change(self.tags)
