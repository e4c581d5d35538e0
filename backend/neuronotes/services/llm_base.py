"""
NeuroNotes Backend: Abstract Note Assistant Interface
=======================================================

What:  Abstract base class for the AI features behind the two functions.
How:   Concrete implementations inherit from NoteAssistant and implement
       suggest_tags() and summarize_note(). The function routes only depend
       on this interface, so tests (and future providers) can swap it.
Who:   Called by routes/functions.py.
"""

from abc import ABC, abstractmethod
from typing import List


class NoteAssistant(ABC):
    """
    Abstract interface for AI assistance on a single note.

    Contract:
        - Implementations handle their own timeouts and retry policy
        - Upstream failures are translated into AIGatewayError subclasses
          (AIRateLimitError, AICreditsExhaustedError, generic AIGatewayError)
        - Missing configuration raises ConfigurationError
    """

    @abstractmethod
    async def suggest_tags(self, title: str, content: str) -> List[str]:
        """
        Suggest tags for a note.

        Returns:
            Normalized tags (lowercase, unique), normally 3 to 5 of them.

        Raises:
            ConfigurationError: No gateway key configured.
            AIRateLimitError / AICreditsExhaustedError: Upstream 429 / 402.
            AIGatewayError: Any other upstream failure or unusable reply.
        """
        ...

    @abstractmethod
    async def summarize_note(self, content: str) -> str:
        """
        Summarize a note's markdown body.

        Raises the same errors as suggest_tags().
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Readiness check used by /health. Must not consume upstream quota."""
        ...
