"""
State machine for a user-triggered AI request.

    IDLE ──run──▶ PENDING ──ok──▶ DONE
                     └──error──▶ FAILED

While PENDING the action is disabled and further `run` calls return None
without starting a second request.
"""

import logging
from enum import Enum
from typing import Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ActionState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    DONE = "done"
    FAILED = "failed"


class AIAction(Generic[T]):
    def __init__(self, name: str):
        self.name = name
        self.state = ActionState.IDLE
        self.error: Optional[BaseException] = None

    @property
    def disabled(self) -> bool:
        return self.state is ActionState.PENDING

    def reset(self) -> None:
        if not self.disabled:
            self.state = ActionState.IDLE
            self.error = None

    async def run(self, call: Callable[[], Awaitable[T]]) -> Optional[T]:
        """Run `call` unless a request is already in flight. Errors propagate."""
        if self.disabled:
            logger.debug("%s already pending, ignoring trigger", self.name)
            return None

        self.state = ActionState.PENDING
        self.error = None
        try:
            result = await call()
        except Exception as e:
            self.state = ActionState.FAILED
            self.error = e
            raise
        self.state = ActionState.DONE
        return result
