"""
Sinks the client layer reports to: toast notifications and navigation.

The UI supplies real implementations; the logging ones here are the
defaults for scripts and tests.
"""

import logging
from typing import List, Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, title: str, description: str = "", *, error: bool = False) -> None:
        ...


class Navigator(Protocol):
    def redirect(self, path: str) -> None:
        ...


class LoggingNotifier:
    """Writes notifications to the log instead of showing toasts."""

    def notify(self, title: str, description: str = "", *, error: bool = False) -> None:
        level = logging.WARNING if error else logging.INFO
        if description:
            logger.log(level, "%s: %s", title, description)
        else:
            logger.log(level, "%s", title)


class LoggingNavigator:
    """Records redirects; `history[-1]` is the current path."""

    def __init__(self, start: str = "/dashboard"):
        self.history: List[str] = [start]

    @property
    def current_path(self) -> str:
        return self.history[-1]

    def redirect(self, path: str) -> None:
        logger.info("Redirecting to %s", path)
        self.history.append(path)
