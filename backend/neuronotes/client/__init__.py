"""
NeuroNotes: Headless Client Layer
==================================

Client-side state and behavior of the notes app, independent of any UI
toolkit. A renderer binds to `Dashboard` and supplies a `Navigator`, a
`Notifier` and a delete-confirmation callback.

    AuthClient ──session──▶ Dashboard ──▶ NoteStore ──▶ NotesBackend ──▶ /api/notes
                               │
                               ├──▶ TagManager ─┐
                               └──▶ AIAction ───┴──▶ FunctionsClient ──▶ /functions/v1
"""

from neuronotes.client.actions import ActionState, AIAction
from neuronotes.client.auth import AuthClient, AuthError, AuthEvent, Session, Subscription
from neuronotes.client.backend import BackendError, FunctionError, FunctionsClient, NotesBackend
from neuronotes.client.config import ClientSettings
from neuronotes.client.dashboard import Dashboard
from neuronotes.client.notify import LoggingNavigator, LoggingNotifier
from neuronotes.client.store import NoteStore, filter_notes, matches_filter
from neuronotes.client.tags import TagManager

__all__ = [
    "ActionState",
    "AIAction",
    "AuthClient",
    "AuthError",
    "AuthEvent",
    "BackendError",
    "ClientSettings",
    "Dashboard",
    "FunctionError",
    "FunctionsClient",
    "LoggingNavigator",
    "LoggingNotifier",
    "NoteStore",
    "NotesBackend",
    "Session",
    "Subscription",
    "TagManager",
    "filter_notes",
    "matches_filter",
]
