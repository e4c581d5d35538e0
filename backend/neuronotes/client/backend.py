"""
HTTP wrappers the client layer uses to reach the NeuroNotes backend.

    NotesBackend     → /api/notes CRUD, scoped by the caller's access token
    FunctionsClient  → /functions/v1/suggest-tags and /functions/v1/summarize-note

Both open a short-lived httpx.AsyncClient per call with the configured
timeout, and turn every failure (HTTP error status, transport error,
timeout) into BackendError / FunctionError carrying a displayable message.
Nothing is retried.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar
from uuid import UUID

import httpx
from pydantic import BaseModel, ValidationError

from neuronotes.client.config import ClientSettings
from neuronotes.schemas.note import NoteListResponse, NoteResponse

logger = logging.getLogger(__name__)

TokenGetter = Callable[[], Optional[str]]
M = TypeVar("M", bound=BaseModel)


class BackendError(Exception):
    """A notes API call failed. `message` is safe to show to the user."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class FunctionError(Exception):
    """An AI function call failed. `message` is safe to show to the user."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _error_message(response: httpx.Response, fallback: str) -> str:
    # Notes API: {"message": ...}; functions: {"error": ...}
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        for key in ("message", "error"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    return fallback


def _parse(response: httpx.Response, model: Type[M]) -> M:
    try:
        return model.model_validate(response.json())
    except (ValueError, ValidationError) as e:
        logger.warning("Unparseable %s reply: %s", model.__name__, str(e))
        raise BackendError("Unexpected response from server", status_code=response.status_code)


class _ApiClient:
    def __init__(
        self,
        access_token: TokenGetter,
        settings: Optional[ClientSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._access_token = access_token
        self._settings = settings or ClientSettings()
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self._access_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if self._settings.auth_anon_key:
            headers["apikey"] = self._settings.auth_anon_key
        return headers

    async def _request(self, method: str, path: str, json: Any = None) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self._settings.api_url,
            timeout=self._settings.request_timeout,
            transport=self._transport,
        ) as client:
            return await client.request(method, path, json=json, headers=self._headers())


class NotesBackend(_ApiClient):
    """User-scoped note persistence through the notes REST API."""

    async def list_notes(self) -> List[NoteResponse]:
        response = await self._call("GET", "/api/notes")
        return _parse(response, NoteListResponse).notes

    async def create_note(self, **fields: Any) -> NoteResponse:
        response = await self._call("POST", "/api/notes", json=fields)
        return _parse(response, NoteResponse)

    async def update_note(self, note_id: UUID, patch: Dict[str, Any]) -> NoteResponse:
        response = await self._call("PATCH", f"/api/notes/{note_id}", json=patch)
        return _parse(response, NoteResponse)

    async def delete_note(self, note_id: UUID) -> None:
        await self._call("DELETE", f"/api/notes/{note_id}")

    async def _call(self, method: str, path: str, json: Any = None) -> httpx.Response:
        if not self._access_token():
            raise BackendError("You must be signed in", status_code=401)
        try:
            response = await self._request(method, path, json=json)
        except httpx.TimeoutException:
            raise BackendError("The server took too long to respond")
        except httpx.TransportError as e:
            logger.warning("%s %s failed: %s", method, path, str(e))
            raise BackendError("Could not reach the server")
        if not response.is_success:
            raise BackendError(
                _error_message(response, f"Request failed ({response.status_code})"),
                status_code=response.status_code,
            )
        return response


class FunctionsClient(_ApiClient):
    """Invokes the two AI functions."""

    async def suggest_tags(self, title: str, content: str) -> List[str]:
        body = await self._invoke("suggest-tags", {"title": title, "content": content})
        tags = body.get("tags")
        if not isinstance(tags, list):
            raise FunctionError("Unexpected response from suggest-tags")
        return [str(tag) for tag in tags]

    async def summarize_note(self, content: str) -> str:
        body = await self._invoke("summarize-note", {"content": content})
        summary = body.get("summary")
        if not isinstance(summary, str):
            raise FunctionError("Unexpected response from summarize-note")
        return summary

    async def _invoke(self, name: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self._request("POST", f"/functions/v1/{name}", json=payload)
        except httpx.TimeoutException:
            raise FunctionError("The AI service took too long to respond")
        except httpx.TransportError as e:
            logger.warning("Function %s failed: %s", name, str(e))
            raise FunctionError("Could not reach the AI service")
        if not response.is_success:
            raise FunctionError(
                _error_message(response, f"{name} failed ({response.status_code})"),
                status_code=response.status_code,
            )
        try:
            body = response.json()
        except ValueError:
            raise FunctionError(f"Unexpected response from {name}")
        if not isinstance(body, dict):
            raise FunctionError(f"Unexpected response from {name}")
        return body
