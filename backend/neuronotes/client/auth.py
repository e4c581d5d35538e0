"""
Thin async wrapper over the hosted auth service's REST API.

Holds the current session in memory and fans session changes out to
subscribers registered with `on_auth_state_change`.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
from uuid import UUID

import httpx
from pydantic import BaseModel, ValidationError

from neuronotes.client.config import ClientSettings

logger = logging.getLogger(__name__)


class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


class AuthUser(BaseModel):
    id: UUID
    email: Optional[str] = None


class Session(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    user: AuthUser


class AuthError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


AuthCallback = Callable[[AuthEvent, Optional[Session]], None]


class Subscription:
    """Handle returned by `on_auth_state_change`. Unsubscribing twice is a no-op."""

    def __init__(self, listeners: List[AuthCallback], callback: AuthCallback):
        self._listeners = listeners
        self._callback = callback

    @property
    def active(self) -> bool:
        return self._callback in self._listeners

    def unsubscribe(self) -> None:
        if self.active:
            self._listeners.remove(self._callback)


def _auth_error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"Authentication failed ({response.status_code})"
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    return f"Authentication failed ({response.status_code})"


class AuthClient:
    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._settings = settings or ClientSettings()
        self._transport = transport
        self._session: Optional[Session] = None
        self._listeners: List[AuthCallback] = []

    def get_session(self) -> Optional[Session]:
        return self._session

    def access_token(self) -> Optional[str]:
        return self._session.access_token if self._session else None

    def on_auth_state_change(self, callback: AuthCallback) -> Subscription:
        self._listeners.append(callback)
        return Subscription(self._listeners, callback)

    async def sign_up(self, email: str, password: str) -> Optional[Session]:
        """
        Register a new account.

        Returns the session when the service signs the user in straight
        away, or None when an email confirmation is still pending.
        """
        body = await self._post("/auth/v1/signup", {"email": email, "password": password})
        if "access_token" not in body:
            logger.info("Sign-up for %s awaiting confirmation", email)
            return None
        return self._set_session(body)

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        body = await self._post(
            "/auth/v1/token",
            {"email": email, "password": password},
            params={"grant_type": "password"},
        )
        return self._set_session(body)

    async def sign_out(self) -> None:
        token = self.access_token()
        try:
            if token:
                await self._post("/auth/v1/logout", None, token=token, expect_body=False)
        finally:
            self._session = None
            self._emit(AuthEvent.SIGNED_OUT, None)

    def _set_session(self, body: Dict[str, Any]) -> Session:
        try:
            session = Session.model_validate(body)
        except ValidationError:
            raise AuthError("Unexpected response from auth service")
        self._session = session
        self._emit(AuthEvent.SIGNED_IN, session)
        return session

    def _emit(self, event: AuthEvent, session: Optional[Session]) -> None:
        for callback in list(self._listeners):
            callback(event, session)

    async def _post(
        self,
        path: str,
        payload: Optional[Dict[str, Any]],
        params: Optional[Dict[str, str]] = None,
        token: Optional[str] = None,
        expect_body: bool = True,
    ) -> Dict[str, Any]:
        headers = {"apikey": self._settings.auth_anon_key}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        try:
            async with httpx.AsyncClient(
                base_url=self._settings.auth_url,
                timeout=self._settings.request_timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(path, json=payload, params=params, headers=headers)
        except httpx.TransportError as e:
            logger.warning("Auth request %s failed: %s", path, str(e))
            raise AuthError("Could not reach the auth service")

        if not response.is_success:
            raise AuthError(_auth_error_message(response), status_code=response.status_code)
        if not expect_body:
            return {}
        try:
            body = response.json()
        except ValueError:
            raise AuthError("Unexpected response from auth service")
        if not isinstance(body, dict):
            raise AuthError("Unexpected response from auth service")
        return body
