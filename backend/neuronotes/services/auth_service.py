"""
NeuroNotes Backend: Auth Service (token validation)
=====================================================

What:  Resolves a bearer access token to the user it belongs to.
How:   Asks the hosted auth service (`GET {AUTH_URL}/auth/v1/user`) with the
       project's anon key. The auth system itself is external; nothing here
       issues, refreshes or stores sessions.
Who:   Used by the `get_current_user` dependency on every notes route.

Mapping:
    200 with a user id   → AuthenticatedUser
    401 / 403            → AuthenticationError (401 to the client)
    anything else        → AuthServiceError   (503 to the client)
"""

import logging
import uuid
from typing import Optional

import httpx
from pydantic import BaseModel

from neuronotes.config import settings
from neuronotes.exceptions import AuthenticationError, AuthServiceError

logger = logging.getLogger(__name__)


class AuthenticatedUser(BaseModel):
    """The slice of the auth service's user record the backend relies on."""

    id: uuid.UUID
    email: Optional[str] = None


class AuthService:
    """Thin wrapper over the auth service's user endpoint."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport

    async def get_user(self, access_token: str) -> AuthenticatedUser:
        url = settings.auth_url.rstrip("/") + "/auth/v1/user"
        try:
            async with httpx.AsyncClient(
                timeout=settings.auth_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    url,
                    headers={
                        "apikey": settings.auth_anon_key,
                        "Authorization": f"Bearer {access_token}",
                    },
                )
        except httpx.TransportError as e:
            logger.error("Auth service unreachable: %s", str(e))
            raise AuthServiceError(context={"error_type": type(e).__name__})

        if response.status_code in (401, 403):
            raise AuthenticationError(message="Invalid or expired session")
        if not response.is_success:
            logger.error("Auth service error: %d %s", response.status_code, response.text)
            raise AuthServiceError(context={"upstream_status": response.status_code})

        try:
            return AuthenticatedUser.model_validate(response.json())
        except ValueError as e:
            logger.error("Auth service returned an unusable user record: %s", str(e))
            raise AuthServiceError(context={"error_type": type(e).__name__})


auth_service = AuthService()
