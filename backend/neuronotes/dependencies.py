"""
FastAPI dependencies shared by the notes routes.
"""

from typing import Optional

from fastapi import Header

from neuronotes.exceptions import AuthenticationError
from neuronotes.services.auth_service import AuthenticatedUser, auth_service


async def get_current_user(
    authorization: Optional[str] = Header(default=None),
) -> AuthenticatedUser:
    """
    Resolve `Authorization: Bearer <token>` to the signed-in user.

    Raises AuthenticationError (401) when the header is missing or not a
    bearer token; the auth service decides whether the token is valid.
    """
    if not authorization:
        raise AuthenticationError()
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError(message="Authorization header must be 'Bearer <token>'")
    return await auth_service.get_user(token.strip())
