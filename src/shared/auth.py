import logging
from typing import Protocol

import httpx
from pydantic import BaseModel
from supabase import AuthApiError, create_client
from supabase import AuthError as SupabaseAuthError

from src.shared.config import SupabaseConfig
from src.shared.exceptions import AuthError


logger = logging.getLogger(__name__)


class User(BaseModel):
    id: str
    email: str | None = None


class AuthContext(BaseModel):
    """Session state handed explicitly to the pages that need it."""

    user: User | None = None
    loading: bool = False


class AuthProvider(Protocol):
    def get_user(self, access_token: str) -> User | None:
        """Return the user owning ``access_token``, or None if the session is not valid."""
        ...


class SupabaseAuthProvider:
    """AuthProvider backed by the Supabase Auth client.

    A rejected token (401/403) means no user. Anything else that goes wrong,
    unreachable server included, is raised as ``AuthError``.
    """

    def __init__(self, config: SupabaseConfig, client=None) -> None:
        if client is None:
            client = create_client(config.url, config.anon_key)
        self._auth = client.auth

    def get_user(self, access_token: str) -> User | None:
        try:
            response = self._auth.get_user(access_token)
        except AuthApiError as e:
            if e.status in (401, 403):
                return None
            logger.error("Auth lookup failed with %s: %s", e.status, e.message)
            raise AuthError(e.message) from e
        except (SupabaseAuthError, httpx.HTTPError) as e:
            logger.error("Auth lookup failed: %s", e)
            raise AuthError(str(e) or type(e).__name__) from e

        if response is None or response.user is None:
            return None
        try:
            return User(id=response.user.id, email=response.user.email)
        except (AttributeError, KeyError, ValueError) as e:
            logger.error("Unexpected auth response: %s", e)
            raise AuthError("Unexpected auth response") from e


def resolve_auth_context(provider: AuthProvider, access_token: str | None) -> AuthContext:
    """Build the AuthContext for a request; no token means no user."""
    if not access_token:
        return AuthContext(user=None, loading=False)
    return AuthContext(user=provider.get_user(access_token), loading=False)


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
