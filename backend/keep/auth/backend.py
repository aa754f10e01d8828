"""Starlette AuthenticationBackend backed by the provider session."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.authentication import AuthCredentials, AuthenticationBackend

from keep.auth.models import AuthenticatedUser

if TYPE_CHECKING:
    from starlette.requests import HTTPConnection

    from shared.auth.server import ServerAuth


class ProviderSessionBackend(AuthenticationBackend):
    """Authenticate a request by asking the provider for the current user.

    Runs on every request with no caching and no retry: a provider failure
    leaves the request anonymous, exactly like a missing session. Static
    assets skip the lookup.
    """

    async def authenticate(
        self,
        conn: HTTPConnection,
    ) -> tuple[AuthCredentials, AuthenticatedUser] | None:
        if conn.url.path.startswith("/static/"):
            return None
        server_auth: ServerAuth | None = getattr(conn.state, "server_auth", None)
        if server_auth is None:
            return None
        user = await server_auth.get_user()
        if user is None:
            return None
        return AuthCredentials(["authenticated"]), AuthenticatedUser(user)
