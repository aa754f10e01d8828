"""Per-request provider client with cookie-backed session storage.

For every HTTP request the middleware builds a ``CookieStorage`` from the
request cookies, creates a provider auth client over it and exposes a
``ServerAuth`` as ``request.state.server_auth``. Session changes made by the
provider during the request (sign in, token refresh, sign out) are written
back as Set-Cookie headers when the response starts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.requests import HTTPConnection
from starlette.responses import Response

from shared.auth.cookies import CookieStorage
from shared.auth.server import ServerAuth

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

    from shared.auth.provider import AuthClientFactory
    from shared.auth.settings import AuthSettings


class AuthClientMiddleware:
    def __init__(self, app: ASGIApp, *, client_factory: AuthClientFactory, auth_settings: AuthSettings) -> None:
        self.app = app
        self._client_factory = client_factory
        self._auth_settings = auth_settings

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        storage = CookieStorage(HTTPConnection(scope).cookies)
        if "state" not in scope:  # pragma: no cover
            scope["state"] = {}
        scope["state"]["server_auth"] = ServerAuth(self._client_factory(storage), self._auth_settings)

        async def send_with_cookies(message: Message) -> None:
            if message["type"] == "http.response.start" and storage.has_changes:
                message["headers"] = [*message.get("headers", []), *self._session_cookie_headers(storage)]
            await send(message)

        await self.app(scope, receive, send_with_cookies)

    def _session_cookie_headers(self, storage: CookieStorage) -> list[tuple[bytes, bytes]]:
        carrier = Response()
        storage.apply(carrier, cookie_secure=self._auth_settings.cookie_secure)
        return [(name, value) for name, value in carrier.raw_headers if name == b"set-cookie"]
