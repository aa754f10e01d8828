"""Supabase client construction for server requests and long-lived clients."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions
from supabase_auth import AsyncGoTrueClient

if TYPE_CHECKING:
    from collections.abc import Callable

    from supabase_auth import AsyncSupportedStorage

    from shared.auth.settings import AuthSettings

    type AuthClientFactory = Callable[[AsyncSupportedStorage], AsyncGoTrueClient]

PROVIDER_TIMEOUT_SECONDS = 10.0


def create_http_client() -> httpx.AsyncClient:
    """Connection pool shared by every request-scoped auth client. The caller closes it."""
    return httpx.AsyncClient(timeout=PROVIDER_TIMEOUT_SECONDS, follow_redirects=True)


def create_server_client(
    settings: AuthSettings,
    storage: AsyncSupportedStorage,
    http_client: httpx.AsyncClient,
) -> AsyncGoTrueClient:
    """Create a request-scoped auth client whose session lives in ``storage``.

    Only the auth API is needed on the server, so this builds the auth client
    directly rather than a full Supabase client with realtime and storage.
    Token refresh is driven by ``get_user``/``get_session`` within the request
    rather than by a background timer.
    """
    return AsyncGoTrueClient(
        url=f"{settings.provider_url}/auth/v1",
        headers={"apikey": settings.provider_key, "Authorization": f"Bearer {settings.provider_key}"},
        storage=storage,
        http_client=http_client,
        flow_type="pkce",
        auto_refresh_token=False,
        persist_session=True,
    )


async def create_browser_client(settings: AuthSettings) -> AsyncClient:
    """Create a long-lived client with in-memory session storage and auto refresh."""
    options = AsyncClientOptions(auto_refresh_token=True, persist_session=True)
    return await acreate_client(settings.provider_url, settings.provider_key, options=options)


def server_client_factory(settings: AuthSettings, http_client: httpx.AsyncClient) -> AuthClientFactory:
    """Bind ``create_server_client`` to ``settings`` and the shared pool for per-request use."""

    def factory(storage: AsyncSupportedStorage) -> AsyncGoTrueClient:
        return create_server_client(settings, storage, http_client)

    return factory
