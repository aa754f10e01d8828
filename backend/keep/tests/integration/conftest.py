"""Shared test helpers for keep integration tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

from keep.server.csrf import CSRF_COOKIE_NAME

if TYPE_CHECKING:
    import httpx
    from starlette.testclient import TestClient


def csrf_token_for(client: TestClient, page: str) -> str:
    """GET ``page`` to obtain the CSRF cookie and return its value."""
    response = client.get(page)
    token = response.cookies.get(CSRF_COOKIE_NAME) or client.cookies.get(CSRF_COOKIE_NAME)
    assert token
    return token


def post_with_csrf(
    client: TestClient,
    page: str,
    data: dict[str, str],
    *,
    form_page: str | None = None,
) -> httpx.Response:
    """Submit a form the way a browser would: GET ``form_page`` (default ``page``) for the token, then POST."""
    token = csrf_token_for(client, form_page or page)
    return client.post(page, data={**data, "csrf_token": token}, follow_redirects=False)
