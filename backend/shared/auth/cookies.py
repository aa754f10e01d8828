"""Request-scoped cookie storage for provider sessions.

The provider SDK persists its session (and the PKCE code verifier) through a
storage object. On the server that storage is the request's cookies: reads
come from the incoming ``Cookie`` header and writes are collected and applied
to the outgoing response.

Values are stored base64url-encoded with a ``base64-`` prefix and split into
numbered chunks (``name.0``, ``name.1``, ...) when they exceed what browsers
accept for a single cookie.
"""

from __future__ import annotations

import base64
import binascii
from typing import TYPE_CHECKING

from supabase_auth import AsyncSupportedStorage

if TYPE_CHECKING:
    from collections.abc import Mapping

    from starlette.responses import Response

COOKIE_PREFIX = "sb-"
BASE64_PREFIX = "base64-"
MAX_CHUNK_SIZE = 3180
SESSION_COOKIE_MAX_AGE_SECONDS = 400 * 24 * 60 * 60  # browser cap for persistent cookies


def cookie_name(key: str) -> str:
    """Map a storage key (e.g. ``supabase.auth.token``) to a cookie name."""
    return COOKIE_PREFIX + key.replace(".", "-")


def encode_value(value: str) -> str:
    encoded = base64.urlsafe_b64encode(value.encode("utf-8")).decode("ascii").rstrip("=")
    return BASE64_PREFIX + encoded


def decode_value(raw: str) -> str | None:
    """Decode a stored cookie value. Return None for values that fail to decode."""
    if not raw.startswith(BASE64_PREFIX):
        return raw
    payload = raw.removeprefix(BASE64_PREFIX)
    padded = payload + "=" * (-len(payload) % 4)
    try:
        return base64.urlsafe_b64decode(padded).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None


def chunk_value(name: str, value: str) -> list[tuple[str, str]]:
    """Split an encoded value into ``(cookie_name, chunk)`` pairs."""
    if len(value) <= MAX_CHUNK_SIZE:
        return [(name, value)]
    return [
        (f"{name}.{index}", value[start : start + MAX_CHUNK_SIZE])
        for index, start in enumerate(range(0, len(value), MAX_CHUNK_SIZE))
    ]


class CookieStorage(AsyncSupportedStorage):
    """Provider storage backed by one request's cookies.

    Writes are not visible to the browser until ``apply`` is called on the
    response; later reads within the same request see them immediately.
    """

    def __init__(self, cookies: Mapping[str, str]) -> None:
        self._cookies = dict(cookies)
        self._pending: dict[str, str | None] = {}

    @property
    def has_changes(self) -> bool:
        return bool(self._pending)

    async def get_item(self, key: str) -> str | None:
        name = cookie_name(key)
        if name in self._pending:
            return self._pending[name]
        return self._read(name)

    async def set_item(self, key: str, value: str) -> None:
        self._pending[cookie_name(key)] = value

    async def remove_item(self, key: str) -> None:
        self._pending[cookie_name(key)] = None

    def apply(self, response: Response, *, cookie_secure: bool) -> None:
        """Write pending changes as Set-Cookie headers, clearing stale chunks."""
        for name, value in self._pending.items():
            existing = self._existing_names(name)
            if value is None:
                for stale in existing:
                    response.delete_cookie(key=stale, path="/")
                continue

            chunks = chunk_value(name, encode_value(value))
            for chunk_name, chunk in chunks:
                response.set_cookie(
                    key=chunk_name,
                    value=chunk,
                    max_age=SESSION_COOKIE_MAX_AGE_SECONDS,
                    httponly=True,
                    samesite="lax",
                    secure=cookie_secure,
                    path="/",
                )
            written = {chunk_name for chunk_name, _ in chunks}
            for stale in existing:
                if stale not in written:
                    response.delete_cookie(key=stale, path="/")

    def _existing_names(self, name: str) -> list[str]:
        return [n for n in self._cookies if n == name or n.startswith(f"{name}.")]

    def _read(self, name: str) -> str | None:
        if name in self._cookies:
            return decode_value(self._cookies[name])

        parts: list[str] = []
        while f"{name}.{len(parts)}" in self._cookies:
            parts.append(self._cookies[f"{name}.{len(parts)}"])
        if not parts:
            return None
        return decode_value("".join(parts))
