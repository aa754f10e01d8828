"""Provider SDK doubles shared by the auth tests."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from supabase_auth.errors import AuthApiError

TEST_USER_ID = "3f6c1a2e-0000-4000-8000-000000000001"
TEST_EMAIL = "player@example.com"


def provider_error(message: str, status: int = 400, code: str | None = None) -> AuthApiError:
    return AuthApiError(message, status, code)


def provider_user(user_id: str = TEST_USER_ID, email: str | None = TEST_EMAIL) -> SimpleNamespace:
    return SimpleNamespace(id=user_id, email=email)


def provider_session(user: SimpleNamespace | None = None, expires_at: int = 1_900_000_000) -> SimpleNamespace:
    return SimpleNamespace(user=user or provider_user(), access_token="access", expires_at=expires_at)


def make_auth_mock(user: SimpleNamespace | None = None) -> MagicMock:
    """Mock of the SDK's async auth client.

    Every call succeeds by default; ``get_user`` reports ``user`` (or no user).
    """
    auth = MagicMock()
    auth.sign_in_with_password = AsyncMock()
    auth.sign_up = AsyncMock()
    auth.sign_out = AsyncMock()
    auth.reset_password_for_email = AsyncMock()
    auth.update_user = AsyncMock()
    auth.exchange_code_for_session = AsyncMock()
    auth.verify_otp = AsyncMock()
    auth.get_user = AsyncMock(return_value=SimpleNamespace(user=user) if user is not None else None)
    auth.get_session = AsyncMock(return_value=None)
    return auth


def client_factory_for(auth: MagicMock) -> MagicMock:
    """Per-request client factory that hands out ``auth`` for every request."""
    return MagicMock(return_value=auth)
