"""User model for Starlette AuthenticationMiddleware integration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.authentication import BaseUser

if TYPE_CHECKING:
    from shared.auth.models import SessionUser


class AuthenticatedUser(BaseUser):
    """``request.user`` for a request carrying a valid provider session."""

    def __init__(self, session_user: SessionUser) -> None:
        self._session_user = session_user

    @property
    def is_authenticated(self) -> bool:  # pragma: no cover
        return True

    @property
    def display_name(self) -> str:
        return self._session_user.email or self._session_user.user_id

    @property
    def identity(self) -> str:  # pragma: no cover
        return self._session_user.user_id

    @property
    def user_id(self) -> str:
        return self._session_user.user_id

    @property
    def email(self) -> str | None:
        return self._session_user.email
