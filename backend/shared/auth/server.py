"""Server-side auth adapter over the provider SDK.

Every operation returns exactly one ``ActionResult`` variant. Provider
failures surface as ``Failure`` carrying the provider's message verbatim;
any other exception propagates to the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import structlog
from supabase_auth.errors import AuthError

from shared.auth.models import Failure, Redirect, SessionUser, Success

if TYPE_CHECKING:
    from supabase_auth import AsyncGoTrueClient

    from shared.auth.models import ActionResult
    from shared.auth.settings import AuthSettings

DASHBOARD_PATH = "/dashboard"
SIGN_IN_PATH = "/sign-in"
RESET_PASSWORD_PATH = "/reset-password"
AUTH_CODE_ERROR_PATH = "/auth/auth-code-error"

# Auth errors plus transport failures (connect, timeout) that the SDK does not wrap.
PROVIDER_ERRORS = (AuthError, httpx.RequestError)

# Email link types and where each lands when the link carries no `next`.
EMAIL_LINK_TARGETS = {
    "signup": DASHBOARD_PATH,
    "email": DASHBOARD_PATH,
    "invite": DASHBOARD_PATH,
    "magiclink": DASHBOARD_PATH,
    "email_change": DASHBOARD_PATH,
    "recovery": RESET_PASSWORD_PATH,
}

logger = structlog.get_logger()


def safe_next(next_path: str | None, default: str = DASHBOARD_PATH) -> str:
    """Return ``next_path`` if it is a local path, otherwise ``default``.

    Rejects absolute and protocol-relative URLs so that ``next`` cannot be
    used as an open redirect.
    """
    if not next_path or not next_path.startswith("/"):
        return default
    if next_path.startswith("//") or "\\" in next_path:
        return default
    return next_path


class ServerAuth:
    """Request-scoped wrapper around the provider's auth client."""

    def __init__(self, auth: AsyncGoTrueClient, settings: AuthSettings) -> None:
        self._auth = auth
        self._settings = settings

    async def sign_in(self, email: str, password: str, next_path: str | None = None) -> ActionResult:
        try:
            await self._auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as e:
            logger.info("sign in rejected", reason=e.message)
            return Failure(e.message)
        logger.info("signed in", email=email)
        return Redirect(safe_next(next_path))

    async def sign_up(self, email: str, password: str) -> ActionResult:
        try:
            await self._auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"email_redirect_to": self._settings.callback_url()},
                },
            )
        except AuthError as e:
            logger.info("sign up rejected", reason=e.message)
            return Failure(e.message)
        logger.info("sign up pending confirmation", email=email)
        return Success()

    async def sign_out(self) -> ActionResult:
        """Invalidate the session. Provider errors are logged, never surfaced."""
        try:
            await self._auth.sign_out()
        except PROVIDER_ERRORS as e:
            logger.warning("sign out failed at provider", reason=str(e))
        return Redirect(SIGN_IN_PATH)

    async def request_password_reset(self, email: str) -> ActionResult:
        try:
            await self._auth.reset_password_for_email(
                email,
                {"redirect_to": self._settings.callback_url(next_path=RESET_PASSWORD_PATH)},
            )
        except AuthError as e:
            logger.info("password reset request rejected", reason=e.message)
            return Failure(e.message)
        logger.info("password reset email requested")
        return Success()

    async def update_password(self, password: str) -> ActionResult:
        try:
            await self._auth.update_user({"password": password})
        except AuthError as e:
            logger.info("password update rejected", reason=e.message)
            return Failure(e.message)
        logger.info("password updated")
        return Redirect(DASHBOARD_PATH)

    async def exchange_code(self, code: str | None, next_path: str | None = None) -> ActionResult:
        """Trade an auth code for a session (PKCE)."""
        if not code:
            return Redirect(AUTH_CODE_ERROR_PATH)
        try:
            await self._auth.exchange_code_for_session({"auth_code": code})
        except PROVIDER_ERRORS as e:
            logger.info("auth code exchange failed", reason=str(e))
            return Redirect(AUTH_CODE_ERROR_PATH)
        return Redirect(safe_next(next_path))

    async def verify_email_link(
        self,
        token_hash: str | None,
        link_type: str | None,
        next_path: str | None = None,
    ) -> ActionResult:
        """Verify the token hash from a confirmation or recovery email and start a session.

        Recovery links land on the new password form unless ``next`` says
        otherwise; every other link type lands on the dashboard.
        """
        if not token_hash or link_type not in EMAIL_LINK_TARGETS:
            return Redirect(AUTH_CODE_ERROR_PATH)
        try:
            await self._auth.verify_otp({"token_hash": token_hash, "type": link_type})
        except PROVIDER_ERRORS as e:
            logger.info("email link verification failed", link_type=link_type, reason=str(e))
            return Redirect(AUTH_CODE_ERROR_PATH)
        logger.info("email link verified", link_type=link_type)
        return Redirect(safe_next(next_path, default=EMAIL_LINK_TARGETS[link_type]))

    async def get_user(self) -> SessionUser | None:
        """Return the current user, treating any provider failure as no user."""
        try:
            response = await self._auth.get_user()
        except PROVIDER_ERRORS as e:
            logger.warning("could not load current user", reason=str(e))
            return None
        if response is None or response.user is None:
            return None
        return SessionUser.from_provider(response.user)
