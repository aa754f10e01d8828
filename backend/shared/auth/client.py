"""Client-side auth state: observable user/session cells with explicit lifecycle.

Used by long-lived processes holding a provider client (see
``bin/watch-session.py``). Each watch fetches the current value once and
follows the provider's auth-state change stream until closed. The initial
fetch and the first change notification may race; whichever lands last wins.
"""

from __future__ import annotations

import contextlib
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import structlog
from shared.auth.server import PROVIDER_ERRORS, SIGN_IN_PATH

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType
    from typing import Self

    from supabase_auth import AsyncGoTrueClient
    from supabase_auth.types import AuthChangeEvent, Session, Subscription, User

logger = structlog.get_logger()


class AuthCell[T]:
    """A single observable value. ``loading`` stays true until the first write."""

    def __init__(self) -> None:
        self._value: T | None = None
        self._loading = True
        self._listeners: list[Callable[[T | None], Any]] = []

    @property
    def value(self) -> T | None:
        return self._value

    @property
    def loading(self) -> bool:
        return self._loading

    def set(self, value: T | None) -> None:
        self._value = value
        self._loading = False
        for listener in list(self._listeners):
            listener(value)

    def subscribe(self, listener: Callable[[T | None], Any]) -> Callable[[], None]:
        """Register ``listener`` for every write. Return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return unsubscribe


class _AuthWatch[T](ABC):
    def __init__(self, auth: AsyncGoTrueClient) -> None:
        self._auth = auth
        self._subscription: Subscription | None = None
        self.state: AuthCell[T] = AuthCell()

    @property
    def active(self) -> bool:
        return self._subscription is not None

    async def start(self) -> None:
        """Subscribe to auth changes, then fetch the current value."""
        if self._subscription is not None:
            return
        self._subscription = self._auth.on_auth_state_change(self._on_change)
        value = await self._fetch()
        # closed while the fetch was in flight
        if self._subscription is not None:
            self.state.set(value)

    def close(self) -> None:
        """Stop following auth changes. Safe to call more than once."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    async def __aenter__(self) -> Self:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _on_change(self, event: AuthChangeEvent, session: Session | None) -> None:
        logger.debug("auth state changed", auth_event=event)
        self.state.set(self._from_session(session))

    @abstractmethod
    async def _fetch(self) -> T | None: ...

    @abstractmethod
    def _from_session(self, session: Session | None) -> T | None: ...


class UserWatch(_AuthWatch["User"]):
    """Follow the current provider user."""

    async def _fetch(self) -> User | None:
        try:
            response = await self._auth.get_user()
        except PROVIDER_ERRORS as e:
            logger.warning("could not load current user", reason=str(e))
            return None
        return response.user if response is not None else None

    def _from_session(self, session: Session | None) -> User | None:
        return session.user if session is not None else None


class SessionWatch(_AuthWatch["Session"]):
    """Follow the current provider session."""

    async def _fetch(self) -> Session | None:
        try:
            return await self._auth.get_session()
        except PROVIDER_ERRORS as e:
            logger.warning("could not load current session", reason=str(e))
            return None

    def _from_session(self, session: Session | None) -> Session | None:
        return session


class ClientAuth:
    """Client-side auth actions.

    ``navigate`` receives the path to move to; ``refresh`` asks the owner to
    revalidate any data loaded under the old session.
    """

    def __init__(
        self,
        auth: AsyncGoTrueClient,
        *,
        navigate: Callable[[str], Any],
        refresh: Callable[[], Any],
    ) -> None:
        self._auth = auth
        self._navigate = navigate
        self._refresh = refresh

    async def sign_out(self) -> None:
        """Sign out, then always navigate to sign in and refresh, even if the provider call fails."""
        try:
            await self._auth.sign_out()
        except PROVIDER_ERRORS as e:
            logger.warning("sign out failed at provider", reason=str(e))
        self._navigate(SIGN_IN_PATH)
        self._refresh()
