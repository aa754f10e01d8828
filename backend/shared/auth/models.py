"""Auth action results and read-only session views."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

if TYPE_CHECKING:
    from typing import Self


@dataclass(frozen=True)
class Redirect:
    """Navigate the browser to ``target`` (a local path)."""

    target: str


@dataclass(frozen=True)
class Failure:
    """Provider-reported error, passed through verbatim."""

    message: str


@dataclass(frozen=True)
class Success:
    """Completed without navigation (e.g. confirmation email sent)."""


type ActionResult = Redirect | Failure | Success


class SessionUser(BaseModel, frozen=True):
    """The subset of the provider user record rendered by the app."""

    user_id: str
    email: str | None = None

    @classmethod
    def from_provider(cls, user: Any) -> Self:  # noqa: ANN401
        """Build from a provider ``User`` (anything with ``id`` and ``email``)."""
        return cls(user_id=str(user.id), email=getattr(user, "email", None))
