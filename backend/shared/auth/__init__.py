"""Provider-backed authentication shared by the web app and client tools."""

from shared.auth.client import AuthCell, ClientAuth, SessionWatch, UserWatch
from shared.auth.cookies import CookieStorage
from shared.auth.models import ActionResult, Failure, Redirect, SessionUser, Success
from shared.auth.server import ServerAuth, safe_next
from shared.auth.settings import AuthSettings

__all__ = [
    "ActionResult",
    "AuthCell",
    "AuthSettings",
    "ClientAuth",
    "CookieStorage",
    "Failure",
    "Redirect",
    "ServerAuth",
    "SessionUser",
    "SessionWatch",
    "Success",
    "UserWatch",
    "safe_next",
]
