"""Route auth policy: every route is explicitly protected or public.

Each helper wraps an endpoint and marks the wrapper with ``AUTH_POLICY_ATTR``
so that ``validate_route_auth_policy`` can refuse to start an app containing
an unclassified route.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING
from urllib.parse import urlencode

from starlette.authentication import has_required_scope
from starlette.responses import RedirectResponse
from starlette.routing import Mount, Route

from shared.auth.server import DASHBOARD_PATH, SIGN_IN_PATH

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.routing import BaseRoute

AUTH_POLICY_ATTR = "__auth_policy__"


def sign_in_redirect(request: Request) -> RedirectResponse:
    """Relative 303 to the sign-in page, carrying the original path as ``next``.

    The dashboard itself is the default target after sign-in, so it is not
    repeated in the query string.
    """
    next_path = request.url.path
    if request.url.query:
        next_path = f"{next_path}?{request.url.query}"
    if next_path == DASHBOARD_PATH:
        return RedirectResponse(url=SIGN_IN_PATH, status_code=303)
    return RedirectResponse(url=f"{SIGN_IN_PATH}?{urlencode({'next': next_path})}", status_code=303)


type Endpoint = Callable[..., Awaitable[Response]]


def protected_html(endpoint: Endpoint) -> Endpoint:
    """Require a session; redirect anonymous requests before the endpoint runs.

    Redirects are relative so the Host header cannot steer them elsewhere.
    """

    @functools.wraps(endpoint)
    async def wrapper(request: Request, **kwargs: str) -> Response:
        if not has_required_scope(request, ["authenticated"]):
            return sign_in_redirect(request)
        return await endpoint(request, **kwargs)

    setattr(wrapper, AUTH_POLICY_ATTR, "protected_html")
    return wrapper


def public_route(endpoint: Endpoint) -> Endpoint:
    """Mark endpoint as explicitly public.

    The marker goes on a fresh wrapper so reusing the bare function on another
    route does not inherit the policy.
    """

    @functools.wraps(endpoint)
    async def wrapper(request: Request, **kwargs: str) -> Response:
        return await endpoint(request, **kwargs)

    setattr(wrapper, AUTH_POLICY_ATTR, "public")
    return wrapper


def validate_route_auth_policy(routes: list[BaseRoute]) -> None:
    """Raise RuntimeError naming every Route without a policy marker. Mounts are exempt."""
    unclassified: list[str] = []
    for route in routes:
        if isinstance(route, Mount):
            continue
        if isinstance(route, Route) and not hasattr(route.endpoint, AUTH_POLICY_ATTR):
            name = route.name or getattr(route.endpoint, "__name__", "unknown")
            unclassified.append(f"{route.path} ({name})")

    if unclassified:
        msg = f"Unclassified routes missing auth policy: {', '.join(unclassified)}"
        raise RuntimeError(msg)
