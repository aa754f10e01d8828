"""CSRF protection for the auth forms (double-submit cookie).

Every form page renders the token from the ``csrf_token`` cookie into a hidden
field; every POST handler checks that the two match before doing anything
else.
"""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING

from starlette.responses import PlainTextResponse

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Any

    from starlette.datastructures import FormData
    from starlette.requests import Request
    from starlette.responses import Response

CSRF_COOKIE_NAME = "csrf_token"
CSRF_FORM_FIELD = "csrf_token"


def get_or_create_csrf_token(request: Request) -> tuple[str, bool]:
    """Return ``(token, is_new)``; ``is_new`` means the cookie must be set."""
    token = request.cookies.get(CSRF_COOKIE_NAME)
    if token:
        return token, False
    return secrets.token_urlsafe(32), True


def set_csrf_cookie(response: Response, token: str, *, cookie_secure: bool) -> None:
    response.set_cookie(
        key=CSRF_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=cookie_secure,
        path="/",
    )


def render_with_csrf(
    request: Request,
    template_name: str,
    context: Mapping[str, Any],
    *,
    status_code: int = 200,
) -> Response:
    """Render ``template_name`` with ``csrf_token`` in its context, issuing the cookie if missing."""
    templates = request.app.state.templates
    token, is_new = get_or_create_csrf_token(request)
    response = templates.TemplateResponse(
        request,
        template_name,
        {**context, "csrf_token": token},
        status_code=status_code,
    )
    if is_new:
        set_csrf_cookie(response, token, cookie_secure=request.app.state.auth_settings.cookie_secure)
    return response


def validate_csrf(request: Request, form_data: FormData) -> PlainTextResponse | None:
    """Return a 403 response if the form token is missing or mismatched, else None."""
    cookie_token = request.cookies.get(CSRF_COOKIE_NAME)
    form_token = form_data.get(CSRF_FORM_FIELD)
    if not cookie_token or not isinstance(form_token, str) or not form_token:
        return PlainTextResponse("CSRF validation failed", status_code=403)
    if not secrets.compare_digest(cookie_token, form_token):
        return PlainTextResponse("CSRF validation failed", status_code=403)
    return None
