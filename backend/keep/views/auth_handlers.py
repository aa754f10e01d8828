"""Auth pages: sign in, sign up, forgot/reset password, auth callback, sign out.

Every POST page follows the same sequence: CSRF check, schema validation
(inline field errors, no provider call), action handler, then one of
redirect / error toast / success panel depending on the result variant.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from starlette.responses import RedirectResponse

from keep import actions
from keep.forms import ResetPasswordForm, ResetPasswordRequestForm, SignInForm, SignUpForm, validate_form
from keep.server.csrf import render_with_csrf, validate_csrf
from shared.auth.models import Failure, Redirect, Success
from shared.auth.server import AUTH_CODE_ERROR_PATH, SIGN_IN_PATH

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping
    from typing import Any

    from starlette.requests import Request
    from starlette.responses import Response

    from keep.forms import _Form
    from shared.auth.models import ActionResult
    from shared.auth.server import ServerAuth

    type FormAction = Callable[[Mapping[str, Any], ServerAuth], Awaitable[ActionResult]]

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again."

# Fields echoed back into a re-rendered form. Passwords never are.
_ECHO_FIELDS = ("email", "next")

logger = structlog.get_logger()


def _echo_values(form: Mapping[str, Any]) -> dict[str, str]:
    return {name: value for name in _ECHO_FIELDS if isinstance(value := form.get(name), str)}


def _render_form(
    request: Request,
    template_name: str,
    *,
    values: Mapping[str, str] | None = None,
    field_errors: Mapping[str, str] | None = None,
    error: str | None = None,
    success: bool = False,
) -> Response:
    return render_with_csrf(
        request,
        template_name,
        {
            "values": values or {},
            "field_errors": field_errors or {},
            "error": error,
            "success": success,
        },
    )


async def _submit(
    request: Request,
    template_name: str,
    schema: type[_Form],
    action: FormAction,
) -> Response:
    form = await request.form()
    csrf_error = validate_csrf(request, form)
    if csrf_error:
        return csrf_error

    values = _echo_values(form)
    parsed, field_errors = validate_form(schema, form)
    if parsed is None:
        return _render_form(request, template_name, values=values, field_errors=field_errors)

    try:
        # Actions see the normalized values the schema accepted, not the raw form
        result = await action(parsed.model_dump(by_alias=True, exclude_none=True), request.state.server_auth)
    except Exception:  # noqa: BLE001
        logger.exception("auth action raised", action=action.__name__)
        return _render_form(request, template_name, values=values, error=UNEXPECTED_ERROR_MESSAGE)

    match result:
        case Redirect(target=target):
            return RedirectResponse(target, status_code=303)
        case Failure(message=message):
            return _render_form(request, template_name, values=values, error=message)
        case Success():
            return _render_form(request, template_name, values=values, success=True)


async def sign_in_page(request: Request) -> Response:
    """GET /sign-in - render the sign-in form."""
    next_path = request.query_params.get("next")
    return _render_form(request, "sign_in.html", values={"next": next_path} if next_path else None)


async def sign_in(request: Request) -> Response:
    """POST /sign-in - redirect to the dashboard (or ``next``) on success."""
    return await _submit(request, "sign_in.html", SignInForm, actions.sign_in)


async def sign_up_page(request: Request) -> Response:
    """GET /sign-up - render the registration form."""
    return _render_form(request, "sign_up.html")


async def sign_up(request: Request) -> Response:
    """POST /sign-up - show the confirm-your-email panel on success."""
    return await _submit(request, "sign_up.html", SignUpForm, actions.sign_up)


async def forgot_password_page(request: Request) -> Response:
    """GET /forgot-password - render the reset request form."""
    return _render_form(request, "forgot_password.html")


async def forgot_password(request: Request) -> Response:
    """POST /forgot-password - show the check-your-email panel on success, no navigation."""
    return await _submit(request, "forgot_password.html", ResetPasswordRequestForm, actions.reset_password_request)


async def reset_password_page(request: Request) -> Response:
    """GET /reset-password - render the new password form."""
    return _render_form(request, "reset_password.html")


async def reset_password(request: Request) -> Response:
    """POST /reset-password - update the password and redirect to the dashboard."""
    return await _submit(request, "reset_password.html", ResetPasswordForm, actions.update_password)


async def auth_callback(request: Request) -> Response:
    """GET /auth/callback - turn an emailed link into a session.

    Links carry either ``token_hash`` and ``type`` (confirmation and recovery
    emails) or a PKCE ``code``. Both accept an optional ``next``.
    """
    server_auth: ServerAuth = request.state.server_auth
    params = request.query_params
    if params.get("token_hash"):
        result = await server_auth.verify_email_link(
            params["token_hash"],
            params.get("type"),
            next_path=params.get("next"),
        )
    else:
        result = await server_auth.exchange_code(params.get("code"), next_path=params.get("next"))
    target = result.target if isinstance(result, Redirect) else AUTH_CODE_ERROR_PATH
    return RedirectResponse(target, status_code=303)


async def auth_code_error_page(request: Request) -> Response:
    """GET /auth/auth-code-error - explain an expired, used or invalid link."""
    templates = request.app.state.templates
    return templates.TemplateResponse(request, "auth_code_error.html")


async def sign_out(request: Request) -> Response:
    """POST /sign-out - end the session and redirect to sign in."""
    form = await request.form()
    csrf_error = validate_csrf(request, form)
    if csrf_error:
        return csrf_error

    result = await actions.sign_out(request.state.server_auth)
    target = result.target if isinstance(result, Redirect) else SIGN_IN_PATH
    return RedirectResponse(target, status_code=303)
