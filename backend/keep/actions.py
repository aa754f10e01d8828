"""Auth action handlers.

Each handler takes the submitted field bundle and the request's
``ServerAuth``, reads exactly the fields it needs, and returns the adapter's
``ActionResult``. Missing fields are forwarded as empty strings; the provider
reports the error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Any

    from shared.auth.models import ActionResult
    from shared.auth.server import ServerAuth

logger = structlog.get_logger()


def _field(form: Mapping[str, Any], name: str) -> str:
    value = form.get(name)
    return value if isinstance(value, str) else ""


def _log_outcome(action: str, result: ActionResult) -> ActionResult:
    logger.debug("auth action finished", action=action, outcome=type(result).__name__)
    return result


async def sign_in(form: Mapping[str, Any], auth: ServerAuth) -> ActionResult:
    result = await auth.sign_in(
        _field(form, "email"),
        _field(form, "password"),
        next_path=_field(form, "next") or None,
    )
    return _log_outcome("sign_in", result)


async def sign_up(form: Mapping[str, Any], auth: ServerAuth) -> ActionResult:
    result = await auth.sign_up(_field(form, "email"), _field(form, "password"))
    return _log_outcome("sign_up", result)


async def sign_out(auth: ServerAuth) -> ActionResult:
    return _log_outcome("sign_out", await auth.sign_out())


async def reset_password_request(form: Mapping[str, Any], auth: ServerAuth) -> ActionResult:
    result = await auth.request_password_reset(_field(form, "email"))
    return _log_outcome("reset_password_request", result)


async def update_password(form: Mapping[str, Any], auth: ServerAuth) -> ActionResult:
    result = await auth.update_password(_field(form, "password"))
    return _log_outcome("update_password", result)
