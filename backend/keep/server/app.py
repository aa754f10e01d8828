from __future__ import annotations

import contextlib
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.middleware.authentication import AuthenticationMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route
from starlette.staticfiles import StaticFiles

from keep.auth import AuthClientMiddleware, ProviderSessionBackend
from keep.auth.policy import protected_html, public_route, validate_route_auth_policy
from keep.server.middleware import SecurityHeadersMiddleware, SlashNormalizationMiddleware
from keep.server.settings import KeepServerSettings
from keep.views import (
    auth_callback,
    auth_code_error_page,
    create_templates,
    dashboard_page,
    forgot_password,
    forgot_password_page,
    home,
    reset_password,
    reset_password_page,
    sign_in,
    sign_in_page,
    sign_out,
    sign_up,
    sign_up_page,
)
from shared.auth.provider import create_http_client, server_client_factory
from shared.auth.settings import AuthSettings
from shared.build_info import APP_VERSION, GIT_COMMIT
from shared.logging import setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    import httpx
    from starlette.requests import Request

    from shared.auth.provider import AuthClientFactory

logger = structlog.get_logger()


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok", "version": APP_VERSION, "commit": GIT_COMMIT})


def create_app(
    settings: KeepServerSettings | None = None,
    auth_settings: AuthSettings | None = None,  # required in production (via get_app)
    client_factory: AuthClientFactory | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = KeepServerSettings()
    if auth_settings is None:  # pragma: no cover
        auth_settings = AuthSettings()  # type: ignore[call-arg]
    # Shared by every request-scoped auth client, closed on shutdown
    pool = http_client if http_client is not None else create_http_client()
    if client_factory is None:  # pragma: no cover
        client_factory = server_client_factory(auth_settings, pool)

    static_dir = Path(settings.static_dir).resolve()

    routes = [
        # Session gate: anonymous visitors are redirected to /sign-in
        Route("/dashboard", protected_html(dashboard_page), methods=["GET"], name="dashboard_page"),
        # Public routes
        Route("/", public_route(home), methods=["GET"], name="home"),
        Route("/health", public_route(health), methods=["GET"], name="health"),
        Route("/sign-in", public_route(sign_in_page), methods=["GET"], name="sign_in_page"),
        Route("/sign-in", public_route(sign_in), methods=["POST"], name="sign_in"),
        Route("/sign-up", public_route(sign_up_page), methods=["GET"], name="sign_up_page"),
        Route("/sign-up", public_route(sign_up), methods=["POST"], name="sign_up"),
        Route("/sign-out", public_route(sign_out), methods=["POST"], name="sign_out"),
        Route("/forgot-password", public_route(forgot_password_page), methods=["GET"], name="forgot_password_page"),
        Route("/forgot-password", public_route(forgot_password), methods=["POST"], name="forgot_password"),
        Route("/reset-password", public_route(reset_password_page), methods=["GET"], name="reset_password_page"),
        Route("/reset-password", public_route(reset_password), methods=["POST"], name="reset_password"),
        Route("/auth/callback", public_route(auth_callback), methods=["GET"], name="auth_callback"),
        Route(
            "/auth/auth-code-error",
            public_route(auth_code_error_page),
            methods=["GET"],
            name="auth_code_error_page",
        ),
    ]

    if static_dir.is_dir():
        routes.append(Mount("/static", app=StaticFiles(directory=str(static_dir)), name="static"))
    else:
        logger.warning("static directory not found, /static/ will not be served", path=str(static_dir))

    validate_route_auth_policy(routes)

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncGenerator[None]:
        yield
        await pool.aclose()
        logger.info("provider connection pool closed")

    app = Starlette(routes=routes, lifespan=lifespan)
    # add_middleware prepends: the last one added runs first
    app.add_middleware(SlashNormalizationMiddleware)  # type: ignore[arg-type]
    app.add_middleware(AuthenticationMiddleware, backend=ProviderSessionBackend())  # type: ignore[arg-type]
    app.add_middleware(
        AuthClientMiddleware,  # type: ignore[arg-type]
        client_factory=client_factory,
        auth_settings=auth_settings,
    )
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.allowed_hosts)  # type: ignore[arg-type]
    app.add_middleware(SecurityHeadersMiddleware)  # type: ignore[arg-type]

    app.state.settings = settings
    app.state.auth_settings = auth_settings
    app.state.http_client = pool
    app.state.templates = create_templates()

    logger.info("keep server ready", app_url=auth_settings.app_url)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory keep.server.app:get_app."""
    s = KeepServerSettings()
    auth = AuthSettings()  # type: ignore[call-arg]
    setup_logging(log_dir=s.log_dir)
    return create_app(settings=s, auth_settings=auth)
